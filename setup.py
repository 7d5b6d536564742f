"""Setuptools shim for tools that still invoke setup.py directly; metadata lives in pyproject.toml."""

from setuptools import setup

setup()
