from .env_utils import configure_env
from .logging import setup_logging

__all__ = [
    "configure_env",
    "setup_logging",
]
