import logging
import os
from typing import Optional

from dotenv import load_dotenv


def configure_env(env_file_name: Optional[str] = None) -> bool:
    """
    Load migration store settings from a dotenv file.

    Args:
        env_file_name: Optional environment file name. If None, tries .env.<ENV> and then .env.

    Returns:
        True if a file was loaded.
    """
    if env_file_name is not None:
        return load_dotenv(env_file_name, override=True)

    environment = os.getenv("ENV", "debug")

    for env_file in [f".env.{environment}", ".env"]:
        if load_dotenv(env_file, override=True):
            logging.debug(f"☑️ Loaded {env_file} file successfully")
            return True

    return False
