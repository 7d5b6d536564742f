from typing import Optional

from mongo_migration_store.utils.serialisation import get_exception_error_type


class MigrationStoreException(Exception):
    def __init__(self,
        message: str,
        *,
        error_type: Optional[str] = None,
        data: Optional[dict] = None
    ):
        """
        Base exception for every runtime failure of a migration store.

        Args:
            message: The error message.
            error_type: Machine readable error type (inferred from the class name if omitted).
            data: Extra context about the failure.
        """
        self.message = message
        self.error_type = error_type or get_exception_error_type(self)
        self.data = data
        super().__init__(message)

    def dict(self) -> dict:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "data": self.data,
        }


class EnvMissingException(ValueError):
    def __init__(self, env_name: str):
        super().__init__(f"[ENV MISSING] Missing required environment variable: `{env_name}`")


class EnvInvalidException(ValueError):
    def __init__(self, env_name: str, value: str = None, supported_values: list[str] = None):
        message = f"[ENV INVALID] Invalid environment variable: `{env_name}`"
        if value:
            message += f" (value: `{value}`) "
        if supported_values:
            message += f" (supported values: {', '.join(supported_values)})"
        super().__init__(message)
