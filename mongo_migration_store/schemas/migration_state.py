from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


class MigrationRecord(BaseModel):
    """One applied migration. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")

    title: str
    timestamp: str


class MigrationState(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    last_run: str = Field(..., alias="lastRun", description="Identifier of the most recently executed migration")
    migrations: list[MigrationRecord] = Field(default_factory=list)

    @classmethod
    def coerce(cls, value: MigrationState | Mapping[str, Any]) -> MigrationState:
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)

    def to_document(self) -> dict[str, Any]:
        """Canonical stored shape: ``{"lastRun": ..., "migrations": [{"title", "timestamp"}, ...]}``."""
        return self.model_dump(by_alias=True)
