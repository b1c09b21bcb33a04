# src/repository_pattern/configs/pydantic_models.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class DbConfig(BaseModel):
    connection_string: str
    database_name: str
    server_selection_timeout_ms: int = Field(5000, gt=0)
    app_name: Optional[str] = None
    client_options: Dict[str, Any] = Field(
        default_factory=dict,
        description="Extra keyword arguments forwarded to AsyncIOMotorClient.",
    )

    @field_validator("connection_string")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        if not value.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("connection_string must start with mongodb:// or mongodb+srv://")
        return value


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class MainConfig(BaseModel):
    db: DbConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    collections: List[str] = Field(
        default_factory=list,
        description="Collections whose document counts the CLI reports.",
    )
