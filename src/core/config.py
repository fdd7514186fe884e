"""
Application settings, read from the environment.

A `.env` file in the working directory is loaded first, so local overrides do not need to be exported.
"""

import os
from dataclasses import dataclass
from typing import Self

from dotenv import load_dotenv

STORAGE_BACKENDS = ("memory", "sql")


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    storage: str = "memory"
    database_url: str = "sqlite:///./diamonds.db"
    sql_echo: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.storage not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend {self.storage!r}. Pick one from {', '.join(STORAGE_BACKENDS)}"
            )

    @classmethod
    def from_env(cls) -> Self:
        load_dotenv()
        return cls(
            storage=os.getenv("DIAMONDS_STORAGE", cls.storage).lower(),
            database_url=os.getenv("DIAMONDS_DATABASE_URL", cls.database_url),
            sql_echo=_as_bool(os.getenv("DIAMONDS_SQL_ECHO", "false")),
            log_level=os.getenv("DIAMONDS_LOG_LEVEL", cls.log_level).upper(),
        )
