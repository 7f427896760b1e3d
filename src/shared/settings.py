import os
from typing import Optional

from pydantic import BaseModel


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class StoreSettings(BaseModel):
    """Post store configuration resolved from the environment."""

    backend: str = "auto"
    connection_string: Optional[str] = None
    database_name: Optional[str] = None
    container_name: str = "posts"
    create_container: bool = False

    @property
    def cosmos_configured(self) -> bool:
        return bool(self.connection_string and self.database_name)

    @classmethod
    def from_env(cls) -> "StoreSettings":
        return cls(
            backend=(os.getenv("POST_STORE_BACKEND") or "auto").lower(),
            connection_string=os.getenv("COSMOS_DB_CONNECTION_STRING"),
            database_name=os.getenv("COSMOS_DB_NAME"),
            container_name=os.getenv("COSMOS_DB_CONTAINER_POSTS") or "posts",
            create_container=_env_flag("COSMOS_DB_CREATE_CONTAINER"),
        )
