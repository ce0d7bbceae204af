"""Runtime settings resolved from the environment.

Architecture:
    Settings is an immutable pydantic-settings model. The CLI layer builds it
    once with ``Settings()`` and passes the pieces it needs (cache directory,
    access token, timeouts) down to the store, cache and HTTP adapter. Nothing
    in the core reads the environment directly.
"""

from __future__ import annotations

import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import SOFTWARE
from .exceptions import RagamintsError

ACCESS_TOKEN_ENV_VAR = "RAGAMINTS_INSTAGRAM_ACCESS_TOKEN"
CACHE_DIR_ENV_VAR = "RAGAMINTS_CACHE_DIR"
CACHE_DISABLED_ENV_VAR = "RAGAMINTS_CACHE_DISABLED"
REQUEST_TIMEOUT_ENV_VAR = "RAGAMINTS_REQUEST_TIMEOUT"


def default_cache_dir(home: Path | None = None, platform: str | None = None) -> Path:
    """Get the default cache directory.

    Examples:
        >>> default_cache_dir(Path("/home/me"), "linux")
        PosixPath('/home/me/.ragamints/cache')
    """
    platform = platform or sys.platform
    home = home or Path.home()
    # Hidden directory everywhere but on Windows
    app_dir = SOFTWARE if platform == "win32" else f".{SOFTWARE}"
    return home / app_dir / "cache"


class Settings(BaseSettings):
    """Process settings.

    Each field is read from its ``RAGAMINTS_*`` environment variable; keyword
    arguments take precedence. Empty variables count as unset.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        populate_by_name=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    access_token: str | None = Field(default=None, validation_alias=ACCESS_TOKEN_ENV_VAR)
    cache_dir: Path = Field(default_factory=default_cache_dir, validation_alias=CACHE_DIR_ENV_VAR)
    cache_disabled: bool = Field(default=False, validation_alias=CACHE_DISABLED_ENV_VAR)
    request_timeout: float = Field(default=30.0, gt=0, validation_alias=REQUEST_TIMEOUT_ENV_VAR)

    @field_validator("cache_dir")
    @classmethod
    def expand_cache_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def cache_enabled(self) -> bool:
        return not self.cache_disabled

    def require_access_token(self) -> str:
        """Return the access token or raise if none was configured."""
        if not self.access_token:
            raise RagamintsError("Need Instagram access token")
        return self.access_token
