"""Runtime configuration, read from JSON files, the environment and CLI overrides."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mavensync.transport import DEFAULT_USER_AGENT

log = logging.getLogger(__name__)


class RepositorySettings(BaseModel):
    """Connection details for one repository."""

    url: str
    username: Optional[str] = None
    password: Optional[str] = None
    log_http_headers: bool = False
    verify_tls: bool = True
    timeout: float = Field(45.0, gt=0)
    connect_timeout: float = Field(3.0, gt=0)

    @property
    def credentials(self) -> Optional[Tuple[str, str]]:
        if not (self.username and self.password):
            return None
        return self.username, self.password


class SourceRepositorySettings(RepositorySettings):
    crawl_delay: float = Field(0.0, ge=0)
    download_delay: float = Field(0.0, ge=0)
    # sub paths to crawl instead of the whole repository
    paths: List[str] = Field(default_factory=list)


class Settings(BaseSettings):
    """Configuration values; environment variables use the ``MAVENSYNC_`` prefix."""

    source: SourceRepositorySettings
    target: RepositorySettings
    artifact_concurrency: int = Field(4, ge=1)
    transfer_checksums: bool = True
    transfer_signatures: bool = True
    staging_dir: Optional[Path] = None
    user_agent: str = DEFAULT_USER_AGENT

    model_config = SettingsConfigDict(
        env_prefix="MAVENSYNC_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def masked(self) -> Dict[str, Any]:
        """Settings as a dict with passwords hidden, for logging."""
        data = self.model_dump(mode="json")
        for side in ("source", "target"):
            if data[side].get("password"):
                data[side]["password"] = "***"
        return data


def _deep_merge(base: Dict[str, Any], update: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in update.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(
    config_files: Iterable[Union[str, Path]] = (),
    overrides: Optional[Mapping[str, Any]] = None,
    **kwargs: Any,
) -> Settings:
    """Merge JSON config files (later files win), then ``overrides``.

    Extra keyword arguments go straight to ``Settings``, e.g. ``_env_file=None``.
    """
    merged: Dict[str, Any] = {}
    for config_file in config_files:
        path = Path(config_file)
        log.debug("Loading configuration from %s", path)
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: top-level JSON value must be an object")
        merged = _deep_merge(merged, data)
    if overrides:
        merged = _deep_merge(merged, overrides)
    return Settings(**merged, **kwargs)
