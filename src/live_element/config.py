"""Wait configuration and its YAML store."""

from __future__ import annotations

import os
import pathlib
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from live_element.constants import (
    CONFIG_FILE,
    DEFAULT_TIMEOUT_MS,
    POLL_INTERVAL_MS,
    TIMEOUT_ENV_VAR,
)
from live_element.core.errors import ConfigError


class WaitConfig(BaseModel):
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, ge=0)
    poll_ms: int = Field(default=POLL_INTERVAL_MS, gt=0)
    resource_dirs: list[str] = Field(default_factory=lambda: ["."])
    journal_path: Optional[str] = None
    journal_stderr: bool = False


class ConfigStore:
    """Manages live-element.yaml read/write."""

    def __init__(self, path: str | pathlib.Path | None = None):
        self.path = pathlib.Path(path or CONFIG_FILE)

    def _load_raw(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {self.path}: {exc}") from exc
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{self.path} must contain a mapping, got {type(raw).__name__}")
        return raw

    def _save_raw(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8"
        )

    def load(self, env: dict[str, str] | None = None) -> WaitConfig:
        """Read the file, then apply the environment timeout override."""
        data = self._load_raw()
        env = os.environ if env is None else env
        override = env.get(TIMEOUT_ENV_VAR)
        if override:
            try:
                data["timeout_ms"] = int(override)
            except ValueError as exc:
                raise ConfigError(
                    f"{TIMEOUT_ENV_VAR} must be an integer, got {override!r}"
                ) from exc
        try:
            return WaitConfig(**data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration in {self.path}: {exc}") from exc

    def save(self, config: WaitConfig) -> None:
        self._save_raw(config.model_dump(exclude_none=True))

    def set_timeout(self, timeout_ms: int) -> WaitConfig:
        data = self._load_raw()
        data["timeout_ms"] = timeout_ms
        try:
            config = WaitConfig(**data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid timeout {timeout_ms}: {exc}") from exc
        self.save(config)
        return config


def load_config(path: str | pathlib.Path | None = None) -> WaitConfig:
    return ConfigStore(path).load()
