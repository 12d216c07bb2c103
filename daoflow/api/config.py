"""Versioned configuration store with validation, history and change events."""

from __future__ import annotations

import enum
import json
import queue
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from daoflow.api.errors import ApiError, ApiErrorCode

EVENT_BUFFER_SIZE = 100
DEFAULT_USER = "system"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ConfigScope(str, enum.Enum):
    """Area a configuration entry applies to."""

    GLOBAL = "global"
    COMPONENT = "component"
    PATTERN = "pattern"
    METRIC = "metric"
    EVOLUTION = "evolution"


def value_type(value: Any) -> str:
    """Name of the kind of ``value`` as stored with a configuration entry."""
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "unknown"


@dataclass
class ConfigValue:
    """A configuration entry."""

    value: Any = None
    type: str = "unknown"
    scope: ConfigScope = ConfigScope.GLOBAL
    version: int = 0
    updated_at: datetime | None = None
    updated_by: str = ""
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "type": self.type,
            "scope": self.scope.value,
            "version": self.version,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "updated_by": self.updated_by,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConfigValue:
        updated_at = data.get("updated_at")
        return cls(
            value=data.get("value"),
            type=data.get("type", "unknown"),
            scope=ConfigScope(data.get("scope", ConfigScope.GLOBAL.value)),
            version=int(data.get("version", 0)),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
            updated_by=data.get("updated_by", ""),
            metadata=data.get("metadata"),
        )


@dataclass(frozen=True)
class ConfigHistory:
    """One recorded change of a configuration entry."""

    key: str
    value: Any
    version: int
    timestamp: datetime
    user: str
    reason: str


@dataclass
class ConfigValidation:
    """Rules a configuration value must satisfy."""

    required: bool = False
    type: str = ""
    range: list[Any] = field(default_factory=list)
    pattern: str = ""
    constraints: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ConfigEvent:
    """Notification of a configuration change."""

    type: str
    key: str
    value: ConfigValue | None = None
    version: int = 0
    timestamp: datetime = field(default_factory=_now)


@dataclass
class BufferConfig:
    """Sizing policy of a dynamic buffer."""

    min_capacity: int = 0
    max_capacity: int = 0
    growth_factor: float = 0.0
    shrink_factor: float = 0.0
    resize_interval: float = 0.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigAPI:
    """Stores configuration entries, validates them and reports every change."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._configs: dict[str, ConfigValue] = {}
        self._validations: dict[str, ConfigValidation] = {}
        self._history: list[ConfigHistory] = []
        self._events: queue.Queue[ConfigEvent] = queue.Queue(maxsize=EVENT_BUFFER_SIZE)
        self.buffer_config: dict[str, BufferConfig] = {}
        self._closed = False

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("config API is closed")

    def _emit(self, event: ConfigEvent) -> None:
        try:
            self._events.put_nowait(event)
        except queue.Full:
            pass

    def set_config(
        self,
        key: str,
        value: Any,
        scope: ConfigScope = ConfigScope.GLOBAL,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Create or update ``key``; type and scope are fixed on creation."""
        with self._lock:
            self._ensure_open()
            self._validate(key, value)
            config = self._configs.get(key)
            if config is None:
                config = ConfigValue(type=value_type(value), scope=ConfigScope(scope))
                self._configs[key] = config
            config.value = value
            config.version += 1
            config.updated_at = _now()
            config.updated_by = DEFAULT_USER
            config.metadata = metadata
            self._record(key, config.value, config.version, config.updated_by, "Manual update")
            self._emit(
                ConfigEvent(
                    type="config_updated", key=key, value=config, version=config.version
                )
            )

    def get_config(self, key: str) -> ConfigValue:
        with self._lock:
            config = self._configs.get(key)
            if config is None:
                raise ApiError(ApiErrorCode.CONFIG_NOT_FOUND, "config not found")
            return config

    def delete_config(self, key: str) -> None:
        with self._lock:
            self._ensure_open()
            config = self._configs.get(key)
            if config is None:
                raise ApiError(ApiErrorCode.CONFIG_NOT_FOUND, "config not found")
            self._record(key, None, config.version, config.updated_by, "Manual deletion")
            del self._configs[key]
            self._emit(ConfigEvent(type="config_deleted", key=key))

    def configs_by_scope(self, scope: ConfigScope) -> dict[str, ConfigValue]:
        scope = ConfigScope(scope)
        with self._lock:
            return {k: c for k, c in self._configs.items() if c.scope is scope}

    def set_validation(self, key: str, validation: ConfigValidation) -> None:
        with self._lock:
            self._validations[key] = validation

    def history(self, key: str) -> list[ConfigHistory]:
        """Recorded changes of ``key``, oldest first."""
        with self._lock:
            return [record for record in self._history if record.key == key]

    def subscribe(self) -> queue.Queue[ConfigEvent]:
        """Queue receiving configuration events; events are dropped when it is full."""
        return self._events

    def export(self) -> bytes:
        """All entries as a JSON object keyed by configuration key."""
        with self._lock:
            return json.dumps(
                {key: config.to_dict() for key, config in self._configs.items()}
            ).encode("utf-8")

    def import_configs(self, data: bytes | str) -> None:
        """Replace all entries with those in ``data``, after validating each."""
        raw = json.loads(data)
        if not isinstance(raw, dict):
            raise ApiError(ApiErrorCode.INVALID_CONFIG, "config data must be an object")
        configs = {key: ConfigValue.from_dict(entry) for key, entry in raw.items()}
        with self._lock:
            for key, config in configs.items():
                self._validate(key, config.value)
            self._configs = configs

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def _validate(self, key: str, value: Any) -> None:
        rule = self._validations.get(key)
        if rule is None:
            return
        if value is None:
            if rule.required:
                raise ApiError(ApiErrorCode.INVALID_CONFIG, f"config {key!r} is required")
            return
        if rule.type and value_type(value) != rule.type:
            raise ApiError(
                ApiErrorCode.INVALID_CONFIG,
                f"config {key!r} must be of type {rule.type}, got {value_type(value)}",
            )
        if rule.range:
            if _is_number(value) and len(rule.range) == 2:
                low, high = rule.range
                if (low is not None and value < low) or (high is not None and value > high):
                    raise ApiError(
                        ApiErrorCode.INVALID_CONFIG,
                        f"config {key!r} out of range [{low}, {high}]",
                    )
            elif value not in rule.range:
                raise ApiError(
                    ApiErrorCode.INVALID_CONFIG, f"config {key!r} not among allowed values"
                )
        if rule.pattern and isinstance(value, str) and not re.fullmatch(rule.pattern, value):
            raise ApiError(
                ApiErrorCode.INVALID_CONFIG, f"config {key!r} does not match {rule.pattern!r}"
            )

    def _record(self, key: str, value: Any, version: int, user: str, reason: str) -> None:
        self._history.append(
            ConfigHistory(
                key=key,
                value=value,
                version=version,
                timestamp=_now(),
                user=user,
                reason=reason,
            )
        )