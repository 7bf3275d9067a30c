"""Config settings – dataclass settings for the processor, Kafka and the database.

Each settings class is built once at startup and passed explicitly to the
components that need it. The aggregation core reads only
``ProcessorSettings.processor_id`` and ``ProcessorSettings.timeline_max_size``.
"""
from __future__ import annotations

import dataclasses

from order_views.kernel.errors import InvalidSettingValueError
from order_views.views.model import DEFAULT_TIMELINE_MAX_SIZE


@dataclasses.dataclass
class Settings:
    """Base class for env-loadable settings."""

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


def _require_positive(name: str, value: int | float) -> None:
    if isinstance(value, bool) or value <= 0:
        raise InvalidSettingValueError(name, value, "must be positive")


@dataclasses.dataclass
class ProcessorSettings(Settings):
    _prefix: dataclasses.ClassVar[str] = "PROCESSOR"

    processor_id: str = "query-processor-1"
    timeline_max_size: int = DEFAULT_TIMELINE_MAX_SIZE
    batch_size: int = 100
    commit_interval_ms: int = 5000
    persist_timeout_seconds: float = 5.0

    def _validate(self) -> None:
        if not self.processor_id:
            raise InvalidSettingValueError("processor_id", self.processor_id, "must not be empty")
        _require_positive("timeline_max_size", self.timeline_max_size)
        _require_positive("batch_size", self.batch_size)
        _require_positive("commit_interval_ms", self.commit_interval_ms)
        _require_positive("persist_timeout_seconds", self.persist_timeout_seconds)


@dataclasses.dataclass
class KafkaSettings(Settings):
    _prefix: dataclasses.ClassVar[str] = "KAFKA"

    bootstrap_servers: str = "localhost:9092"
    group_id: str = "query-processor"
    topics: list[str] = dataclasses.field(default_factory=lambda: ["orders"])
    poll_timeout_ms: int = 1000

    def _validate(self) -> None:
        if not self.topics:
            raise InvalidSettingValueError("topics", self.topics, "at least one topic is required")
        _require_positive("poll_timeout_ms", self.poll_timeout_ms)


@dataclasses.dataclass
class DatabaseSettings(Settings):
    _prefix: dataclasses.ClassVar[str] = "DATABASE"

    url: str = "sqlite+aiosqlite:///order_views.db"
    echo: bool = False


@dataclasses.dataclass
class AppSettings:
    """Every settings group of a running processor."""

    processor: ProcessorSettings = dataclasses.field(default_factory=ProcessorSettings)
    kafka: KafkaSettings = dataclasses.field(default_factory=KafkaSettings)
    database: DatabaseSettings = dataclasses.field(default_factory=DatabaseSettings)


__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "KafkaSettings",
    "ProcessorSettings",
    "Settings",
]
