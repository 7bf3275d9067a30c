"""Unit tests for settings dataclasses and loaders."""
from __future__ import annotations

import pytest

from order_views.config import (
    AppSettings,
    DatabaseSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    KafkaSettings,
    ProcessorSettings,
    load_settings,
)
from order_views.kernel.errors import ConfigError, InvalidSettingValueError


# ---------------------------------------------------------------------------
# Settings dataclasses
# ---------------------------------------------------------------------------


class TestProcessorSettings:
    def test_defaults(self) -> None:
        s = ProcessorSettings()
        assert s.processor_id == "query-processor-1"
        assert s.timeline_max_size == 100
        assert s.batch_size == 100
        assert s.commit_interval_ms == 5000
        assert s.persist_timeout_seconds == 5.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"processor_id": ""},
            {"timeline_max_size": 0},
            {"batch_size": -1},
            {"commit_interval_ms": 0},
            {"persist_timeout_seconds": 0.0},
        ],
    )
    def test_rejects_invalid(self, kwargs) -> None:
        with pytest.raises(InvalidSettingValueError):
            ProcessorSettings(**kwargs)


class TestKafkaSettings:
    def test_defaults(self) -> None:
        s = KafkaSettings()
        assert s.topics == ["orders"]
        assert s.group_id == "query-processor"

    def test_requires_a_topic(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            KafkaSettings(topics=[])


class TestAppSettings:
    def test_groups_default(self) -> None:
        s = AppSettings()
        assert isinstance(s.processor, ProcessorSettings)
        assert isinstance(s.kafka, KafkaSettings)
        assert isinstance(s.database, DatabaseSettings)


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_reads_prefixed_variables(self) -> None:
        loader = EnvSettingsLoader(
            {
                "PROCESSOR_PROCESSOR_ID": "proc-9",
                "PROCESSOR_TIMELINE_MAX_SIZE": "25",
                "PROCESSOR_PERSIST_TIMEOUT_SECONDS": "2.5",
            }
        )
        s = loader.load(ProcessorSettings)
        assert s.processor_id == "proc-9"
        assert s.timeline_max_size == 25
        assert s.persist_timeout_seconds == 2.5
        assert s.batch_size == 100

    def test_list_and_bool_coercion(self) -> None:
        kafka = EnvSettingsLoader({"KAFKA_TOPICS": "orders, refunds ,"}).load(KafkaSettings)
        assert kafka.topics == ["orders", "refunds"]
        db = EnvSettingsLoader({"DATABASE_ECHO": "true"}).load(DatabaseSettings)
        assert db.echo is True

    def test_bad_number(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader({"PROCESSOR_BATCH_SIZE": "lots"}).load(ProcessorSettings)
        assert exc_info.value.setting == "PROCESSOR_BATCH_SIZE"

    def test_out_of_range_value_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            EnvSettingsLoader({"PROCESSOR_BATCH_SIZE": "0"}).load(ProcessorSettings)

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KAFKA_GROUP_ID", "from-env")
        assert EnvSettingsLoader().load(KafkaSettings).group_id == "from-env"


# ---------------------------------------------------------------------------
# DotenvSettingsLoader / load_settings
# ---------------------------------------------------------------------------


class TestDotenvSettingsLoader:
    def test_reads_env_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "placeholder")
        env_file = tmp_path / ".env"
        env_file.write_text("DATABASE_URL=sqlite+aiosqlite:///from-dotenv.db\n")
        s = DotenvSettingsLoader(str(env_file), override=True).load(DatabaseSettings)
        assert s.url == "sqlite+aiosqlite:///from-dotenv.db"


class TestLoadSettings:
    def test_loads_every_group(self) -> None:
        s = load_settings(EnvSettingsLoader({"KAFKA_BOOTSTRAP_SERVERS": "kafka:29092"}))
        assert s.kafka.bootstrap_servers == "kafka:29092"
        assert s.processor == ProcessorSettings()

    def test_overrides_applied(self) -> None:
        s = load_settings(EnvSettingsLoader({}), overrides={"processor": {"processor_id": "override"}})
        assert s.processor.processor_id == "override"

    def test_overrides_validated(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            load_settings(EnvSettingsLoader({}), overrides={"processor": {"batch_size": 0}})
