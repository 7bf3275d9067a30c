"""Config loaders – EnvSettingsLoader, DotenvSettingsLoader and ``load_settings``."""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, Mapping, TypeVar

from order_views.config.settings import (
    AppSettings,
    DatabaseSettings,
    KafkaSettings,
    ProcessorSettings,
    Settings,
)
from order_views.kernel.errors import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Load settings from environment variables named ``<PREFIX>_<FIELD>``."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        prefix = getattr(settings_class, "_prefix", "").upper()
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):
            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = environ.get(env_key)
            if raw is None:
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING
                ):
                    raise MissingRequiredSettingError(env_key)
                continue
            try:
                kwargs[field.name] = self._coerce(raw, field.type)
            except ValueError as exc:
                raise InvalidSettingValueError(env_key, raw, str(exc)) from exc

        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load {settings_class.__name__}: {exc}", cause=exc) from exc

    def _coerce(self, value: str, type_hint: Any) -> Any:  # noqa: PLR0911
        hint = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", str(type_hint))
        if type_hint is bool or hint == "bool":
            return value.strip().lower() in ("1", "true", "yes", "on")
        if type_hint is int or hint == "int":
            return int(value)
        if type_hint is float or hint == "float":
            return float(value)
        if getattr(type_hint, "__origin__", None) is list or str(hint).startswith("list"):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value


class DotenvSettingsLoader(SettingsLoader):
    """Read a ``.env`` file into the environment, then defer to :class:`EnvSettingsLoader`."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        from dotenv import load_dotenv

        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


def load_settings(
    loader: SettingsLoader | None = None,
    overrides: Mapping[str, Mapping[str, Any]] | None = None,
) -> AppSettings:
    """Build :class:`AppSettings` once from *loader* (environment by default).

    *overrides* maps a group name (``"processor"``, ``"kafka"``,
    ``"database"``) to field values applied on top of the loaded ones,
    useful in tests.
    """
    loader = loader or EnvSettingsLoader()
    overrides = overrides or {}
    groups: dict[str, Settings] = {}
    for name, cls in (
        ("processor", ProcessorSettings),
        ("kafka", KafkaSettings),
        ("database", DatabaseSettings),
    ):
        settings = loader.load(cls)
        if name in overrides:
            settings = dataclasses.replace(settings, **overrides[name])
        groups[name] = settings
    return AppSettings(**groups)  # type: ignore[arg-type]


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "load_settings"]
