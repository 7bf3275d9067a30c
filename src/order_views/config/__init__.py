"""Config – env-based settings and loaders."""

from order_views.config.loaders import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    SettingsLoader,
    load_settings,
)
from order_views.config.settings import (
    AppSettings,
    DatabaseSettings,
    KafkaSettings,
    ProcessorSettings,
    Settings,
)
from order_views.kernel.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "AppSettings",
    "ConfigError",
    "DatabaseSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "KafkaSettings",
    "MissingRequiredSettingError",
    "ProcessorSettings",
    "Settings",
    "SettingsLoader",
    "load_settings",
]
