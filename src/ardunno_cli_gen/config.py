from enum import Enum
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import ClassVar

from pydantic_settings import BaseSettings, SettingsConfigDict


def _package_version() -> str:
    try:
        return pkg_version("ardunno-cli-gen")
    except PackageNotFoundError:
        return "0.0.0"


PKG_VERSION = _package_version()


class AppEnv(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Logging level."""

    FATAL = "fatal"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class AppConfig(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(extra="ignore")

    app_env: AppEnv = AppEnv.DEVELOPMENT
    version: str = PKG_VERSION
    log_level: LogLevel = LogLevel.WARN


class ProxyConfig(BaseSettings):
    """Outbound HTTP proxy, read from the lower-case `https_proxy` variable."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        case_sensitive=True, extra="ignore"
    )

    https_proxy: str | None = None


class GeneratorConfig(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="ARDUNNO_", extra="ignore"
    )

    protoc: str | None = None
    ts_proto_plugin: str | None = None
