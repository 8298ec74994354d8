from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from .logging_utils import configure_logger
from .messages import BUNDLED_MESSAGES, StaticMessageSource, load_messages, merge_messages, normalize_locale


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LocaleConfig:
    """
    Locale negotiation settings.

    Attributes:
        default_locale: Base locale for message fallback and for requests
            that do not ask for a locale.
        supported_locales: Locales a request may negotiate to.
    """
    default_locale: str = "en"
    supported_locales: Tuple[str, ...] = ("en", "de")


@dataclass(frozen=True)
class MessagesConfig:
    """
    Message catalog settings.

    Attributes:
        overrides_path: Optional JSON file whose texts override the bundled catalog.
    """
    overrides_path: Optional[Path] = None


@dataclass(frozen=True)
class AppConfig:
    """
    Top-level configuration for the error translation layer.
    """
    locale: LocaleConfig = field(default_factory=LocaleConfig)
    messages: MessagesConfig = field(default_factory=MessagesConfig)
    log_level: str = "INFO"

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _parse_locales(raw: str) -> Tuple[str, ...]:
    locales = []
    for item in raw.split(","):
        tag = normalize_locale(item)
        if tag and tag not in locales:
            locales.append(tag)
    return tuple(locales)


def load_locale_config_from_env(
    default_var: str = "API_ERRORS_DEFAULT_LOCALE",
    supported_var: str = "API_ERRORS_SUPPORTED_LOCALES",
) -> LocaleConfig:
    """
    Load locale settings from environment variables.

    Raises:
        ConfigError: If no supported locale is configured or the default
            locale is not one of them.
    """
    default_locale = normalize_locale(os.getenv(default_var, "en"))
    if default_locale is None:
        raise ConfigError(f"Environment variable {default_var!r} is empty.")

    supported = _parse_locales(os.getenv(supported_var, "en,de"))
    if not supported:
        raise ConfigError(f"Environment variable {supported_var!r} lists no locales.")

    if default_locale not in supported:
        raise ConfigError(
            f"Default locale {default_locale!r} is not in supported locales {list(supported)!r}."
        )

    return LocaleConfig(default_locale=default_locale, supported_locales=supported)


def load_app_config() -> AppConfig:
    """
    Construct and return the full configuration from the environment.

    Reads a `.env` file first when present.

    Raises:
        ConfigError: If any setting is missing or invalid.
    """
    load_dotenv(find_dotenv(usecwd=True))

    log_level = os.getenv("API_ERRORS_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(f"Unknown log level {log_level!r}; expected one of {list(VALID_LOG_LEVELS)!r}.")

    raw_path = os.getenv("API_ERRORS_MESSAGES_PATH", "").strip()
    overrides_path = Path(raw_path) if raw_path else None

    return AppConfig(
        locale=load_locale_config_from_env(),
        messages=MessagesConfig(overrides_path=overrides_path),
        log_level=log_level,
    )


def build_message_catalog(config: AppConfig) -> Dict[str, Dict[str, str]]:
    """
    Return the bundled catalog merged with the configured overrides file.

    Raises:
        ConfigError: If the overrides file cannot be read or parsed.
    """
    path = config.messages.overrides_path
    if path is None:
        return merge_messages(BUNDLED_MESSAGES, {})

    try:
        overlay = load_messages(path)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot load message overrides from {str(path)!r}: {exc}") from exc

    return merge_messages(BUNDLED_MESSAGES, overlay)


def build_message_source(config: AppConfig) -> StaticMessageSource:
    """Build the in-memory message source described by `config`."""
    return StaticMessageSource(
        build_message_catalog(config),
        default_locale=config.locale.default_locale,
        logger=configure_logger("api_errors.messages", config.log_level_value),
    )
