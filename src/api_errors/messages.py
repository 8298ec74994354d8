"""
Message resolution for localized error texts.

The dispatcher depends only on the `MessageSource` protocol. `StaticMessageSource`
is an in-memory implementation backed by a {locale: {key: text}} mapping.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, runtime_checkable

from .logging_utils import configure_logger


@runtime_checkable
class MessageSource(Protocol):
    """
    Resolves a localization key to text.

    Implementations must never raise for a missing key: they fall back to
    `default` when given, otherwise to some best-effort text.
    """

    def get_message(
        self,
        key: str,
        args: Optional[Sequence[Any]] = None,
        default: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> str:
        ...


BUNDLED_MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "error.internal": "An internal server error occurred.",
        "error.service.unavailable": "The service is temporarily unavailable. Please try again later.",
        "error.unknown": "An unknown error occurred.",
        "error.validation.failed": "Validation failed for the submitted data.",
        "error.invalid.request": "Invalid request data",
        "error.unsupported.media.type": "The media type of the request is not supported.",
        "error.method.not.allowed": "The request method is not allowed for this resource.",
        "error.unauthorized": "Authentication is required to access this resource.",
        "error.authentication.failed": "Authentication failed.",
        "error.token.expired": "The access token has expired.",
        "error.access.denied": "Access to this resource is denied.",
        "error.account.locked": "The account is locked.",
        "error.resource.not.found": "The requested resource was not found.",
        "error.resource.exists": "The resource already exists.",
        "error.data.integrity.violation": "The operation would violate data integrity.",
        "error.business.validation.failed": "The request violates a business rule.",
        "error.operation.not.permitted": "This operation is not permitted.",
        "error.too.many.requests": "Too many requests. Please slow down.",
        "error.network.failure": "A network failure occurred.",
        "error.external.service.failure": "External service failed",
        "error.external.service.timeout": "The external service did not respond in time.",
    },
    "de": {
        "error.internal": "Es ist ein interner Serverfehler aufgetreten.",
        "error.service.unavailable": "Der Dienst ist vorübergehend nicht verfügbar. Bitte versuchen Sie es später erneut.",
        "error.unknown": "Ein unbekannter Fehler ist aufgetreten.",
        "error.validation.failed": "Die Validierung der übermittelten Daten ist fehlgeschlagen.",
        "error.invalid.request": (
            "Die Anfrage konnte aufgrund fehlender oder ungültiger Informationen nicht verarbeitet werden."
        ),
        "error.unsupported.media.type": "Der Medientyp der Anfrage wird nicht unterstützt.",
        "error.method.not.allowed": "Die Anfragemethode ist für diese Ressource nicht erlaubt.",
        "error.unauthorized": "Für den Zugriff auf diese Ressource ist eine Anmeldung erforderlich.",
        "error.authentication.failed": "Die Authentifizierung ist fehlgeschlagen.",
        "error.token.expired": "Das Zugriffstoken ist abgelaufen.",
        "error.access.denied": "Der Zugriff auf diese Ressource wurde verweigert.",
        "error.account.locked": "Das Konto ist gesperrt.",
        "error.resource.not.found": "Die angeforderte Ressource wurde nicht gefunden.",
        "error.resource.exists": "Die Ressource existiert bereits.",
        "error.data.integrity.violation": "Der Vorgang würde die Datenintegrität verletzen.",
        "error.business.validation.failed": "Die Anfrage verstößt gegen eine Geschäftsregel.",
        "error.operation.not.permitted": "Dieser Vorgang ist nicht erlaubt.",
        "error.too.many.requests": "Zu viele Anfragen. Bitte versuchen Sie es später erneut.",
        "error.network.failure": "Ein Netzwerkfehler ist aufgetreten.",
        "error.external.service.failure": "Externer Dienstfehler",
        "error.external.service.timeout": "Der externe Dienst hat nicht rechtzeitig geantwortet.",
    },
}


def normalize_locale(locale: Optional[str]) -> Optional[str]:
    """
    Normalize a locale tag to `language` or `language_REGION` form.

    "de-DE", "de_de" and "DE_de" all become "de_DE". Empty input returns None.
    """
    if locale is None:
        return None
    tag = locale.strip().replace("-", "_")
    if not tag:
        return None
    parts = tag.split("_")
    language = parts[0].lower()
    if len(parts) > 1 and parts[1]:
        return f"{language}_{parts[1].upper()}"
    return language


class StaticMessageSource:
    """
    In-memory MessageSource.

    Lookup order for a key: exact locale, language-only locale, default
    locale. When nothing matches, `default` is returned if given, otherwise
    the key itself, so the result is never empty.

    Read-only after construction; safe to share between threads.
    """

    def __init__(
        self,
        messages: Mapping[str, Mapping[str, str]],
        default_locale: str = "en",
        logger: logging.Logger | None = None,
    ) -> None:
        normalized: Dict[str, Mapping[str, str]] = {}
        for locale, texts in messages.items():
            key = normalize_locale(locale)
            if key is None:
                raise ValueError("Message catalog contains an empty locale tag.")
            merged = dict(normalized.get(key, {}))
            merged.update(texts)
            normalized[key] = MappingProxyType(merged)

        default = normalize_locale(default_locale)
        if default is None:
            raise ValueError("default_locale must not be empty.")

        self._messages: Mapping[str, Mapping[str, str]] = MappingProxyType(normalized)
        self._default_locale = default
        self._logger = logger or configure_logger("api_errors.messages")

    @property
    def default_locale(self) -> str:
        return self._default_locale

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(sorted(self._messages))

    def _candidates(self, locale: Optional[str]) -> list[str]:
        candidates: list[str] = []
        tag = normalize_locale(locale)
        if tag is not None:
            candidates.append(tag)
            language = tag.split("_")[0]
            if language != tag:
                candidates.append(language)
        if self._default_locale not in candidates:
            candidates.append(self._default_locale)
        return candidates

    def _lookup(self, key: str, locale: Optional[str]) -> Optional[str]:
        for candidate in self._candidates(locale):
            text = self._messages.get(candidate, {}).get(key)
            if text:
                return text
        return None

    def _format(self, key: str, text: str, args: Optional[Sequence[Any]]) -> str:
        if not args:
            return text
        try:
            return text.format(*args)
        except (IndexError, KeyError, ValueError, AttributeError, TypeError):
            self._logger.warning(
                "Message arguments do not match placeholders",
                extra={"event": "messages.format_failed", "error_code": key},
            )
            return text

    def get_message(
        self,
        key: str,
        args: Optional[Sequence[Any]] = None,
        default: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> str:
        # A localized entry for the requested locale wins over the default
        # text; the default only replaces a base-locale lookup.
        tag = normalize_locale(locale)
        text = None
        if tag is not None:
            text = self._messages.get(tag, {}).get(key)
            if not text and "_" in tag:
                text = self._messages.get(tag.split("_")[0], {}).get(key)

        if not text and default:
            return self._format(key, default, args)

        if not text:
            text = self._lookup(key, locale)

        if not text:
            self._logger.warning(
                "No message found for key",
                extra={"event": "messages.missing_key", "error_code": key, "locale": tag},
            )
            return key

        return self._format(key, text, args)


def load_messages(path: str | Path) -> Dict[str, Dict[str, str]]:
    """
    Load a message catalog from a JSON file shaped {"<locale>": {"<key>": "<text>"}}.

    Raises:
        ValueError: If the file is not valid JSON or has the wrong shape.
        OSError: If the file cannot be read.
    """
    raw = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Message catalog {str(path)!r} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Message catalog {str(path)!r} must be a JSON object keyed by locale.")

    catalog: Dict[str, Dict[str, str]] = {}
    for locale, texts in data.items():
        if not isinstance(texts, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in texts.items()
        ):
            raise ValueError(
                f"Message catalog {str(path)!r}: locale {locale!r} must map string keys to string texts."
            )
        catalog[locale] = dict(texts)
    return catalog


def merge_messages(
    base: Mapping[str, Mapping[str, str]],
    overlay: Mapping[str, Mapping[str, str]],
) -> Dict[str, Dict[str, str]]:
    """Return a new catalog with `overlay` texts taking precedence over `base`."""
    merged: Dict[str, Dict[str, str]] = {locale: dict(texts) for locale, texts in base.items()}
    for locale, texts in overlay.items():
        merged.setdefault(locale, {}).update(texts)
    return merged
