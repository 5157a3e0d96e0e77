"""Resolve stored notifications into human-readable title and message.

Structured payloads are looked up in a translation catalog; anything the
catalog cannot resolve falls back to the title and message stored with the
record, so legacy rows and unknown keys always render.
"""

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from ecare.core.config import settings
from ecare.models.notification import Notification
from ecare.services.notification_codec import StructuredMessage, decode

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([\w.-]+)\s*\}\}")


class TranslationCatalog(Protocol):
    def resolve(self, key: str, params: Mapping[str, str]) -> str | None:
        """Translated text for ``key``, or None when the catalog has no entry."""
        ...


class DictCatalog:
    """Catalog over a flat ``key -> template`` mapping with ``{{param}}`` placeholders."""

    def __init__(self, entries: Mapping[str, str]):
        self.entries = dict(entries)

    def resolve(self, key: str, params: Mapping[str, str]) -> str | None:
        template = self.entries.get(key)
        if not template:
            return None
        return PLACEHOLDER_PATTERN.sub(
            lambda match: params.get(match.group(1), match.group(0)), template
        )

    @classmethod
    def from_json_file(cls, path: str | Path, namespace: str = "notification") -> "DictCatalog":
        """Load one namespace of an i18next-style JSON resource file.

        Nested objects are flattened with ``.`` separators. A file without the
        namespace yields an empty catalog.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            data = {}
        section = data.get(namespace, {}) if namespace else data
        if not isinstance(section, dict):
            section = {}
        return cls(_flatten(section))


def _flatten(tree: dict[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for name, value in tree.items():
        key = f"{prefix}{name}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{key}."))
        elif isinstance(value, str):
            flat[key] = value
    return flat


@dataclass(frozen=True)
class RenderedNotification:
    title: str
    message: str
    structured: bool


def _candidates(*keys: str, exclude: str | None = None) -> list[str]:
    seen: list[str] = []
    for key in keys:
        if key and key != exclude and key not in seen:
            seen.append(key)
    return seen


def message_keys(key: str) -> list[str]:
    """Catalog keys tried, in order, for a structured message body."""
    return _candidates(key, key.replace("_title", "_body"), f"{key}_body")


def title_keys(key: str) -> list[str]:
    """Catalog keys tried, in order, for a structured message title."""
    return _candidates(key.replace("_body", "_title"), f"{key}_title", exclude=key)


def _resolve_first(
    catalog: TranslationCatalog, keys: list[str], params: Mapping[str, str]
) -> str | None:
    for key in keys:
        text = catalog.resolve(key, params)
        if text:
            return text
    return None


def render_notification(record: Notification, catalog: TranslationCatalog) -> RenderedNotification:
    stored_title = str(record.title or "")
    stored_message = str(record.message or "")

    decoded = decode(stored_message)
    if not isinstance(decoded, StructuredMessage):
        return RenderedNotification(title=stored_title, message=stored_message, structured=False)

    message = _resolve_first(catalog, message_keys(decoded.key), decoded.params)
    title = _resolve_first(catalog, title_keys(decoded.key), decoded.params)
    return RenderedNotification(
        title=title or stored_title,
        message=message or stored_message,
        structured=True,
    )


def load_catalog(path: str | None = None) -> DictCatalog | None:
    """Catalog from ``NOTIFICATION_CATALOG_PATH``, or None when rendering is disabled.

    An unreadable file is logged and treated as disabled.
    """
    path = path or settings.NOTIFICATION_CATALOG_PATH
    if not path:
        return None
    try:
        return DictCatalog.from_json_file(path)
    except (OSError, ValueError):
        logger.exception("Failed to load notification catalog from %s", path)
        return None
