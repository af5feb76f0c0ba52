"""Adapters from host-framework route entries to RouteRecord.

Route tables arrive as dataclasses, plain mappings (YAML/JSON manifests,
framework dumps) or arbitrary objects. Everything past this module only
works with RouteRecord.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, List, Mapping, Optional

from .models import HTTP_VERBS, RouteRecord

logger = logging.getLogger(__name__)

# accepted key/attribute spellings, first match wins
HELPER_KEYS = ("helper", "name", "as")
VERB_KEYS = ("verb", "method")
ACTION_KEYS = ("action", "plug_opts")


def as_record(raw: Any) -> Optional[RouteRecord]:
    """Adapt one route entry. Returns None for entries with an unusable verb."""
    if isinstance(raw, RouteRecord):
        record = raw
    elif isinstance(raw, Mapping):
        record = record_from_mapping(raw)
    else:
        record = record_from_object(raw)
    if record is None:
        return None

    verb = record.verb.upper()
    if verb not in HTTP_VERBS:
        logger.warning("Skipping %s %s: unsupported HTTP verb", record.verb, record.path)
        return None
    return dataclasses.replace(record, verb=verb)


def as_records(entries: Iterable[Any]) -> List[RouteRecord]:
    records = []
    for entry in entries:
        record = as_record(entry)
        if record is not None:
            records.append(record)
    return records


def record_from_mapping(data: Mapping) -> Optional[RouteRecord]:
    path = data.get("path")
    verb = _first(data, VERB_KEYS)
    if not path or not verb:
        logger.warning("Skipping route entry without path/verb: %r", dict(data))
        return None
    return RouteRecord(
        verb=_text(verb),
        path=str(path),
        helper=_optional_text(_first(data, HELPER_KEYS)),
        action=_optional_text(_first(data, ACTION_KEYS)),
        live=bool(data.get("live", False)),
        defaults=dict(data.get("defaults") or {}),
    )


def record_from_object(obj: Any) -> Optional[RouteRecord]:
    values = {}
    for key in HELPER_KEYS + VERB_KEYS + ACTION_KEYS + ("path", "live", "defaults"):
        if hasattr(obj, key):
            values[key] = getattr(obj, key)
    return record_from_mapping(values)


def _first(data: Mapping, keys: tuple) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    # symbols dumped from Ruby/Elixir arrive as ":show"
    text = str(value)
    return text[1:] if text.startswith(":") else text


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return _text(value) or None
