"""Route model builder: helper naming and Route construction."""

from __future__ import annotations

from typing import Optional

from .config import Configuration
from .models import Route, RouteRecord
from .path_parser import categorize_params, parse_path


def generate_name(helper: str, camel_case: bool = False, compact: bool = False) -> str:
    """Build the path helper name for a framework helper.

    >>> generate_name("user")
    'user_path'
    >>> generate_name("user", camel_case=True, compact=True)
    'user'
    """
    name = helper if compact else f"{helper}_path"
    return to_camel_case(name) if camel_case else name


def generate_url_name(helper: str, camel_case: bool = False) -> str:
    """Build the absolute-URL helper name (`user_url`, `userUrl`)."""
    name = f"{helper}_url"
    return to_camel_case(name) if camel_case else name


def to_camel_case(name: str) -> str:
    """Convert snake_case to camelCase."""
    words = name.split("_")
    return words[0] + "".join(word.capitalize() for word in words[1:])


def build_route(record: RouteRecord, config: Optional[Configuration] = None,
                helper: Optional[str] = None) -> Route:
    """Create a Route from a route record.

    `helper` overrides the record's helper; the extractor uses it when
    disambiguating duplicate names.
    """
    config = config or Configuration()
    helper = helper or record.helper or ""
    segments = parse_path(record.path)
    required, optional = categorize_params(segments)

    return Route(
        name=generate_name(helper, camel_case=config.camel_case, compact=config.compact),
        verb=record.verb.upper(),
        path=record.path,
        segments=tuple(segments),
        required_params=tuple(required),
        optional_params=tuple(optional),
        defaults=dict(record.defaults or {}),
        helper=helper,
        url_name=generate_url_name(helper, camel_case=config.camel_case),
        action=record.action,
    )
