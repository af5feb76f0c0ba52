"""Path pattern parser: turns `/users/:id(.:format)` into typed segments."""

from __future__ import annotations

import logging
import re
from typing import List, Tuple

from .models import (
    GlobSegment,
    LiteralSegment,
    OptionalSegment,
    ParamSegment,
    Segment,
)

logger = logging.getLogger(__name__)

# posts(.:format), :id(.:format)
OPTIONAL_COMPONENT = re.compile(r"^([^(]*)\((.*)\)$")
SLASH_RUN = re.compile(r"/+")


def parse_path(path: str) -> List[Segment]:
    """Parse a route path pattern into an ordered list of segments.

    Literal components are wrapped in slashes, params and globs are preceded
    by a `/` separator, and adjacent literals are merged afterwards so the
    result never holds two literals in a row.
    """
    parsed: List[Segment] = []
    for component in path.split("/"):
        if not component:
            continue
        parsed.extend(_parse_component(component))
    return _normalize(parsed)


def categorize_params(segments: List[Segment]) -> Tuple[List[str], List[str]]:
    """Split the parameter names of a segment list into (required, optional)."""
    required: List[str] = []
    optional: List[str] = []
    for segment in segments:
        if isinstance(segment, (ParamSegment, GlobSegment)):
            if segment.name not in required:
                required.append(segment.name)
        elif isinstance(segment, OptionalSegment):
            for name in _optional_param_names(segment):
                if name not in optional:
                    optional.append(name)
    return required, optional


def _optional_param_names(segment: OptionalSegment) -> List[str]:
    names = []
    for child in segment.children:
        if isinstance(child, ParamSegment):
            names.append(child.name)
        elif isinstance(child, OptionalSegment):
            names.extend(_optional_param_names(child))
    return names


def _parse_component(component: str) -> List[Segment]:
    if "(" in component:
        return _parse_optional_component(component)
    return _parse_plain_component(component)


def _parse_plain_component(component: str) -> List[Segment]:
    if component.startswith(":"):
        return [LiteralSegment("/"), ParamSegment(component[1:])]
    if component.startswith("*"):
        return [LiteralSegment("/"), GlobSegment(component[1:])]
    return [LiteralSegment(f"/{component}/")]


def _parse_optional_component(component: str) -> List[Segment]:
    """Parse `prefix(suffix)` where suffix is the optional part."""
    match = OPTIONAL_COMPONENT.match(component)
    if match is None:
        logger.debug("Unbalanced optional group in %r, treating as literal", component)
        return [LiteralSegment(f"/{component}/")]

    prefix, inner = match.groups()
    if prefix.startswith((":", "*")):
        head = _parse_plain_component(prefix)
    elif prefix:
        # no trailing slash: the optional part attaches directly (users.json)
        head = [LiteralSegment(f"/{prefix}")]
    else:
        head = [LiteralSegment("/")]

    children = tuple(_normalize(_parse_optional_part(inner)))
    return head + [OptionalSegment(children)]


def _parse_optional_part(inner: str) -> List[Segment]:
    if inner.startswith("."):
        rest = inner[1:]
        if rest.startswith(":"):
            return [LiteralSegment("."), ParamSegment(rest[1:])]
        return [LiteralSegment(inner)]
    if inner.startswith(":"):
        return [ParamSegment(inner[1:])]
    if not inner:
        return []
    return [LiteralSegment(inner)]


def _normalize(segments: List[Segment]) -> List[Segment]:
    """Merge adjacent literals and collapse repeated slashes."""
    result: List[Segment] = []
    for segment in segments:
        if isinstance(segment, LiteralSegment):
            if result and isinstance(result[-1], LiteralSegment):
                segment = LiteralSegment(result[-1].text + segment.text)
                result.pop()
            result.append(LiteralSegment(SLASH_RUN.sub("/", segment.text)))
        else:
            result.append(segment)
    return result
