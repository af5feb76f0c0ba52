"""Segment serializer: the compact tree the JavaScript runtime evaluates.

Wire format (must stay in sync with runtime.ROUTE_BUILDER_JS):

    literal   "/users/"
    param     ["param", "id"]
    glob      ["glob", "path"]
    optional  ["optional", [...nodes]]
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Sequence
from urllib.parse import quote

from .models import (
    GlobSegment,
    LiteralSegment,
    OptionalSegment,
    ParamSegment,
    Route,
    Segment,
)

logger = logging.getLogger(__name__)

PARAM = "param"
GLOB = "glob"
OPTIONAL = "optional"

# characters encodeURIComponent leaves alone
URI_COMPONENT_SAFE = "-_.!~*'()"


def serialize(route: Route) -> List[Any]:
    return serialize_segments(route.segments)


def serialize_segments(segments: Sequence[Segment]) -> List[Any]:
    return [serialize_segment(segment) for segment in segments]


def serialize_segment(segment: Segment) -> Any:
    if isinstance(segment, LiteralSegment):
        return segment.text
    if isinstance(segment, ParamSegment):
        return [PARAM, segment.name]
    if isinstance(segment, GlobSegment):
        return [GLOB, segment.name]
    if isinstance(segment, OptionalSegment):
        return [OPTIONAL, serialize_segments(segment.children)]
    raise TypeError(f"Unknown segment type: {type(segment).__name__}")


def serialize_params(route: Route) -> Dict[str, Dict[str, Any]]:
    """Parameter metadata: {"id": {"required": True}, "format": {"default": "json"}}.

    Required entries come first. A name listed both as required and optional
    keeps its required entry.
    """
    params: Dict[str, Dict[str, Any]] = {}
    for name in route.required_params:
        params[name] = {"required": True}
    for name in route.optional_params:
        if name in params:
            logger.warning("%s: parameter '%s' is both required and optional", route.name, name)
            continue
        if name in route.defaults:
            params[name] = {"default": route.defaults[name]}
        else:
            params[name] = {}
    return params


def to_json(value: Any) -> str:
    """Deterministic compact JSON for embedding in generated code."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def evaluate(nodes: Sequence[Any], params: Mapping[str, Any], trailing_slash: bool = False) -> str:
    """Build a path from serialized nodes, the way the JS runtime does.

    Optional groups render only when every param inside them is bound.
    A trailing slash is dropped unless `trailing_slash` is set.
    Raises ValueError when a required param is missing.
    """
    path = "".join(_evaluate_node(node, params) for node in nodes)
    if not path:
        return "/"
    if trailing_slash:
        return path if path.endswith("/") else path + "/"
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/") or "/"
    return path


def _evaluate_node(node: Any, params: Mapping[str, Any], optional: bool = False) -> str:
    if isinstance(node, str):
        return node

    tag, value = node
    if tag == OPTIONAL:
        if not all(params.get(name) is not None for name in _node_params(value)):
            return ""
        return "".join(_evaluate_node(child, params, optional=True) for child in value)

    bound = params.get(value)
    if bound is None:
        if optional:
            return ""
        raise ValueError(f"Missing required parameter(s): {value}")
    if tag == GLOB:
        return str(bound)
    return quote(str(bound), safe=URI_COMPONENT_SAFE)


def _node_params(nodes: Sequence[Any]) -> List[str]:
    names = []
    for node in nodes:
        if isinstance(node, list) and node[0] == PARAM:
            names.append(node[1])
    return names
