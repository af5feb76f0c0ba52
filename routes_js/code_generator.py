"""Classic mode: one JavaScript module holding every route helper.

Two output variants:

* simple - each helper is `_builder.route(params, tree, absolute)` from the
  RouteBuilder runtime and returns a URL string.
* rich - each helper returns `{ url, method }` and is built around
  `_buildUrl(pattern, params, options)` with optional method and form
  variants attached as properties.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Tuple

from . import runtime, templates
from .config import Configuration
from .models import MUTATION_VERBS, Route
from .resource_typescript import safe_js_name
from .serializer import serialize, serialize_params, to_json

logger = logging.getLogger(__name__)

INDENT = "  "
FORM_METHODS = ("patch", "put", "delete")


def generate(routes: List[Route], config: Optional[Configuration] = None) -> str:
    """Render the classic-mode JavaScript module for `routes`."""
    config = (config or Configuration()).validate()

    if config.is_rich:
        parts, exports, helper_exports = _rich_parts(routes, config)
    else:
        parts, exports, helper_exports = _simple_parts(routes, config)

    body = "\n\n".join(parts)
    return templates.render_module(config.module_type, body, exports, helper_exports)


def _simple_parts(routes: List[Route], config: Configuration) -> Tuple[List[str], List[str], List[str]]:
    builder_options = {"defaultUrlOptions": config.default_url_options}
    parts = [
        runtime.ROUTE_BUILDER_JS,
        f"const _builder = new RouteBuilder({to_json(builder_options)});",
        runtime.CONFIGURE_JS,
    ]
    exports = ["configure"]
    for route in routes:
        parts.append(render_simple_route(route, config))
        exports.append(route.name)
        if config.url_helpers and route.url_name:
            parts.append(render_simple_route(route, config, absolute=True))
            exports.append(route.url_name)
    return parts, exports, []


def _rich_parts(routes: List[Route], config: Configuration) -> Tuple[List[str], List[str], List[str]]:
    parts = [runtime.RICH_HELPERS_JS]
    helpers = ["_buildUrl"]
    if config.with_forms:
        parts.append(runtime.FORM_HELPER_JS)
        helpers.append("_buildFormAction")
    if config.url_helpers:
        logger.debug("url_helpers only apply to the simple variant")

    exports = []
    for route in routes:
        parts.append(render_rich_route(route, config))
        exports.append(route.name)

    helper_exports = helpers if config.module_type == "esm" else []
    return parts, exports, helper_exports


def render_simple_route(route: Route, config: Configuration, absolute: bool = False) -> str:
    name = route.url_name if absolute else route.name
    params = to_json(serialize_params(route))
    tree = to_json(serialize(route))
    flag = "true" if absolute else "false"
    doc = simple_jsdoc(route, absolute) + "\n" if config.documentation else ""
    return f"{doc}const {name} = /*#__PURE__*/ _builder.route({params}, {tree}, {flag});"


def simple_jsdoc(route: Route, absolute: bool = False) -> str:
    lines = ["/**", f" * {route.verb} {route.path}"]
    for param in route.required_params:
        lines.append(f" * @param {{string|number}} {param}")
    lines.append(" * @param {object} [options] Optional params, query params, anchor, trailing_slash")
    lines.append(" * @returns {string} " + ("Absolute URL" if absolute else "Path"))
    lines.append(" */")
    return "\n".join(lines)


def render_rich_route(route: Route, config: Configuration) -> str:
    """Render one rich-mode helper as `Object.assign(function, {variants})`."""
    args = ", ".join(_js_args(route) + ["options"])
    pattern = json.dumps(route.path)
    params = params_object(route)
    method = route.method

    lines = []
    if config.documentation:
        lines.append(rich_jsdoc(route))
    lines.append(f"const {route.name} = Object.assign(")
    lines.extend(_indent(_route_function(args, pattern, params, method), 1))
    lines[-1] += ","

    members = []
    if config.with_methods:
        members.extend(_method_members(route, args, pattern, params))
    if config.with_forms and route.verb in MUTATION_VERBS:
        members.append(_form_member(route, args, pattern, params))

    if members:
        lines.append(INDENT + "{")
        for member in members:
            member[-1] += ","
            lines.extend(_indent(member, 2))
        lines.append(INDENT + "}")
    else:
        lines.append(INDENT + "{}")
    lines.append(");")
    return "\n".join(lines)


def rich_jsdoc(route: Route) -> str:
    lines = ["/**", f" * {route.verb} {route.path}"]
    for param in route.required_params:
        lines.append(f" * @param {{string|number|{{id: string|number}}}} {param}")
    lines.append(" * @param {object} [options] query, mergeQuery, anchor and optional params")
    lines.append(" * @returns {{url: string, method: string}}")
    lines.append(" */")
    return "\n".join(lines)


def params_object(route: Route) -> str:
    """JS object literal passing required params, e.g. `{ id }`."""
    entries = []
    for param in route.required_params:
        arg = _safe_arg(param)
        entries.append(param if arg == param else f"{json.dumps(param)}: {arg}")
    if not entries:
        return "{}"
    return "{ " + ", ".join(entries) + " }"


def _route_function(args: str, pattern: str, params: str, method: str) -> List[str]:
    return [
        f"function({args}) {{",
        "  return {",
        f"    url: _buildUrl({pattern}, {params}, options),",
        f"    method: {json.dumps(method)},",
        "  };",
        "}",
    ]


def _method_members(route: Route, args: str, pattern: str, params: str) -> List[List[str]]:
    members = [[
        f"url: function({args}) {{",
        f"  return _buildUrl({pattern}, {params}, options);",
        "}",
    ]]
    methods = ["get", "head"]
    if route.verb in MUTATION_VERBS:
        methods.append(route.method)
    for method in methods:
        function = _route_function(args, pattern, params, method)
        function[0] = f"{method}: {function[0]}"
        members.append(function)
    return members


def _form_member(route: Route, args: str, pattern: str, params: str) -> List[str]:
    lines = ["form: Object.assign("]
    lines.extend(_indent(_form_function(args, pattern, params, route.method), 1))
    lines[-1] += ","
    lines.append(INDENT + "{")
    for method in FORM_METHODS:
        function = _form_function(args, pattern, params, method)
        function[0] = f"{method}: {function[0]}"
        function[-1] += ","
        lines.extend(_indent(function, 2))
    lines.append(INDENT + "}")
    lines.append(")")
    return lines


def _form_function(args: str, pattern: str, params: str, method: str) -> List[str]:
    form_method = method if method in ("get", "post") else "post"
    return [
        f"function({args}) {{",
        "  return {",
        f"    action: _buildFormAction({pattern}, {params}, {json.dumps(method)}, options),",
        f"    method: {json.dumps(form_method)},",
        "  };",
        "}",
    ]


def _js_args(route: Route) -> List[str]:
    return [_safe_arg(param) for param in route.required_params]


def _safe_arg(name: str) -> str:
    return safe_js_name(name)


def _indent(lines: List[str], depth: int) -> List[str]:
    prefix = INDENT * depth
    return [prefix + line if line else line for line in lines]
