"""TypeScript declarations (.d.ts) for the classic-mode module."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .config import Configuration
from .models import MUTATION_VERBS, Route
from .resource_typescript import safe_js_name
from .templates import HEADER, NAMESPACE

SIMPLE_TYPES = [
    ("type", "RouteParam = string | number | { id: string | number };"),
    ("interface", """RouteOptions {
  anchor?: string;
  trailing_slash?: boolean;
  scheme?: string;
  host?: string;
  port?: string | number;
  [param: string]: unknown;
}"""),
    ("interface", """UrlOptions {
  scheme?: string;
  host?: string;
  port?: string | number;
}"""),
    ("interface", """RouteHelperInfo {
  requiredParams(): string[];
  toString(): string;
}"""),
    ("function", "configure(options: { defaultUrlOptions?: UrlOptions; trailingSlash?: boolean }): void;"),
]

RICH_TYPES = [
    ("type", "RouteParam = string | number | { id: string | number };"),
    ("interface", """RouteOptions {
  query?: Record<string, unknown>;
  mergeQuery?: Record<string, unknown>;
  anchor?: string;
  [param: string]: unknown;
}"""),
    ("interface", """RouteResult<M extends string = string> {
  url: string;
  method: M;
}"""),
    ("interface", """FormAttrs {
  action: string;
  method: 'get' | 'post';
}"""),
    ("function", "_buildUrl(pattern: string, params?: Record<string, unknown>, options?: RouteOptions): string;"),
]

FORM_HELPER_TYPE = (
    "function",
    "_buildFormAction(pattern: string, params?: Record<string, unknown>, method?: string, "
    "options?: RouteOptions): string;",
)


def generate(routes: List[Route], config: Optional[Configuration] = None) -> str:
    """Render declarations matching code_generator.generate for the same input."""
    config = (config or Configuration()).validate()

    if config.is_rich:
        declarations = list(RICH_TYPES)
        if config.with_forms:
            declarations.append(FORM_HELPER_TYPE)
        declarations.extend(("const", rich_declaration(route, config)) for route in routes)
    else:
        declarations = list(SIMPLE_TYPES)
        for route in routes:
            declarations.append(("const", simple_declaration(route.name, route)))
            if config.url_helpers and route.url_name:
                declarations.append(("const", simple_declaration(route.url_name, route)))

    if config.module_type is None:
        body = _namespace_block(declarations)
    else:
        body = "\n\n".join(_module_declaration(kind, text) for kind, text in declarations)
        if config.module_type == "umd":
            body += f"\n\nexport as namespace {NAMESPACE};"
    return f"{HEADER}\n\n{body}\n"


def simple_declaration(name: str, route: Route) -> str:
    args = _signature(route)
    return f"{name}: (({args}) => string) & RouteHelperInfo;"


def rich_declaration(route: Route, config: Configuration) -> str:
    args = _signature(route)
    members = []
    if config.with_methods:
        members.append(f"url({args}): string;")
        methods = ["get", "head"]
        if route.verb in MUTATION_VERBS:
            methods.append(route.method)
        members.extend(f"{m}({args}): RouteResult<'{m}'>;" for m in methods)
    if config.with_forms and route.verb in MUTATION_VERBS:
        variants = " ".join(f"{m}({args}): FormAttrs;" for m in ("patch", "put", "delete"))
        members.append(f"form: (({args}) => FormAttrs) & {{ {variants} }};")

    call = f"(({args}) => RouteResult<'{route.method}'>)"
    if not members:
        return f"{route.name}: {call};"
    inner = "\n".join("  " + member for member in members)
    return f"{route.name}: {call} & {{\n{inner}\n}};"


def _signature(route: Route) -> str:
    params = [f"{safe_js_name(p)}: RouteParam" for p in route.required_params]
    params.append("options?: RouteOptions")
    return ", ".join(params)


def _module_declaration(kind: str, text: str) -> str:
    if kind in ("const", "function"):
        return f"export declare {kind} {text}"
    return f"export {kind} {text}"


def _namespace_block(declarations: List[Tuple[str, str]]) -> str:
    lines = [f"declare namespace {NAMESPACE} {{"]
    for index, (kind, text) in enumerate(declarations):
        if index:
            lines.append("")
        for line in f"{kind} {text}".splitlines():
            lines.append("  " + line)
    lines.append("}")
    return "\n".join(lines)
