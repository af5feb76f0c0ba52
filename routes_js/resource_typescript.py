"""TypeScript emission for resource mode.

Each resource file binds one `route()` call per action and exports both the
aggregate resource object and the individual bindings:

    import { route, type Route, type RouteOptions, type Param } from './lib/wayfinder';

    const index = route('/users', 'get');
    const new_ = route('/users/new', 'get');

    export const users = {
      index,
      new: new_,
    } as const;

    export { index, new_ };
"""

from __future__ import annotations

import json
import logging
import re
from typing import Optional, Sequence, Tuple

from . import runtime, templates
from .config import Configuration
from .errors import NameCollisionError
from .models import Action, GeneratedFile, Resource
from .resource_generator import RESOURCE_EXT

logger = logging.getLogger(__name__)

RUNTIME_PATH = "lib/wayfinder" + RESOURCE_EXT
RUNTIME_MODULE = "lib/wayfinder"

RESERVED_WORDS = frozenset("""
await break case catch class const continue debugger default delete do else
enum export extends false finally for function if implements import in
instanceof interface let new null package private protected public return
static super switch this throw true try typeof var void while with yield
""".split())

IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
NON_IDENTIFIER_CHARS = re.compile(r"[^\w$]")


def is_reserved_word(name: str) -> bool:
    return name in RESERVED_WORDS


def safe_js_name(name: str) -> str:
    """A usable JS binding name: `new` -> `new_`, `my-thing` -> `my_thing`."""
    name = NON_IDENTIFIER_CHARS.sub("_", name) or "_"
    if name[0].isdigit():
        name = "_" + name
    if is_reserved_word(name):
        return name + "_"
    return name


def generate_runtime(config: Configuration) -> GeneratedFile:
    return GeneratedFile(path=RUNTIME_PATH, content=runtime.wayfinder_runtime(config.with_forms))


def generate_resource_file(resource: Resource, config: Configuration) -> GeneratedFile:
    runtime_import = _relative_prefix(len(resource.key) - 1) + RUNTIME_MODULE
    import_line = (
        "import { route, type Route, type RouteOptions, type Param } "
        f"from '{runtime_import}';"
    )

    name = safe_js_name(resource.name)
    blocks, properties, bindings = [], [], []
    for action in resource.actions:
        binding = safe_js_name(action.name)
        if binding == name:
            # the resource object already owns this name
            binding = safe_js_name(action.name + "_action")
        blocks.append(render_action(action, config, binding))
        properties.append(action.name if binding == action.name else f"{_property_key(action.name)}: {binding}")
        bindings.append(binding)

    content = templates.render_resource_file(
        import_line=import_line,
        blocks=blocks,
        name=name,
        properties=properties,
        bindings=bindings,
    )
    logger.debug("Resource %s: %d actions", resource.path, len(resource.actions))
    return GeneratedFile(path=resource.path, content=content)


def render_action(action: Action, config: Configuration, binding: Optional[str] = None) -> str:
    """One `const <action> = route<...>(pattern, method);` binding."""
    binding = binding or safe_js_name(action.name)
    generic = _params_type(action)
    call = f"const {binding} = route{generic}({_ts_string(action.path)}, {_ts_string(action.route.method)});"
    if not config.documentation:
        return call
    return "\n".join([
        "/**",
        f" * {action.verb} {action.path}",
        f" * @action :{action.name}",
        " */",
        call,
    ])


def generate_index(resources: Sequence[Resource], config: Configuration) -> GeneratedFile:
    """Top-level barrel: direct re-exports plus one namespace per scope."""
    top_level = [r for r in resources if not r.scope]
    scopes = sorted({r.scope[0] for r in resources if r.scope})
    exports, namespaces = barrel_entries(top_level, scopes)
    content = templates.render_index(exports, namespaces, runtime_path="./" + RUNTIME_MODULE)
    return GeneratedFile(path="index" + RESOURCE_EXT, content=content)


def generate_scoped_index(scope: Tuple[str, ...], resources: Sequence[Resource],
                          config: Configuration, subscopes: Sequence[str] = ()) -> GeneratedFile:
    exports, namespaces = barrel_entries(resources, subscopes)
    content = templates.render_index(exports, namespaces)
    return GeneratedFile(path="/".join(scope) + "/index" + RESOURCE_EXT, content=content)


def barrel_entries(resources: Sequence[Resource], scopes: Sequence[str]):
    """(binding, module) pairs for the resource and scope re-exports of one directory.

    Modules are named after the key token written to disk; bindings are the
    safe JS names. A scope whose name is taken by a resource in the same
    directory is exported as `<scope>_scope`.
    """
    exports, taken = [], {}
    for resource in resources:
        binding = safe_js_name(resource.name)
        if binding in taken:
            raise NameCollisionError(binding, [taken[binding], resource.path])
        taken[binding] = resource.path
        exports.append((binding, resource.key[-1]))

    namespaces = []
    for scope in scopes:
        binding = safe_js_name(scope)
        if binding in taken:
            binding = safe_js_name(scope + "_scope")
            logger.info("Scope %s shares its name with a resource; exported as %s", scope, binding)
            if binding in taken:
                raise NameCollisionError(binding, [taken[binding], scope + "/index" + RESOURCE_EXT])
        taken[binding] = scope + "/index" + RESOURCE_EXT
        namespaces.append((binding, scope + "/index"))
    return exports, namespaces


def _params_type(action: Action) -> str:
    if not action.params:
        return ""
    fields = []
    for param in action.params:
        key = param.name if IDENTIFIER.match(param.name) else json.dumps(param.name)
        fields.append(f"{key}{'' if param.required else '?'}: Param")
    return "<{ " + "; ".join(fields) + " }>"


def _property_key(name: str) -> str:
    # reserved words are valid property names; other non-identifiers get quoted
    return name if IDENTIFIER.match(name) else json.dumps(name)


def _ts_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _relative_prefix(depth: int) -> str:
    return "../" * depth if depth else "./"
