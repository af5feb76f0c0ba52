"""Resource mode: group routes into resources and infer CRUD action names.

Resource mode writes one TypeScript module per resource instead of a single
routes file:

    assets/js/routes/
        index.ts            barrel re-exporting every resource
        lib/wayfinder.ts    route() runtime
        users.ts
        admin/
            index.ts        scope barrel
            users.ts
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Sequence, Tuple

from .config import Configuration
from .models import Action, ActionParam, GeneratedFile, Resource, Route

logger = logging.getLogger(__name__)

RESOURCE_EXT = ".ts"

# canonical emission order of actions inside a resource file
ACTION_ORDER = ("index", "new", "create", "show", "edit", "update", "delete", "restore", "confirm")

HELPER_SUFFIX = re.compile(r"_(path|url)$")
ACTION_PREFIX = re.compile(r"^(new|edit|create|update|delete|restore)_")
ACTION_SUFFIX = re.compile(r"_(index|show|new|edit|create|update|delete|confirm|restore|confirm_email)$")
OPTIONAL_GROUP = re.compile(r"\([^)]*\)")
NON_WORD = re.compile(r"\W+")

API_VERSION_SCOPE = re.compile(r"^/api/v(\d+)/")

# helper-name rules checked before path-shape rules
NAME_RULES = [
    (re.compile(r"^new_"), "new"),
    (re.compile(r"^edit_"), "edit"),
    (re.compile(r"^create_"), "create"),
    (re.compile(r"^update_"), "update"),
    (re.compile(r"^delete_"), "delete"),
    (re.compile(r"^restore_"), "restore"),
    (re.compile(r"_restore_(path|url)$"), "restore"),
    (re.compile(r"_confirm_(path|url)$"), "confirm"),
    (re.compile(r"_new_(path|url)$"), "new"),
    (re.compile(r"_index_(path|url)$"), "index"),
    (re.compile(r"_show_(path|url)$"), "show"),
]

PATH_RULES = [
    (re.compile(r"/new$"), None, "new"),
    (re.compile(r"/create$"), "GET", "new"),
    (re.compile(r"/:\w+/edit$"), None, "edit"),
    (re.compile(r"/:\w+/restore$"), None, "restore"),
    (re.compile(r"/:\w+/confirm$"), None, "confirm"),
]

VERB_ACTIONS = {"POST": "create", "PATCH": "update", "PUT": "update", "DELETE": "delete"}
MEMBER_PATH = re.compile(r"/:\w+$")


def generate(routes: List[Route], config: Configuration) -> List[GeneratedFile]:
    """Build every file of a resource-mode output tree."""
    from . import resource_typescript

    resources = group_routes_by_resource(routes, config)

    files = [resource_typescript.generate_runtime(config)]
    files.extend(resource_typescript.generate_resource_file(r, config) for r in resources)
    if config.include_index:
        files.append(resource_typescript.generate_index(resources, config))
    for scope, members, subscopes in scoped_groups(resources):
        files.append(resource_typescript.generate_scoped_index(scope, members, config, subscopes))
    return files


def group_routes_by_resource(routes: List[Route], config: Configuration) -> List[Resource]:
    """Cluster routes by resource key, sorted by resource name."""
    groups: Dict[Tuple[str, ...], List[Route]] = {}
    for route in routes:
        groups.setdefault(resource_key(route, config.group_by), []).append(route)

    resources = [
        Resource(
            key=key,
            name=key[-1],
            path=generate_resource_path(key),
            actions=extract_actions(members, key),
            routes=members,
        )
        for key, members in groups.items()
    ]
    return sorted(resources, key=lambda r: (r.name, r.key))


def resource_key(route: Route, group_by: str = "resource") -> Tuple[str, ...]:
    if group_by == "scope":
        return resource_key_from_path(route)
    if group_by == "controller":
        return resource_key_from_controller(route)
    return resource_key_from_helper(route)


def resource_key_from_helper(route: Route) -> Tuple[str, ...]:
    """Derive ("admin", "users") from admin_user_path at /admin/users/:id."""
    scope = extract_scope_from_path(route.path)

    name = HELPER_SUFFIX.sub("", route.helper_name)
    name = ACTION_PREFIX.sub("", name)
    name = ACTION_SUFFIX.sub("", name)
    name = _collapse_repeat(name)
    name = _strip_scope_prefix(name, scope)
    name = NON_WORD.sub("_", name).strip("_") or "root"

    return scope + (pluralize(name),)


def resource_key_from_path(route: Route) -> Tuple[str, ...]:
    """Key from the static path segments, e.g. /admin/users/:id -> (admin, users)."""
    tokens = []
    for component in OPTIONAL_GROUP.sub("", route.path).split("/"):
        if not component or component.startswith((":", "*")):
            continue
        tokens.append(NON_WORD.sub("_", component).strip("_") or "root")
    return tuple(tokens) or ("root",)


def resource_key_from_controller(route: Route) -> Tuple[str, ...]:
    # Route records carry no controller module yet; group like `resource`.
    return resource_key_from_helper(route)


def generate_resource_path(key: Sequence[str], ext: str = RESOURCE_EXT) -> str:
    """("admin", "users") -> "admin/users.ts"."""
    return "/".join(key) + ext


def infer_action_name(route: Route) -> str:
    """Infer a Phoenix-style action tag for a route.

    Helper-name conventions win over path shape, which wins over the HTTP
    verb: a GET alone cannot tell :new from :index.
    """
    name = route.helper_name
    verb = route.verb.upper()
    path = OPTIONAL_GROUP.sub("", route.path)

    for pattern, action in NAME_RULES:
        if pattern.search(name):
            return action
    for pattern, required_verb, action in PATH_RULES:
        if pattern.search(path) and (required_verb is None or verb == required_verb):
            return action
    if verb in VERB_ACTIONS:
        return VERB_ACTIONS[verb]
    if verb == "GET" and MEMBER_PATH.search(path):
        return "show"
    return "index"


def extract_actions(routes: List[Route], key: Sequence[str] = ()) -> List[Action]:
    """One Action per distinct tag, first route wins, in canonical order."""
    actions: Dict[str, Action] = {}
    for route in routes:
        tag = infer_action_name(route)
        if tag in actions:
            logger.warning(
                "Resource %s: dropping %s %s, action '%s' already taken by %s",
                "/".join(key), route.verb, route.path, tag, actions[tag].path,
            )
            continue
        actions[tag] = Action(name=tag, route=route, params=build_params(route))
    return sorted(actions.values(), key=action_sort_order)


def build_params(route: Route) -> List[ActionParam]:
    params = [ActionParam(name, True) for name in route.required_params]
    params.extend(ActionParam(name, False) for name in route.optional_params
                  if name not in route.required_params)
    return params


def action_sort_order(action: Action) -> int:
    if action.name in ACTION_ORDER:
        return ACTION_ORDER.index(action.name)
    return len(ACTION_ORDER)


def scoped_groups(resources: List[Resource]):
    """Yield (scope, resources, subscopes) for every scope prefix level.

    A resource keyed (api, v1, products) produces barrels for (api,) with
    subscope v1 and for (api, v1) with the products resource.
    """
    members: Dict[Tuple[str, ...], List[Resource]] = {}
    subscopes: Dict[Tuple[str, ...], List[str]] = {}
    for resource in resources:
        scope = resource.scope
        if not scope:
            continue
        members.setdefault(scope, []).append(resource)
        for depth in range(1, len(scope)):
            children = subscopes.setdefault(scope[:depth], [])
            if scope[depth] not in children:
                children.append(scope[depth])
        members.setdefault(scope[:1], [])

    for scope in sorted(set(members) | set(subscopes)):
        yield scope, members.get(scope, []), sorted(subscopes.get(scope, []))


def extract_scope_from_path(path: str) -> Tuple[str, ...]:
    if path.startswith("/admin/"):
        return ("admin",)
    match = API_VERSION_SCOPE.match(path)
    if match:
        return ("api", f"v{match.group(1)}")
    if path.startswith("/api/"):
        return ("api",)
    return ()


def pluralize(word: str) -> str:
    """Naive pluralization, good enough for resource file names."""
    if word.endswith("s"):
        return word
    if word.endswith("y"):
        return word[:-1] + "ies"
    return word + "s"


def _collapse_repeat(name: str) -> str:
    parts = name.split("_")
    if len(parts) >= 2 and parts[0] == parts[1]:
        return "_".join(parts[:1] + parts[2:])
    return name


def _strip_scope_prefix(name: str, scope: Tuple[str, ...]) -> str:
    if not scope:
        return name
    prefix = "_".join(scope) + "_"
    return name[len(prefix):] if name.startswith(prefix) else name
