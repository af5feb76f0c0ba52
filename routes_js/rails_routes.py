"""Rails `config/routes.rb` reader: tree-sitter AST walker producing RouteRecords.

Helper names follow Rails' named routes (`users`, `new_user`, `edit_user`,
`user`, `admin_users`, `post_comments`, `preview_user`). Like Rails, a name
belongs to the first route that claims it; later routes on the same name
get no helper.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node

from .models import RouteRecord
from .ruby_helpers import (
    extract_array_elements,
    extract_call_info,
    extract_hash_from_args,
    extract_string_value,
    find_block_body,
    node_text,
    pair_nodes,
    parse_ruby,
    singularize,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete")
MATCH_ALL = ("GET", "POST", "PUT", "PATCH", "DELETE")

RESOURCES_ACTIONS = ["index", "create", "new", "edit", "show", "update", "destroy"]
RESOURCE_ACTIONS = ["create", "new", "edit", "show", "update", "destroy"]

ACTION_VERBS = {
    "index": ("GET",),
    "create": ("POST",),
    "new": ("GET",),
    "edit": ("GET",),
    "show": ("GET",),
    "update": ("PATCH", "PUT"),
    "destroy": ("DELETE",),
}

LIST_OPTIONS = ("only", "except", "via", "concerns")
FORMAT_SUFFIX = "(.:format)"
# Rails only derives a route name from paths made of plain words
NAMEABLE_PATH = re.compile(r"^[\w\-/]+$")


@dataclass
class RouteScope:
    """Nesting state while walking the routes DSL."""

    path: str = ""
    name_prefix: Tuple[str, ...] = ()
    module: str = ""
    # innermost resource, when inside `resources`/`resource`
    singular: Optional[str] = None
    plural: Optional[str] = None
    param: str = "id"
    singular_resource: bool = False
    scope_type: Optional[str] = None  # "member" | "collection" | None
    defaults: Dict[str, str] = field(default_factory=dict)

    def copy(self, **changes) -> RouteScope:
        return dataclasses.replace(self, **changes)

    @property
    def member_path(self) -> str:
        if self.singular_resource:
            return self.path
        return f"{self.path}/:{self.param}"

    @property
    def nested_path(self) -> str:
        """Prefix for routes nested directly in a resource: /posts/:post_id."""
        if self.singular_resource:
            return self.path
        return f"{self.path}/:{self.singular}_{self.param}"


class RailsRoutesReader:
    """Read a Rails routes file and return RouteRecords in declaration order."""

    def __init__(self, routes_file: str):
        self.routes_file = routes_file
        self.records: List[RouteRecord] = []
        self.concerns: Dict[str, Node] = {}
        self._claimed: set = set()

    def read(self) -> List[RouteRecord]:
        self._read_file(self.routes_file, RouteScope())
        logger.debug("Read %d routes from %s", len(self.records), self.routes_file)
        return self.records

    def _read_file(self, path: str, scope: RouteScope) -> None:
        with open(path, "rb") as f:
            source = f.read()
        self._walk(parse_ruby(source), scope)

    def _walk(self, node: Node, scope: RouteScope) -> None:
        for child in node.children:
            self._process_node(child, scope)

    def _walk_block(self, block: Optional[Node], scope: RouteScope) -> None:
        for statement in find_block_body(block):
            self._process_node(statement, scope)

    def _process_node(self, node: Node, scope: RouteScope) -> None:
        call_info = extract_call_info(node)
        if call_info is None:
            # if/unless bodies, begin blocks and the like: walk through
            self._walk(node, scope)
            return

        method_name, args, block = call_info
        if block is None:
            for child in node.children:
                if child.type in ("do_block", "block"):
                    block = child
                    break
        args = [a for a in args if a.type not in ("(", ")", ",")]

        if method_name in HTTP_METHODS:
            self._handle_verb((method_name.upper(),), args, block, scope)
            return

        handler = {
            "resources": self._handle_resources,
            "resource": self._handle_resource,
            "namespace": self._handle_namespace,
            "scope": self._handle_scope,
            "member": self._handle_member,
            "collection": self._handle_collection,
            "concern": self._handle_concern_def,
            "concerns": self._handle_concerns_use,
            "root": self._handle_root,
            "match": self._handle_match,
            "defaults": self._handle_defaults,
            "draw": self._handle_draw,
        }.get(method_name)
        if handler:
            handler(args, block, scope)
        elif method_name == "mount":
            logger.debug("Skipping mounted engine: %s", node_text(node))
        else:
            # constraints, with_options, Rails.application.routes.draw ...
            self._walk_block(block, scope)

    # ---- DSL handlers ----

    def _handle_resources(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        """`resources :users, only: [...], path: ..., as: ..., param: ...`."""
        name, opts = self._name_and_options(args)
        if not name:
            return
        plural = opts.get("as", name)
        singular = singularize(plural)
        prefix, base = self._nesting(scope)
        path = self._join(base, opts.get("path", name))

        inner = scope.copy(
            path=path,
            name_prefix=prefix,
            singular=singular,
            plural=plural,
            param=opts.get("param", "id"),
            singular_resource=False,
            scope_type=None,
        )
        # uncountable names: Rails keeps the collection helper distinct
        collection_name = plural + "_index" if singular == plural else plural
        for action in self._filter_actions(RESOURCES_ACTIONS, opts):
            if action in ("index", "create"):
                self._emit_action(action, path, self._name(*prefix, collection_name), inner)
            elif action in ("new", "edit"):
                route_path = f"{path}/new" if action == "new" else f"{inner.member_path}/edit"
                self._emit_action(action, route_path, self._name(action, *prefix, singular), inner)
            else:
                self._emit_action(action, inner.member_path, self._name(*prefix, singular), inner)

        self._replay_concerns(opts.get("concerns", []), inner)
        self._walk_block(block, inner)

    def _handle_resource(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        """Singular `resource :profile`: no index, no :id."""
        name, opts = self._name_and_options(args)
        if not name:
            return
        singular = opts.get("as", name)
        prefix, base = self._nesting(scope)
        path = self._join(base, opts.get("path", name))

        inner = scope.copy(
            path=path,
            name_prefix=prefix,
            singular=singular,
            plural=singular,
            singular_resource=True,
            scope_type=None,
        )
        for action in self._filter_actions(RESOURCE_ACTIONS, opts):
            if action in ("new", "edit"):
                self._emit_action(action, f"{path}/{action}", self._name(action, *prefix, singular), inner)
            else:
                self._emit_action(action, path, self._name(*prefix, singular), inner)

        self._replay_concerns(opts.get("concerns", []), inner)
        self._walk_block(block, inner)

    def _handle_namespace(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        name, opts = self._name_and_options(args)
        if not name:
            return
        inner = self._clear_resource(scope).copy(
            path=self._join(scope.path, opts.get("path", name)),
            name_prefix=scope.name_prefix + (opts.get("as", name),),
            module=self._join_module(scope.module, opts.get("module", name)),
        )
        self._walk_block(block, inner)

    def _handle_scope(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        """`scope '/path', module: :mod, as: :name`."""
        name, opts = self._name_and_options(args)
        inner = scope.copy()
        path = opts.get("path", name)
        if path:
            inner.path = self._join(scope.path, path)
        if opts.get("module"):
            inner.module = self._join_module(scope.module, opts["module"])
        if opts.get("as"):
            inner.name_prefix = scope.name_prefix + (opts["as"],)
        self._walk_block(block, inner)

    def _handle_member(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        self._walk_block(block, scope.copy(scope_type="member"))

    def _handle_collection(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        self._walk_block(block, scope.copy(scope_type="collection"))

    def _handle_concern_def(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        if not args or block is None:
            return
        name = extract_string_value(args[0])
        if name:
            self.concerns[name] = block

    def _handle_concerns_use(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        names: List[str] = []
        for arg in args:
            if arg.type in ("array", "symbol_array"):
                names.extend(extract_array_elements(arg))
            elif arg.type in ("simple_symbol", "string"):
                names.append(extract_string_value(arg))
        self._replay_concerns(names, scope)

    def _handle_root(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        """`root 'pages#home'` or `root to: 'pages#home'`."""
        _, opts = self._name_and_options(args)
        target = opts.get("to")
        if target is None:
            for arg in args:
                if arg.type == "string":
                    target = extract_string_value(arg)
                    break
        action = target.split("#", 1)[1] if target and "#" in target else "root"
        path = scope.path or "/"
        self._emit("GET", path, self._name(*scope.name_prefix, "root"), action, scope)

    def _handle_match(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        """`match '/path', via: [:get, :post]`; `via: :all` expands to every verb."""
        _, opts = self._name_and_options(args)
        via = opts.get("via") or ["all"]
        verbs = MATCH_ALL if "all" in via else tuple(v.upper() for v in via)
        self._handle_verb(verbs, args, block, scope)

    def _handle_defaults(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        """`defaults format: :json do ... end`."""
        defaults = dict(scope.defaults)
        for key, value in extract_hash_from_args(args).items():
            defaults[key] = extract_string_value(value)
        self._walk_block(block, scope.copy(defaults=defaults))

    def _handle_draw(self, args: List[Node], block: Optional[Node], scope: RouteScope) -> None:
        """`draw(:admin)` loads config/routes/admin.rb; `routes.draw do` walks the block."""
        if not args:
            self._walk_block(block, scope)
            return
        name = extract_string_value(args[0])
        draw_file = os.path.join(os.path.dirname(self.routes_file), "routes", f"{name}.rb")
        if os.path.isfile(draw_file):
            self._read_file(draw_file, scope)
        else:
            logger.warning("draw(%s) referenced but file not found: %s", name, draw_file)

    def _handle_verb(self, verbs: Tuple[str, ...], args: List[Node], block: Optional[Node],
                     scope: RouteScope) -> None:
        """`get 'about', to: 'pages#about', as: :about` and friends."""
        name, opts = self._name_and_options(args)
        if not name:
            return

        target = opts.get("to", "")
        action = opts.get("action") or (target.split("#", 1)[1] if "#" in target else None)
        on = opts.get("on")
        scope_type = on if on in ("member", "collection") else scope.scope_type
        is_symbol = bool(args) and args[0].type == "simple_symbol"

        if scope.singular and scope_type == "member":
            path = self._join(scope.member_path, name)
            helper = self._name(opts.get("as", name), *scope.name_prefix, scope.singular)
        elif scope.singular and scope_type == "collection":
            path = self._join(scope.path, name)
            helper = self._name(opts.get("as", name), *scope.name_prefix, scope.plural)
        elif scope.singular:
            path = self._join(scope.nested_path, name)
            helper = self._name(*scope.name_prefix, scope.singular, opts.get("as", name))
        else:
            path = self._join(scope.path, name)
            helper = self._route_name(name, opts, scope)

        if action is None and is_symbol:
            action = name
        for verb in verbs:
            self._emit(verb, path, helper, action, scope)

    # ---- emission ----

    def _emit_action(self, action: str, path: str, helper: Optional[str], scope: RouteScope) -> None:
        for verb in ACTION_VERBS[action]:
            self._emit(verb, path, helper, action, scope)

    def _emit(self, verb: str, path: str, helper: Optional[str], action: Optional[str],
              scope: RouteScope) -> None:
        if helper in self._claimed:
            helper = None
        elif helper:
            self._claimed.add(helper)
        if path != "/":
            path = path.rstrip("/") + FORMAT_SUFFIX
        self.records.append(RouteRecord(
            verb=verb,
            path=path,
            helper=helper,
            action=action,
            defaults=dict(scope.defaults),
        ))

    # ---- helpers ----

    def _name_and_options(self, args: List[Node]) -> Tuple[Optional[str], Dict[str, object]]:
        """First positional string/symbol and keyword options.

        `get 'status' => 'health#show'` is read as path 'status' with
        `to: 'health#show'`.
        """
        name = None
        opts: Dict[str, object] = {}
        pairs: List[Node] = []
        for arg in args:
            if arg.type in ("simple_symbol", "string") and name is None:
                name = extract_string_value(arg)
            elif arg.type == "pair":
                pairs.append(arg)
            elif arg.type == "hash":
                pairs.extend(c for c in arg.children if c.type == "pair")

        for pair in pairs:
            key_node, value_node = pair_nodes(pair)
            if key_node is None:
                continue
            key = extract_string_value(key_node)
            if key_node.type == "string" and name is None:
                name, key = key, "to"
            if key in LIST_OPTIONS:
                opts[key] = self._value_list(value_node)
            elif value_node.type == "nil":
                opts[key] = None
            else:
                opts[key] = extract_string_value(value_node)
        return name, opts

    def _value_list(self, node: Node) -> List[str]:
        if node.type in ("array", "symbol_array", "string_array"):
            return extract_array_elements(node)
        value = extract_string_value(node)
        return [value] if value else []

    def _route_name(self, path: str, opts: Dict[str, object], scope: RouteScope) -> Optional[str]:
        if "as" in opts:
            return self._name(*scope.name_prefix, opts["as"]) if opts["as"] else None
        candidate = path.strip("/")
        if not candidate or not NAMEABLE_PATH.match(candidate):
            return None
        return self._name(*scope.name_prefix, re.sub(r"[/\-]", "_", candidate))

    def _nesting(self, scope: RouteScope) -> Tuple[Tuple[str, ...], str]:
        """Name prefix and base path for a resource declared inside `scope`."""
        if not scope.singular:
            return scope.name_prefix, scope.path
        if scope.scope_type == "member":
            return scope.name_prefix + (scope.singular,), scope.member_path
        if scope.scope_type == "collection":
            return scope.name_prefix + (scope.plural,), scope.path
        return scope.name_prefix + (scope.singular,), scope.nested_path

    def _replay_concerns(self, names: List[str], scope: RouteScope) -> None:
        for name in names:
            block = self.concerns.get(name)
            if block is None:
                logger.warning("Concern '%s' referenced but not defined", name)
                continue
            self._walk_block(block, scope)

    @staticmethod
    def _clear_resource(scope: RouteScope) -> RouteScope:
        return scope.copy(singular=None, plural=None, param="id", singular_resource=False, scope_type=None)

    @staticmethod
    def _filter_actions(actions: List[str], opts: Dict[str, object]) -> List[str]:
        if "only" in opts:
            return [a for a in actions if a in opts["only"]]
        if "except" in opts:
            return [a for a in actions if a not in opts["except"]]
        return list(actions)

    @staticmethod
    def _name(*parts: Optional[str]) -> str:
        return "_".join(str(p) for p in parts if p)

    @staticmethod
    def _join(prefix: str, suffix: Optional[str]) -> str:
        if not suffix or suffix == "/":
            return prefix or "/"
        suffix = str(suffix).strip("/")
        return f"{prefix.rstrip('/')}/{suffix}"

    @staticmethod
    def _join_module(prefix: str, module: Optional[str]) -> str:
        if not module:
            return prefix
        module = str(module).strip("/")
        return f"{prefix}/{module}" if prefix else module


def read_routes(routes_file: str) -> List[RouteRecord]:
    """Read every route declared in a Rails routes file."""
    return RailsRoutesReader(routes_file).read()
