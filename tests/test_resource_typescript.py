"""Tests for resource-mode TypeScript emission."""

import pytest

from routes_js.config import Configuration
from routes_js.errors import NameCollisionError
from routes_js.models import Resource, RouteRecord
from routes_js.resource_generator import generate, group_routes_by_resource
from routes_js.resource_typescript import (
    generate_index,
    generate_resource_file,
    generate_runtime,
    generate_scoped_index,
    render_action,
    safe_js_name,
)
from routes_js.route import build_route

USERS_FILE = """import { route, type Route, type RouteOptions, type Param } from './lib/wayfinder';

/**
 * GET /users
 * @action :index
 */
const index = route('/users', 'get');

/**
 * GET /users/new
 * @action :new
 */
const new_ = route('/users/new', 'get');

export const users = {
  index,
  new: new_,
} as const;

export { index, new_ };
"""


def _resources(records, **options):
    config = Configuration(style="resource", **options)
    routes = [build_route(RouteRecord(verb=verb, path=path, helper=helper)) for helper, verb, path in records]
    return group_routes_by_resource(routes, config), config


class TestSafeJsName:
    def test_reserved_words(self):
        assert safe_js_name("new") == "new_"
        assert safe_js_name("delete") == "delete_"

    def test_plain_names(self):
        assert safe_js_name("index") == "index"
        assert safe_js_name("users") == "users"

    def test_invalid_characters(self):
        assert safe_js_name("my-thing") == "my_thing"
        assert safe_js_name("1st") == "_1st"


class TestResourceFile:
    def test_users_file(self):
        resources, config = _resources([
            ("users", "GET", "/users"),
            ("new_user", "GET", "/users/new"),
        ])
        generated = generate_resource_file(resources[0], config)
        assert generated.path == "users.ts"
        assert generated.content == USERS_FILE

    def test_without_documentation(self):
        resources, config = _resources([("users", "GET", "/users")], documentation=False)
        content = generate_resource_file(resources[0], config).content
        assert "/**" not in content
        assert "const index = route('/users', 'get');" in content

    def test_nested_import_depth(self):
        resources, config = _resources([("api_v1_products", "GET", "/api/v1/products")])
        content = generate_resource_file(resources[0], config).content
        assert "from '../../lib/wayfinder';" in content

    def test_scoped_import_depth(self):
        resources, config = _resources([("admin_users", "GET", "/admin/users")])
        generated = generate_resource_file(resources[0], config)
        assert generated.path == "admin/users.ts"
        assert "from '../lib/wayfinder';" in generated.content

    def test_param_generics(self):
        resources, config = _resources([("user", "GET", "/users/:id(.:format)")])
        action = resources[0].actions[0]
        assert render_action(action, config).endswith(
            "const show = route<{ id: Param; format?: Param }>('/users/:id(.:format)', 'get');"
        )

    def test_mutation_method(self):
        resources, config = _resources([("user", "DELETE", "/users/:id")], documentation=False)
        action = resources[0].actions[0]
        assert render_action(action, config) == "const delete_ = route<{ id: Param }>('/users/:id', 'delete');"

    def test_jsdoc(self):
        resources, config = _resources([("user", "PATCH", "/users/:id")])
        doc = render_action(resources[0].actions[0], config)
        assert doc.startswith("/**\n * PATCH /users/:id\n * @action :update\n */\n")


class TestIndexFiles:
    def test_top_level_index(self):
        resources, config = _resources([
            ("users", "GET", "/users"),
            ("posts", "GET", "/posts"),
            ("admin_users", "GET", "/admin/users"),
            ("api_v1_products", "GET", "/api/v1/products"),
        ])
        generated = generate_index(resources, config)
        assert generated.path == "index.ts"
        assert generated.content == (
            "export { posts } from './posts';\n"
            "export { users } from './users';\n"
            "export * as admin from './admin/index';\n"
            "export * as api from './api/index';\n"
            "\n"
            "// Runtime types\n"
            "export type { Route, RouteOptions, FormAttrs, Param, Method } from './lib/wayfinder';\n"
        )

    def test_scoped_index(self):
        resources, config = _resources([("admin_users", "GET", "/admin/users")])
        generated = generate_scoped_index(("admin",), resources, config)
        assert generated.path == "admin/index.ts"
        assert generated.content == "export { users } from './users';\n"

    def test_scoped_index_with_subscopes(self):
        generated = generate_scoped_index(("api",), [], Configuration(), ["v1"])
        assert generated.path == "api/index.ts"
        assert generated.content == "export * as v1 from './v1/index';\n"


class TestRuntime:
    def test_runtime_path(self):
        assert generate_runtime(Configuration()).path == "lib/wayfinder.ts"

    def test_runtime_without_forms(self):
        content = generate_runtime(Configuration()).content
        assert "export function route<" in content
        assert "export type Method = 'get' | 'post' | 'put' | 'patch' | 'delete' | 'head' | 'options';" in content
        assert "buildForm" not in content
        assert "FormFunction" not in content
        assert "{form_" not in content

    def test_runtime_with_forms(self):
        content = generate_runtime(Configuration(with_forms=True)).content
        assert "export type FormFunction<P>" in content
        assert "form: FormFunction<P>;" in content
        assert "form: Object.assign(buildForm(defaultMethod), {" in content
        assert "_method: method.toUpperCase()" in content


SCOPE_RECORDS = [
    ("users", "GET", "/users"),
    ("user", "GET", "/users/:id"),
    ("new_user", "GET", "/users/new"),
    ("edit_user", "GET", "/users/:id/edit"),
]


class TestScopeGroupedBarrels:
    def _files(self):
        config = Configuration(style="resource", group_by="scope")
        routes = [build_route(RouteRecord(verb=verb, path=path, helper=helper))
                  for helper, verb, path in SCOPE_RECORDS]
        return {f.path: f.content for f in generate(routes, config)}

    def test_file_layout(self):
        assert sorted(self._files()) == [
            "index.ts",
            "lib/wayfinder.ts",
            "users.ts",
            "users/edit.ts",
            "users/index.ts",
            "users/new.ts",
        ]

    def test_scoped_barrel_imports_files_on_disk(self):
        assert self._files()["users/index.ts"] == (
            "export { edit } from './edit';\n"
            "export { new_ } from './new';\n"
        )

    def test_scope_sharing_a_resource_name(self):
        index = self._files()["index.ts"]
        assert index.startswith(
            "export { users } from './users';\n"
            "export * as users_scope from './users/index';\n"
        )
        assert index.count(" users ") == 1

    def test_action_named_like_its_resource(self):
        content = self._files()["users/new.ts"]
        assert "from '../lib/wayfinder';" in content
        assert "const new_action = route('/users/new', 'get');" in content
        assert "export const new_ = {\n  new: new_action,\n} as const;" in content
        assert "export { new_action };" in content

    def test_duplicate_binding_raises(self):
        resources = [
            Resource(key=("new",), name="new", path="new.ts"),
            Resource(key=("new_",), name="new_", path="new_.ts"),
        ]
        with pytest.raises(NameCollisionError, match="new_"):
            generate_index(resources, Configuration(style="resource"))
