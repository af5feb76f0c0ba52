"""Tests for the .d.ts declaration generator."""

from routes_js.config import Configuration
from routes_js.models import RouteRecord
from routes_js.route import build_route
from routes_js.type_generator import generate, rich_declaration, simple_declaration

ARGS = "id: RouteParam, options?: RouteOptions"


def _route(helper="user", path="/users/:id", verb="GET"):
    return build_route(RouteRecord(verb=verb, path=path, helper=helper))


class TestSimpleDeclarations:
    def test_declaration(self):
        assert simple_declaration("user_path", _route()) == (
            f"user_path: (({ARGS}) => string) & RouteHelperInfo;"
        )

    def test_no_params(self):
        route = _route("users", "/users")
        assert simple_declaration("users_path", route) == (
            "users_path: ((options?: RouteOptions) => string) & RouteHelperInfo;"
        )

    def test_module(self):
        dts = generate([_route()], Configuration())
        assert "export type RouteParam = string | number | { id: string | number };" in dts
        assert "export interface RouteHelperInfo {" in dts
        assert "export declare function configure(" in dts
        assert f"export declare const user_path: (({ARGS}) => string) & RouteHelperInfo;" in dts

    def test_url_helpers(self):
        dts = generate([_route()], Configuration(url_helpers=True))
        assert "export declare const user_url: " in dts

    def test_reserved_param_name(self):
        route = _route("klass", "/classes/:class")
        assert "(class_: RouteParam, options?: RouteOptions)" in simple_declaration("klass_path", route)


class TestRichDeclarations:
    def test_plain(self):
        config = Configuration(variant="rich")
        assert rich_declaration(_route(), config) == f"user_path: (({ARGS}) => RouteResult<'get'>);"

    def test_with_methods(self):
        config = Configuration(variant="rich", with_methods=True)
        assert rich_declaration(_route(verb="PATCH"), config) == (
            f"user_path: (({ARGS}) => RouteResult<'patch'>) & {{\n"
            f"  url({ARGS}): string;\n"
            f"  get({ARGS}): RouteResult<'get'>;\n"
            f"  head({ARGS}): RouteResult<'head'>;\n"
            f"  patch({ARGS}): RouteResult<'patch'>;\n"
            "};"
        )

    def test_with_forms(self):
        config = Configuration(variant="rich", with_forms=True)
        text = rich_declaration(_route(verb="DELETE"), config)
        assert f"form: (({ARGS}) => FormAttrs) & {{ patch({ARGS}): FormAttrs;" in text

    def test_form_helper_declared(self):
        dts = generate([_route(verb="DELETE")], Configuration(variant="rich", with_forms=True))
        assert "export declare function _buildFormAction(" in dts
        assert "export interface RouteResult<M extends string = string> {" in dts

    def test_no_form_helper_without_forms(self):
        dts = generate([_route()], Configuration(variant="rich"))
        assert "_buildFormAction" not in dts
        assert "export declare function _buildUrl(" in dts


class TestModuleTypes:
    def test_umd_namespace(self):
        dts = generate([_route()], Configuration(module_type="umd"))
        assert dts.endswith("\n\nexport as namespace Routes;\n")

    def test_cjs_uses_module_declarations(self):
        dts = generate([_route()], Configuration(module_type="cjs"))
        assert "export declare const user_path" in dts
        assert "export as namespace" not in dts

    def test_global_namespace(self):
        dts = generate([_route()], Configuration(module_type=None))
        assert "declare namespace Routes {" in dts
        assert "\n  type RouteParam = " in dts
        assert f"\n  const user_path: (({ARGS}) => string) & RouteHelperInfo;" in dts
        assert "export " not in dts
        assert dts.endswith("}\n")

    def test_header(self):
        assert generate([], Configuration()).startswith("/**\n * Route helpers generated by routes-js.")
