"""Tests for the generation entry points and file writing."""

import os

import pytest

from routes_js.config import Configuration
from routes_js.generator import definitions, generate, generate_files, write_files
from routes_js.models import GeneratedFile, RouteRecord

RECORDS = [
    RouteRecord(verb="GET", path="/users(.:format)", helper="users", action="index"),
    RouteRecord(verb="GET", path="/users/new(.:format)", helper="new_user", action="new"),
    RouteRecord(verb="GET", path="/users/:id(.:format)", helper="user", action="show"),
    RouteRecord(verb="GET", path="/admin/users(.:format)", helper="admin_users", action="index"),
]


class TestGenerate:
    def test_generate_source(self):
        js = generate(RECORDS)
        assert "const users_path = /*#__PURE__*/ _builder.route(" in js
        assert "const admin_users_path = " in js

    def test_definitions(self):
        dts = definitions(RECORDS)
        assert "export declare const user_path: ((id: RouteParam, options?: RouteOptions) => string) & RouteHelperInfo;" in dts

    def test_idempotent(self):
        config = Configuration(variant="rich", with_methods=True)
        assert generate(RECORDS, config) == generate(RECORDS, config)


class TestGenerateFiles:
    def test_classic_paths(self):
        result = generate_files(RECORDS, Configuration(output_file="out/routes.js"))
        assert result.paths == ["out/routes.js", "out/routes.d.ts"]
        assert len(result.routes) == 4

    def test_classic_without_types(self):
        result = generate_files(RECORDS, Configuration(output_file="routes.js", generate_types=False))
        assert result.paths == ["routes.js"]

    def test_explicit_types_file(self):
        config = Configuration(output_file="routes.js", types_file="types/routes.d.ts")
        assert generate_files(RECORDS, config).paths == ["routes.js", "types/routes.d.ts"]

    def test_resource_paths(self):
        config = Configuration(style="resource", output_dir="frontend/routes")
        paths = generate_files(RECORDS, config).paths
        assert paths[0] == os.path.join("frontend/routes", "lib/wayfinder.ts")
        assert os.path.join("frontend/routes", "users.ts") in paths
        assert os.path.join("frontend/routes", "admin/users.ts") in paths
        assert os.path.join("frontend/routes", "index.ts") in paths
        assert os.path.join("frontend/routes", "admin/index.ts") in paths

    def test_resource_contents(self):
        result = generate_files(RECORDS, Configuration(style="resource"))
        users = next(f for f in result.files if f.path.endswith(os.sep + "users.ts") and "admin" not in f.path)
        assert "const index = route<{ format?: Param }>('/users(.:format)', 'get');" in users.content
        assert "new: new_," in users.content


class TestWriteFiles:
    def test_creates_directories(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "routes.js"
        written = write_files([GeneratedFile(path=str(target), content="// routes\n")])
        assert written == [str(target)]
        assert target.read_text() == "// routes\n"

    def test_overwrites(self, tmp_path):
        target = tmp_path / "routes.js"
        target.write_text("old")
        write_files([GeneratedFile(path=str(target), content="new")])
        assert target.read_text() == "new"

    def test_hooks_receive_written_paths(self, tmp_path):
        calls = []
        files = [
            GeneratedFile(path=str(tmp_path / "a.js"), content="a"),
            GeneratedFile(path=str(tmp_path / "b.d.ts"), content="b"),
        ]
        write_files(files, hooks=[calls.append])
        assert calls == [[str(tmp_path / "a.js"), str(tmp_path / "b.d.ts")]]

    def test_write_error_skips_hooks(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        calls = []
        with pytest.raises(OSError):
            write_files([GeneratedFile(path=str(blocker / "routes.js"), content="x")], hooks=[calls.append])
        assert calls == []

    def test_end_to_end(self, tmp_path):
        config = Configuration(style="resource", output_dir=str(tmp_path / "routes"))
        written = write_files(generate_files(RECORDS, config).files)
        assert (tmp_path / "routes" / "lib" / "wayfinder.ts").exists()
        assert (tmp_path / "routes" / "admin" / "index.ts").read_text() == "export { users } from './users';\n"
        assert len(written) == 5
