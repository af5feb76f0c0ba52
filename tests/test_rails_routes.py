"""Tests for the Rails routes.rb reader."""

import logging
import os

import pytest

from routes_js.rails_routes import RailsRoutesReader, read_routes

FIXTURE = os.path.join(os.path.dirname(__file__), "fixtures", "sample_app", "config", "routes.rb")


def _by_helper(records):
    return {r.helper: r for r in records if r.helper}


def _read_source(tmp_path, source):
    path = tmp_path / "routes.rb"
    path.write_text(source)
    return read_routes(str(path))


class TestSampleApp:
    @pytest.fixture(scope="class")
    def records(self):
        return read_routes(FIXTURE)

    @pytest.fixture(scope="class")
    def helpers(self, records):
        return _by_helper(records)

    def test_root(self, helpers):
        root = helpers["root"]
        assert root.verb == "GET"
        assert root.path == "/"
        assert root.action == "home"

    def test_resources(self, helpers):
        assert helpers["users"].path == "/users(.:format)"
        assert helpers["users"].action == "index"
        assert helpers["new_user"].path == "/users/new(.:format)"
        assert helpers["edit_user"].path == "/users/:id/edit(.:format)"
        assert helpers["user"].path == "/users/:id(.:format)"
        assert helpers["user"].action == "show"

    def test_later_routes_on_a_claimed_name_have_no_helper(self, records):
        user_routes = [r for r in records if r.path == "/users/:id(.:format)"]
        assert [(r.verb, r.helper) for r in user_routes] == [
            ("GET", "user"),
            ("PATCH", None),
            ("PUT", None),
            ("DELETE", None),
        ]
        create = [r for r in records if r.path == "/users(.:format)" and r.verb == "POST"]
        assert create[0].helper is None
        assert create[0].action == "create"

    def test_member_and_collection(self, helpers):
        assert helpers["preview_user"].path == "/users/:id/preview(.:format)"
        assert helpers["preview_user"].action == "preview"
        assert helpers["search_users"].path == "/users/search(.:format)"

    def test_nested_resources(self, records, helpers):
        assert set(["posts", "post"]) <= set(helpers)
        assert "new_post" not in helpers
        assert helpers["post_comments"].path == "/posts/:post_id/comments(.:format)"
        assert helpers["new_post_comment"].path == "/posts/:post_id/comments/new(.:format)"
        assert helpers["edit_post_comment"].path == "/posts/:post_id/comments/:id/edit(.:format)"
        assert helpers["post_comment"].path == "/posts/:post_id/comments/:id(.:format)"
        assert not [r for r in records if "comments" in r.path and r.verb == "DELETE"]

    def test_singular_resource(self, records, helpers):
        assert helpers["profile"].path == "/profile(.:format)"
        assert helpers["edit_profile"].path == "/profile/edit(.:format)"
        assert "new_profile" not in helpers
        assert {r.verb for r in records if r.path == "/profile(.:format)"} == {"GET", "PATCH", "PUT"}

    def test_namespace(self, helpers):
        assert helpers["admin_users"].path == "/admin/users(.:format)"
        assert helpers["admin_user"].path == "/admin/users/:id(.:format)"

    def test_defaults_block(self, helpers):
        products = helpers["api_v1_products"]
        assert products.path == "/api/v1/products(.:format)"
        assert products.defaults == {"format": "json"}
        assert helpers["api_v1_product"].defaults == {"format": "json"}
        assert helpers["users"].defaults == {}

    def test_concerns(self, helpers):
        assert helpers["article"].path == "/articles/:id(.:format)"
        assert helpers["article_notes"].path == "/articles/:article_id/notes(.:format)"

    def test_match_via(self, records, helpers):
        assert helpers["search"].verb == "GET"
        assert helpers["search"].path == "/search(.:format)"
        assert helpers["search"].action == "index"
        post = [r for r in records if r.path == "/search(.:format)" and r.verb == "POST"]
        assert len(post) == 1
        assert post[0].helper is None

    def test_simple_verbs(self, helpers):
        assert helpers["about"].path == "/about(.:format)"
        assert helpers["about"].action == "about"
        assert helpers["health"].action == "show"

    def test_conditional_block(self, helpers):
        assert helpers["debug"].path == "/debug(.:format)"

    def test_draw(self, helpers):
        assert helpers["legal_terms"].path == "/legal/terms(.:format)"
        assert helpers["legal_terms"].action == "terms"

    def test_declaration_order(self, records):
        named = [r.helper for r in records if r.helper]
        assert named[0] == "root"
        assert named.index("users") < named.index("posts") < named.index("legal_terms")


class TestInlineRoutes:
    def test_unnameable_path(self, tmp_path):
        records = _read_source(tmp_path, 'get "photos/:id", to: "photos#show"\n')
        assert len(records) == 1
        assert records[0].helper is None
        assert records[0].path == "/photos/:id(.:format)"

    def test_explicit_name(self, tmp_path):
        records = _read_source(tmp_path, 'get "photos/:id", to: "photos#show", as: :photo\n')
        assert records[0].helper == "photo"

    def test_nil_name(self, tmp_path):
        records = _read_source(tmp_path, 'get "status", to: "health#show", as: nil\n')
        assert records[0].helper is None

    def test_custom_path(self, tmp_path):
        records = _read_source(tmp_path, "resources :people, path: 'folks', only: [:index, :show]\n")
        helpers = _by_helper(records)
        assert helpers["people"].path == "/folks(.:format)"
        assert helpers["person"].path == "/folks/:id(.:format)"

    def test_custom_param(self, tmp_path):
        records = _read_source(tmp_path, "resources :photos, param: :slug, only: [:show]\n")
        assert records[0].path == "/photos/:slug(.:format)"

    def test_uncountable(self, tmp_path):
        records = _read_source(tmp_path, "resources :sheep, only: [:index, :show]\n")
        helpers = _by_helper(records)
        assert helpers["sheep_index"].path == "/sheep(.:format)"
        assert helpers["sheep"].path == "/sheep/:id(.:format)"

    def test_scope_with_name_prefix(self, tmp_path):
        source = "scope '/v2', as: 'v2' do\n  resources :items, only: [:index]\nend\n"
        records = _read_source(tmp_path, source)
        assert records[0].helper == "v2_items"
        assert records[0].path == "/v2/items(.:format)"

    def test_namespaced_root(self, tmp_path):
        source = "namespace :admin do\n  root 'dashboard#index'\nend\n"
        records = _read_source(tmp_path, source)
        assert records[0].helper == "admin_root"
        assert records[0].path == "/admin(.:format)"
        assert records[0].action == "index"

    def test_on_member(self, tmp_path):
        source = "resources :users, only: [] do\n  get :preview, on: :member\nend\n"
        records = _read_source(tmp_path, source)
        assert records[0].helper == "preview_user"
        assert records[0].path == "/users/:id/preview(.:format)"

    def test_mount_is_skipped(self, tmp_path):
        records = _read_source(tmp_path, "mount Sidekiq::Web => '/sidekiq'\n")
        assert records == []

    def test_missing_draw_file(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            records = _read_source(tmp_path, "draw :missing\n")
        assert records == []
        assert "file not found" in caplog.text

    def test_undefined_concern(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            _read_source(tmp_path, "resources :articles, only: [:show], concerns: :missing\n")
        assert "Concern 'missing' referenced but not defined" in caplog.text

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            RailsRoutesReader(str(tmp_path / "nope.rb")).read()
