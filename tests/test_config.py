"""Tests for Configuration validation and config files."""

import os
import re
import tempfile

import pytest

from routes_js.config import Configuration, load_config_file
from routes_js.errors import ConfigurationError


class TestDefaults:
    def test_defaults(self):
        config = Configuration.new()
        assert config.module_type == "esm"
        assert config.output_file == "assets/js/routes.js"
        assert config.generate_types is True
        assert config.variant == "simple"
        assert config.style == "classic"
        assert config.output_dir == "assets/js/routes"
        assert config.group_by == "resource"
        assert config.include == []
        assert not config.is_rich
        assert not config.is_resource_mode

    def test_types_path_derived(self):
        assert Configuration(output_file="public/routes.js").types_path == "public/routes.d.ts"

    def test_types_path_explicit(self):
        config = Configuration(types_file="types/routes.d.ts")
        assert config.types_path == "types/routes.d.ts"


class TestValidation:
    @pytest.mark.parametrize("alias", ["none", "nil", "global", "NONE", ""])
    def test_global_aliases(self, alias):
        assert Configuration.new(module_type=alias).module_type is None

    def test_invalid_module_type(self):
        with pytest.raises(ConfigurationError, match="Invalid module_type"):
            Configuration.new(module_type="amd")

    def test_invalid_variant(self):
        with pytest.raises(ConfigurationError, match="Invalid variant"):
            Configuration.new(variant="fancy")

    def test_invalid_style(self):
        with pytest.raises(ConfigurationError, match="Invalid style"):
            Configuration.new(style="flat")

    def test_invalid_group_by(self):
        with pytest.raises(ConfigurationError, match="Invalid group_by"):
            Configuration.new(group_by="module")

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            Configuration.new(variant="fancy")

    def test_patterns_compiled(self):
        config = Configuration.new(include=["^admin", re.compile("users")])
        assert all(isinstance(p, re.Pattern) for p in config.include)
        assert config.include[0].pattern == "^admin"

    def test_invalid_pattern(self):
        with pytest.raises(ConfigurationError, match="Invalid exclude pattern"):
            Configuration.new(exclude=["["])

    def test_pattern_list_required(self):
        with pytest.raises(ConfigurationError):
            Configuration.new(include="^admin")

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError, match="Unknown configuration option"):
            Configuration.new(prefix="/app")

    def test_default_url_options_mapping(self):
        with pytest.raises(ConfigurationError):
            Configuration.new(default_url_options="example.com")


class TestMerge:
    def test_merge_returns_copy(self):
        base = Configuration.new(camel_case=True)
        merged = base.merge(variant="rich")
        assert merged.variant == "rich"
        assert merged.camel_case is True
        assert base.variant == "simple"

    def test_merge_validates(self):
        with pytest.raises(ConfigurationError):
            Configuration.new().merge(style="flat")

    def test_merge_unknown(self):
        with pytest.raises(ConfigurationError):
            Configuration.new().merge(bogus=True)


class TestLoadConfigFile:
    def _write(self, text):
        handle = tempfile.NamedTemporaryFile("w", suffix=".yml", delete=False)
        with handle:
            handle.write(text)
        return handle.name

    def teardown_method(self):
        path = getattr(self, "path", None)
        if path and os.path.exists(path):
            os.unlink(path)

    def test_top_level_mapping(self):
        self.path = self._write("variant: rich\ncamel_case: true\n")
        assert load_config_file(self.path) == {"variant": "rich", "camel_case": True}

    def test_nested_key(self):
        self.path = self._write("routes_js:\n  style: resource\n  output_dir: frontend/routes\n")
        assert load_config_file(self.path) == {"style": "resource", "output_dir": "frontend/routes"}

    def test_empty_file(self):
        self.path = self._write("")
        assert load_config_file(self.path) == {}

    def test_unknown_option(self):
        self.path = self._write("prefix: /app\n")
        with pytest.raises(ConfigurationError, match="Unknown configuration option"):
            load_config_file(self.path)

    def test_not_a_mapping(self):
        self.path = self._write("- variant\n- rich\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config_file(self.path)

    def test_invalid_yaml(self):
        self.path = self._write("variant: [rich\n")
        with pytest.raises(ConfigurationError, match="Cannot parse config file"):
            load_config_file(self.path)

    def test_missing_file(self):
        with pytest.raises(OSError):
            load_config_file("/nonexistent/routes_js.yml")
