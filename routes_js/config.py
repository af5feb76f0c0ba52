"""Generation settings: one Configuration object per run, validated up front."""

from __future__ import annotations

import dataclasses
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MODULE_TYPES = ("esm", "cjs", "umd", None)
# spellings accepted for the global-namespace module type
GLOBAL_MODULE_ALIASES = {"none", "nil", "global", ""}
VARIANTS = ("simple", "rich")
STYLES = ("classic", "resource")
GROUP_BY = ("resource", "scope", "controller")


@dataclass
class Configuration:
    """Options recognised by the generator.

    `include` and `exclude` accept strings or compiled patterns; `validate()`
    compiles strings so the rest of the pipeline only sees `re.Pattern`s.
    """

    module_type: Optional[str] = "esm"
    output_file: str = "assets/js/routes.js"
    types_file: Optional[str] = None
    generate_types: bool = True
    include: List[Any] = field(default_factory=list)
    exclude: List[Any] = field(default_factory=list)
    camel_case: bool = False
    url_helpers: bool = False
    compact: bool = False
    default_url_options: Dict[str, Any] = field(default_factory=dict)
    documentation: bool = True
    router: Optional[str] = None
    # classic mode output shape
    variant: str = "simple"
    with_methods: bool = False
    with_forms: bool = False
    # resource mode
    style: str = "classic"
    output_dir: str = "assets/js/routes"
    group_by: str = "resource"
    include_index: bool = True
    include_live: bool = True

    @classmethod
    def new(cls, **options: Any) -> Configuration:
        """Build a configuration from keyword options and validate it."""
        unknown = sorted(set(options) - _field_names())
        if unknown:
            raise ConfigurationError(f"Unknown configuration option(s): {', '.join(unknown)}")
        return cls(**options).validate()

    def merge(self, **options: Any) -> Configuration:
        """Return a copy with `options` applied on top, validated."""
        unknown = sorted(set(options) - _field_names())
        if unknown:
            raise ConfigurationError(f"Unknown configuration option(s): {', '.join(unknown)}")
        return dataclasses.replace(self, **options).validate()

    def validate(self) -> Configuration:
        """Check enum values and compile include/exclude patterns.

        Raises ConfigurationError on the first invalid option.
        """
        if isinstance(self.module_type, str) and self.module_type.lower() in GLOBAL_MODULE_ALIASES:
            self.module_type = None
        if self.module_type not in MODULE_TYPES:
            raise ConfigurationError(
                f"Invalid module_type: {self.module_type!r}. "
                "Must be one of 'esm', 'cjs', 'umd', or None"
            )
        if self.variant not in VARIANTS:
            raise ConfigurationError(
                f"Invalid variant: {self.variant!r}. Must be 'simple' or 'rich'"
            )
        if self.style not in STYLES:
            raise ConfigurationError(
                f"Invalid style: {self.style!r}. Must be 'classic' or 'resource'"
            )
        if self.group_by not in GROUP_BY:
            raise ConfigurationError(
                f"Invalid group_by: {self.group_by!r}. "
                "Must be 'resource', 'scope', or 'controller'"
            )
        self.include = _compile_patterns("include", self.include)
        self.exclude = _compile_patterns("exclude", self.exclude)
        if not isinstance(self.default_url_options, dict):
            raise ConfigurationError("default_url_options must be a mapping")
        if (self.with_methods or self.with_forms) and self.variant != "rich":
            logger.debug("with_methods/with_forms only apply to the rich variant")
        return self

    @property
    def types_path(self) -> str:
        """The .d.ts path: explicit `types_file`, else derived from `output_file`."""
        if self.types_file:
            return self.types_file
        root, _ = os.path.splitext(self.output_file)
        return root + ".d.ts"

    @property
    def is_resource_mode(self) -> bool:
        return self.style == "resource"

    @property
    def is_rich(self) -> bool:
        return self.variant == "rich"


def load_config_file(path: str) -> Dict[str, Any]:
    """Read generation options from a YAML file.

    The file holds a mapping of option names to values, either at the top
    level or under a `routes_js` key.
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("routes_js"), dict):
        data = data["routes_js"]
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping of options")

    unknown = sorted(set(data) - _field_names())
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration option(s) in {path}: {', '.join(unknown)}"
        )
    return data


def _field_names() -> set:
    return {f.name for f in dataclasses.fields(Configuration)}


def _compile_patterns(option: str, patterns: Any) -> List[re.Pattern]:
    if not isinstance(patterns, (list, tuple)):
        raise ConfigurationError(f"{option} must be a list of regular expressions")
    compiled = []
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            compiled.append(pattern)
        elif isinstance(pattern, str):
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise ConfigurationError(f"Invalid {option} pattern {pattern!r}: {e}") from e
        else:
            raise ConfigurationError(f"{option} must be a list of regular expressions")
    return compiled
