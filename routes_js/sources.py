"""Router resolution: turn a router reference into RouteRecords.

A reference is one of:

* ``package.module:attribute`` - a Python iterable of route entries, or a
  callable returning one
* a ``.yaml``/``.yml``/``.json`` route manifest
* a Rails ``routes.rb`` file, or a project directory containing
  ``config/routes.rb``
"""

from __future__ import annotations

import importlib
import json
import logging
import os
import re
from typing import Any, List, Optional

import yaml

from .errors import RouterNotFoundError
from .models import RouteRecord
from .rails_routes import read_routes
from .records import as_records

logger = logging.getLogger(__name__)

# probed in order by detect_router
CANDIDATES = (
    os.path.join("config", "routes.rb"),
    "routes.yaml",
    "routes.yml",
    "routes.json",
)

MODULE_REFERENCE = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$")
MANIFEST_EXTENSIONS = (".yaml", ".yml", ".json")


def detect_router(root: str = ".") -> str:
    """Find a route source in a project directory.

    Raises RouterNotFoundError when none of the known locations exist.
    """
    for candidate in CANDIDATES:
        path = os.path.join(root, candidate)
        if os.path.isfile(path):
            logger.debug("Detected router: %s", path)
            return path
    raise RouterNotFoundError(
        f"No router found in {os.path.abspath(root)}. Looked for: {', '.join(CANDIDATES)}. "
        "Pass --router with a routes.rb file, a YAML/JSON route manifest "
        "or a module:attribute reference."
    )


def load_records(router: Optional[str] = None, root: str = ".") -> List[RouteRecord]:
    """Resolve `router` (auto-detected under `root` when None) into RouteRecords."""
    if not router:
        router = detect_router(root)

    if not os.path.exists(router) and MODULE_REFERENCE.match(router):
        return as_records(_load_object(router))

    if os.path.isdir(router):
        routes_file = os.path.join(router, "config", "routes.rb")
        if not os.path.isfile(routes_file):
            raise RouterNotFoundError(f"No config/routes.rb found in {router}")
        router = routes_file

    if not os.path.isfile(router):
        raise RouterNotFoundError(f"Router not found: {router}")

    _, ext = os.path.splitext(router)
    if ext.lower() in MANIFEST_EXTENSIONS:
        return as_records(load_manifest(router))
    if ext.lower() == ".rb":
        return read_routes(router)
    raise RouterNotFoundError(
        f"Unsupported router file: {router}. Expected routes.rb, .yaml, .yml or .json"
    )


def load_manifest(path: str) -> List[Any]:
    """Read a route manifest: a top-level list or a mapping with a `routes` list."""
    with open(path, "r") as f:
        try:
            if path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (ValueError, yaml.YAMLError) as e:
            raise RouterNotFoundError(f"Cannot parse route manifest {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("routes")
    if not isinstance(data, list):
        raise RouterNotFoundError(f"Route manifest {path} must contain a list of routes")
    return data


def _load_object(reference: str) -> Any:
    module_name, _, attribute = reference.partition(":")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise RouterNotFoundError(f"Cannot import router module {module_name!r}: {e}") from e

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise RouterNotFoundError(f"{module_name!r} has no attribute {attribute!r}") from e

    if callable(target):
        target = target()
    try:
        return list(target)
    except TypeError as e:
        raise RouterNotFoundError(f"Router {reference} is not an iterable of routes") from e
