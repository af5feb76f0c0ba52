"""Route extraction: filtering, Route construction and helper-name disambiguation."""

from __future__ import annotations

import dataclasses
import logging
import re
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from .config import Configuration
from .errors import NameCollisionError
from .models import Route, RouteRecord
from .records import as_records
from .resource_generator import infer_action_name
from .route import build_route, generate_name, generate_url_name

logger = logging.getLogger(__name__)

NON_WORD = re.compile(r"\W+")


def extract_routes(entries: Iterable[Any], config: Optional[Configuration] = None) -> List[Route]:
    """Turn raw route entries into uniquely named Routes.

    Entries without a helper name are skipped (they cannot become JS
    identifiers). Raises NameCollisionError if names are still duplicated
    after disambiguation.
    """
    config = (config or Configuration()).validate()

    routes = []
    for record in as_records(entries):
        if not record.helper:
            logger.debug("Skipping %s %s: no helper name", record.verb, record.path)
            continue
        if record.live and not config.include_live:
            logger.debug("Skipping live route %s", record.path)
            continue
        if not filter_route(record, config):
            continue
        routes.append(build_route(record, config))

    routes = collapse_put_aliases(routes)
    routes = disambiguate(routes, config)
    check_unique_names(routes, config)
    logger.debug("Extracted %d routes", len(routes))
    return routes


def filter_route(record: RouteRecord, config: Configuration) -> bool:
    """Apply include/exclude patterns to the record's helper name."""
    helper = record.helper or ""
    included = not config.include or any(p.search(helper) for p in config.include)
    excluded = any(p.search(helper) for p in config.exclude)
    return included and not excluded


def collapse_put_aliases(routes: List[Route]) -> List[Route]:
    """Drop PUT routes that repeat a PATCH route (same helper, path and action).

    Phoenix `resources` and similar DSLs emit both verbs for `:update`.
    """
    patched = {(r.helper, r.path, _action_token(r)) for r in routes if r.verb.upper() == "PATCH"}
    result = []
    for route in routes:
        if route.verb.upper() == "PUT" and (route.helper, route.path, _action_token(route)) in patched:
            logger.debug("Skipping PUT %s: same route as PATCH", route.path)
            continue
        result.append(route)
    return result


def disambiguate(routes: List[Route], config: Configuration) -> List[Route]:
    """Rename routes that share a helper name.

    Duplicates first get the action appended (`help_index_path`); routes that
    still collide get a scope token from the leading static path segments
    prepended (`admin_page_show_path`).
    """
    groups: Dict[str, List[Route]] = {}
    for route in routes:
        groups.setdefault(route.name, []).append(route)

    result = []
    for name, group in groups.items():
        if len(group) == 1:
            result.extend(group)
            continue

        renamed = [_rename(r, f"{r.helper}_{_action_token(r)}", config) for r in group]
        counts = Counter(r.name for r in renamed)
        for route in renamed:
            if counts[route.name] > 1:
                route = _rename(route, f"{scope_token(route.path)}_{route.helper}", config)
            logger.debug("Renamed duplicate helper %s -> %s (%s)", name, route.name, route.path)
            result.append(route)
    return result


def check_unique_names(routes: List[Route], config: Configuration) -> None:
    emitted: Dict[str, List[str]] = {}
    for route in routes:
        emitted.setdefault(route.name, []).append(route.path)
        if config.url_helpers and route.url_name:
            emitted.setdefault(route.url_name, []).append(route.path)
    for name, paths in emitted.items():
        if len(paths) > 1:
            raise NameCollisionError(name, paths)


def scope_token(path: str) -> str:
    """Identifier built from the static path segments before the first param."""
    static = []
    for component in path.split("/"):
        component = component.split("(", 1)[0]
        if not component:
            continue
        if component.startswith((":", "*")):
            if static:
                break
            continue
        static.append(component)
    token = NON_WORD.sub("_", "_".join(static)).strip("_")
    return token or "root"


def _action_token(route: Route) -> str:
    action = route.action or infer_action_name(route)
    return NON_WORD.sub("_", action).strip("_") or infer_action_name(route)


def _rename(route: Route, helper: str, config: Configuration) -> Route:
    return dataclasses.replace(
        route,
        helper=helper,
        name=generate_name(helper, camel_case=config.camel_case, compact=config.compact),
        url_name=generate_url_name(helper, camel_case=config.camel_case),
    )
