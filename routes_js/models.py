"""Data models for routes-js."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

HTTP_VERBS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")
MUTATION_VERBS = ("POST", "PATCH", "PUT", "DELETE")


@dataclass
class RouteRecord:
    """One entry of the host framework's route table."""

    verb: str  # GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS
    path: str  # /users/:id(.:format)
    helper: Optional[str] = None  # user
    action: Optional[str] = None  # show
    live: bool = False  # LiveView-style route
    defaults: dict = field(default_factory=dict)


# ---- Path segments ----

@dataclass(frozen=True)
class LiteralSegment:
    text: str


@dataclass(frozen=True)
class ParamSegment:
    name: str


@dataclass(frozen=True)
class GlobSegment:
    name: str


@dataclass(frozen=True)
class OptionalSegment:
    children: Tuple["Segment", ...]


Segment = Union[LiteralSegment, ParamSegment, GlobSegment, OptionalSegment]


@dataclass(frozen=True)
class Route:
    """A normalized route, ready for code generation."""

    name: str  # user_path
    verb: str
    path: str
    segments: Tuple[Segment, ...]
    required_params: Tuple[str, ...] = ()
    optional_params: Tuple[str, ...] = ()
    defaults: dict = field(default_factory=dict, compare=False)
    helper: str = ""  # user, after disambiguation
    url_name: Optional[str] = None  # user_url
    action: Optional[str] = None  # controller action from the route record

    @property
    def helper_name(self) -> str:
        """Snake-case path helper name, independent of camelCase/compact."""
        if self.helper:
            return f"{self.helper}_path"
        return self.name

    @property
    def method(self) -> str:
        return self.verb.lower()


# ---- Resource mode ----

@dataclass(frozen=True)
class ActionParam:
    name: str
    required: bool


@dataclass
class Action:
    name: str  # index, new, create, show, edit, update, delete, restore, confirm
    route: Route
    params: List[ActionParam] = field(default_factory=list)

    @property
    def verb(self) -> str:
        return self.route.verb

    @property
    def path(self) -> str:
        return self.route.path


@dataclass
class Resource:
    key: Tuple[str, ...]  # ("admin", "users")
    name: str  # users
    path: str  # admin/users.ts
    actions: List[Action] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)

    @property
    def scope(self) -> Tuple[str, ...]:
        return self.key[:-1]


@dataclass(frozen=True)
class GeneratedFile:
    path: str
    content: str
