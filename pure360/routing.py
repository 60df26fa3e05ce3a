"""Path → view mapping and the role/profile gate in front of protected views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


HOME = "/"
AUTH = "/auth"
ADMIN = "/admin"
CLIENT_DASHBOARD = "/client-dashboard"
WORKER_DASHBOARD = "/worker-dashboard"
COMPLETE_PROFILE = "/complete-profile"
PENDING_APPROVAL = "/pending-approval"
BOOKINGS = "/bookings"
NOT_FOUND = "*"


@dataclass(frozen=True)
class Route:
    path: str
    title: str
    allowed_roles: Tuple[str, ...] = ()
    require_profile_complete: bool = False

    @property
    def is_protected(self) -> bool:
        return bool(self.allowed_roles)


ROUTES: Dict[str, Route] = {
    r.path: r
    for r in [
        Route(HOME, "Home"),
        Route(AUTH, "Sign in"),
        Route("/services", "Services"),
        Route("/work-with-us", "Work with us"),
        Route("/cleaning", "Book a clean"),
        Route("/removals", "Removals"),
        Route("/care", "Care"),
        Route(BOOKINGS, "My bookings"),
        Route("/profile", "Profile"),
        Route("/chat", "Chat"),
        Route(CLIENT_DASHBOARD, "Dashboard", ("client",)),
        Route(WORKER_DASHBOARD, "Dashboard", ("worker",), require_profile_complete=True),
        Route(COMPLETE_PROFILE, "Complete profile", ("worker",)),
        Route(PENDING_APPROVAL, "Pending approval", ("worker",)),
        Route(ADMIN, "Admin", ("admin",)),
    ]
}


def find_route(path: str) -> Route:
    return ROUTES.get(path, Route(NOT_FOUND, "Not found"))


@dataclass
class AuthState:
    """What the guard needs to know about the visitor, as three separate lookups."""

    user: Optional[Any] = None
    role: Optional[str] = None
    profile: Optional[Dict[str, Any]] = None
    auth_loading: bool = False
    role_loading: bool = False
    profile_loading: bool = False

    @property
    def is_loading(self) -> bool:
        return self.auth_loading or self.role_loading or self.profile_loading

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


@dataclass(frozen=True)
class Decision:
    action: str  # "render" | "redirect" | "loading"
    target: Optional[str] = None

    @classmethod
    def render(cls) -> "Decision":
        return cls("render")

    @classmethod
    def redirect(cls, target: str) -> "Decision":
        return cls("redirect", target)

    @classmethod
    def loading(cls) -> "Decision":
        return cls("loading")


def home_for_role(role: Optional[str]) -> str:
    if role == "admin":
        return ADMIN
    if role == "worker":
        return WORKER_DASHBOARD
    return CLIENT_DASHBOARD


def guard(route: Route, state: AuthState) -> Decision:
    if state.is_loading:
        return Decision.loading()

    if not route.is_protected:
        return Decision.render()

    if not state.is_authenticated:
        return Decision.redirect(AUTH)

    if not state.role or state.role not in route.allowed_roles:
        return Decision.redirect(home_for_role(state.role))

    if route.require_profile_complete and state.role == "worker":
        profile = state.profile or {}
        if not profile.get("profile_completed"):
            return Decision.redirect(COMPLETE_PROFILE)
        if profile.get("worker_status") != "approved":
            return Decision.redirect(PENDING_APPROVAL)

    return Decision.render()


def resolve(path: str, state: AuthState, max_hops: int = 5) -> Tuple[Route, Decision]:
    """Follow redirects until a route renders (or is still loading)."""
    route = find_route(path)
    decision = guard(route, state)
    hops = 0
    while decision.action == "redirect" and hops < max_hops:
        if decision.target == route.path:
            # e.g. signed in without a role row: no home of its own to land on
            return find_route(HOME), Decision.render()
        route = find_route(decision.target)
        decision = guard(route, state)
        hops += 1
    return route, decision
