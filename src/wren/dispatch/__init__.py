"""Dispatch — resolve a request to a service, method, and arguments.

Usage::

    from wren.dispatch import DispatchCoordinator, RouteRequest

    target = coordinator.resolve(RouteRequest.from_path("GET", "/user-profile/edit-name/42"))
    target.name       # "UserProfileService"
    target.method     # "doEditName"
    target.arguments  # ("42", ...)
"""

from wren.dispatch.binder import ArgumentBinder
from wren.dispatch.coordinator import DispatchCoordinator
from wren.dispatch.resolver import MethodResolution, MethodResolver, MethodState
from wren.dispatch.types import DispatchFailure, ResolvedTarget, RouteRequest

__all__ = [
    "ArgumentBinder",
    "DispatchCoordinator",
    "DispatchFailure",
    "MethodResolution",
    "MethodResolver",
    "MethodState",
    "ResolvedTarget",
    "RouteRequest",
]
