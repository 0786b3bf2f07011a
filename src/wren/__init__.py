"""Wren — a service-dispatch web framework.

Requests resolve to a *service* and one of its methods by URL convention:
``/user-profile/edit-name/42`` calls ``UserProfileService.doEditName("42")``.
Aliases and regex routes remap URLs; misses land on ``FailService`` with a 404.

Basic usage::

    from wren import App, SiteService

    app = App()

    @app.service
    class UserProfileService(SiteService):
        def main(self):
            return "profile"

        def doEditName(self, user_id, field="name"):
            return f"editing {field} of {user_id}"

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "Redirect",
    "Request",
    "ResolvedTarget",
    "Response",
    "RestService",
    "Service",
    "ServiceError",
    "SiteService",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name in ("Service", "SiteService", "RestService"):
        from wren.services import base as _base

        return getattr(_base, name)

    if name == "ResolvedTarget":
        from wren.dispatch.types import ResolvedTarget

        return ResolvedTarget

    if name in (
        "WrenError",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "ServiceError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
