"""Service base classes.

A service is the unit that processes a resolved request. Site services
expose one method per URL action (``/user/edit-name`` -> ``doEditName``);
rest services expose one method per HTTP verb (``get``, ``post``, ...).

Usage::

    class UserService(SiteService):
        def main(self):
            return "users"

        def doShow(self, user_id, tab="profile"):
            return f"user {user_id} ({tab})"
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from wren._internal.invoke import invoke
from wren.errors import MethodNotAllowed
from wren.http.response import Redirect

if TYPE_CHECKING:
    from wren.dispatch.types import DispatchFailure
    from wren.http.request import Request

SERVICE_MAIN = "Main"
SERVICE_FAIL = "Fail"
SERVICE_NAME_SUFFIX = "Service"

METHOD_NAME_PREFIX = "do"
METHOD_MAIN = "main"
METHOD_FALL = "fall"
METHOD_INIT = "init"
METHOD_ON_BEFORE = "on_before"
METHOD_ON_AFTER = "on_after"

PROTOCOL_SITE = "site"
PROTOCOL_REST = "rest"

# Verb methods a rest service may declare
REST_METHODS = frozenset({"get", "post", "put", "delete", "patch", "head", "options"})

MAIN_SERVICE_NAME = SERVICE_MAIN + SERVICE_NAME_SUFFIX
FAIL_SERVICE_NAME = SERVICE_FAIL + SERVICE_NAME_SUFFIX


class Service:
    """Base for all services.

    Subclass :class:`SiteService` or :class:`RestService` rather than this
    class directly; the protocol decides how the dispatcher derives the
    method to call.

    Class attributes a subclass may override:

    - ``use_main_only``: always call ``main()``, whatever the path says.
    - ``allowed_methods``: HTTP verbs this service accepts. Empty means all.

    Optional hook methods: ``init()`` runs at the end of construction,
    ``on_before()`` / ``on_after()`` run around the served method.
    """

    protocol: ClassVar[str | None] = None
    use_main_only: ClassVar[bool] = False
    allowed_methods: Sequence[str] = ()

    def __init__(
        self,
        request: Request,
        *,
        name: str | None = None,
        method: str | None = None,
        arguments: Sequence[Any] | None = None,
        failure: DispatchFailure | None = None,
    ) -> None:
        self.request = request
        # Given name or class name (for direct inits, eg: FooService(request))
        self.name: str = name or type(self).__name__
        self.method: str | None = method
        self.arguments: tuple[Any, ...] = tuple(arguments or ())
        self.failure = failure

        # Prevent lowercased verbs
        self.allowed_methods = tuple(m.upper() for m in self.allowed_methods)

        init = getattr(self, METHOD_INIT, None)
        if callable(init):
            init()

    # -- Introspection --

    @property
    def short_name(self) -> str:
        """Name without the service suffix (``UserService`` -> ``User``)."""
        if self.name.endswith(SERVICE_NAME_SUFFIX):
            return self.name[: -len(SERVICE_NAME_SUFFIX)]
        return self.name

    @property
    def is_site(self) -> bool:
        return self.protocol == PROTOCOL_SITE

    @property
    def is_rest(self) -> bool:
        return self.protocol == PROTOCOL_REST

    @property
    def is_main_service(self) -> bool:
        return self.name == MAIN_SERVICE_NAME

    @property
    def is_fail_service(self) -> bool:
        return self.name == FAIL_SERVICE_NAME

    @property
    def is_default_service(self) -> bool:
        return self.is_main_service or self.is_fail_service

    def is_allowed_method(self, verb: str) -> bool:
        """Check the request method limiter."""
        if not self.allowed_methods:
            return True
        return verb.upper() in self.allowed_methods

    # -- Serving --

    async def serve(self) -> Any:
        """Call the resolved method with its bound arguments.

        Site services redirect ``/main`` to ``/`` and ``/<service>/main``
        to ``/<service>`` (301) so every page has one canonical URL.

        Raises:
            MethodNotAllowed: If ``allowed_methods`` excludes the request verb.
        """
        request = self.request

        if self.is_site and not self.is_fail_service:
            segments = [s for s in request.path.split("/") if s]
            if segments and segments[0].lower() == SERVICE_MAIN.lower():
                return Redirect("/", status=301)
            if len(segments) > 1 and segments[1].lower() == METHOD_MAIN:
                return Redirect("/" + segments[0].lower(), status=301)

        if not self.is_allowed_method(request.method):
            raise MethodNotAllowed(frozenset(self.allowed_methods))

        on_before = getattr(self, METHOD_ON_BEFORE, None)
        if callable(on_before):
            await invoke(on_before)

        method = getattr(self, self.method or METHOD_MAIN)
        result = await invoke(method, *self.arguments)

        on_after = getattr(self, METHOD_ON_AFTER, None)
        if callable(on_after):
            await invoke(on_after)

        return result


class SiteService(Service):
    """Multi-method service: the second path segment selects the method."""

    protocol: ClassVar[str | None] = PROTOCOL_SITE


class RestService(Service):
    """Verb-method service: the HTTP verb selects the method."""

    protocol: ClassVar[str | None] = PROTOCOL_REST
