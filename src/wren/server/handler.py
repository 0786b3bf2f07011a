"""HTTP request pipeline.

scope -> Request -> ResolvedTarget -> served value -> Response -> ASGI send.
Dispatch failures are ordinary targets here; only exceptions take the
error path.
"""

from wren._internal.asgi import Receive, Scope, Send
from wren.dispatch.coordinator import DispatchCoordinator
from wren.dispatch.types import ResolvedTarget, RouteRequest
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.server.errors import ErrorHandlers, handle_http_error, handle_internal_error
from wren.server.negotiation import negotiate
from wren.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    coordinator: DispatchCoordinator,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        target = coordinator.resolve(RouteRequest.from_request(request), request)
        response = await serve_target(target)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)

    await send_response(response, send)


async def serve_target(target: ResolvedTarget) -> Response:
    """Serve a resolved target and apply its failure status.

    A routing miss answers with the failure code (404) even though the
    fail service produced the body, unless the service returned a
    response with a status of its own.
    """
    result = await target.service.serve()
    response = negotiate(result)
    if target.failure is not None and response.status == 200:
        response = response.with_status(target.failure.code)
    return response
