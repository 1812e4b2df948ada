"""ASGI handler — routes a request, runs its handler, and finalizes.

The only component that touches raw ASGI scopes. Each request moves
through a small state machine::

    ROUTING -> (BODY_PENDING | READY) -> HANDLING -> (FINISHED | ERRORED)

No match is a plain 404. Anything raised after a route matched (body
decoding, the handler, a deferred function, a template render) becomes
a 500 for that request only; the details stay in the server log.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import anyio
from kida import Environment

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.dispatch.completion import Completion
from wren.dispatch.results import (
    Deferred,
    Immediate,
    PendingExternalCompletion,
    classify_result,
)
from wren.http.request import Request
from wren.http.response import ResponseContext
from wren.routing.params import ParamMap, extract_params, merge_body
from wren.routing.route import BODY_METHODS, Route
from wren.routing.router import Router
from wren.server.finalizer import finish, not_found, server_error

logger = logging.getLogger("wren.server")


@dataclass(slots=True)
class RequestContext:
    """Transient state for one in-flight dispatch. Never shared."""

    request: Request
    response: ResponseContext
    route: Route
    completion: Completion
    params: ParamMap = field(default_factory=dict)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    kida_env: Environment | None = None,
    completion_timeout: float | None = None,
    access_log: bool = True,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    await dispatch(
        request,
        send,
        router=router,
        kida_env=kida_env,
        completion_timeout=completion_timeout,
        access_log=access_log,
    )


async def dispatch(
    request: Request,
    send: Send,
    *,
    router: Router,
    kida_env: Environment | None = None,
    completion_timeout: float | None = None,
    access_log: bool = True,
) -> None:
    """Route *request*, run its handler, and write exactly one response."""
    response = ResponseContext(kida_env)

    route = router.find(request.method, request.path)
    if route is None:
        logger.debug("404 %s %s", request.method, request.path)
        await not_found(request, response, send, access_log=access_log)
        return

    ctx = RequestContext(request=request, response=response, route=route, completion=Completion())

    try:
        with anyio.move_on_after(completion_timeout) as deadline:
            body = await _run(ctx)
    except Exception:
        logger.exception("500 %s %s", request.method, request.url)
        await _fail(ctx, send, access_log)
        return

    if deadline.cancelled_caught:
        logger.warning(
            "Request not completed within %ss: %s %s",
            completion_timeout,
            request.method,
            request.url,
        )
        await _fail(ctx, send, access_log)
        return

    await finish(route, request, response, body, send, access_log=access_log)


async def _run(ctx: RequestContext) -> Any:
    """Build parameters, invoke the handler, and wait for its body."""
    request, response, route = ctx.request, ctx.response, ctx.route

    ctx.params = extract_params(route, request.path, request.query)
    if request.method in BODY_METHODS and not request.body_received:
        # BODY_PENDING: buffer every chunk, then merge form fields (body wins)
        ctx.params = merge_body(ctx.params, await request.body())

    response.bind(ctx.completion)
    result = classify_result(await invoke(route.handler, request, response, ctx.params))

    match result:
        case Immediate(value):
            ctx.completion(value)
        case Deferred(fn):
            await invoke(fn, ctx.completion)
        case PendingExternalCompletion():
            queued = response.queued_render
            if queued is not None and not ctx.completion.done:
                await invoke(queued.fn, ctx.completion)

    return await ctx.completion.wait()


async def _fail(ctx: RequestContext, send: Send, access_log: bool) -> None:
    """Answer with a 500 unless a response was already written."""
    if ctx.response.finished:
        return
    await server_error(ctx.request, ctx.response, send, access_log=access_log)
