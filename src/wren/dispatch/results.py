"""Handler result variants.

A route handler ends in one of three ways. The dispatcher classifies
the return value once and then matches on the variant::

    Immediate(value)             the value is the response body
    Deferred(fn)                 fn(continuation) supplies the body later
    PendingExternalCompletion()  something else completes the request

Handlers may return the variants directly; plain return values are
classified by ``classify_result``.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# The continuation a deferred function calls with the final body
type Continuation = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class Immediate:
    """The handler produced the complete response body."""

    value: Any


@dataclass(frozen=True, slots=True)
class Deferred:
    """The handler returned a function that will call its continuation.

    ``fn`` may be sync or async. It is invoked exactly once, with the
    request's continuation as its only argument.
    """

    fn: Callable[[Continuation], Any]


@dataclass(frozen=True, slots=True)
class PendingExternalCompletion:
    """The handler returned nothing and arranged completion elsewhere."""


PENDING = PendingExternalCompletion()

type HandlerResult = Immediate | Deferred | PendingExternalCompletion


def classify_result(result: Any) -> HandlerResult:
    """Map a raw handler return value onto a ``HandlerResult``."""
    if isinstance(result, Immediate | Deferred | PendingExternalCompletion):
        return result
    if result is None:
        return PENDING
    if callable(result):
        return Deferred(result)
    return Immediate(result)
