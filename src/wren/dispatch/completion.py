"""Per-request completion hook.

Each in-flight request owns one ``Completion``. Whatever produces the
response body (the dispatcher for immediate results, a deferred
function, a template render, or handler code running out-of-band)
calls it exactly once; the dispatcher awaits it and finalizes.
"""

from typing import Any

import anyio

from wren.errors import ResponseFinishedError


class Completion:
    """An exactly-once continuation that the dispatcher can await.

    Must be created inside a running event loop.
    """

    __slots__ = ("_done", "_event", "_value")

    def __init__(self) -> None:
        self._event = anyio.Event()
        self._value: Any = None
        self._done = False

    def __call__(self, value: Any = None) -> None:
        if self._done:
            msg = "Request was already completed."
            raise ResponseFinishedError(msg)
        self._done = True
        self._value = value
        self._event.set()

    @property
    def done(self) -> bool:
        return self._done

    async def wait(self) -> Any:
        """Suspend until the continuation is called; return its value."""
        await self._event.wait()
        return self._value
