# core/dispatch.py
from __future__ import annotations

from typing import Any, Callable, Protocol


class Dispatcher(Protocol):
    """
    Runs a blocking backend call off the GUI thread.

    Exactly one of `on_done(result)` / `on_error(exc)` is invoked later, on
    the GUI thread, once `fn()` settles.
    """

    def submit(
        self,
        fn: Callable[[], Any],
        on_done: Callable[[Any], None],
        on_error: Callable[[Exception], None],
    ) -> None: ...
