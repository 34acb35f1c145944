"""Request logging for dispatched controller actions.

Each action emits ``"<Controller>.<action> start"`` before running and
``"<Controller>.<action> end (<ms> ms)"`` afterwards; an action that raises
emits ``"... failed (<ms> ms)"`` and the exception propagates unchanged.

Options (dispatcher-wide or per action via ``_target``):
    - ``enabled``: turn the plugin off without detaching it
    - ``before`` / ``after``: toggle the start and end lines
    - ``print``: write to stdout instead of the logger

Example::

    dispatcher = Dispatcher(config, registry).plug("logging")
    dispatcher.plugin("logging").configure(_target="PingController.index", enabled=False)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from genro_rest.core.dispatcher import Dispatcher
from genro_rest.plugins._base_plugin import ActionEntry, BasePlugin

_DEFAULTS = {"enabled": True, "before": True, "after": True, "print": False}


class LoggingPlugin(BasePlugin):
    """Log start, end and elapsed time of every action."""

    plugin_code = "logging"
    plugin_description = "Logs controller actions with timing"

    __slots__ = ("_logger",)

    def __init__(self, dispatcher, *, logger: logging.Logger | None = None, **cfg):
        self._logger = logger or logging.getLogger("genro_rest")
        super().__init__(dispatcher, **cfg)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        print: bool = False,  # noqa: A002
    ):
        pass

    def wrap_action(self, entry: ActionEntry, call_next: Callable):
        settings = {**_DEFAULTS, **self.configuration(entry.name)}
        if not settings["enabled"]:
            return call_next
        write = _stdout if settings["print"] else self._logger.info

        def logged(*args, **kwargs):
            if settings["before"]:
                write(f"{entry.name} start")
            started = time.perf_counter()
            try:
                result = call_next(*args, **kwargs)
            except Exception:
                write(f"{entry.name} failed ({_elapsed_ms(started):.2f} ms)")
                raise
            if settings["after"]:
                write(f"{entry.name} end ({_elapsed_ms(started):.2f} ms)")
            return result

        return logged


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


def _stdout(message: str) -> None:
    print(message)


Dispatcher.register_plugin(LoggingPlugin)
