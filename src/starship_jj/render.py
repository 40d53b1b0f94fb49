"""Render pipeline: run the configured modules in order onto one stream.

Each module is visited once: ``parse`` populates the facts it needs through
the shared cache (an engine error aborts the whole pipeline, output already
written stays), then ``render`` writes its text.  The last emitted style is
carried between modules so consecutive spans only emit the codes that differ.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import TYPE_CHECKING, Callable, TextIO

from starship_jj.context import PromptContext
from starship_jj.style import RESET, Style

if TYPE_CHECKING:
    from starship_jj.config.models import Config
    from starship_jj.state import RepoStateCache
    from starship_jj.style import AnsiStyle

logger = logging.getLogger(__name__)


class RenderState:
    """The output stream plus the effective style last written to it."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.last_emitted: AnsiStyle | None = None

    def style(self, style: Style, fallback: Style | None = None) -> None:
        prefix, self.last_emitted = style.format(fallback, self.last_emitted)
        self.stream.write(prefix)

    def write(self, text: str) -> None:
        self.stream.write(text)

    def reset(self) -> None:
        """Transition to the fully default style."""
        self.style(Style(), Style())


class Watchdog:
    """Fail-open deadline for rendering.

    If :meth:`finish` has not been called when the timer fires, a reset and a
    single space are written to the stream and ``exit`` is called, so a slow
    repository never leaves the shell prompt hanging.  The primary thread is
    not interrupted; the timer only races it.

    Args:
        timeout_ms: Deadline in milliseconds.
        stream: Stream shared with the primary thread.
        exit: Called with status 0 on expiry.  Defaults to ``os._exit``.
    """

    def __init__(
        self,
        timeout_ms: int,
        stream: TextIO,
        *,
        exit: Callable[[int], None] = os._exit,
    ) -> None:
        self._stream = stream
        self._exit = exit
        self._done = threading.Event()
        self._timer = threading.Timer(timeout_ms / 1000, self._expire)
        self._timer.daemon = True
        self.fired = False

    def start(self) -> Watchdog:
        self._timer.start()
        return self

    def finish(self) -> None:
        """Signal that the primary thread wrote its last byte."""
        self._done.set()
        self._timer.cancel()

    def join(self, timeout: float | None = None) -> None:
        self._timer.join(timeout)

    def _expire(self) -> None:
        if self._done.is_set():
            return
        self.fired = True
        logger.debug("Render deadline expired")
        self._stream.write(RESET + " ")
        self._stream.flush()
        self._exit(0)


class RenderPipeline:
    """Run ``config.modules`` against one cache and one output stream."""

    def __init__(
        self,
        config: Config,
        cache: RepoStateCache,
        stream: TextIO,
        *,
        exit: Callable[[int], None] = os._exit,
    ) -> None:
        self.config = config
        self.cache = cache
        self.stream = stream
        self._exit = exit

    def run(self) -> PromptContext:
        watchdog = None
        if self.config.timeout is not None:
            watchdog = Watchdog(self.config.timeout, self.stream, exit=self._exit).start()

        context = PromptContext(cache=self.cache, config=self.config)
        out = RenderState(self.stream)
        try:
            for module in self.config.modules:
                logger.debug("Parsing module %s", module.type)
                module.parse(context)
                module.render(out, context.data, self.config.module_separator)
            if self.config.reset_color:
                out.reset()
            self.stream.flush()
        finally:
            if watchdog is not None:
                watchdog.finish()
        return context
