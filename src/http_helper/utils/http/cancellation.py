"""Per-request cancellation handle.

Each fetch creates one ``CancelHandle`` and binds the task that sends the
request and reads its body. The fetch operation cancels it only when no
response was received, so an already failed request stops waiting
instead of running out its full timeout.
"""

import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CancelHandle:
    """Cancellation handle bound to a single in-flight request."""

    def __init__(self) -> None:
        self._task: Optional[asyncio.Task] = None
        self.cancelled = False
        self.reason: Optional[str] = None

    def bind(self, task: asyncio.Task) -> None:
        """Associate the task carrying the request with this handle."""
        self._task = task

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel the bound request if it is still running.

        Waits until the task has actually unwound, so no work for this
        request continues after ``cancel`` returns. Calling it more than
        once is harmless.

        :param reason: Optional description logged with the cancellation
        :type reason: Optional[str]
        """
        if self.cancelled:
            return
        self.cancelled = True
        self.reason = reason

        task = self._task
        if task is None or task.done():
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Our own cancellation. Re-raise if the caller is being cancelled too.
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        except Exception as e:
            logger.debug("Cancelled request finished with %s", type(e).__name__)
        logger.debug("Cancelled in-flight request: %s", reason or "no reason given")
