"""
Cache clear action for the settings view

One destructive request at a time. A success message dismisses itself after a
short delay, a failure message stays until the next attempt.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import structlog

from constants import (
    ACTIVITY_CLEAR_FAILED_MESSAGE,
    CACHE_CLEAR_FAILED_MESSAGE,
    SUCCESS_DISMISS_SECONDS,
)

logger = structlog.get_logger('cache_clear')


class CacheClearStatus:
    IDLE = "idle"
    CLEARING = "clearing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class CacheClearState:
    """Transient outcome of the clear action, never persisted"""

    status: str
    deleted_count: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "CacheClearState":
        return cls(CacheClearStatus.IDLE)

    @classmethod
    def clearing(cls) -> "CacheClearState":
        return cls(CacheClearStatus.CLEARING)

    @classmethod
    def succeeded(cls, deleted_count: int) -> "CacheClearState":
        return cls(CacheClearStatus.SUCCEEDED, deleted_count=deleted_count)

    @classmethod
    def failed(cls, message: str) -> "CacheClearState":
        return cls(CacheClearStatus.FAILED, message=message)


StateListener = Callable[[CacheClearState], None]


class CacheClearController:
    """
    State machine around a single clear request.

        idle -> clearing -> succeeded(n) -> (dismiss_after) -> idle
                         -> failed(message)
        failed / succeeded -> clearing on the next trigger()

    The request and the dismissal timer both run on the event loop of the caller.
    """

    def __init__(
        self,
        clear: Callable[[], Awaitable[int]],
        dismiss_after: float = SUCCESS_DISMISS_SECONDS,
        failure_message: str = CACHE_CLEAR_FAILED_MESSAGE,
        success_template: str = "Cache cleared ({deleted} entries removed)",
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._clear = clear
        self.dismiss_after = dismiss_after
        self.failure_message = failure_message
        self.success_template = success_template
        self._loop = loop
        self._state = CacheClearState.idle()
        self._listeners: List[StateListener] = []
        self._task: Optional[asyncio.Task] = None
        self._dismiss_handle: Optional[asyncio.TimerHandle] = None
        self._disposed = False

    @property
    def state(self) -> CacheClearState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state.status == CacheClearStatus.CLEARING

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def success_message(self) -> Optional[str]:
        if self._state.status != CacheClearStatus.SUCCEEDED:
            return None
        return self.success_template.format(deleted=self._state.deleted_count)

    @property
    def error_message(self) -> Optional[str]:
        if self._state.status != CacheClearStatus.FAILED:
            return None
        return self._state.message

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a callable that removes it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def trigger(self) -> Optional[asyncio.Task]:
        """
        Start a clear request.

        Must be called from a running event loop (or with one passed to the
        constructor). Does nothing while a request is already outstanding.

        Returns:
            The task running the request, or None when the call was ignored
        """
        if self._disposed:
            logger.warning("Ignoring cache clear trigger on a disposed controller")
            return None
        if self.is_busy:
            logger.debug("Cache clear already in progress, ignoring trigger")
            return None

        loop = self._loop or asyncio.get_running_loop()

        # A pending dismissal must never revert the state of this new attempt
        self._cancel_dismiss()
        self._set_state(CacheClearState.clearing())
        self._task = loop.create_task(self._run(loop))
        return self._task

    async def wait(self):
        """Wait for the outstanding request, if any"""
        if self._task is not None:
            await self._task

    def dispose(self):
        """Detach from the view. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._cancel_dismiss()
        self._listeners.clear()
        logger.debug("Cache clear controller disposed")

    async def _run(self, loop: asyncio.AbstractEventLoop):
        try:
            deleted = await self._clear()
        except asyncio.CancelledError:
            if not self._disposed:
                self._set_state(CacheClearState.failed(self.failure_message))
            raise
        except Exception as e:
            # The detail is logged, the user only sees the fixed message
            logger.warning(f"Clear request failed: {e}")
            if not self._disposed:
                self._set_state(CacheClearState.failed(self.failure_message))
            return

        if self._disposed:
            return

        if isinstance(deleted, bool) or not isinstance(deleted, int) or deleted < 0:
            logger.warning(f"Clear request returned an unusable count: {deleted!r}")
            self._set_state(CacheClearState.failed(self.failure_message))
            return

        logger.info(f"Cleared {deleted} entries")
        self._set_state(CacheClearState.succeeded(deleted))
        self._dismiss_handle = loop.call_later(self.dismiss_after, self._dismiss)

    def _dismiss(self):
        self._dismiss_handle = None
        if self._state.status == CacheClearStatus.SUCCEEDED:
            self._set_state(CacheClearState.idle())

    def _cancel_dismiss(self):
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None

    def _set_state(self, state: CacheClearState):
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Cache clear state listener failed")


def cache_clear_controller(client, **kwargs) -> CacheClearController:
    """Controller wired to the backend's search cache clear endpoint"""
    return CacheClearController(client.clear_cache, **kwargs)


def activity_clear_controller(client, **kwargs) -> CacheClearController:
    """Same action for the activity log"""
    kwargs.setdefault("failure_message", ACTIVITY_CLEAR_FAILED_MESSAGE)
    kwargs.setdefault("success_template", "Activity cleared ({deleted} entries removed)")
    return CacheClearController(client.clear_activity, **kwargs)
