"""Per-channel trailing debounce in front of the sticky refresh."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional, Set

log = logging.getLogger(__name__)


@dataclass
class SchedulerState:
    """Process-wide transient state shared by the scheduler and the engine."""
    pending_timers: Dict[str, asyncio.Task] = field(default_factory=dict)
    in_flight: Set[str] = field(default_factory=set)
    # fired timers, held until their callback returns
    running: Set[asyncio.Task] = field(default_factory=set)


class DebounceScheduler:
    """Collapses a burst of activity into a single callback ``delay`` seconds
    after the last event.

    A steady stream of events keeps pushing the callback back. Pass
    ``max_wait`` to bound that: the callback then fires at most ``max_wait``
    seconds after the first event of the burst.
    """

    def __init__(
        self,
        state: SchedulerState,
        callback: Callable[[str], Awaitable],
        delay: float = 2.0,
        max_wait: Optional[float] = None,
    ):
        self.state = state
        self.callback = callback
        self.delay = delay
        self.max_wait = max_wait or None
        self._burst_started: Dict[str, float] = {}

    def on_activity(self, channel_id) -> None:
        key = str(channel_id)
        loop = asyncio.get_running_loop()
        now = loop.time()

        previous = self.state.pending_timers.pop(key, None)
        if previous is not None:
            previous.cancel()
        else:
            self._burst_started[key] = now

        delay = self.delay
        if self.max_wait is not None:
            remaining = self.max_wait - (now - self._burst_started.get(key, now))
            delay = max(0.0, min(delay, remaining))

        self.state.pending_timers[key] = loop.create_task(self._fire_later(key, delay))

    async def _fire_later(self, key: str, delay: float) -> None:
        await asyncio.sleep(delay)

        # past this point the timer is spent; a new event starts a new one
        task = asyncio.current_task()
        if self.state.pending_timers.get(key) is task:
            del self.state.pending_timers[key]
        self._burst_started.pop(key, None)

        if key in self.state.in_flight:
            log.debug("[Scheduler] Channel %s already refreshing, dropping timer", key)
            return
        self.state.running.add(task)
        try:
            await self.callback(key)
        except Exception:
            log.exception("[Scheduler] Refresh for channel %s failed", key)
        finally:
            self.state.running.discard(task)

    def cancel(self, channel_id) -> bool:
        key = str(channel_id)
        self._burst_started.pop(key, None)
        task = self.state.pending_timers.pop(key, None)
        if task is None:
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        for key in list(self.state.pending_timers):
            self.cancel(key)

    def is_pending(self, channel_id) -> bool:
        return str(channel_id) in self.state.pending_timers
