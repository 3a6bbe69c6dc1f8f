import asyncio
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger("recruitai.scheduling")

TickFn = Callable[[], Any]


class PeriodicTask:
    """
    Cancellable fixed-cadence loop on the running event loop.

    stop() cancels synchronously and is safe to call any number of times.
    tick() runs one iteration directly, so cadence-driven code can be
    exercised without real timers.
    """

    def __init__(self, callback: TickFn, interval_sec: float, name: str = "periodic"):
        self.callback = callback
        self.interval_sec = max(0.001, float(interval_sec))
        self.name = name
        self.ticks = 0
        self.failures = 0
        self._task: asyncio.Task | None = None
        self._cancelled: asyncio.Task | None = None
        self._paused = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def paused(self) -> bool:
        return self._paused

    async def tick(self) -> Any:
        try:
            result = self.callback()
            if inspect.isawaitable(result):
                result = await result
            self.ticks += 1
            return result
        except Exception as exc:
            # one bad tick must not end the loop; the next tick retries
            self.failures += 1
            logger.warning("periodic tick failed | name=%s err=%s", self.name, exc)
            return None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_sec)
            if self._paused:
                continue
            await self.tick()

    def start(self) -> None:
        if self.running:
            return
        self._paused = False
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def stop(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            self._cancelled = task

    async def aclose(self) -> None:
        self.stop()
        task, self._cancelled = self._cancelled, None
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
