"""
Presentation helper that hands a finished text to a callback one character at a time.
"""
import asyncio
import inspect
import random
from typing import Awaitable, Callable, Optional, Tuple

from ollama_console.shared.protocols import UpdateCallback

DEFAULT_DELAY_RANGE: Tuple[float, float] = (0.015, 0.035)


async def invoke_callback(callback, *args) -> None:
    """Call a sync or async callback and await it when needed."""
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class TypingReveal:
    """
    Replays already-resolved text as incremental "typing".

    Every step passes the cumulative prefix, so the last call always carries the
    full text unchanged. Pass delay_range=None to reveal without sleeping.
    """

    def __init__(self, delay_range: Optional[Tuple[float, float]] = DEFAULT_DELAY_RANGE,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
                 rng: Optional[random.Random] = None):
        if delay_range is not None and not 0 <= delay_range[0] <= delay_range[1]:
            raise ValueError(f"Invalid delay range: {delay_range}")
        self.delay_range = delay_range
        self._sleep = sleep
        self._rng = rng or random.Random()

    def next_delay(self) -> float:
        if self.delay_range is None:
            return 0.0
        low, high = self.delay_range
        return self._rng.uniform(low, high)

    async def reveal(self, text: str, on_update: UpdateCallback) -> str:
        partial = ""
        for char in text:
            delay = self.next_delay()
            if delay > 0:
                await self._sleep(delay)
            partial += char
            await invoke_callback(on_update, partial)
        return partial
