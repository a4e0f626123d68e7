"""Randomized delays that keep request timing from looking scripted."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable

from duckscout.config.schema import JitterConfig

Sleep = Callable[[float], Awaitable[None]]


class Jitter:
    """Sleep for a random time drawn from the landing or typing range."""

    def __init__(
        self,
        config: JitterConfig | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
        rng: random.Random | None = None,
    ):
        self.config = config or JitterConfig()
        self._sleep = sleep
        self._rng = rng or random.Random()

    def landing_delay(self) -> float:
        return self._draw(self.config.landing_min, self.config.landing_max)

    def typing_delay(self) -> float:
        return self._draw(self.config.typing_min, self.config.typing_max)

    async def landing(self) -> None:
        """Pause as a user would after opening the homepage."""
        await self._pause(self.landing_delay())

    async def typing(self) -> None:
        """Pause as a user would while typing a query."""
        await self._pause(self.typing_delay())

    def _draw(self, low: float, high: float) -> float:
        low, high = max(0.0, low), max(0.0, high)
        if high <= low:
            return low
        return self._rng.uniform(low, high)

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await self._sleep(seconds)
