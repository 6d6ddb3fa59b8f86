"""Synchronization primitives shared between the caller and the health check."""

import asyncio


class WaitGroup:
    """Counting barrier for asyncio tasks.

    The owner of a background activity calls ``add()`` before launching it and
    ``done()`` exactly once when it finishes; ``wait()`` returns once every
    tracked activity has finished.  Not thread-safe: use it from a single
    event loop.
    """

    def __init__(self) -> None:
        self._count = 0
        self._zero = asyncio.Event()
        self._zero.set()

    @property
    def count(self) -> int:
        """Number of activities still outstanding."""
        return self._count

    def add(self, delta: int = 1) -> None:
        """Adjust the counter by ``delta``.

        Raises:
            ValueError: If the counter would become negative.
        """
        count = self._count + delta
        if count < 0:
            raise ValueError("WaitGroup counter cannot go negative")

        self._count = count
        if count == 0:
            self._zero.set()
        else:
            self._zero.clear()

    def done(self) -> None:
        """Mark one tracked activity as finished."""
        self.add(-1)

    async def wait(self) -> None:
        """Block until the counter reaches zero."""
        await self._zero.wait()
