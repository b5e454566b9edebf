"""Process lifecycle for the database service.

States run ``UNINITIALIZED -> POOL_CONSTRUCTED -> HEALTHY -> SHUTTING_DOWN
-> CLOSED``. A failed startup probe goes straight to ``CLOSED``.
"""

import asyncio
import signal
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from .connection import DatabaseService
from .core.exceptions import ConfigurationError, DatabaseConnectionError


class LifecycleState(str, Enum):
    UNINITIALIZED = "uninitialized"
    POOL_CONSTRUCTED = "pool_constructed"
    HEALTHY = "healthy"
    SHUTTING_DOWN = "shutting_down"
    CLOSED = "closed"


SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class LifecycleManager:
    """Owns startup, signal handling and shutdown of a ``DatabaseService``."""

    def __init__(self, service: DatabaseService):
        self.service = service
        self.state = LifecycleState.UNINITIALIZED
        self.received_signal: signal.Signals | None = None

    async def start(self) -> None:
        """
        Build the pool and probe it.

        Raises:
            RuntimeError: if called twice
            DatabaseConnectionError: probe failed; the service is closed
        """
        if self.state is not LifecycleState.UNINITIALIZED:
            raise RuntimeError(f"Cannot start from state {self.state.value}")

        try:
            await self.service.connect()
            self.state = LifecycleState.POOL_CONSTRUCTED
            await self.service.test_connection()
        except Exception:
            await self.service.disconnect()
            self.state = LifecycleState.CLOSED
            raise

        self.state = LifecycleState.HEALTHY

    async def shutdown(self) -> None:
        """Close the service. Safe to call any number of times."""
        if self.state in (LifecycleState.SHUTTING_DOWN, LifecycleState.CLOSED):
            return
        self.state = LifecycleState.SHUTTING_DOWN
        await self.service.disconnect()
        self.state = LifecycleState.CLOSED

    def _on_signal(
        self,
        sig: signal.Signals,
        task: asyncio.Future,
        on_signal: Optional[Callable[[], None]] = None,
    ) -> None:
        if self.state is not LifecycleState.HEALTHY:
            return
        logger.info(f"Received {sig.name}, shutting down")
        self.received_signal = sig
        if on_signal is not None:
            on_signal()
        else:
            task.cancel()

    async def run(
        self,
        body: Callable[[], Awaitable[Any]],
        handle_signals: bool = True,
        on_signal: Optional[Callable[[], None]] = None,
    ) -> int:
        """
        Start, run ``body`` while healthy, then shut down.

        SIGINT/SIGTERM cancel ``body``, or call ``on_signal`` instead when one
        is given so ``body`` can wind down and return on its own. Shutdown
        runs however ``body`` ends.

        Returns:
            1 if startup failed, otherwise 0. Exceptions raised by ``body``
            propagate after shutdown.
        """
        try:
            await self.start()
        except (ConfigurationError, DatabaseConnectionError):
            logger.error("Failed to start due to database connection error")
            return 1

        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(body())
        installed = []
        if handle_signals:
            for sig in SHUTDOWN_SIGNALS:
                try:
                    loop.add_signal_handler(sig, self._on_signal, sig, task, on_signal)
                    installed.append(sig)
                except (NotImplementedError, RuntimeError):
                    # Windows event loops and non-main threads
                    logger.debug(f"Signal handler for {sig.name} unavailable")

        try:
            await task
        except asyncio.CancelledError:
            if self.received_signal is None:
                raise
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.shutdown()

        return 0
