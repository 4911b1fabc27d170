"""Server-sent events channel for remote contexts.

The backend streams ``task:*`` events on ``GET /tasks/events``; the advisory
``task:moved`` goes back with ``POST /tasks/events``. Dropped streams are
reopened with exponential backoff until ``max_reconnect_attempts``
consecutive failures.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from taskboard_cli.models import RealtimeEvent, TaskStatus
from taskboard_cli.models.config_models import RealtimeConfig
from taskboard_cli.models.exceptions import AuthError, TaskboardError
from taskboard_cli.services.api.client import APIClient
from taskboard_cli.services.api.tasks import TasksAPI

from .channel import EventHandler, RealtimeChannel

logger = logging.getLogger(__name__)

EVENTS_PATH = "/tasks/events"


async def parse_sse(lines: AsyncIterator[str]) -> AsyncIterator[tuple[str, str]]:
    """Yield ``(event name, data)`` frames from an event-stream line iterator.

    Multiple ``data:`` lines are joined with newlines, ``:`` lines are
    comments and a frame without ``event:`` is named ``message``.
    """
    event_name = "message"
    data_lines: list[str] = []

    async for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if not line:
            if data_lines:
                yield event_name, "\n".join(data_lines)
            event_name = "message"
            data_lines = []
            continue
        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        value = value.removeprefix(" ")
        if field == "event":
            event_name = value
        elif field == "data":
            data_lines.append(value)

    if data_lines:
        yield event_name, "\n".join(data_lines)


def decode_frame(name: str, data: str) -> RealtimeEvent | None:
    """Turn a frame into an event; malformed or unknown frames yield None."""
    try:
        payload = json.loads(data)
        if name == "message" and isinstance(payload, dict) and "event" in payload:
            name, payload = payload["event"], payload.get("data")
        return RealtimeEvent.from_wire(name, payload)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("Ignoring malformed realtime frame %r: %s", name, e)
        return None


class SseRealtimeChannel(RealtimeChannel):
    """Realtime channel reading the backend's event stream over httpx."""

    def __init__(
        self,
        client: APIClient,
        config: RealtimeConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        super().__init__()
        self.client = client
        self.config = config or RealtimeConfig()
        self._sleep = sleep
        self._handler: EventHandler | None = None
        self._task: asyncio.Task | None = None
        self._connected = False
        self._closing = False
        self.attempts = 0

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def connect(self, handler: EventHandler) -> None:
        """Start the background reader; returns without waiting for the stream."""
        if self.running:
            await self.disconnect()
        self._handler = handler
        self._closing = False
        self._task = asyncio.create_task(self._run(), name="taskboard-sse")

    async def disconnect(self) -> None:
        self._closing = True
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self._connected = False

    async def wait_closed(self) -> None:
        """Wait until the reader stops on its own (exhausted or unauthorized)."""
        if self._task is not None:
            await self._task

    async def emit_moved(self, task_id: str, status: TaskStatus) -> None:
        await TasksAPI(self.client).publish_event(
            RealtimeEvent.moved(task_id, status).to_wire()
        )

    async def _dispatch(self, event: RealtimeEvent) -> None:
        if self._handler is None:
            return
        result = self._handler(event)
        if inspect.isawaitable(result):
            await result

    async def _read_stream(self) -> None:
        async with self.client.stream("GET", EVENTS_PATH) as response:
            self._connected = True
            self.attempts = 0
            logger.info("Realtime stream connected to %s", self.client.base_url)
            async for name, data in parse_sse(response.aiter_lines()):
                event = decode_frame(name, data)
                if event is not None:
                    await self._dispatch(event)

    async def _run(self) -> None:
        delay = self.config.reconnect_delay
        while not self._closing:
            try:
                await self._read_stream()
                logger.info("Realtime stream closed by server")
            except AuthError as e:
                logger.error("Realtime stream rejected credentials: %s", e)
                self._connected = False
                self._report_error(e)
                return
            except TaskboardError as e:
                logger.warning("Realtime stream failed: %s", e)
            except Exception:
                logger.exception("Realtime stream stopped by an unexpected error")
            finally:
                if self._connected:
                    delay = self.config.reconnect_delay
                self._connected = False

            if self._closing:
                return

            self.attempts += 1
            if self.attempts >= self.config.max_reconnect_attempts:
                logger.error(
                    "Giving up on realtime stream after %d attempts", self.attempts
                )
                self._report_exhausted()
                return

            logger.debug("Reconnecting realtime stream in %.1fs", delay)
            await self._sleep(delay)
            delay = min(delay * 2, self.config.max_reconnect_delay)
