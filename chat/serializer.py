"""
Single-lane queue for outbound generation calls.

The generation API is rate limited, so chat requests are answered one at
a time, in arrival order, with a fixed pause after every call:

    IDLE -> DRAINING (one item) -> COOLING_DOWN -> IDLE

``submit`` may be called in any state. Only a submit seen in IDLE starts
the drain task; otherwise the item waits for the running loop to reach
IDLE again and pick it up. The check and the state change happen in one
event-loop step with no await in between, which is what keeps two drain
tasks from ever running. A multi-threaded port would need a real lock or
a single-consumer channel here.

The queue is unbounded and nothing is dropped for being stale. Callers
that go away still have their request processed.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from chat.links import CHAT_STYLES, transform_links
from config import Config

logger = logging.getLogger(__name__)

TRANSIENT_ERROR_MESSAGE = "Please wait a moment and try again."


class SerializerState(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"
    COOLING_DOWN = "cooling_down"


@dataclass
class ChatReply:
    success: bool
    message: str
    styles: str | None = None
    details: str | None = None


@dataclass
class QueuedRequest:
    prompt: str
    sink: asyncio.Future


class RequestSerializer:
    def __init__(
        self,
        generate: Callable[[str], Awaitable[str]],
        postprocess: Callable[[str], str] = transform_links,
        cooldown_seconds: float | None = None,
        call_timeout_seconds: float | None = None,
        styles: str | None = CHAT_STYLES,
    ) -> None:
        self._generate = generate
        self._postprocess = postprocess
        self._cooldown = Config.CHAT_COOLDOWN_SECONDS if cooldown_seconds is None else cooldown_seconds
        self._call_timeout = (
            Config.GENERATION_TIMEOUT_SECONDS if call_timeout_seconds is None else call_timeout_seconds
        )
        self._styles = styles

        self._queue: deque[QueuedRequest] = deque()
        self._state = SerializerState.IDLE
        self._current: QueuedRequest | None = None
        self._drain_task: asyncio.Task | None = None
        self._stopped = False

    @property
    def state(self) -> SerializerState:
        return self._state

    @property
    def pending(self) -> int:
        """Requests waiting behind the one in flight."""
        return len(self._queue)

    def submit(self, prompt: str) -> asyncio.Future:
        """Append a request and return the future its reply resolves."""
        if self._stopped:
            raise RuntimeError("RequestSerializer is stopped")

        loop = asyncio.get_running_loop()
        request = QueuedRequest(prompt=prompt, sink=loop.create_future())
        self._queue.append(request)
        logger.debug("Queued chat request (%d pending, state=%s)", len(self._queue), self._state.value)

        if self._state is SerializerState.IDLE:
            self._state = SerializerState.DRAINING
            self._drain_task = loop.create_task(self._drain())
        return request.sink

    async def ask(self, prompt: str) -> ChatReply:
        # Shielded: a cancelled caller must not cancel the queued item
        return await asyncio.shield(self.submit(prompt))

    async def _drain(self) -> None:
        while self._queue:
            self._state = SerializerState.DRAINING
            self._current = self._queue.popleft()
            reply = await self._process(self._current.prompt)
            if not self._current.sink.done():
                self._current.sink.set_result(reply)
            self._current = None

            self._state = SerializerState.COOLING_DOWN
            await asyncio.sleep(self._cooldown)
            self._state = SerializerState.IDLE
        self._drain_task = None

    async def _process(self, prompt: str) -> ChatReply:
        try:
            text = await asyncio.wait_for(self._generate(prompt), timeout=self._call_timeout)
            return ChatReply(success=True, message=self._postprocess(text), styles=self._styles)
        except asyncio.TimeoutError:
            logger.error("Generation call timed out after %ss", self._call_timeout)
            return ChatReply(
                success=False,
                message=TRANSIENT_ERROR_MESSAGE,
                details=f"Generation timed out after {self._call_timeout}s",
            )
        except Exception as exc:
            # The lane must survive any failure of the opaque call
            logger.exception("Error processing queued chat request")
            return ChatReply(success=False, message=TRANSIENT_ERROR_MESSAGE, details=str(exc))

    async def stop(self) -> None:
        """Cancel draining and answer everything still queued with the retry reply."""
        self._stopped = True
        task = self._drain_task
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            self._drain_task = None

        abandoned = [self._current] if self._current else []
        abandoned.extend(self._queue)
        self._queue.clear()
        self._current = None
        for request in abandoned:
            if not request.sink.done():
                request.sink.set_result(
                    ChatReply(success=False, message=TRANSIENT_ERROR_MESSAGE, details="Server shutting down")
                )
        self._state = SerializerState.IDLE
