# best-effort mirroring of local actions to a remote service
import asyncio
import logging
import threading
from typing import Coroutine, Optional, Set

import httpx

from .models import Poll, RemotePollIn, VoteIn

logger = logging.getLogger(__name__)


class RemoteSyncClient:
    """
    Notifies the remote service about created polls and cast votes.

    Never raises: network errors and non-2xx answers are logged and reduced to
    None / False. Without an endpoint both calls succeed trivially with no I/O.
    """

    def __init__(
        self,
        endpoint: str = "",
        timeout: float = 1.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def create_poll(self, poll: Poll) -> Optional[str]:
        if not self.enabled:
            return None

        body = RemotePollIn(
            question=poll.question,
            description=poll.description,
            options=poll.options,
            category=poll.category,
            image_url=poll.image_url,
        ).model_dump(by_alias=True, exclude_none=True)

        try:
            async with self._client() as client:
                resp = await client.post(f"{self.endpoint}/polls", json=body)
                resp.raise_for_status()
                remote_id = resp.json().get("id")
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.warning("remote createPoll failed for %s: %r", poll.id, e)
            return None

        if remote_id is None:
            logger.warning("remote createPoll for %s returned no id", poll.id)
            return None
        return str(remote_id)

    async def vote(self, poll_id: str, option_id: str) -> bool:
        if not self.enabled:
            return True

        body = VoteIn(option_id=option_id).model_dump(by_alias=True)
        try:
            async with self._client() as client:
                resp = await client.post(f"{self.endpoint}/polls/{poll_id}/votes", json=body)
        except httpx.HTTPError as e:
            logger.warning("remote vote failed for %s: %r", poll_id, e)
            return False

        if not resp.is_success:
            logger.warning("remote vote for %s answered %s", poll_id, resp.status_code)
        return resp.is_success


class BackgroundRunner:
    """
    Fire-and-forget execution of coroutines.

    Inside a running event loop the coroutine becomes a task on that loop;
    otherwise it goes to a daemon thread that owns its own loop. Callers never
    get a handle to wait on, and errors stop here.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def submit(self, coro: Coroutine) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None and loop is not self._loop:
            task = loop.create_task(self._guard(coro))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return

        asyncio.run_coroutine_threadsafe(self._guard(coro), self._background_loop())

    async def _guard(self, coro: Coroutine) -> None:
        try:
            await coro
        except Exception:
            logger.exception("background sync task failed")

    def _background_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever, name="voteapp-sync", daemon=True
                )
                self._thread.start()
            return self._loop

    def close(self) -> None:
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop, self._thread = None, None
        if loop is None:
            return
        loop.call_soon_threadsafe(self._shutdown, loop)
        if thread is not None:
            thread.join(timeout=2.0)
            if thread.is_alive():
                logger.warning("background sync loop did not stop in time")
                return
        loop.close()

    @staticmethod
    def _shutdown(loop: asyncio.AbstractEventLoop) -> None:
        # runs on the background loop: cancel what is left, stop once it settles
        tasks = asyncio.all_tasks(loop)
        if not tasks:
            loop.stop()
            return
        for task in tasks:
            task.cancel()
        done = asyncio.gather(*tasks, return_exceptions=True)
        done.add_done_callback(lambda _: loop.stop())
