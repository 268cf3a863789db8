# Standard library imports
import asyncio
import logging
from time import monotonic
from typing import Callable, Optional

# Local application imports
from .controller_registry import get_controller_gateway
from ...core.exceptions import TagWriteError
from ...domain.models.tag_config import TagConfig
from ...domain.models.tag_value import TagValue
from ...domain.repositories.controller_gateway import ControllerGateway
from ...domain.repositories.tag_config_repository import TagConfigRepository

logger = logging.getLogger(__name__)

_WriteIntent = tuple[int, TagValue, asyncio.Future]


class TagWriter:
    """
    Single consumer for every controller write.

    Engines place write intents on a queue and either forget them (`submit`)
    or await the outcome (`write`). Intents are executed one at a time in
    submission order, so writes from one subsystem never race each other.
    Each intent resolves its tag through the tag configuration; a missing tag,
    a non-positive address, a missing gateway or a rejected write all resolve
    to False and are logged.

    The tag list is cached for `refresh_interval` seconds. A failed refresh
    keeps serving the previous list when there is one.
    """

    def __init__(
        self,
        tag_repository: TagConfigRepository,
        gateway_provider: Callable[[], Optional[ControllerGateway]] = get_controller_gateway,
        refresh_interval: float = 5.0,
        monotonic_clock: Optional[Callable[[], float]] = None,
    ):
        self._tag_repository = tag_repository
        self._gateway_provider = gateway_provider
        self._refresh_interval = refresh_interval
        self._monotonic = monotonic_clock or monotonic
        self._tags: Optional[list[TagConfig]] = None
        self._tags_loaded_at = 0.0
        self._queue: asyncio.Queue[_WriteIntent] = asyncio.Queue()
        self._consumer: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    def start(self) -> None:
        if not self.running:
            self._consumer = asyncio.get_running_loop().create_task(
                self._consume(), name="tag-writer"
            )
            logger.info("Tag writer started")

    async def stop(self) -> None:
        if self._consumer is None:
            return
        self._consumer.cancel()
        try:
            await self._consumer
        except asyncio.CancelledError:
            pass
        self._consumer = None
        while not self._queue.empty():
            _, _, future = self._queue.get_nowait()
            if not future.done():
                future.set_result(False)
        logger.info("Tag writer stopped")

    def submit(self, tag_id: int, value: TagValue) -> asyncio.Future:
        """Queue a write without waiting for it. Must be called from the event loop."""
        self.start()
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((tag_id, value, future))
        return future

    async def write(self, tag_id: int, value: TagValue) -> bool:
        """Queue a write and wait for its outcome."""
        return await self.submit(tag_id, value)

    async def _consume(self) -> None:
        while True:
            tag_id, value, future = await self._queue.get()
            try:
                ok = await self._execute(tag_id, value)
            except asyncio.CancelledError:
                if not future.done():
                    future.set_result(False)
                raise
            except TagWriteError as e:
                logger.error(f"Tag write failed: {e.message}")
                ok = False
            except Exception as e:
                logger.error(f"Unexpected error writing tag {tag_id}: {e}", exc_info=True)
                ok = False
            finally:
                self._queue.task_done()
            if not future.done():
                future.set_result(ok)

    async def _execute(self, tag_id: int, value: TagValue) -> bool:
        tags = await self._resolve_tags()
        tag = next((t for t in tags if t.tag_no == tag_id), None)
        if tag is None:
            raise TagWriteError(f"Tag {tag_id} is not configured", tag_id=tag_id)
        if not tag.is_addressable:
            raise TagWriteError(
                f"Tag {tag_id} has no valid address ({tag.address})", tag_id=tag_id
            )

        gateway = self._gateway_provider()
        if gateway is None:
            raise TagWriteError(f"No controller gateway registered for tag {tag_id}", tag_id=tag_id)

        ok = await gateway.write_tag(tag, value)
        if ok:
            logger.debug(f"Wrote {value!r} to tag {tag_id} (PLC {tag.plc_no}, address {tag.address})")
        else:
            logger.warning(f"Controller rejected write of {value!r} to tag {tag_id}")
        return ok

    async def _resolve_tags(self) -> list[TagConfig]:
        if self._tags is not None and self._monotonic() - self._tags_loaded_at <= self._refresh_interval:
            return self._tags
        try:
            self._tags = await self._tag_repository.get_all_tags()
        except Exception as e:
            if self._tags is None:
                raise
            logger.warning(f"Tag configuration refresh failed, using cached tags: {e}")
        self._tags_loaded_at = self._monotonic()
        return self._tags
