from __future__ import annotations

import logging
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Optional, Tuple, Type

from ..core.constants import DEFAULT_MAX_RETRIES, RETRY_BACKOFF_SECONDS, RETRY_PACING_SECONDS
from ..core.exceptions import DataFetchError

logger = logging.getLogger(__name__)

# Repositories wrap driver failures in DataFetchError; socket-level errors may
# still escape from a connection that drops mid-call.
TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (DataFetchError, ConnectionError, TimeoutError)


@dataclass
class QueuedRequest:
    request_id: str
    operation: Callable[[], Any]
    max_retries: int
    retries: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    metadata: Optional[dict] = None


class RequestQueue:
    """FIFO queue of data-store operations with bounded retries.

    A transient failure is retried after ``backoff_seconds * attempt`` until it
    has failed ``max_retries`` times, then it is dropped. Any other exception
    (validation errors, bugs) is raised to the caller on the first attempt.
    """

    def __init__(
        self,
        *,
        sleep: Callable[[float], None] = time.sleep,
        backoff_seconds: float = RETRY_BACKOFF_SECONDS,
        pacing_seconds: float = RETRY_PACING_SECONDS,
        retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
    ):
        self._queue: Deque[QueuedRequest] = deque()
        self._sleep = sleep
        self._backoff = float(backoff_seconds)
        self._pacing = float(pacing_seconds)
        self._retry_on = tuple(retry_on)
        self._processing = False

    def add(
        self,
        operation: Callable[[], Any],
        max_retries: int = DEFAULT_MAX_RETRIES,
        metadata: Optional[dict] = None,
    ) -> str:
        request_id = f"req_{uuid.uuid4().hex[:12]}"
        self._queue.append(
            QueuedRequest(
                request_id=request_id,
                operation=operation,
                max_retries=max(int(max_retries), 1),
                metadata=metadata,
            )
        )
        logger.debug("Queued request %s: %s", request_id, metadata)
        return request_id

    def size(self) -> int:
        return len(self._queue)

    def clear(self) -> None:
        self._queue.clear()

    def process(self) -> int:
        """Drain the queue. Returns how many operations succeeded.

        A non-transient failure removes its request and propagates; the rest
        of the queue stays in place for the next call.
        """
        if self._processing:
            return 0

        self._processing = True
        succeeded = 0
        try:
            while self._queue:
                req = self._queue[0]
                try:
                    req.operation()
                except self._retry_on as exc:
                    req.retries += 1
                    logger.warning(
                        "Request %s failed (attempt %d/%d): %s",
                        req.request_id, req.retries, req.max_retries, exc,
                    )
                    if req.retries >= req.max_retries:
                        logger.error("Request %s exceeded max retries, dropping it", req.request_id)
                        self._queue.popleft()
                    else:
                        self._sleep(self._backoff * req.retries)
                except Exception:
                    self._queue.popleft()
                    raise
                else:
                    succeeded += 1
                    self._queue.popleft()

                if self._queue and self._pacing:
                    self._sleep(self._pacing)
        finally:
            self._processing = False

        return succeeded

    def run(
        self,
        operation: Callable[[], Any],
        max_retries: int = DEFAULT_MAX_RETRIES,
        metadata: Optional[dict] = None,
    ) -> Any:
        """Run one operation with the queue's retry policy and return its result."""
        attempts = max(int(max_retries), 1)
        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            try:
                return operation()
            except self._retry_on as exc:
                last_error = exc
                logger.warning("Operation %s failed (attempt %d/%d): %s", metadata, attempt, attempts, exc)
                if attempt < attempts:
                    self._sleep(self._backoff * attempt)

        raise DataFetchError(f"Could not load data after {attempts} attempts") from last_error
