"""
Purpose: Gateway-sized fan-out of push messages.
What it does:
- splits any number of messages into ordered chunks of at most `batch_size`
  (ceil(N / batch_size) chunks, concatenating back to the original list)
- sends every chunk to the gateway independently, optionally through a bounded
  worker pool
- counts messages in chunks the gateway acknowledged

A failed chunk (non-2xx or transport error) is logged and left out of the count.
It never stops the remaining chunks and never raises to the caller. No retries:
push is a convenience channel, not a delivery guarantee.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Sequence, TypeVar

from .messages import PushMessage

logger = logging.getLogger(__name__)

GATEWAY_BATCH_LIMIT = 100

T = TypeVar("T")


@dataclass(frozen=True)
class BatchReport:
    sent: int
    batches: int
    failed_batches: int


def chunk_messages(messages: Sequence[T], size: int = GATEWAY_BATCH_LIMIT) -> List[List[T]]:
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    return [list(messages[start:start + size]) for start in range(0, len(messages), size)]


def _send_chunk(gateway, index: int, chunk: List[PushMessage]) -> int:
    """Returns the number of acknowledged messages (0 on failure)."""
    try:
        gateway.send(chunk)
    except Exception:
        logger.exception("Push batch %d (%d messages) failed", index + 1, len(chunk))
        return 0
    return len(chunk)


def send_in_batches(
    gateway,
    messages: Sequence[PushMessage],
    batch_size: int = GATEWAY_BATCH_LIMIT,
    max_workers: int = 1,
) -> BatchReport:
    """
    Sends `messages` through `gateway.send(chunk)` one chunk per call.

    With max_workers > 1 chunks go out concurrently; results are still summed
    per chunk, so one failure cannot cancel or hide another chunk's success.
    """
    chunks = chunk_messages(messages, batch_size)
    if not chunks:
        return BatchReport(sent=0, batches=0, failed_batches=0)

    if max_workers <= 1 or len(chunks) == 1:
        results = [_send_chunk(gateway, index, chunk) for index, chunk in enumerate(chunks)]
    else:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(chunks))) as pool:
            results = list(pool.map(lambda item: _send_chunk(gateway, *item), enumerate(chunks)))

    failed = sum(1 for count in results if count == 0)
    if failed:
        logger.error("%d of %d push batches failed", failed, len(chunks))

    return BatchReport(sent=sum(results), batches=len(chunks), failed_batches=failed)
