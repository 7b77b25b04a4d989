from __future__ import annotations

import logging
import time
from queue import Empty, Queue
from typing import Any, Iterable

from forest.world.chunks import ChunkStore
from forest.world.types import Chunk, ChunkPayloadError, ElementBatch, chunk_from_payload

logger = logging.getLogger(__name__)


class ServerChunkReconciler:
    """Merges authoritative chunks from the server into the local store.

    A chunk whose key is already resident is skipped without complaint, so
    delivering the same batch twice changes nothing. Deliveries from a
    network thread go through ``submit`` and are applied by ``drain`` on the
    tick thread.
    """

    def __init__(self, store: ChunkStore) -> None:
        self.store = store
        self._pending: Queue[list[Chunk]] = Queue()

    def merge(self, incoming: Iterable[Chunk]) -> ElementBatch:
        merged = ElementBatch()
        inserted = 0
        for chunk in incoming:
            if self.store.insert(chunk, source="server"):
                merged.extend(chunk)
                inserted += 1
        if inserted:
            logger.info(
                "merged %d server chunks: %d trees, %d bushes, %d flowers",
                inserted,
                len(merged.trees),
                len(merged.bushes),
                len(merged.flowers),
            )
        return merged

    @staticmethod
    def decode(payload: Any) -> list[Chunk]:
        """Decode a ``world:chunks`` payload, dropping malformed chunks."""
        if isinstance(payload, dict):
            payload = payload.get("chunks", [])
        if not isinstance(payload, list):
            logger.warning("ignoring chunk payload of type %s", type(payload).__name__)
            return []
        chunks: list[Chunk] = []
        for item in payload:
            try:
                chunks.append(chunk_from_payload(item))
            except ChunkPayloadError as exc:
                logger.warning("skipping malformed server chunk: %s", exc)
        return chunks

    def merge_payload(self, payload: Any) -> ElementBatch:
        return self.merge(self.decode(payload))

    def submit(self, chunks: Iterable[Chunk]) -> None:
        self._pending.put(list(chunks))

    def pending(self) -> int:
        return self._pending.qsize()

    def drain(self, budget_seconds: float = 0.0) -> ElementBatch:
        merged = ElementBatch()
        start = time.perf_counter()
        while True:
            if budget_seconds > 0 and (time.perf_counter() - start) >= budget_seconds:
                break
            try:
                batch = self._pending.get_nowait()
            except Empty:
                break
            merged.extend(self.merge(batch))
        return merged
