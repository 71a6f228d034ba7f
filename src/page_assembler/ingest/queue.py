"""
Module: ingest.queue

Purpose:
    Concurrent extraction with deterministic commit. Sources are extracted
    on a thread pool, but results are committed in submission order, so the
    final page order never depends on which decode finished first.

Key Classes:
    - IngestQueue: Thread pool extraction with ordered commit
    - IngestReport: Committed sources and per-file failures
    - IngestFailure: One file that contributed no pages

Dependencies:
    - concurrent.futures: Thread pool execution
    - ingest.extractor: Per-file extraction

Used By:
    - page_assembler.controller: ingest_files()
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from page_assembler.codec.base import DocumentCodec
from page_assembler.config import AssemblyConfig
from page_assembler.core.errors import AssemblyError, CorruptSource

from .extractor import ExtractedSource, SourceUpload, extract_source

logger = logging.getLogger(__name__)

Extractor = Callable[[SourceUpload, DocumentCodec, AssemblyConfig], ExtractedSource]
Committer = Callable[[ExtractedSource], str]


@dataclass(frozen=True)
class IngestFailure:
    """A file that was rejected; it contributed no pages."""

    name: str
    error: AssemblyError


@dataclass(frozen=True)
class IngestReport:
    """
    Outcome of one batch.

    Attributes:
        committed: (filename, source_id) in commit order
        failures: Rejected files in submission order
    """

    committed: Tuple[Tuple[str, str], ...] = ()
    failures: Tuple[IngestFailure, ...] = ()

    @property
    def source_ids(self) -> Tuple[str, ...]:
        return tuple(source_id for _, source_id in self.committed)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def warnings(self) -> Tuple[str, ...]:
        return tuple(str(f.error) for f in self.failures)


class IngestQueue:
    """
    Thread pool extraction queue with ordered commit.

    Usage:
        with IngestQueue(codec, max_workers=4) as queue:
            for upload in uploads:
                queue.submit(upload)
            report = queue.drain(commit)

    commit is always called on the thread that calls drain(), one source
    at a time, in submission order. A completion that arrives before its
    predecessors is buffered until they have been committed.
    """

    def __init__(
        self,
        codec: DocumentCodec,
        config: Optional[AssemblyConfig] = None,
        *,
        max_workers: Optional[int] = None,
        extractor: Extractor = extract_source,
    ) -> None:
        self._codec = codec
        self._config = config or AssemblyConfig()
        self._extractor = extractor
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or self._config.max_ingest_workers,
            thread_name_prefix="ingest",
        )
        self._pending: List[Tuple[SourceUpload, Future]] = []

    def submit(self, upload: SourceUpload) -> Future:
        """Queue an upload for extraction."""
        future = self._executor.submit(self._extractor, upload, self._codec, self._config)
        self._pending.append((upload, future))
        return future

    def drain(self, commit: Committer) -> IngestReport:
        """
        Wait for every queued extraction and commit results in order.

        Args:
            commit: Registers one extracted source, returning its id

        Returns:
            IngestReport for the drained batch
        """
        pending, self._pending = self._pending, []
        seq_of: Dict[Future, int] = {future: seq for seq, (_, future) in enumerate(pending)}
        buffered: Dict[int, Future] = {}
        next_seq = 0
        committed: List[Tuple[str, str]] = []
        failures: List[IngestFailure] = []

        for future in as_completed(seq_of):
            buffered[seq_of[future]] = future
            while next_seq in buffered:
                upload = pending[next_seq][0]
                self._commit_one(upload, buffered.pop(next_seq), commit, committed, failures)
                next_seq += 1

        logger.info(f"Ingested {len(committed)}/{len(pending)} file(s)")
        return IngestReport(committed=tuple(committed), failures=tuple(failures))

    def _commit_one(
        self,
        upload: SourceUpload,
        future: Future,
        commit: Committer,
        committed: List[Tuple[str, str]],
        failures: List[IngestFailure],
    ) -> None:
        try:
            extracted = future.result()
            source_id = commit(extracted)
        except AssemblyError as e:
            logger.warning(f"Skipping {upload.name}: {e}")
            failures.append(IngestFailure(upload.name, e))
            return
        except Exception as e:
            # Decoder internals raise a wide variety of errors on bad input
            error = CorruptSource(upload.name, str(e) or type(e).__name__)
            logger.warning(f"Skipping {upload.name}: {error}")
            failures.append(IngestFailure(upload.name, error))
            return
        committed.append((upload.name, source_id))

    def shutdown(self) -> None:
        """Shutdown the thread pool, waiting for running extractions."""
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "IngestQueue":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()
