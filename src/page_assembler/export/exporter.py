"""
Module: export.exporter

Purpose:
    Sequential export of a batch of plans with partial-failure semantics.
    A chunk that fails is skipped and recorded; the remaining chunks are
    still exported.

Key Functions:
    - export_plans(): Execute, name and deliver every plan

Key Classes:
    - ExportResult: Delivered outputs, failures and warnings

Dependencies:
    - export.executor: Plan execution
    - export.naming: Output filenames
    - export.sink: Delivery

Used By:
    - page_assembler.controller: export_assembly()
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from page_assembler.codec.base import DocumentCodec
from page_assembler.core.errors import AssemblyError, ChunkExportFailure
from page_assembler.core.models import OutputDocumentPlan
from page_assembler.engine.registry import SourceRegistry

from .executor import render_plan
from .naming import plan_filename
from .sink import PDF_MIME, OutputSink

logger = logging.getLogger(__name__)

CHUNK_ERRORS = (AssemblyError, OSError, RuntimeError, ValueError, IndexError)


@dataclass(frozen=True)
class ExportResult:
    """
    Result of one export batch (immutable).

    Attributes:
        delivered: Locations reported by the sink, in delivery order
        filenames: Filenames of the delivered outputs
        failures: One ChunkExportFailure per skipped chunk
        total: Number of plans in the batch
    """

    delivered: Tuple[str, ...]
    filenames: Tuple[str, ...]
    failures: Tuple[ChunkExportFailure, ...]
    total: int

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_indices(self) -> Tuple[int, ...]:
        return tuple(f.chunk_index for f in self.failures)

    @property
    def warnings(self) -> Tuple[str, ...]:
        """Aggregate warning listing the failed chunk indices, if any."""
        if not self.failures:
            return ()
        indices = ", ".join(str(i) for i in self.failed_indices)
        return (f"Failed to export {len(self.failures)} of {self.total} file(s): chunk(s) {indices}",)


def export_plans(
    plans: Sequence[OutputDocumentPlan],
    *,
    registry: SourceRegistry,
    codec: DocumentCodec,
    sink: OutputSink,
    base_name: str,
    tag: str,
    pause_seconds: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> ExportResult:
    """
    Export plans one after another.

    Outputs are delivered in plan order. pause_seconds separates
    consecutive deliveries.

    Args:
        plans: Plans to export
        registry: Source lookup for payloads
        codec: Document codec
        sink: Delivery target
        base_name: Filename base
        tag: Operation tag for filenames
        pause_seconds: Pause between deliveries
        sleep: Injected for tests

    Returns:
        ExportResult; never raises for a failing chunk
    """
    delivered: List[str] = []
    filenames: List[str] = []
    failures: List[ChunkExportFailure] = []
    start_time = time.perf_counter()

    for position, plan in enumerate(plans, start=1):
        filename = plan_filename(base_name, tag, plan)
        if delivered and pause_seconds > 0:
            sleep(pause_seconds)
        try:
            data = render_plan(plan, registry, codec)
            location = sink.deliver(filename, data, PDF_MIME)
        except CHUNK_ERRORS as e:
            failure = ChunkExportFailure(plan.index or position, filename, e)
            logger.warning(str(failure))
            failures.append(failure)
            continue
        delivered.append(location)
        filenames.append(filename)
        logger.info(f"Exported {filename} ({plan.page_count} page(s))")

    result = ExportResult(
        delivered=tuple(delivered),
        filenames=tuple(filenames),
        failures=tuple(failures),
        total=len(plans),
    )
    for warning in result.warnings:
        logger.warning(warning)
    logger.info(
        f"Export finished in {time.perf_counter() - start_time:.2f}s: "
        f"{len(delivered)}/{len(plans)} file(s)"
    )
    return result
