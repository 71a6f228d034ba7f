"""
Module: export.sink

Purpose:
    Output sinks: where finished documents are delivered.

Key Classes:
    - OutputSink: Abstract deliver(filename, data, mime_type)
    - DirectorySink: Atomic writes into a directory
    - ZipSink: Entries in a ZIP archive
    - MemorySink: Keeps deliveries in memory

Dependencies:
    - tempfile (std): Atomic writes
    - zipfile (std): Archive output

Used By:
    - export.exporter: Sequential delivery of plans
    - export.images: Page image delivery
    - page_assembler.cli: DirectorySink / ZipSink
"""

from __future__ import annotations

import logging
import tempfile
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
PNG_MIME = "image/png"


class OutputSink(ABC):
    """Receives finished outputs, one at a time."""

    @abstractmethod
    def deliver(self, filename: str, data: bytes, mime_type: str = PDF_MIME) -> str:
        """
        Save one output.

        Returns:
            Where the output went (path, archive member or filename)

        Raises:
            OSError: If the output cannot be saved
        """


class DirectorySink(OutputSink):
    """
    Writes each output to a directory via a temporary file and an atomic
    rename, so a failed write never leaves a truncated file behind.

    Existing files are not overwritten; "_1", "_2", ... is appended to the
    stem instead.
    """

    def __init__(self, output_dir: Path, *, overwrite: bool = False) -> None:
        self.output_dir = output_dir
        self.overwrite = overwrite
        self.delivered: List[Path] = []

    def deliver(self, filename: str, data: bytes, mime_type: str = PDF_MIME) -> str:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self._target(filename)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            suffix=path.suffix,
            dir=self.output_dir,
            delete=False,
        ) as f:
            f.write(data)
            temp_path = Path(f.name)
        try:
            temp_path.replace(path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        self.delivered.append(path)
        logger.info(f"Wrote {path}")
        return str(path)

    def _target(self, filename: str) -> Path:
        path = self.output_dir / Path(filename).name
        if self.overwrite or not path.exists():
            return path
        n = 1
        while True:
            candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
            if not candidate.exists():
                return candidate
            n += 1


class ZipSink(OutputSink):
    """
    Collects outputs into a single ZIP archive.

    Usage:
        with ZipSink(Path("out/pages.zip")) as sink:
            export_plans(..., sink=sink)
    """

    def __init__(self, output_path: Path) -> None:
        if output_path.suffix != ".zip":
            output_path = output_path.with_suffix(".zip")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path = output_path
        self._zip: Optional[zipfile.ZipFile] = zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED)
        self.names: List[str] = []

    def deliver(self, filename: str, data: bytes, mime_type: str = PDF_MIME) -> str:
        if self._zip is None:
            raise OSError(f"Archive already closed: {self.output_path}")
        self._zip.writestr(filename, data)
        self.names.append(filename)
        return f"{self.output_path}:{filename}"

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None
            logger.info(f"Wrote {len(self.names)} file(s) to {self.output_path}")

    def __enter__(self) -> "ZipSink":
        return self

    def __exit__(self, *args) -> None:
        self.close()


@dataclass
class Delivery:
    filename: str
    data: bytes = field(repr=False)
    mime_type: str


class MemorySink(OutputSink):
    """Keeps every delivery in memory, in delivery order."""

    def __init__(self) -> None:
        self.deliveries: List[Delivery] = []

    def deliver(self, filename: str, data: bytes, mime_type: str = PDF_MIME) -> str:
        self.deliveries.append(Delivery(filename, data, mime_type))
        return filename

    @property
    def filenames(self) -> List[str]:
        return [d.filename for d in self.deliveries]

    def as_dict(self) -> Dict[str, bytes]:
        return {d.filename: d.data for d in self.deliveries}
