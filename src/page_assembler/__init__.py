"""Top-level package for the Page Assembler.

Provides subpackages:
- page_assembler.core – immutable models and the error hierarchy
- page_assembler.engine – page composition state and the assembly planner
- page_assembler.codec – PyMuPDF document codec and thumbnail renderer
- page_assembler.ingest – source extraction and the ordered ingest queue
- page_assembler.export – plan execution, file naming and output sinks
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version, PackageNotFoundError
    except ImportError:
        return "0.0.0"
    try:
        return pkg_version("page-assembler")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
