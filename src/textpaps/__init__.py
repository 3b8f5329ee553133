"""Top-level package for textpaps.

Converts plain or lightly marked-up text into paginated, column-formatted
PostScript, PDF or SVG.

Provides subpackages:
- textpaps.loading – paper sizes, input decoding, print-filter options
- textpaps.engine – text layout engine over ReportLab font metrics
- textpaps.layout – paragraph splitting, line flattening, page compositing
- textpaps.output – rendering surfaces (PDF, PostScript, SVG)
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
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("textpaps")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
