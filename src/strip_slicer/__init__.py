"""Top-level package for the Strip Slicer.

Provides subpackages:
- strip_slicer.geometry – stack source images into one virtual strip
- strip_slicer.detection – find safe cut lines inside the strip
- strip_slicer.layout – initial pagination and pin editing
- strip_slicer.output – slice rendering and export sinks
- strip_slicer.session – context object tying the pieces together
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
        except (OSError, IndexError):
            # Unreadable or malformed pyproject; use the installed metadata
            pass

    try:
        from importlib.metadata import version as pkg_version, PackageNotFoundError
        return pkg_version("strip-slicer")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 Strip Slicer contributors"
__all__: list[str] = ["__version__"]
