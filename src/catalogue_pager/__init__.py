"""Top-level package for the catalogue pager.

Provides subpackages:
- catalogue_pager.core – item, layout, override and page models
- catalogue_pager.pagination – grouping, synthetic pages and reordering
- catalogue_pager.assets – concurrent image acquisition
- catalogue_pager.output – page rendering, raster compositing and PDF output
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

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("catalogue-pager")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
