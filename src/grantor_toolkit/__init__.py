"""Top-level package for the grantor administrative toolkit.

Provides subpackages:
- grantor_toolkit.report – application report assembly (layout, images, merge)
- grantor_toolkit.storage – object store access for applicant documents
- grantor_toolkit.api – Flask endpoints used by the dashboard
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
        except Exception:
            pass

    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("grantor-toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 grantor-toolkit contributors"
__all__: list[str] = ["__version__", "__copyright__"]
