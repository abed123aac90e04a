"""Public interface for the three-column file manager."""

__version__ = "0.3.0"

from .manager import FileManager, FileManagerError  # noqa: E402

__all__ = ["FileManager", "FileManagerError", "__version__"]
