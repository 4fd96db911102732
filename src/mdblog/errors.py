"""Exception types raised by the content tooling"""

from pathlib import Path


class MdblogError(Exception):
    """Base class for all mdblog failures."""


class FrontmatterError(MdblogError, ValueError):
    """YAML front matter did not parse or is not a mapping."""


class DocumentError(MdblogError):
    """A document's front matter does not satisfy its Post/Page schema."""

    def __init__(self, path: Path | str, message: str):
        self.path = Path(path)
        super().__init__(f"{path}: {message}")


class SiteError(MdblogError):
    """Generated site output is missing or unreadable."""


class GeneratorError(MdblogError):
    """The external static-site generator could not be started."""
