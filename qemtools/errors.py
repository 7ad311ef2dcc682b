"""Exception types raised at internal seams and handled locally by the parser and assembler."""


class QemToolsError(Exception):
    """Base class for qemtools errors."""


class MalformedRecordError(QemToolsError, ValueError):
    """A single metadata line cannot be turned into a bounding region."""

    def __init__(self, reason: str, line: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.line = line


class ResourceUnavailableError(QemToolsError, OSError):
    """The metadata resource could not be located or read."""


class FragmentLoadError(QemToolsError):
    """A matched fragment file could not be loaded by the asset loader."""
