class ExtractionFailure(ValueError):
    """Raised when the input tree itself is unusable (no root, bad viewport)."""


class SnapshotError(ValueError):
    """Raised when a snapshot file or payload cannot be decoded into a tree."""
