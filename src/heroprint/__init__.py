from .engine import extract, extract_snapshot, HeroExtractor
from .errors import ExtractionFailure, SnapshotError
from .model import Fingerprint

__version__ = "0.1.0"

__all__ = [
    "extract",
    "extract_snapshot",
    "HeroExtractor",
    "ExtractionFailure",
    "SnapshotError",
    "Fingerprint",
]
