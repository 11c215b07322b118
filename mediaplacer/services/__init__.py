"""Import services: resolution, locking, transfer and scheduling."""
from .file_ops import FileManager
from .importer import ImporterDependencies, MediaImporter, suffixed_candidates
from .locks import DestinationLockManager
from .normalizer import normalize, textilize
from .resolver import DestinationResolver, build_path, classify, extract_timestamp
from .scanner import TaskScheduler, run_import, verify_directory
from .stats import RunStatistics

__all__ = [
    "FileManager",
    "ImporterDependencies",
    "MediaImporter",
    "suffixed_candidates",
    "DestinationLockManager",
    "normalize",
    "textilize",
    "DestinationResolver",
    "build_path",
    "classify",
    "extract_timestamp",
    "TaskScheduler",
    "run_import",
    "verify_directory",
    "RunStatistics",
]
