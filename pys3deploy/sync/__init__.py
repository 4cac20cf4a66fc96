"""Sync engine for pys3deploy - deploy a directory tree to a bucket."""

from .comparator import FileComparator, RemoteListing, SyncAction, SyncDecision
from .engine import SyncEngine
from .operations import SyncOperations
from .planner import UploadMetadata, UploadPlanner, UploadRule
from .reconciler import Reconciler
from .report import DeleteReport, SyncFailure, SyncReport
from .scanner import DirectoryScanner, LocalFile
from .twins import ResolvedCandidate, TwinResolver

__all__ = [
    "SyncEngine",
    "SyncOperations",
    "DirectoryScanner",
    "LocalFile",
    "TwinResolver",
    "ResolvedCandidate",
    "FileComparator",
    "RemoteListing",
    "SyncAction",
    "SyncDecision",
    "UploadPlanner",
    "UploadMetadata",
    "UploadRule",
    "Reconciler",
    "SyncReport",
    "DeleteReport",
    "SyncFailure",
]
