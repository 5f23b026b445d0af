from skillshelf.imports.models import ImportRequest, RemoteLocator
from skillshelf.imports.service import ImportPipeline
from skillshelf.imports.snapshot import GitSnapshotFetcher, ISnapshotFetcher

__all__ = [
    "GitSnapshotFetcher",
    "ISnapshotFetcher",
    "ImportPipeline",
    "ImportRequest",
    "RemoteLocator",
]
