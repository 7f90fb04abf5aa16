"""Workspace-wide symbol indexing."""

from workspace.index import CancellationToken, IndexEntry, WorkspaceIndex
from workspace.source import DocumentSource, FileSystemSource, InMemorySource

__all__ = [
    "CancellationToken",
    "DocumentSource",
    "FileSystemSource",
    "InMemorySource",
    "IndexEntry",
    "WorkspaceIndex",
]
