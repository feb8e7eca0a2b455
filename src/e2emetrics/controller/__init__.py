"""Host adapters that trigger coverage reconciles."""

from e2emetrics.controller.sync import PipelineCoverageSyncer, SyncRequest, SyncResponse

__all__ = ["PipelineCoverageSyncer", "SyncRequest", "SyncResponse"]
