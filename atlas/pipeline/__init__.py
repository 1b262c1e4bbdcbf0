"""Query pipeline orchestration."""

from atlas.pipeline.orchestrator import AtlasQueryPipeline, PipelineOptions

__all__ = ["AtlasQueryPipeline", "PipelineOptions"]
