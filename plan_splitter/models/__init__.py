from .plan_models import (
    MaterializedPlan,
    OutlineEntry,
    PlanArtifact,
    PlanBoundary,
    PlanFailure,
    PlanRecord,
    PlanReference,
    Provenance,
    ReferenceCategory,
    SegmentationResult,
    SegmentationStrategy,
    SourceDocument,
)

__all__ = [
    "MaterializedPlan",
    "OutlineEntry",
    "PlanArtifact",
    "PlanBoundary",
    "PlanFailure",
    "PlanRecord",
    "PlanReference",
    "Provenance",
    "ReferenceCategory",
    "SegmentationResult",
    "SegmentationStrategy",
    "SourceDocument",
]
