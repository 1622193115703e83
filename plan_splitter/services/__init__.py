from .plan_storage import (
    InMemoryMetadataStore,
    InMemoryPlanStorage,
    JsonlMetadataStore,
    LocalPlanStorage,
    MetadataStore,
    PlanStorage,
)

__all__ = [
    "InMemoryMetadataStore",
    "InMemoryPlanStorage",
    "JsonlMetadataStore",
    "LocalPlanStorage",
    "MetadataStore",
    "PlanStorage",
]
