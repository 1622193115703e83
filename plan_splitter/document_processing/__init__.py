"""
Document processing package for the survey plan splitter.
Handles outline extraction, plan reference classification, boundary
resolution, fallback segmentation and plan PDF materialization.
"""

from .boundary_resolver import BoundaryResolver
from plan_splitter.exceptions import (
    ParseFailure,
    PlanMaterializationError,
    SegmentationError,
    StorageError,
)
from .heuristic_segmenter import HeuristicSegmenter
from .outline_extractor import OutlineExtractor
from .page_text_scanner import PageTextScanner
from .plan_materializer import PlanMaterializer
from .plan_segmenter import PlanSegmenter, load_source_document
from .reference_classifier import ReferenceClassifier

__all__ = [
    "BoundaryResolver",
    "HeuristicSegmenter",
    "OutlineExtractor",
    "PageTextScanner",
    "PlanMaterializer",
    "PlanSegmenter",
    "ReferenceClassifier",
    "load_source_document",
    "ParseFailure",
    "PlanMaterializationError",
    "SegmentationError",
    "StorageError",
]
