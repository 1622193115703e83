"""
Heuristic Segmenter
Fallback segmentation for documents without usable bookmarks.

Two strategies, tried in order:
  1. Plan references found in the filename; pages are shared evenly
     between them.
  2. Size-tiered guess; the page range is cut into equal parts with
     references synthesised from the filename. These boundaries are tagged
     heuristic so they can be flagged for review.
"""

import logging
import math
import re
from typing import List, Optional, Sequence, Tuple

from plan_splitter.config.settings import SegmentationSettings, settings as app_settings
from plan_splitter.document_processing.reference_classifier import ReferenceClassifier
from plan_splitter.models.plan_models import PlanBoundary, PlanReference, Provenance

logger = logging.getLogger(__name__)

FALLBACK_PREFIX = "PLAN"


class HeuristicSegmenter:
    """Partitions a document when the outline gives no plan boundaries"""

    def __init__(
        self,
        classifier: Optional[ReferenceClassifier] = None,
        settings: Optional[SegmentationSettings] = None,
    ):
        self.classifier = classifier or ReferenceClassifier()
        self.settings = settings or app_settings.segmentation

    def segment(self, total_pages: int, filename: str) -> List[PlanBoundary]:
        """Filename references if any, otherwise the size-tiered guess"""
        boundaries = self.from_filename(total_pages, filename)
        if boundaries:
            return boundaries
        return self.size_tiered(total_pages, filename)

    def from_filename(self, total_pages: int, filename: str) -> List[PlanBoundary]:
        """
        Build boundaries from plan references in the filename.

        Args:
            total_pages: Page count of the source document
            filename: Declared filename, e.g. "Survey 100001-1, 100001-2.pdf"

        Returns:
            One boundary per reference, or an empty list if none were found
        """
        references = self.classifier.extract_references(filename or "")
        if not references:
            logger.info(f"No plan references found in filename '{filename}'")
            return []

        logger.info(
            f"Found plan references in filename: {[r.token for r in references]}"
        )
        return self.from_references(references, total_pages, Provenance.FILENAME)

    def from_references(
        self,
        references: Sequence[PlanReference],
        total_pages: int,
        provenance: Provenance,
    ) -> List[PlanBoundary]:
        """Share the pages evenly between the given references, in order"""
        if not references or total_pages < 1:
            return []

        if len(references) > total_pages:
            dropped = [r.token for r in references[total_pages:]]
            logger.warning(
                f"{len(references)} references for {total_pages} pages; "
                f"no pages left for {dropped}"
            )
            references = references[:total_pages]

        ranges = self.split_evenly(total_pages, len(references))
        return [
            PlanBoundary(
                reference=reference.token,
                title=f"Survey Plan {reference.token}",
                start_page=start,
                end_page=end,
                provenance=provenance,
            )
            for reference, (start, end) in zip(references, ranges)
        ]

    def size_tiered(self, total_pages: int, filename: str) -> List[PlanBoundary]:
        """
        Guess plan boundaries from the document size alone.

        Small documents are a single plan. Larger ones are cut into parts of
        roughly the tier's target size; the target grows with the document
        because a fixed page count is wrong at both extremes.
        """
        if total_pages < 1:
            return []

        if total_pages <= self.settings.small_document_max_pages:
            plan_count = 1
            logger.info(f"Small document ({total_pages} pages) - single plan")
        else:
            target = self.settings.pages_per_plan_for(total_pages)
            plan_count = math.ceil(total_pages / target)
            logger.info(
                f"No plan signal in {total_pages} pages - "
                f"~{target} pages per plan, {plan_count} plans"
            )

        if plan_count == 1:
            return [PlanBoundary(
                reference=self.synthesize_reference(filename, 1),
                title="Survey Plan",
                start_page=1,
                end_page=total_pages,
                provenance=Provenance.HEURISTIC,
            )]

        return [
            PlanBoundary(
                reference=self.synthesize_reference(filename, index),
                title=f"Survey Plan {index}",
                start_page=start,
                end_page=end,
                provenance=Provenance.HEURISTIC,
            )
            for index, (start, end) in enumerate(
                self.split_evenly(total_pages, plan_count), start=1
            )
        ]

    def synthesize_reference(self, filename: str, index: int) -> str:
        """E.g. ("bundle scan.pdf", 2) -> "BUNDLE_SCA_002" """
        stem = re.sub(r"\.pdf$", "", filename or "", flags=re.IGNORECASE)
        prefix = re.sub(r"[^a-zA-Z0-9]", "_", stem)[: self.settings.reference_prefix_length].upper()
        return f"{prefix or FALLBACK_PREFIX}_{str(index).zfill(self.settings.sequence_padding)}"

    @staticmethod
    def split_evenly(total_pages: int, count: int) -> List[Tuple[int, int]]:
        """
        Inclusive 1-based page ranges for count parts of equal size.

        The remainder goes to the final part, e.g. (10, 3) -> 1-3, 4-6, 7-10.
        """
        count = max(1, min(count, total_pages))
        size = total_pages // count
        ranges = []
        for index in range(count):
            start = index * size + 1
            end = total_pages if index == count - 1 else start + size - 1
            ranges.append((start, end))
        return ranges
