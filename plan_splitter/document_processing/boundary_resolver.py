"""
Boundary Resolver
Turns ordered (bookmark title, start page) pairs into contiguous plan
boundaries covering the whole document.
"""

import logging
from functools import reduce
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from plan_splitter.document_processing.reference_classifier import ReferenceClassifier
from plan_splitter.models.plan_models import OutlineEntry, PlanBoundary, Provenance

logger = logging.getLogger(__name__)

UNTITLED_REFERENCE = "UNTITLED"


class _Opening(NamedTuple):
    """A boundary whose end page is not known yet"""
    reference: str
    title: str
    start_page: int


class _Marker(NamedTuple):
    reference: str
    title: str
    page: int


class BoundaryResolver:
    """Resolves outline entries into non-overlapping plan boundaries"""

    def __init__(self, classifier: Optional[ReferenceClassifier] = None):
        self.classifier = classifier or ReferenceClassifier()

    def resolve_outline(self, entries: Iterable[OutlineEntry], total_pages: int) -> List[PlanBoundary]:
        """Resolve extractor output, skipping entries without a usable page"""
        return self.resolve(self.usable_pairs(entries, total_pages), total_pages)

    def usable_pairs(self, entries: Iterable[OutlineEntry], total_pages: int) -> List[Tuple[str, int]]:
        """(title, page) for entries that point inside the document"""
        pairs = []
        for entry in entries:
            if entry.page is None or not 1 <= entry.page <= total_pages:
                logger.debug(f"Skipping bookmark '{entry.title}' with unusable page {entry.page}")
                continue
            pairs.append((entry.title, entry.page))
        return pairs

    def resolve(
        self,
        pairs: Sequence[Tuple[str, int]],
        total_pages: int,
        provenance: Provenance = Provenance.OUTLINE,
    ) -> List[PlanBoundary]:
        """
        Build plan boundaries from bookmarks.

        Every bookmark either opens a new boundary or continues the current
        one when it names the same plan. The first boundary always starts at
        page 1 and the last one ends at total_pages.

        Args:
            pairs: (label, 1-based page) in manuscript order
            total_pages: Page count of the source document
            provenance: Tag for the resulting boundaries

        Returns:
            Boundaries in page order, or an empty list when there are no pairs
        """
        if not pairs or total_pages < 1:
            return []

        markers = [
            self._to_marker(label, page)
            for label, page in pairs
            if page is not None and 1 <= page <= total_pages
        ]
        if not markers:
            return []
        # Stable sort keeps declaration order for bookmarks on the same page
        markers.sort(key=lambda marker: marker.page)

        openings = reduce(self._step, markers, ())
        boundaries = self._close(openings, total_pages, provenance)

        logger.info(
            f"Resolved {len(pairs)} bookmarks into {len(boundaries)} plans: "
            + ", ".join(f"{b.reference} ({b.start_page}-{b.end_page})" for b in boundaries)
        )
        return boundaries

    def _to_marker(self, label: str, page: int) -> _Marker:
        label = (label or "").strip()
        classified = self.classifier.classify(label)
        if classified is not None:
            reference = classified.token
        elif label:
            # Unrecognised notation: the whole title is the reference
            reference = label
        else:
            logger.warning(f"Untitled bookmark on page {page}")
            reference = UNTITLED_REFERENCE

        title = label if label and label != reference else f"Plan {reference}"
        return _Marker(reference=reference, title=title, page=page)

    @staticmethod
    def _step(openings: Tuple[_Opening, ...], marker: _Marker) -> Tuple[_Opening, ...]:
        """Fold one bookmark into the boundaries opened so far"""
        if not openings:
            # Pages before the first bookmark belong to the first plan
            return (_Opening(marker.reference, marker.title, 1),)

        current = openings[-1]
        if marker.reference == current.reference:
            logger.debug(f"Continuing plan '{current.reference}' at page {marker.page}")
            return openings

        if marker.page <= current.start_page:
            # Two plans cannot start on the same page; the later bookmark wins
            logger.info(
                f"Bookmark '{marker.title}' starts on the same page as "
                f"'{current.reference}' (page {current.start_page}); using '{marker.reference}'"
            )
            earlier = openings[:-1]
            if earlier and earlier[-1].reference == marker.reference:
                return earlier
            return earlier + (_Opening(marker.reference, marker.title, current.start_page),)

        logger.debug(f"Started new plan '{marker.reference}' at page {marker.page}")
        return openings + (_Opening(marker.reference, marker.title, marker.page),)

    @staticmethod
    def _close(
        openings: Tuple[_Opening, ...], total_pages: int, provenance: Provenance
    ) -> List[PlanBoundary]:
        """Each boundary ends the page before the next one starts"""
        boundaries = []
        for index, opening in enumerate(openings):
            if index + 1 < len(openings):
                end_page = openings[index + 1].start_page - 1
            else:
                end_page = total_pages
            boundaries.append(PlanBoundary(
                reference=opening.reference,
                title=opening.title,
                start_page=opening.start_page,
                end_page=end_page,
                provenance=provenance,
            ))
        return boundaries
