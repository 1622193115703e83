"""
Plan Segmentation Orchestrator
Splits a survey search document that bundles several plans into one PDF per
plan.

Stages:
  PARSE -> OUTLINE_ATTEMPT -> FILENAME_ATTEMPT -> [PAGE_TEXT_ATTEMPT]
        -> HEURISTIC_FALLBACK -> MATERIALIZE_EACH -> DONE
The first attempt that yields boundaries wins. Only a parse failure aborts a
run; a plan that cannot be copied or stored is reported in the result's
failures and the remaining plans are still processed.
"""

import io
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from PyPDF2 import PasswordType, PdfReader

from plan_splitter.config.settings import Settings, settings as app_settings
from plan_splitter.document_processing.boundary_resolver import BoundaryResolver
from plan_splitter.document_processing.heuristic_segmenter import HeuristicSegmenter
from plan_splitter.document_processing.outline_extractor import OutlineExtractor
from plan_splitter.document_processing.page_text_scanner import PageTextScanner
from plan_splitter.document_processing.plan_materializer import PlanMaterializer
from plan_splitter.document_processing.reference_classifier import ReferenceClassifier
from plan_splitter.exceptions import ParseFailure, StorageError
from plan_splitter.models.plan_models import (
    MaterializedPlan,
    PlanArtifact,
    PlanBoundary,
    PlanFailure,
    PlanRecord,
    Provenance,
    SegmentationResult,
    SegmentationStrategy,
    SourceDocument,
)
from plan_splitter.services.plan_storage import MetadataStore, PlanStorage
from plan_splitter.utils.logger import SegmentationRunLogger
from plan_splitter.utils.pdf_validator import check_source_bytes

logger = logging.getLogger(__name__)


def load_source_document(content: bytes, filename: str, max_file_size_mb: int = 200) -> SourceDocument:
    """
    Parse the source bytes once for the whole run.

    Encrypted documents are opened with the empty user password, which is
    how permission-only PDFs are protected.

    Raises:
        ParseFailure: If the bytes are not a readable PDF, it needs a
            password, or it has no pages
    """
    is_valid, message = check_source_bytes(content, max_file_size_mb)
    if not is_valid:
        raise ParseFailure(message, filename)

    try:
        reader = PdfReader(io.BytesIO(content))
        if reader.is_encrypted:
            if reader.decrypt("") == PasswordType.NOT_DECRYPTED:
                raise ParseFailure("document requires a password", filename)
            logger.info(f"{filename} is encrypted; opened with the empty user password")
        page_count = len(reader.pages)
    except ParseFailure:
        raise
    except Exception as e:
        raise ParseFailure(f"could not parse PDF: {str(e)}", filename) from e

    if page_count == 0:
        raise ParseFailure("document has no pages", filename)

    logger.info(f"Loaded {filename}: {page_count} pages, {len(content)} bytes")
    return SourceDocument(content=content, filename=filename, page_count=page_count, reader=reader)


class PlanSegmenter:
    """Main entry point: segment a source document and store each plan"""

    def __init__(
        self,
        storage: PlanStorage,
        metadata_store: Optional[MetadataStore] = None,
        settings: Optional[Settings] = None,
        materializer: Optional[PlanMaterializer] = None,
    ):
        self.settings = settings or app_settings
        self.storage = storage
        self.metadata_store = metadata_store

        segmentation = self.settings.segmentation
        self.classifier = ReferenceClassifier()
        self.outline_extractor = OutlineExtractor()
        self.boundary_resolver = BoundaryResolver(self.classifier)
        self.heuristic_segmenter = HeuristicSegmenter(self.classifier, segmentation)
        self.page_text_scanner = PageTextScanner(self.classifier, segmentation.text_scan_max_pages)
        self.materializer = materializer or PlanMaterializer(
            segmentation, key_prefix=self.settings.storage.key_prefix
        )

    def segment(
        self,
        source_bytes: bytes,
        filename: str,
        total_pages: Optional[int] = None,
        *,
        project_id: str = "unassigned",
        source_document_id: Optional[str] = None,
    ) -> SegmentationResult:
        """
        Split a multi-plan PDF into one stored PDF per plan.

        Args:
            source_bytes: The source PDF
            filename: Declared filename, used for reference extraction
            total_pages: Caller's page count; the parsed count wins if they differ
            project_id: Project the plans belong to
            source_document_id: Id of the source document record, if any

        Returns:
            SegmentationResult listing stored plans and per-plan failures

        Raises:
            ParseFailure: If the document cannot be parsed or has no pages
        """
        with SegmentationRunLogger(logger, filename, project_id) as run:
            if total_pages is not None and total_pages <= 0:
                raise ParseFailure("total page count is zero", filename)

            source = load_source_document(
                source_bytes, filename, self.settings.segmentation.max_file_size_mb
            )
            if total_pages is not None and total_pages != source.page_count:
                logger.warning(
                    f"Caller reported {total_pages} pages but {filename} has "
                    f"{source.page_count}; using {source.page_count}"
                )

            strategy, boundaries = self.plan_boundaries(source)
            result = SegmentationResult(
                source_filename=filename,
                total_pages=source.page_count,
                strategy=strategy,
                started_at=run.start_time,
            )

            for index, boundary in enumerate(boundaries, 1):
                logger.info(
                    f"Processing plan {index}/{len(boundaries)}: {boundary.reference} "
                    f"(pages {boundary.start_page}-{boundary.end_page})"
                )
                try:
                    result.materialized.append(
                        self._store_plan(source, boundary, project_id, source_document_id)
                    )
                except Exception as e:
                    logger.error(f"Error processing plan {boundary.reference}: {str(e)}")
                    result.failures.append(PlanFailure(
                        reference=boundary.reference,
                        reason=str(e) or type(e).__name__,
                        start_page=boundary.start_page,
                        end_page=boundary.end_page,
                    ))

            result.completed_at = datetime.now()
            logger.info(
                f"Segmentation of {filename} complete: {len(result.materialized)} plans stored, "
                f"{len(result.failures)} failed ({strategy.value})",
                extra={
                    'strategy': strategy.value,
                    'plans_materialized': len(result.materialized),
                    'plans_failed': len(result.failures),
                },
            )
            return result

    def plan_boundaries(self, source: SourceDocument) -> Tuple[SegmentationStrategy, List[PlanBoundary]]:
        """
        Decide plan boundaries without writing anything.

        Precedence: outline, filename references, page text (when enabled),
        size-tiered heuristic. The heuristic always yields at least one
        boundary for a non-empty document.
        """
        total_pages = source.page_count

        entries = self.outline_extractor.extract(source.reader)
        boundaries = self.boundary_resolver.resolve_outline(entries, total_pages)
        if boundaries:
            return SegmentationStrategy.OUTLINE, boundaries
        logger.info(f"No usable outline in {source.filename}; trying filename")

        boundaries = self.heuristic_segmenter.from_filename(total_pages, source.filename)
        if boundaries:
            return SegmentationStrategy.FILENAME, boundaries

        if self.settings.segmentation.scan_page_text:
            boundaries = self._boundaries_from_page_text(source)
            if boundaries:
                return SegmentationStrategy.PAGE_TEXT, boundaries

        logger.warning(
            f"No plan references found for {source.filename}; "
            f"falling back to heuristic segmentation"
        )
        return SegmentationStrategy.HEURISTIC, self.heuristic_segmenter.size_tiered(
            total_pages, source.filename
        )

    def _boundaries_from_page_text(self, source: SourceDocument) -> List[PlanBoundary]:
        try:
            markers = self.page_text_scanner.scan(source.content)
        except Exception as e:
            logger.warning(f"Page text scan failed for {source.filename}: {str(e)}")
            return []
        return self.boundary_resolver.resolve(markers, source.page_count, Provenance.TEXT)

    def _store_plan(
        self,
        source: SourceDocument,
        boundary: PlanBoundary,
        project_id: str,
        source_document_id: Optional[str],
    ) -> MaterializedPlan:
        """Materialize, upload and record one plan"""
        artifact = self.materializer.materialize(source, boundary, project_id)
        self.storage.upload(artifact.storage_key, artifact.content)

        if self.metadata_store is not None:
            try:
                self.metadata_store.save(self._record_for(artifact, project_id, source_document_id))
            except Exception as e:
                self._remove_orphan(artifact.storage_key)
                raise StorageError(f"Failed to save metadata for {boundary.reference}: {str(e)}") from e

        logger.info(f"Successfully processed plan: {boundary.reference}")
        return MaterializedPlan(
            reference=boundary.reference,
            title=boundary.title,
            pages=boundary.page_numbers,
            storage_key=artifact.storage_key,
            byte_size=artifact.byte_size,
            provenance=boundary.provenance,
        )

    def _record_for(
        self, artifact: PlanArtifact, project_id: str, source_document_id: Optional[str]
    ) -> PlanRecord:
        boundary = artifact.boundary
        return PlanRecord(
            project_id=project_id,
            source_document_id=source_document_id,
            reference_number=boundary.reference,
            title=boundary.title,
            storage_key=artifact.storage_key,
            page_numbers=boundary.page_numbers,
            byte_size=artifact.byte_size,
            provenance=boundary.provenance,
        )

    def _remove_orphan(self, storage_key: str) -> None:
        """Delete a stored file whose metadata record could not be written"""
        try:
            self.storage.delete(storage_key)
            logger.info(f"Removed orphaned plan file {storage_key}")
        except Exception as e:
            logger.error(f"Could not remove orphaned plan file {storage_key}: {str(e)}")
