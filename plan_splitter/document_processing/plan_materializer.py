"""
Plan Materializer
Copies a boundary's page range out of the source PDF into a standalone PDF.
"""

import io
import logging
import re
import uuid
from datetime import date
from typing import Optional

from PyPDF2 import PdfReader, PdfWriter

from plan_splitter.config.settings import SegmentationSettings, settings as app_settings
from plan_splitter.exceptions import PlanMaterializationError
from plan_splitter.models.plan_models import PlanArtifact, PlanBoundary, SourceDocument

logger = logging.getLogger(__name__)


class PlanMaterializer:
    """Builds one PDF per plan boundary without touching the source document"""

    def __init__(self, settings: Optional[SegmentationSettings] = None, key_prefix: str = "projects"):
        self.settings = settings or app_settings.segmentation
        self.key_prefix = key_prefix

    def materialize(
        self,
        source: SourceDocument,
        boundary: PlanBoundary,
        project_id: str = "unassigned",
    ) -> PlanArtifact:
        """
        Build the standalone PDF for one plan.

        Args:
            source: Parsed source document; it is only read from
            boundary: Inclusive 1-based page range and reference of the plan
            project_id: Project the plan file is stored under

        Returns:
            PlanArtifact with the new PDF bytes and its storage key

        Raises:
            PlanMaterializationError: If the page range is outside the source
                or a page cannot be copied
        """
        if boundary.end_page > source.page_count:
            raise PlanMaterializationError(
                boundary.reference,
                f"pages {boundary.start_page}-{boundary.end_page} exceed "
                f"document length {source.page_count}",
            )

        reader = source.reader
        if reader is None:
            reader = PdfReader(io.BytesIO(source.content))
            if reader.is_encrypted:
                reader.decrypt("")
        writer = PdfWriter()

        # PyPDF2 pages are 0-indexed
        for page_index in range(boundary.start_page - 1, boundary.end_page):
            try:
                writer.add_page(reader.pages[page_index])
            except Exception as e:
                raise PlanMaterializationError(
                    boundary.reference,
                    f"could not copy page {page_index + 1}: {str(e)}",
                ) from e

        writer.add_metadata({
            "/Title": boundary.title,
            "/Subject": f"Survey Plan {boundary.reference}",
            "/Creator": self.settings.pdf_creator,
        })

        output = io.BytesIO()
        try:
            writer.write(output)
        except Exception as e:
            raise PlanMaterializationError(
                boundary.reference, f"could not write plan PDF: {str(e)}"
            ) from e

        artifact = PlanArtifact(
            boundary=boundary,
            content=output.getvalue(),
            storage_key=self.storage_key(project_id, boundary.reference),
        )
        logger.info(
            f"Materialized plan {boundary.reference}: pages "
            f"{boundary.start_page}-{boundary.end_page} ({artifact.byte_size} bytes)"
        )
        return artifact

    def storage_key(self, project_id: str, reference: str) -> str:
        """projects/<project>/plans/plan_<ref>_<date>_<suffix>.pdf"""
        clean_ref = re.sub(r"[^a-zA-Z0-9-]", "_", reference.strip()) or "plan"
        suffix = uuid.uuid4().hex[:8]
        return (
            f"{self.key_prefix}/{project_id}/plans/"
            f"plan_{clean_ref}_{date.today().isoformat()}_{suffix}.pdf"
        )
