"""
Page text scanning module.
Looks for plan references in the text layer of each page, for documents
that have neither bookmarks nor references in their filename.
"""

import io
import logging
from typing import List, Optional, Tuple

import pdfplumber

from plan_splitter.document_processing.reference_classifier import ReferenceClassifier

logger = logging.getLogger(__name__)


class PageTextScanner:
    """Finds the first plan reference printed on each page"""

    def __init__(self, classifier: Optional[ReferenceClassifier] = None, max_pages: int = 50):
        self.classifier = classifier or ReferenceClassifier()
        self.max_pages = max_pages

    def scan(self, pdf_content: bytes) -> List[Tuple[str, int]]:
        """Return (reference, page) markers where the printed reference changes

        Args:
            pdf_content: PDF file content as bytes

        Returns:
            (reference token, 1-based page) pairs in page order, suitable for
            BoundaryResolver.resolve(); empty when no page carries a reference
            (e.g. scanned pages without a text layer)
        """
        markers: List[Tuple[str, int]] = []
        previous: Optional[str] = None

        for page_number, text in self.extract_page_texts(pdf_content):
            references = self.classifier.extract_references(text)
            if not references:
                continue
            token = references[0].token
            if token != previous:
                markers.append((token, page_number))
                logger.debug(f"Page {page_number}: plan reference {token}")
                previous = token

        logger.info(f"Page text scan found {len(markers)} plan reference markers")
        return markers

    def extract_page_texts(self, pdf_content: bytes) -> List[Tuple[int, str]]:
        """Extract (page number, text) for up to max_pages pages using pdfplumber"""
        texts = []

        with pdfplumber.open(io.BytesIO(pdf_content)) as pdf:
            for page_number, page in enumerate(pdf.pages[: self.max_pages], 1):
                try:
                    page_text = page.extract_text() or ""
                except Exception as e:
                    logger.debug(f"Error extracting page {page_number}: {str(e)}")
                    continue
                texts.append((page_number, page_text))

        return texts
