"""
PDF outline (bookmark) extraction module.
Reads the bookmark tree of a parsed PDF and resolves every node to a page.
"""

import logging
from typing import Any, List, Optional

from plan_splitter.models.plan_models import OutlineEntry

logger = logging.getLogger(__name__)


class OutlineExtractor:
    """Flattens a PDF outline into (title, page) entries in manuscript order"""

    def extract(self, reader: Any) -> List[OutlineEntry]:
        """Extract the outline as a flat, depth-first list

        Args:
            reader: Parsed PyPDF2 PdfReader

        Returns:
            OutlineEntry list in declaration order; empty when the document
            has no outline. Entries whose destination cannot be resolved are
            kept with page=None.
        """
        return self.flatten(self.extract_tree(reader))

    def extract_tree(self, reader: Any) -> List[OutlineEntry]:
        """Extract the outline keeping the bookmark hierarchy"""
        try:
            outline = reader.outline
        except Exception as e:
            # A damaged outline is treated as no outline at all
            logger.warning(f"Could not read document outline: {str(e)}")
            return []

        if not outline:
            logger.info("No bookmarks found in document")
            return []

        tree = self._build_entries(reader, outline, level=0)
        logger.info(f"Found {len(tree)} top-level bookmarks")
        return tree

    def flatten(self, entries: List[OutlineEntry]) -> List[OutlineEntry]:
        """Depth-first, pre-order walk of an entry tree"""
        flat: List[OutlineEntry] = []
        for entry in entries:
            flat.append(entry)
            flat.extend(self.flatten(entry.children))
        return flat

    def _build_entries(self, reader: Any, items: List[Any], level: int) -> List[OutlineEntry]:
        """Convert PyPDF2 outline items; a nested list holds the previous item's children"""
        entries: List[OutlineEntry] = []

        for item in items:
            if isinstance(item, list):
                children = self._build_entries(reader, item, level + 1)
                if entries:
                    entries[-1].children.extend(children)
                else:
                    # Children with no parent item stay in place
                    entries.extend(children)
                continue

            title = str(getattr(item, "title", None) or "").strip()
            page = self._resolve_page(reader, item, title)
            entries.append(OutlineEntry(title=title, page=page, level=level))
            logger.debug(f"Bookmark '{title}' (level {level}) -> page {page}")

        return entries

    def _resolve_page(self, reader: Any, item: Any, title: str) -> Optional[int]:
        """Resolve a bookmark destination to a 1-based page number"""
        try:
            page_index = reader.get_destination_page_number(item)
        except Exception as e:
            logger.warning(f"Could not resolve destination of bookmark '{title}': {str(e)}")
            return None

        if page_index is None or page_index < 0:
            logger.warning(f"Bookmark '{title}' points to no page in this document")
            return None

        return page_index + 1
