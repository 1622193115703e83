"""
Source document pre-checks.

Rejects uploads that are obviously not a PDF before PyPDF2 is asked to parse
them. Encryption is not checked here; the parser decides whether it can open
the document.
"""

import logging
from typing import Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE_MB = 200

# Some producers emit junk before the header; readers accept it within 1KB
HEADER_SEARCH_BYTES = 1024
PDF_HEADERS = (b"%PDF-1.", b"%PDF-2.")


def check_source_bytes(
    content: bytes, max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB
) -> Tuple[bool, str]:
    """
    Check that source bytes look like a PDF worth parsing.

    Messages do not name the file; callers add that context.

    Args:
        content: Source document bytes
        max_file_size_mb: Upload size limit in megabytes

    Returns:
        Tuple of (is_valid, message)
    """
    if not content:
        return False, "source document is empty"

    size_mb = len(content) / (1024 * 1024)
    if len(content) > max_file_size_mb * 1024 * 1024:
        return False, f"source document is {size_mb:.1f}MB, limit is {max_file_size_mb}MB"

    header = content[:HEADER_SEARCH_BYTES]
    if not any(marker in header for marker in PDF_HEADERS):
        return False, f"no PDF header in the first {HEADER_SEARCH_BYTES} bytes"

    if not content.rstrip().endswith(b"%%EOF"):
        # PyPDF2 recovers many truncated files
        logger.warning("Source document has no EOF marker and may be truncated")

    return True, f"PDF header found ({size_mb:.1f}MB)"
