"""
Shared pytest fixtures: small in-memory PDFs built with PyPDF2.
"""

import io
from typing import List, Optional, Sequence, Tuple

import pytest
from PyPDF2 import PdfWriter

# (title, 0-based page index, child bookmarks)
Bookmark = Tuple[str, int, Sequence["Bookmark"]]


def build_pdf(
    page_count: int,
    bookmarks: Optional[List[Bookmark]] = None,
    user_password: Optional[str] = None,
    owner_password: Optional[str] = None,
) -> bytes:
    """Blank letter-size pages with an optional bookmark tree, optionally encrypted"""
    writer = PdfWriter()
    for _ in range(page_count):
        writer.add_blank_page(width=612, height=792)

    def add(items, parent=None):
        for title, page_index, children in items:
            item = writer.add_outline_item(title, page_index, parent=parent)
            add(children, parent=item)

    add(bookmarks or [])
    if owner_password is not None:
        writer.encrypt(user_password=user_password or "", owner_password=owner_password)

    output = io.BytesIO()
    writer.write(output)
    return output.getvalue()


@pytest.fixture
def make_pdf():
    """Factory fixture returning build_pdf"""
    return build_pdf
