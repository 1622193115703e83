"""
Unit tests for the boundary resolver
"""

import pytest

from plan_splitter.document_processing.boundary_resolver import UNTITLED_REFERENCE, BoundaryResolver
from plan_splitter.models.plan_models import OutlineEntry, Provenance


def spans(boundaries):
    return [(b.reference, b.start_page, b.end_page) for b in boundaries]


def assert_covers(boundaries, total_pages):
    """Boundaries are contiguous, non-overlapping and cover 1..total_pages"""
    assert boundaries[0].start_page == 1
    assert boundaries[-1].end_page == total_pages
    for previous, current in zip(boundaries, boundaries[1:]):
        assert current.start_page == previous.end_page + 1
    assert sum(b.page_count for b in boundaries) == total_pages


class TestBoundaryResolver:
    """Test suite for BoundaryResolver"""

    @pytest.fixture
    def resolver(self):
        return BoundaryResolver()

    def test_each_bookmark_opens_a_plan(self, resolver):
        boundaries = resolver.resolve(
            [("432367-1", 1), ("432367-2", 4), ("432367-3", 9)], total_pages=12
        )
        assert spans(boundaries) == [
            ("432367-1", 1, 3),
            ("432367-2", 4, 8),
            ("432367-3", 9, 12),
        ]
        assert all(b.provenance == Provenance.OUTLINE for b in boundaries)
        assert boundaries[0].title == "Plan 432367-1"

    def test_repeated_bookmarks_continue_the_plan(self, resolver):
        boundaries = resolver.resolve(
            [("DP 4021", 1), ("DP 4021", 3), ("DP 4022", 6)], total_pages=10
        )
        assert spans(boundaries) == [("4021", 1, 5), ("4022", 6, 10)]
        assert boundaries[0].title == "DP 4021"

    def test_duplicate_bookmarks_on_same_page(self, resolver):
        boundaries = resolver.resolve(
            [("432367-1", 1), ("432367-1", 1), ("432367-2", 6)], total_pages=10
        )
        assert spans(boundaries) == [("432367-1", 1, 5), ("432367-2", 6, 10)]

    def test_first_bookmark_after_page_one(self, resolver):
        boundaries = resolver.resolve([("432367-1", 3), ("432367-2", 6)], total_pages=8)
        assert spans(boundaries) == [("432367-1", 1, 5), ("432367-2", 6, 8)]

    def test_out_of_order_bookmarks_are_sorted_by_page(self, resolver):
        boundaries = resolver.resolve([("222222", 5), ("111111", 1)], total_pages=8)
        assert spans(boundaries) == [("111111", 1, 4), ("222222", 5, 8)]

    def test_same_page_later_bookmark_wins(self, resolver):
        boundaries = resolver.resolve(
            [("111111", 1), ("222222", 4), ("333333", 4)], total_pages=6
        )
        assert spans(boundaries) == [("111111", 1, 3), ("333333", 4, 6)]

    def test_same_page_collision_merges_with_previous_plan(self, resolver):
        boundaries = resolver.resolve(
            [("111111", 1), ("222222", 4), ("111111", 4)], total_pages=6
        )
        assert spans(boundaries) == [("111111", 1, 6)]

    def test_unrecognised_title_becomes_reference(self, resolver):
        boundaries = resolver.resolve([("Cover sheet", 1), ("DP 5", 2)], total_pages=3)
        assert spans(boundaries) == [("Cover sheet", 1, 1), ("5", 2, 3)]

    def test_untitled_bookmark(self, resolver):
        boundaries = resolver.resolve([("  ", 1)], total_pages=2)
        assert spans(boundaries) == [(UNTITLED_REFERENCE, 1, 2)]

    def test_pages_outside_document_are_ignored(self, resolver):
        boundaries = resolver.resolve(
            [("111111", 0), ("222222", 2), ("333333", 9)], total_pages=5
        )
        assert spans(boundaries) == [("222222", 1, 5)]

    def test_no_pairs(self, resolver):
        assert resolver.resolve([], total_pages=5) == []
        assert resolver.resolve([("111111", 7)], total_pages=5) == []

    def test_provenance_is_applied(self, resolver):
        boundaries = resolver.resolve([("111111", 1), ("222222", 2)], 3, Provenance.TEXT)
        assert {b.provenance for b in boundaries} == {Provenance.TEXT}
        assert not any(b.needs_review for b in boundaries)

    @pytest.mark.parametrize("pairs,total_pages", [
        ([("111111", 1)], 1),
        ([("111111", 2), ("222222", 2), ("333333", 3)], 3),
        ([("DP 1", 1), ("DP 2", 2), ("DP 1", 3), ("DP 3", 10)], 12),
        ([("PS 4", 7), ("PS 5", 3), ("PS 6", 7)], 7),
        ([("A", 1), ("B", 1), ("C", 1)], 4),
    ])
    def test_boundaries_cover_document(self, resolver, pairs, total_pages):
        assert_covers(resolver.resolve(pairs, total_pages), total_pages)

    def test_resolve_outline_skips_unusable_entries(self, resolver):
        entries = [
            OutlineEntry(title="Plans", page=None),
            OutlineEntry(title="432367-1", page=1, level=1),
            OutlineEntry(title="broken", page=40, level=1),
            OutlineEntry(title="432367-2", page=3, level=1),
        ]
        assert resolver.usable_pairs(entries, 4) == [("432367-1", 1), ("432367-2", 3)]
        assert spans(resolver.resolve_outline(entries, 4)) == [
            ("432367-1", 1, 2),
            ("432367-2", 3, 4),
        ]
