"""
Plan Segmentation Models
Data shapes shared by the outline extractor, boundary resolver, materializer
and the segmentation orchestrator.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReferenceCategory(str, Enum):
    """Plan reference notations, most specific first"""
    NUMERIC_DASH = "numeric_dash"  # 432367-1
    LETTER_SIX_DIGIT = "letter_six_digit"  # H123456
    SIX_DIGIT = "six_digit"  # 134166
    DEPOSITED_PLAN = "deposited_plan"  # DP 4021
    PLAN_OF_SURVEY = "plan_of_survey"  # PS 12
    CROWN_PLAN = "crown_plan"  # CP 77
    PLAN_OF_TITLE = "plan_of_title"  # PT 301
    LAND_TITLES_OFFICE = "land_titles_office"  # LTO 9
    PLAN_NUMBER = "plan_number"  # Plan 123


class Provenance(str, Enum):
    """Where a boundary came from"""
    OUTLINE = "outline"
    FILENAME = "filename"
    TEXT = "text"
    HEURISTIC = "heuristic"


class SegmentationStrategy(str, Enum):
    """Which stage produced the boundaries of a run"""
    OUTLINE = "outline"
    FILENAME = "filename"
    PAGE_TEXT = "page_text"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class SourceDocument:
    """Immutable input to one segmentation run"""

    content: bytes = field(repr=False)
    filename: str
    page_count: int
    reader: Any = field(default=None, repr=False, compare=False)

    @property
    def byte_size(self) -> int:
        return len(self.content)


@dataclass
class OutlineEntry:
    """One bookmark node; page is 1-based and None when unresolvable"""

    title: str
    page: Optional[int]
    level: int = 0
    children: List["OutlineEntry"] = field(default_factory=list)


@dataclass(frozen=True)
class PlanReference:
    """Result of classifying a label"""

    token: str
    category: ReferenceCategory
    label: str


class PlanBoundary(BaseModel):
    """A page-contiguous span of the source document owned by one plan"""

    model_config = ConfigDict(frozen=True)

    reference: str = Field(min_length=1)
    title: str
    start_page: int  # 1-based
    end_page: int  # 1-based, inclusive
    provenance: Provenance = Provenance.OUTLINE

    @model_validator(mode="after")
    def check_page_range(self) -> "PlanBoundary":
        if self.start_page < 1:
            raise ValueError(f"start_page must be >= 1, got {self.start_page}")
        if self.end_page < self.start_page:
            raise ValueError(
                f"end_page {self.end_page} is before start_page {self.start_page}"
            )
        return self

    @property
    def page_count(self) -> int:
        return self.end_page - self.start_page + 1

    @property
    def page_numbers(self) -> List[int]:
        return list(range(self.start_page, self.end_page + 1))

    @property
    def needs_review(self) -> bool:
        """Synthesised boundaries should be checked by a person"""
        return self.provenance == Provenance.HEURISTIC


@dataclass
class PlanArtifact:
    """A standalone plan PDF built from one boundary"""

    boundary: PlanBoundary
    content: bytes = field(repr=False)
    storage_key: str = ""

    @property
    def byte_size(self) -> int:
        return len(self.content)


class PlanRecord(BaseModel):
    """Metadata record persisted after a plan file is stored"""
    project_id: str
    source_document_id: Optional[str] = None
    reference_number: str
    title: str
    storage_key: str
    page_numbers: List[int]
    byte_size: int
    provenance: Provenance
    created_at: datetime = Field(default_factory=datetime.now)


class MaterializedPlan(BaseModel):
    """A plan that was written to storage"""
    reference: str
    title: str
    pages: List[int]
    storage_key: str
    byte_size: int
    provenance: Provenance


class PlanFailure(BaseModel):
    """A plan that could not be materialized or stored"""
    reference: str
    reason: str
    start_page: Optional[int] = None
    end_page: Optional[int] = None


class SegmentationResult(BaseModel):
    """Outcome of segmenting one source document"""
    source_filename: str
    total_pages: int
    strategy: SegmentationStrategy
    materialized: List[MaterializedPlan] = Field(default_factory=list)
    failures: List[PlanFailure] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        """True when every planned boundary was stored"""
        return not self.failures

    @property
    def requires_review(self) -> bool:
        return any(p.provenance == Provenance.HEURISTIC for p in self.materialized)

    @property
    def boundaries(self) -> List[Tuple[str, int, int]]:
        """(reference, start, end) of every stored plan, in page order"""
        return [(p.reference, p.pages[0], p.pages[-1]) for p in self.materialized]

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()
