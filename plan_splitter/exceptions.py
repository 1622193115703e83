"""
Exceptions raised by the plan segmentation engine.

Only ParseFailure escapes PlanSegmenter.segment(); the others are caught per
plan and reported in SegmentationResult.failures.
"""

from typing import Optional


class SegmentationError(Exception):
    """Base class for segmentation errors"""

    pass


class ParseFailure(SegmentationError):
    """The source bytes are not a usable PDF, or it has no pages"""

    def __init__(self, message: str, filename: Optional[str] = None):
        self.filename = filename
        super().__init__(f"{filename}: {message}" if filename else message)


class PlanMaterializationError(SegmentationError):
    """Copying a plan's page range into a new document failed"""

    def __init__(self, reference: str, message: str):
        self.reference = reference
        super().__init__(f"Plan {reference}: {message}")


class StorageError(SegmentationError):
    """A storage or metadata write failed"""

    pass
