"""
Plan Reference Classifier
Recognises survey plan reference numbers in bookmark titles, filenames and
page text.

Rules are tried in order, most specific first; the first rule that matches
wins and its captured group, trimmed, is the reference token. Tokens are
kept exactly as captured so leading zeros survive.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from plan_splitter.models.plan_models import PlanReference, ReferenceCategory

logger = logging.getLogger(__name__)

# Separators joining several references in one label, e.g. "100001-1, 100001-2"
COMPOSITE_SEPARATORS = re.compile(r"\s*[,&+]\s*")
PDF_EXTENSION = re.compile(r"\.pdf$", re.IGNORECASE)


@dataclass(frozen=True)
class ReferenceRule:
    category: ReferenceCategory
    regex: re.Pattern


def _p(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


REFERENCE_RULES: List[ReferenceRule] = [
    ReferenceRule(ReferenceCategory.NUMERIC_DASH, _p(r"\b(\d{6}-\d+)\b")),
    ReferenceRule(ReferenceCategory.LETTER_SIX_DIGIT, _p(r"\b([A-Z]\d{6})\b")),
    ReferenceRule(ReferenceCategory.SIX_DIGIT, _p(r"\b(\d{6})\b")),
    # Plan register prefixes
    ReferenceRule(ReferenceCategory.DEPOSITED_PLAN, _p(r"\bDP\s*(\d+)\b")),
    ReferenceRule(ReferenceCategory.PLAN_OF_SURVEY, _p(r"\bPS\s*(\d+)\b")),
    ReferenceRule(ReferenceCategory.CROWN_PLAN, _p(r"\bCP\s*(\d+)\b")),
    ReferenceRule(ReferenceCategory.PLAN_OF_TITLE, _p(r"\bPT\s*(\d+)\b")),
    ReferenceRule(ReferenceCategory.LAND_TITLES_OFFICE, _p(r"\bLTO\s*(\d+)\b")),
    ReferenceRule(ReferenceCategory.PLAN_NUMBER, _p(r"\bPlan\s+(\d+)\b")),
]


class ReferenceClassifier:
    """Extracts canonical plan reference tokens from free-form labels"""

    def __init__(self, rules: Optional[List[ReferenceRule]] = None):
        self.rules = rules if rules is not None else REFERENCE_RULES

    def classify(self, label: str) -> Optional[PlanReference]:
        """
        Classify a single label.

        Args:
            label: Bookmark title, filename or other short text

        Returns:
            PlanReference for the first matching rule, or None if no rule matches
        """
        if not label or not label.strip():
            return None

        for rule in self.rules:
            match = rule.regex.search(label)
            if match:
                token = match.group(1).strip()
                if token:
                    logger.debug(f"Classified '{label}' as {rule.category.value}: {token}")
                    return PlanReference(token=token, category=rule.category, label=label)

        logger.debug(f"No plan reference in '{label}'")
        return None

    def split_composite(self, text: str) -> List[str]:
        """Split a label joining several references with ',', '&' or '+'"""
        return [part.strip() for part in COMPOSITE_SEPARATORS.split(text) if part.strip()]

    def extract_references(self, text: str) -> List[PlanReference]:
        """
        Find every plan reference in a filename or block of text.

        Composite labels are split first. Within each part every rule is
        applied; a match overlapping text already claimed by a more specific
        rule is ignored (so "100001-1" does not also yield "100001").
        References come back in reading order without duplicates.

        Args:
            text: Filename (a trailing .pdf is ignored, underscores count as
                spaces) or page text

        Returns:
            List of PlanReference, possibly empty
        """
        if not text:
            return []

        # Underscores are word characters and would defeat the \b anchors
        text = PDF_EXTENSION.sub("", text.strip()).replace("_", " ")
        found: List[PlanReference] = []
        seen = set()

        for part in self.split_composite(text):
            for token, category in self._scan(part):
                if token in seen:
                    continue
                seen.add(token)
                found.append(PlanReference(token=token, category=category, label=part))

        if found:
            logger.debug(f"Extracted {len(found)} references from '{text[:80]}'")
        return found

    def _scan(self, part: str) -> List[Tuple[str, ReferenceCategory]]:
        claimed: List[Tuple[int, int]] = []
        hits: List[Tuple[int, str, ReferenceCategory]] = []

        for rule in self.rules:
            for match in rule.regex.finditer(part):
                start, end = match.span()
                if any(start < c_end and c_start < end for c_start, c_end in claimed):
                    continue
                token = match.group(1).strip()
                if not token:
                    continue
                claimed.append((start, end))
                hits.append((start, token, rule.category))

        hits.sort(key=lambda hit: hit[0])
        return [(token, category) for _, token, category in hits]
