"""
Anchor finding over reconstructed rows using fuzzy matching.
"""
from typing import List, Optional, Dict
from rapidfuzz import fuzz
import logging

from .rows import Row

logger = logging.getLogger(__name__)


class AnchorMatch:
    """Represents a found anchor with its row and confidence."""
    def __init__(self, row: Row, index: int, confidence: float, target: str):
        self.row = row
        self.index = index
        self.confidence = confidence
        self.target = target

    def __repr__(self):
        return f"AnchorMatch('{self.target}', confidence={self.confidence:.1f}, index={self.index}, row={self.row})"


def find_anchor(rows: List[Row], target: str, fuzzy_threshold: float = 90) -> Optional[AnchorMatch]:
    """
    Find the row that best contains the target text.

    The first row containing the target verbatim wins. Otherwise the row with
    the highest partial ratio at or above the threshold is returned.

    Args:
        rows: Rows to search through
        target: Label text to find
        fuzzy_threshold: Minimum confidence score (0-100)

    Returns:
        AnchorMatch if found, None otherwise
    """
    for index, row in enumerate(rows):
        if target in row.text:
            return AnchorMatch(row, index, 100.0, target)

    best_match = None
    best_confidence = 0.0
    target_lower = target.lower()

    for index, row in enumerate(rows):
        row_text = row.text.lower()
        if len(row_text) < len(target_lower) * 0.8:
            continue

        confidence = fuzz.partial_ratio(target_lower, row_text)
        if confidence > best_confidence and confidence >= fuzzy_threshold:
            best_confidence = confidence
            best_match = AnchorMatch(row, index, confidence, target)

    if best_match:
        logger.debug(f"Fuzzy anchor match: {best_match}")
    return best_match


def find_anchors(rows: List[Row], targets: List[str],
                 fuzzy_threshold: float = 90) -> Dict[str, AnchorMatch]:
    """
    Find multiple anchors.

    Returns:
        Dictionary mapping target strings to AnchorMatch objects
    """
    results = {}

    for target in targets:
        match = find_anchor(rows, target, fuzzy_threshold)
        if match:
            results[target] = match
            logger.debug(f"Found anchor '{target}' with confidence {match.confidence:.1f}")
        else:
            logger.debug(f"Anchor '{target}' not found")

    return results


def next_row(rows: List[Row], anchor: AnchorMatch) -> Optional[Row]:
    """Return the row directly below an anchor row, if any."""
    index = anchor.index + 1
    return rows[index] if index < len(rows) else None
