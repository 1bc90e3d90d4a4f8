"""
Reconstruction of logical table rows from positioned text fragments.
"""
from typing import List, Iterable
import logging

from ..models.schema import TextItem

logger = logging.getLogger(__name__)

DEFAULT_Y_TOLERANCE = 3.0


class Row:
    """A logical line: fragments of one page at (nearly) the same height, left to right."""
    def __init__(self, items: List[TextItem]):
        if not items:
            raise ValueError("A row needs at least one text item")
        self.items = sorted(items, key=lambda item: item.x)
        self.page = self.items[0].page
        self.y = items[0].y

    @property
    def texts(self) -> List[str]:
        """Stripped, non-empty fragment texts in reading order."""
        return [item.text.strip() for item in self.items if item.text.strip()]

    @property
    def text(self) -> str:
        """All fragments joined with single spaces."""
        return ' '.join(self.texts)

    @property
    def x0(self) -> float:
        return self.items[0].x

    @property
    def x1(self) -> float:
        return max(item.x + item.width for item in self.items)

    def __len__(self):
        return len(self.items)

    def __repr__(self):
        return f"Row(page={self.page}, y={self.y:.1f}, text='{self.text}')"


def group_into_rows(items: Iterable[TextItem], y_tolerance: float = DEFAULT_Y_TOLERANCE) -> List[Row]:
    """
    Group text items into rows by page and vertical proximity.

    Items are read top to bottom (descending y, the origin is bottom-left),
    then left to right. A new row starts whenever the page changes or an item
    is ``y_tolerance`` or more away from the first item of the current row.

    Args:
        items: Text items from all pages
        y_tolerance: Maximum vertical distance within one row (exclusive)

    Returns:
        Rows in reading order
    """
    sorted_items = sorted(items, key=lambda item: (item.page, -item.y, item.x))
    if not sorted_items:
        return []

    rows = []
    current_row = [sorted_items[0]]
    anchor = sorted_items[0]

    for item in sorted_items[1:]:
        if item.page == anchor.page and abs(item.y - anchor.y) < y_tolerance:
            current_row.append(item)
        else:
            rows.append(Row(current_row))
            current_row = [item]
            anchor = item

    rows.append(Row(current_row))

    logger.debug(f"Grouped {len(sorted_items)} text items into {len(rows)} rows")
    return rows
