"""
PDF loading and text fragment extraction using pdfplumber.
"""
import io
import re
import pdfplumber
from pathlib import Path
from typing import List, Optional, Union
import logging

from ..models.schema import TextItem

logger = logging.getLogger(__name__)

PDFSource = Union[Path, str, bytes]

LIGATURES = {
    'ﬁ': 'fi',
    'ﬂ': 'fl',
    'ﬀ': 'ff',
    'ﬃ': 'ffi',
    'ﬄ': 'ffl',
    'ﬆ': 'st',
    'ﬅ': 'st'
}


class PageData:
    """Represents a page with its text fragments."""
    def __init__(self, page_num: int, width: float, height: float, items: List[TextItem]):
        self.page_num = page_num
        self.width = width
        self.height = height
        self.items = items

    def __repr__(self):
        return f"PageData(page_num={self.page_num}, items={len(self.items)})"


class PDFLoader:
    """
    Extracts positioned text fragments page by page.

    Fragments are runs of characters separated by less than ``x_tolerance``;
    with ``keep_blank_chars`` a date like "06 jan." stays one fragment while
    separate table columns become separate fragments.
    """

    def __init__(self, source: PDFSource, x_tolerance: float = 3, y_tolerance: float = 3,
                 keep_blank_chars: bool = True):
        self.source = source
        self.x_tolerance = x_tolerance
        self.y_tolerance = y_tolerance
        self.keep_blank_chars = keep_blank_chars
        self._pdf = None
        self._pages = []

    def _open(self):
        if isinstance(self.source, (bytes, bytearray)):
            return pdfplumber.open(io.BytesIO(self.source))
        return pdfplumber.open(self.source)

    def load(self) -> List[PageData]:
        """Load the PDF and extract fragments from all pages, in page order."""
        if self._pages:
            return self._pages

        try:
            self._pdf = self._open()
            logger.info(f"Loaded PDF with {len(self._pdf.pages)} pages")

            for page_num, page in enumerate(self._pdf.pages, 1):
                words = page.extract_words(
                    x_tolerance=self.x_tolerance,
                    y_tolerance=self.y_tolerance,
                    keep_blank_chars=self.keep_blank_chars,
                    use_text_flow=False
                )

                items = []
                for word in words:
                    text = normalize_fragment(word.get('text', ''))
                    if not text:
                        continue
                    items.append(TextItem(
                        text=text,
                        x=float(word['x0']),
                        # pdfplumber measures from the top, fragments from the bottom
                        y=float(page.height - word['bottom']),
                        page=page_num,
                        width=float(word['x1'] - word['x0'])
                    ))

                self._pages.append(PageData(
                    page_num=page_num,
                    width=float(page.width),
                    height=float(page.height),
                    items=items
                ))
                logger.debug(f"Page {page_num}: {len(items)} text fragments extracted")

            return self._pages

        except Exception as e:
            logger.error(f"Error loading PDF: {e}")
            raise

    def text_items(self) -> List[TextItem]:
        """All fragments of all pages, page by page."""
        return [item for page in self.load() for item in page.items]

    def get_page(self, page_num: int) -> Optional[PageData]:
        """Get a specific page by number (1-indexed)."""
        pages = self.load()
        if 1 <= page_num <= len(pages):
            return pages[page_num - 1]
        return None

    def close(self):
        """Close the PDF file."""
        if self._pdf:
            self._pdf.close()
            self._pdf = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def normalize_fragment(text: str) -> str:
    """Replace ligatures and collapse whitespace."""
    for ligature, replacement in LIGATURES.items():
        text = text.replace(ligature, replacement)
    return re.sub(r'\s+', ' ', text).strip()


def load_text_items(source: PDFSource, **options) -> List[TextItem]:
    """Convenience wrapper returning all text fragments of a PDF."""
    with PDFLoader(source, **options) as loader:
        return loader.text_items()
