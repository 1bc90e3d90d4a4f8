"""
Debug overlay tool for visual QA of row reconstruction.
"""
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging
from PIL import Image, ImageDraw, ImageFont
import fitz  # PyMuPDF

from ..core.classifier import (
    ExchangeRateAnnotation, HeaderRow, RowClassifier, RowOutcome, Skip, TransactionCandidate,
)
from ..core.detectors import TemplateDetector, DEFAULT_TEMPLATE_ID
from ..core.loader import PDFLoader, PDFSource
from ..core.rows import group_into_rows

logger = logging.getLogger(__name__)

# Fragments carry their baseline only; boxes are drawn this tall.
ROW_HEIGHT = 8.0

OUTCOME_COLORS = {
    TransactionCandidate: (0, 170, 0, 200),
    ExchangeRateAnnotation: (0, 150, 255, 200),
    HeaderRow: (255, 140, 0, 200),
    Skip: (160, 160, 160, 160),
}


def _font(size: int):
    try:
        return ImageFont.truetype("arial.ttf", size)
    except OSError:
        return ImageFont.load_default()


class DebugOverlay:
    """Draws every reconstructed row on top of the rendered page, colored by classification."""

    def __init__(self, source: PDFSource, template_id: Optional[str] = None):
        detector = TemplateDetector()
        self.template = detector.get_template(template_id or DEFAULT_TEMPLATE_ID)
        self.classifier = RowClassifier(self.template)

        if isinstance(source, (bytes, bytearray)):
            self.pdf_doc = fitz.open(stream=source, filetype="pdf")
        else:
            self.pdf_doc = fitz.open(str(source))

        self.loader = PDFLoader(source, **self.template.get('loader', {}))
        try:
            self.pages = self.loader.load()
        except Exception:
            self.close()
            raise

    def create_overlays(self, output_dir: Path, zoom: float = 2.0) -> List[Path]:
        """
        Create debug overlay images for all pages.

        Args:
            output_dir: Directory to save overlay images
            zoom: Render scale

        Returns:
            Paths of the written images
        """
        output_dir.mkdir(parents=True, exist_ok=True)

        y_tolerance = self.template.get('rows', {}).get('y_tolerance', 3)
        items = [item for page in self.pages for item in page.items]
        outcomes_by_page: Dict[int, List[RowOutcome]] = {}
        for row in group_into_rows(items, y_tolerance):
            outcomes_by_page.setdefault(row.page, []).append(self.classifier.classify(row))

        written = []
        for page_data in self.pages:
            pdf_page = self.pdf_doc[page_data.page_num - 1]
            pix = pdf_page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
            img = Image.frombytes("RGB", [pix.width, pix.height], pix.samples)

            overlay = self._create_page_overlay(
                page_data.height, outcomes_by_page.get(page_data.page_num, []), img.size, zoom
            )
            combined = Image.alpha_composite(img.convert("RGBA"), overlay)

            output_path = output_dir / f"page_{page_data.page_num:02d}_overlay.png"
            combined.save(output_path)
            written.append(output_path)
            logger.info(f"Created overlay: {output_path}")

        return written

    def _create_page_overlay(self, page_height: float, outcomes: List[RowOutcome],
                             img_size: Tuple[int, int], zoom: float) -> Image.Image:
        overlay = Image.new("RGBA", img_size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        font = _font(10)

        for outcome in outcomes:
            row = outcome.row
            color = OUTCOME_COLORS[type(outcome)]

            # y is measured from the bottom, image rows from the top
            top = (page_height - row.y - ROW_HEIGHT) * zoom
            bottom = (page_height - row.y) * zoom
            box = [int(row.x0 * zoom), int(top), int(row.x1 * zoom), int(bottom)]
            draw.rectangle(box, outline=color, width=2)

            label = type(outcome).__name__
            if isinstance(outcome, Skip):
                label = f"Skip:{outcome.reason}"
            draw.text((box[2] + 4, box[1]), label, fill=color, font=font)

        return overlay

    def close(self):
        """Close resources."""
        self.loader.close()
        self.pdf_doc.close()


def create_debug_overlay(source: PDFSource, template_id: Optional[str], output_dir: Path) -> List[Path]:
    """
    Create debug overlay images for a PDF.

    Args:
        source: PDF path or bytes
        template_id: Template ID to use
        output_dir: Directory to save overlay images
    """
    overlay = DebugOverlay(source, template_id)
    try:
        return overlay.create_overlays(output_dir)
    finally:
        overlay.close()
