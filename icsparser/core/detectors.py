"""
Template loading and detection.
"""
import yaml
from itertools import groupby
from pathlib import Path
from typing import Dict, Any, Optional, List
import logging

from .anchors import find_anchors
from .errors import TemplateNotFound
from .loader import PDFLoader, PDFSource
from .rows import Row, group_into_rows

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_ID = "ics_nl_v1"


class TemplateDetector:
    """Loads statement templates and detects which one matches a document."""

    def __init__(self, templates_dir: Path = None):
        self.templates_dir = templates_dir or Path(__file__).parent.parent / "templates"
        self.templates = {}
        self._load_templates()

    def _load_templates(self):
        """Load all available templates."""
        if not self.templates_dir.exists():
            logger.warning(f"Templates directory not found: {self.templates_dir}")
            return

        for yaml_file in sorted(self.templates_dir.glob("*.yaml")):
            with open(yaml_file, 'r', encoding='utf-8') as f:
                template_data = yaml.safe_load(f) or {}
            template_id = template_data.get('template_id')
            if template_id:
                self.templates[template_id] = template_data
                logger.debug(f"Loaded template: {template_id}")
            else:
                logger.warning(f"Template without template_id ignored: {yaml_file}")

    def match_rows(self, rows: List[Row]) -> Optional[str]:
        """
        Detect which template matches already grouped rows.

        Returns:
            Template ID if found, None otherwise
        """
        for template_id, template_config in self.templates.items():
            if self._matches_template(rows, template_config):
                logger.info(f"Statement matches template: {template_id}")
                return template_id

        logger.warning("No matching template found")
        return None

    def detect_template(self, source: PDFSource) -> Optional[str]:
        """
        Detect which template matches a PDF.

        Args:
            source: PDF path or bytes

        Returns:
            Template ID if found, None otherwise
        """
        with PDFLoader(source) as loader:
            items = loader.text_items()

        if not items:
            logger.error("No text found in PDF")
            return None

        return self.match_rows(group_into_rows(items))

    def _matches_template(self, rows: List[Row], template_config: Dict[str, Any]) -> bool:
        """All ``must_contain`` anchors must be found on a single page."""
        page_match = template_config.get('page_match', {})
        must_contain = page_match.get('must_contain', [])
        fuzzy_threshold = page_match.get('fuzzy_threshold', 90)

        if not must_contain:
            logger.warning("Template has no 'must_contain' requirements")
            return False

        for page_num, page_rows in groupby(rows, key=lambda row: row.page):
            found = find_anchors(list(page_rows), must_contain, fuzzy_threshold)
            if len(found) == len(must_contain):
                logger.debug(f"All required anchors found on page {page_num}")
                return True

        return False

    def get_template(self, template_id: str) -> Dict[str, Any]:
        """
        Get template configuration by ID.

        Raises:
            TemplateNotFound: no template with this id is loaded
        """
        template = self.templates.get(template_id)
        if template is None:
            raise TemplateNotFound(f"Template not found: {template_id}")
        return template

    def list_templates(self) -> List[str]:
        """List all available template IDs."""
        return list(self.templates.keys())


def detect_template(source: PDFSource) -> Optional[str]:
    """
    Convenience function to detect the template for a PDF.

    Returns:
        Template ID if found, None otherwise
    """
    return TemplateDetector().detect_template(source)
