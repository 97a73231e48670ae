# src/services/report_service.py
# Renders the filtered dashboard tables into a printable PDF report.

from datetime import datetime
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape
from src.utils.formatting import TEMPLATE_DIR, format_date, format_money, report_filename
from src.utils.logger import logger
from src.api.errors import ServiceError

REPORT_TEMPLATE = 'report.html'


class ReportService:
    """HTML rendering with Jinja2, PDF conversion with WeasyPrint."""

    def __init__(self, template_dir: str = TEMPLATE_DIR):
        self.jinja_env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(['html', 'xml'])
        )
        self.jinja_env.filters["money"] = format_money
        self.jinja_env.filters["dmy"] = format_date
        logger.info("ReportService initialized.")

    def render_html(self, view: Dict[str, Any]) -> str:
        try:
            template = self.jinja_env.get_template(REPORT_TEMPLATE)
            return template.render(view=view, generated_at=datetime.now().strftime('%d-%m-%Y %H:%M'))
        except Exception as e:
            logger.error(f"Error rendering report template: {e}", exc_info=True)
            raise ServiceError(f"Failed to render report: {e}") from e

    def render_pdf(self, view: Dict[str, Any]) -> bytes:
        html = self.render_html(view)
        # weasyprint loads pango/cairo at import time
        from weasyprint import HTML
        try:
            pdf_bytes = HTML(string=html).write_pdf()
        except Exception as e:
            logger.error(f"Failed to convert report to PDF: {e}", exc_info=True)
            raise ServiceError(f"Failed to generate PDF report: {e}") from e
        logger.info(f"PDF report generated for {view.get('period_label')} ({len(pdf_bytes)} bytes).")
        return pdf_bytes

    @staticmethod
    def filename_for(view: Dict[str, Any]) -> str:
        return report_filename(view)
