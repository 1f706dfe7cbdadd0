"""
REPORTS App - Report Renderers

Turns an AggregatedReport into a downloadable or mailable artifact:
    - PDF via WeasyPrint over a Django template
    - XLSX via openpyxl
    - HTML fragment (dashboard preview and e-mail body)

Row formatting is shared by all three formats so they agree cell for cell.
"""

import logging
from io import BytesIO
from typing import List, Tuple

from django.conf import settings
from django.db import models
from django.template.loader import render_to_string
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from core.models import CompanySettings
from parcels.models import Courier
from .aggregator import AggregatedReport
from .exceptions import ReportRenderError

logger = logging.getLogger(__name__)


REPORT_COLUMNS = (
    'Task ID', 'Seller ID', 'Courier', 'Quantity', 'Date',
    'Picked Up Same Day', 'Earning',
)

XLSX_MONEY_FORMAT = '"₱"#,##0.00'


class ReportFormat(models.TextChoices):
    PDF = 'pdf', 'PDF'
    XLSX = 'xlsx', 'Excel'
    HTML = 'html', 'HTML'


CONTENT_TYPES = {
    ReportFormat.PDF: 'application/pdf',
    ReportFormat.XLSX: 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    ReportFormat.HTML: 'text/html; charset=utf-8',
}


# ===========================================
# FORMAT-AGNOSTIC ROWS
# ===========================================

def format_money(amount) -> str:
    return f"{settings.REPORT_CURRENCY_SYMBOL}{amount:,.2f}"


def pickup_label(entry) -> str:
    if entry.courier != Courier.SPX:
        return 'N/A'
    return 'Yes' if entry.picked_up_same_day else 'No'


def report_rows(report: AggregatedReport) -> List[Tuple[str, ...]]:
    """One tuple of display strings per entry, in REPORT_COLUMNS order."""
    return [
        (
            entry.task_id,
            entry.seller_id,
            entry.courier,
            str(entry.quantity),
            entry.date.isoformat(),
            pickup_label(entry),
            format_money(entry.total_earning),
        )
        for entry in report.entries
    ]


def summary_lines(report: AggregatedReport) -> List[Tuple[str, str]]:
    return [
        ('Total Parcels', str(report.total_quantity)),
        ('Total Earnings', format_money(report.total_earnings)),
    ]


# ===========================================
# RENDERER
# ===========================================

class ReportRenderer:
    """
    Renders parcel reports for one company.

    The company snapshot is taken by the caller so a single request (or
    task) renders every format with the same name and logo.
    """

    def __init__(self, company: CompanySettings):
        self.company = company

    @staticmethod
    def content_type(fmt: str) -> str:
        return CONTENT_TYPES[ReportFormat(fmt)]

    @staticmethod
    def filename(report: AggregatedReport, fmt: str) -> str:
        return f"parcels-{report.label}.{ReportFormat(fmt).value}"

    def render(self, report: AggregatedReport, fmt: str):
        """
        Render a report in the requested format.

        Returns:
            bytes for PDF and XLSX, str for HTML

        Raises:
            ReportRenderError: On any rendering failure
        """
        handlers = {
            ReportFormat.PDF: self.to_pdf,
            ReportFormat.XLSX: self.to_xlsx,
            ReportFormat.HTML: self.to_html,
        }
        try:
            handler = handlers[ReportFormat(fmt)]
        except ValueError as e:
            raise ReportRenderError(f"Unsupported report format: {fmt}") from e
        return handler(report)

    def _context(self, report: AggregatedReport) -> dict:
        return {
            'company': self.company,
            'title': f"{self.company.company_name} - Parcel Report",
            'report': report,
            'columns': REPORT_COLUMNS,
            'rows': report_rows(report),
            'summary': summary_lines(report),
            'filter_label': report.label,
            'date_range': report.date_range,
            'generated_at': report.generated_at,
        }

    def to_html(self, report: AggregatedReport) -> str:
        """Standalone HTML fragment, used as e-mail body and preview."""
        try:
            return render_to_string('reports/parcel_report_email.html', self._context(report))
        except Exception as e:
            logger.exception(f"[REPORTS] HTML rendering failed: {e}")
            raise ReportRenderError("Failed to render HTML report") from e

    def to_pdf(self, report: AggregatedReport) -> bytes:
        try:
            html_content = render_to_string('reports/parcel_report.html', self._context(report))
        except Exception as e:
            logger.exception(f"[REPORTS] PDF template rendering failed: {e}")
            raise ReportRenderError("Failed to render PDF report") from e
        return self._html_to_pdf(html_content)

    @staticmethod
    def _html_to_pdf(html_content: str) -> bytes:
        """Convert rendered HTML to PDF bytes using WeasyPrint."""
        try:
            from weasyprint import HTML
        except ImportError as e:
            logger.error("[REPORTS] WeasyPrint not installed. Run: pip install weasyprint")
            raise ReportRenderError("WeasyPrint is required for PDF generation") from e

        try:
            pdf_buffer = BytesIO()
            HTML(string=html_content).write_pdf(pdf_buffer)
            return pdf_buffer.getvalue()
        except Exception as e:
            logger.exception(f"[REPORTS] PDF conversion failed: {e}")
            raise ReportRenderError("Failed to generate PDF") from e

    def to_xlsx(self, report: AggregatedReport) -> bytes:
        try:
            return self._build_workbook(report)
        except Exception as e:
            logger.exception(f"[REPORTS] Excel generation failed: {e}")
            raise ReportRenderError("Failed to generate Excel report") from e

    def _build_workbook(self, report: AggregatedReport) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = "Parcel Report"

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        for col, header in enumerate(REPORT_COLUMNS, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = border

        # Quantity and earning stay numeric so the sheet can be summed
        for row, (entry, values) in enumerate(zip(report.entries, report_rows(report)), 2):
            task_id, seller_id, courier, _, day, pickup, _ = values
            ws.cell(row=row, column=1, value=task_id)
            ws.cell(row=row, column=2, value=seller_id)
            ws.cell(row=row, column=3, value=courier)
            ws.cell(row=row, column=4, value=entry.quantity)
            ws.cell(row=row, column=5, value=day)
            ws.cell(row=row, column=6, value=pickup)
            earning = ws.cell(row=row, column=7, value=float(entry.total_earning))
            earning.number_format = XLSX_MONEY_FORMAT

            for col in range(1, len(REPORT_COLUMNS) + 1):
                ws.cell(row=row, column=col).border = border

        for col, header in enumerate(REPORT_COLUMNS, 1):
            values = [header] + [str(ws.cell(row=r, column=col).value) for r in range(2, len(report.entries) + 2)]
            ws.column_dimensions[get_column_letter(col)].width = min(max(len(v) for v in values) + 2, 50)

        summary_row = len(report.entries) + 3
        ws.cell(row=summary_row, column=1, value="SUMMARY").font = Font(bold=True, size=14)
        ws.cell(row=summary_row + 1, column=1, value="Company")
        ws.cell(row=summary_row + 1, column=2, value=self.company.company_name)
        ws.cell(row=summary_row + 2, column=1, value="Filter")
        ws.cell(row=summary_row + 2, column=2, value=report.label)
        ws.cell(row=summary_row + 3, column=1, value="Total Parcels")
        ws.cell(row=summary_row + 3, column=2, value=report.total_quantity)
        ws.cell(row=summary_row + 4, column=1, value="Total Earnings")
        total = ws.cell(row=summary_row + 4, column=2, value=float(report.total_earnings))
        total.number_format = XLSX_MONEY_FORMAT

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()
