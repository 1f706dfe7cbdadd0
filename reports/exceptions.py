class ReportError(Exception):
    """Base class for report generation failures."""


class ReportStorageError(ReportError):
    """The parcel store could not be read; no report was produced."""


class ReportRenderError(ReportError):
    """A report artifact (PDF, spreadsheet, HTML) could not be produced."""


class EmailNotConfigured(Exception):
    """SMTP is disabled or incomplete in the company settings."""
