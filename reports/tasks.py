"""
REPORTS App - Celery Tasks for E-mailed Reports

Each task reads a fresh settings snapshot when it runs, so a report sent
after an SMTP change uses the new server.

SMTP failures are retried by the worker. Inline (eager) runs fail at once
so the calling request can report the error.
"""

import logging
from smtplib import SMTPException

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_parcel_report_email(self, to: str, subject: str, filter_token: str = ''):
    """
    E-mail the parcel report of a filter token as an HTML body.

    Args:
        to: Recipient address
        subject: Message subject
        filter_token: 'today', 'week', 'month', 'year' or '' for all
    """
    from core.models import AppSetting
    from reports.aggregator import build_report
    from reports.mailer import ReportMailer
    from reports.renderers import ReportRenderer

    company = AppSetting.objects.snapshot()
    report = build_report(filter_token)
    html_body = ReportRenderer(company).to_html(report)

    logger.info(f"[CELERY] Sending parcel report ({report.label}) to {to}")

    try:
        sent = ReportMailer(company).send(to, subject, html_body)
    except (SMTPException, OSError) as e:
        if self.request.is_eager:
            logger.error(f"[CELERY] Parcel report to {to} failed: {e}")
            raise
        logger.warning(f"[CELERY] Parcel report to {to} failed, retrying: {e}")
        raise self.retry(exc=e)

    return {'to': to, 'filter': report.label, 'entries': len(report.entries), 'sent': sent}


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_employee_report_email(self, to: str, subject: str):
    """E-mail the list of employees with their contact details."""
    from core.models import AppSetting, User, UserRole
    from reports.mailer import ReportMailer

    company = AppSetting.objects.snapshot()
    mailer = ReportMailer(company)
    employees = User.objects.filter(role=UserRole.EMPLOYEE).order_by('name')
    html_body = mailer.render_employee_report(employees)

    logger.info(f"[CELERY] Sending employee report to {to}")

    try:
        sent = mailer.send(to, subject, html_body)
    except (SMTPException, OSError) as e:
        if self.request.is_eager:
            logger.error(f"[CELERY] Employee report to {to} failed: {e}")
            raise
        logger.warning(f"[CELERY] Employee report to {to} failed, retrying: {e}")
        raise self.retry(exc=e)

    return {'to': to, 'employees': employees.count(), 'sent': sent}
