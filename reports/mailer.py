"""
REPORTS App - E-mail Dispatch

Sends reports and account notices through the SMTP server configured in
the company settings (not Django's EMAIL_HOST): admins change it at
runtime from the settings page.
"""

import logging
from typing import Iterable, Optional, Union

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import format_html, strip_tags

from core.models import CompanySettings
from .exceptions import EmailNotConfigured

logger = logging.getLogger(__name__)


EMPLOYEE_REPORT_COLUMNS = (
    'Employee ID', 'Name', 'Email', 'Phone', 'Address', 'Last Active', 'Joined',
)


class ReportMailer:
    """Sends HTML e-mails with the company SMTP configuration."""

    def __init__(self, company: CompanySettings):
        self.company = company

    @property
    def is_configured(self) -> bool:
        return bool(
            self.company.smtp_enabled
            and self.company.smtp_host
            and self.company.smtp_from_email
        )

    def get_connection(self):
        """
        SMTP connection for the company server.

        Port 465 uses implicit SSL. Other ports use STARTTLS unless the
        smtp_use_tls setting is off (plain relays on port 25).
        """
        if not self.is_configured:
            raise EmailNotConfigured("Email is not configured. Please configure SMTP settings first.")

        use_ssl = self.company.smtp_port == 465
        return get_connection(
            backend=settings.EMAIL_BACKEND,
            host=self.company.smtp_host,
            port=self.company.smtp_port,
            username=self.company.smtp_user,
            password=self.company.smtp_password,
            use_ssl=use_ssl,
            use_tls=self.company.smtp_use_tls and not use_ssl,
            timeout=settings.EMAIL_TIMEOUT,
        )

    def send(self, to: Union[str, Iterable[str]], subject: str, html_body: str,
             attachments: Optional[list] = None) -> int:
        """
        Send one HTML message.

        Args:
            to: Recipient address or list of addresses
            subject: Message subject
            html_body: HTML content; a plain-text part is derived from it
            attachments: Optional (filename, content, mimetype) tuples

        Returns:
            Number of messages sent (0 or 1)

        Raises:
            EmailNotConfigured: If SMTP is disabled or incomplete
            smtplib.SMTPException / OSError: On delivery failure
        """
        recipients = [to] if isinstance(to, str) else list(to)
        message = EmailMultiAlternatives(
            subject=subject,
            body=strip_tags(html_body),
            from_email=self.company.sender,
            to=recipients,
            connection=self.get_connection(),
        )
        message.attach_alternative(html_body, 'text/html')
        for attachment in attachments or []:
            message.attach(*attachment)

        sent = message.send()
        logger.info(f"[EMAIL] Sent '{subject}' to {', '.join(recipients)}")
        return sent

    def render_employee_report(self, employees) -> str:
        return render_to_string('reports/employee_report_email.html', {
            'company': self.company,
            'columns': EMPLOYEE_REPORT_COLUMNS,
            'employees': list(employees),
            'generated_at': timezone.now(),
        })

    def send_password_reset(self, user, temporary_password: str) -> int:
        html_body = format_html(
            "<p>Hello {},</p>"
            "<p>Your password for {} has been reset.</p>"
            "<p>Temporary password: <strong>{}</strong></p>"
            "<p>Please log in and change it from your profile.</p>",
            user.name, self.company.company_name, temporary_password,
        )
        return self.send(user.email, f"{self.company.company_name} - Password Reset", html_body)
