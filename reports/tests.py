"""
Parcel Reports Tests
====================

Tests for:
1. Date-range resolver (rolling week, calendar month/year)
2. Report aggregator (exact totals, empty range, storage failures)
3. Renderers (PDF, XLSX, HTML fragment)
4. E-mail dispatch and Celery tasks
5. Export and e-mail endpoints
"""

import sys
import types
from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from io import BytesIO
from smtplib import SMTPException
from unittest.mock import patch

from celery.exceptions import Retry
from django.core import mail
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework import status
from rest_framework.test import APIClient

from core.models import AppSetting, CompanySettings, User, UserRole
from parcels.models import Courier, ParcelEntry
from reports.aggregator import aggregate, build_report
from reports.date_ranges import DateRange, FilterToken, UNBOUNDED, resolve_range
from reports.exceptions import EmailNotConfigured, ReportRenderError, ReportStorageError
from reports.mailer import ReportMailer
from reports.renderers import (
    REPORT_COLUMNS, ReportFormat, ReportRenderer, report_rows, summary_lines
)
from reports.tasks import send_employee_report_email, send_parcel_report_email

LOCMEM_EMAIL = 'django.core.mail.backends.locmem.EmailBackend'

SMTP_SETTINGS = {
    'smtp_enabled': 'true',
    'smtp_host': 'smtp.example.com',
    'smtp_port': '587',
    'smtp_user': 'mailer',
    'smtp_password': 'secret',
    'smtp_from_email': 'noreply@example.com',
    'smtp_from_name': 'L&A Reports',
}


class FakeHTML:
    """Stands in for weasyprint.HTML so tests do not need Pango."""

    def __init__(self, string):
        self.string = string

    def write_pdf(self, target):
        target.write(b'%PDF-1.7 ' + self.string.encode('utf-8')[:32])


class BrokenHTML(FakeHTML):

    def write_pdf(self, target):
        raise ValueError('layout failed')


def fake_weasyprint(html_class=FakeHTML):
    module = types.ModuleType('weasyprint')
    module.HTML = html_class
    return patch.dict(sys.modules, {'weasyprint': module})


def make_employee(email='maria@example.com', name='Maria Santos'):
    return User.objects.create_user(email=email, password='testpass123', name=name)


def record(user, task_id, courier=Courier.SPX, quantity=10, same_day=False, day=None):
    return ParcelEntry.objects.record(
        user, task_id=task_id, seller_id=f'SELLER-{task_id}', courier=courier,
        quantity=quantity, picked_up_same_day=same_day, date=day,
    )


# ==========================================
# DATE RANGES
# ==========================================

class TestDateRangeResolver(SimpleTestCase):

    NOW = date(2025, 3, 15)

    def test_today(self):
        self.assertEqual(resolve_range('today', self.NOW), DateRange(self.NOW, self.NOW))

    def test_week_is_rolling_seven_days(self):
        self.assertEqual(resolve_range('week', self.NOW).since, date(2025, 3, 8))
        self.assertEqual(resolve_range('week', self.NOW).until, self.NOW)

    def test_month_is_calendar_subtraction(self):
        self.assertEqual(resolve_range('month', self.NOW).since, date(2025, 2, 15))

    def test_year_is_calendar_subtraction(self):
        self.assertEqual(resolve_range('year', self.NOW).since, date(2024, 3, 15))

    def test_month_clamps_to_end_of_shorter_month(self):
        self.assertEqual(resolve_range('month', date(2025, 3, 31)).since, date(2025, 2, 28))
        self.assertEqual(resolve_range('month', date(2024, 3, 31)).since, date(2024, 2, 29))

    def test_year_from_leap_day(self):
        self.assertEqual(resolve_range('year', date(2024, 2, 29)).since, date(2023, 2, 28))

    def test_unknown_or_missing_token_is_unbounded(self):
        for token in (None, '', 'all', 'decade', 'weekly'):
            self.assertEqual(resolve_range(token, self.NOW), UNBOUNDED)
        self.assertTrue(UNBOUNDED.is_unbounded)

    def test_token_is_case_insensitive(self):
        self.assertEqual(resolve_range(' Month ', self.NOW).since, date(2025, 2, 15))

    def test_filter_token_choices(self):
        self.assertEqual(FilterToken.values, ['today', 'week', 'month', 'year'])

    def test_naive_datetime_anchor(self):
        self.assertEqual(resolve_range('today', datetime(2025, 3, 15, 23, 59)).since, self.NOW)

    @override_settings(TIME_ZONE='Asia/Manila')
    def test_aware_datetime_anchor_uses_local_date(self):
        # 2025-03-14 20:00 UTC is already 2025-03-15 in Manila
        now = datetime(2025, 3, 14, 20, 0, tzinfo=dt_timezone.utc)
        self.assertEqual(resolve_range('today', now).since, self.NOW)

    def test_contains_is_inclusive(self):
        week = resolve_range('week', self.NOW)
        self.assertTrue(week.contains(date(2025, 3, 8)))
        self.assertTrue(week.contains(self.NOW))
        self.assertFalse(week.contains(date(2025, 3, 7)))
        self.assertFalse(week.contains(date(2025, 3, 16)))

    def test_to_dict(self):
        self.assertEqual(
            resolve_range('today', self.NOW).to_dict(),
            {'since': '2025-03-15', 'until': '2025-03-15'},
        )
        self.assertEqual(UNBOUNDED.to_dict(), {'since': None, 'until': None})


# ==========================================
# AGGREGATOR
# ==========================================

class TestReportAggregator(TestCase):

    def setUp(self):
        self.employee = make_employee()
        self.today = timezone.localdate()

    def test_today_report_end_to_end(self):
        record(self.employee, 'SPX-1', Courier.SPX, 150, same_day=True)
        record(self.employee, 'FLASH-1', Courier.FLASH, 40)

        report = build_report('today')

        self.assertEqual(len(report.entries), 2)
        self.assertEqual(report.total_quantity, 190)
        self.assertEqual(report.total_earnings, Decimal('190.00'))

    def test_empty_range_is_not_an_error(self):
        record(self.employee, 'OLD', day=self.today - timedelta(days=30))

        report = build_report('today')

        self.assertEqual(report.entries, ())
        self.assertTrue(report.is_empty)
        self.assertEqual(report.total_quantity, 0)
        self.assertEqual(report.total_earnings, Decimal('0.00'))

    def test_totals_use_stored_earnings(self):
        # Stored values that the current formula would not produce
        for i in range(3):
            ParcelEntry.objects.create(
                task_id=f'T{i}', seller_id='S', courier=Courier.SPX, quantity=1,
                date=self.today, total_earning=Decimal('0.10'),
            )

        report = aggregate(UNBOUNDED)

        self.assertEqual(report.total_earnings, Decimal('0.30'))
        self.assertEqual(report.total_quantity, 3)

    def test_cent_sums_do_not_drift(self):
        for i in range(100):
            record(self.employee, f'T{i}', Courier.SPX, 1)

        report = aggregate(UNBOUNDED)

        self.assertEqual(report.total_earnings, Decimal('50.00'))

    def test_entries_ordered_newest_first(self):
        record(self.employee, 'OLDER', day=self.today - timedelta(days=2))
        record(self.employee, 'NEWER')

        report = build_report('')

        self.assertEqual([e.task_id for e in report.entries], ['NEWER', 'OLDER'])
        self.assertEqual(report.label, 'all')

    def test_storage_failure_is_wrapped(self):
        with patch.object(ParcelEntry.objects, 'in_range', side_effect=DatabaseError('gone')):
            with self.assertRaises(ReportStorageError):
                build_report('week')

    def test_to_dict(self):
        record(self.employee, 'T1', Courier.FLASH, 10)

        data = build_report('today').to_dict()

        self.assertEqual(data['filter'], 'today')
        self.assertEqual(data['since'], self.today.isoformat())
        self.assertEqual(data['totalQuantity'], 10)
        self.assertEqual(data['totalEarnings'], Decimal('30.00'))
        self.assertEqual(data['entries'][0]['taskId'], 'T1')


# ==========================================
# RENDERERS
# ==========================================

class TestReportRenderers(TestCase):

    def setUp(self):
        self.employee = make_employee()
        self.company = CompanySettings.from_mapping({'company_name': 'L&A Logistic Services'})
        self.renderer = ReportRenderer(self.company)
        record(self.employee, 'SPX-YES', Courier.SPX, 150, same_day=True)
        record(self.employee, 'SPX-NO', Courier.SPX, 50)
        record(self.employee, 'FLASH', Courier.FLASH, 40)
        self.report = build_report('today')

    def test_rows_follow_column_order(self):
        rows = {row[0]: row for row in report_rows(self.report)}

        self.assertEqual(len(REPORT_COLUMNS), 7)
        self.assertEqual(rows['SPX-YES'][2:], (
            'SPX', '150', timezone.localdate().isoformat(), 'Yes', '₱100.00'
        ))
        self.assertEqual(rows['SPX-NO'][5], 'No')
        self.assertEqual(rows['FLASH'][5], 'N/A')
        self.assertEqual(rows['FLASH'][6], '₱90.00')

    def test_money_uses_thousands_separator(self):
        ParcelEntry.objects.create(
            task_id='BIG', seller_id='S', courier=Courier.SPX, quantity=1,
            date=timezone.localdate(), total_earning=Decimal('1234.50'),
        )
        rows = {row[0]: row for row in report_rows(build_report('today'))}
        self.assertEqual(rows['BIG'][6], '₱1,234.50')

    def test_summary_lines(self):
        self.assertEqual(summary_lines(self.report), [
            ('Total Parcels', '240'),
            ('Total Earnings', '₱215.00'),
        ])

    def test_html_fragment(self):
        html = self.renderer.to_html(self.report)

        for column in REPORT_COLUMNS:
            self.assertIn(column, html)
        self.assertIn('L&amp;A Logistic Services - Parcel Report', html)
        self.assertIn('N/A', html)
        self.assertIn('₱215.00', html)
        self.assertNotIn('<html', html)

    def test_html_escapes_entry_values(self):
        record(self.employee, '<script>alert(1)</script>')
        html = self.renderer.to_html(build_report('today'))
        self.assertNotIn('<script>', html)
        self.assertIn('&lt;script&gt;', html)

    def test_html_render_is_idempotent(self):
        self.assertEqual(self.renderer.to_html(self.report), self.renderer.to_html(self.report))

    def test_html_for_empty_report(self):
        html = self.renderer.to_html(build_report('today', now=date(2001, 1, 1)))
        self.assertIn('No parcel entries for this period.', html)
        self.assertIn('₱0.00', html)

    def test_xlsx_cells(self):
        wb = load_workbook(BytesIO(self.renderer.to_xlsx(self.report)))
        ws = wb.active

        self.assertEqual([cell.value for cell in ws[1]], list(REPORT_COLUMNS))
        rows = {row[0]: row for row in ws.iter_rows(min_row=2, max_row=4, values_only=True)}
        self.assertEqual(rows['SPX-YES'][3], 150)
        self.assertEqual(rows['SPX-YES'][6], 100.0)
        self.assertEqual(rows['FLASH'][5], 'N/A')

        summary = {row[0]: row[1] for row in ws.iter_rows(min_row=6, values_only=True) if row[0]}
        self.assertIn('SUMMARY', summary)
        self.assertEqual(summary['Total Parcels'], 240)
        self.assertEqual(summary['Total Earnings'], 215.0)

    def test_xlsx_render_is_idempotent(self):
        first = load_workbook(BytesIO(self.renderer.to_xlsx(self.report))).active
        second = load_workbook(BytesIO(self.renderer.to_xlsx(self.report))).active
        self.assertEqual(
            list(first.iter_rows(values_only=True)),
            list(second.iter_rows(values_only=True)),
        )

    def test_pdf_uses_weasyprint(self):
        with fake_weasyprint():
            pdf = self.renderer.render(self.report, ReportFormat.PDF)
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_pdf_failure_leaves_report_untouched(self):
        entries_before = self.report.entries
        with fake_weasyprint(BrokenHTML):
            with self.assertRaises(ReportRenderError):
                self.renderer.to_pdf(self.report)

        self.assertIs(self.report.entries, entries_before)
        self.assertEqual(self.report.total_earnings, Decimal('215.00'))
        # Other formats still work
        self.assertIn('₱215.00', self.renderer.to_html(self.report))

    def test_missing_weasyprint_is_a_render_error(self):
        with patch.dict(sys.modules, {'weasyprint': None}):
            with self.assertRaises(ReportRenderError):
                self.renderer.to_pdf(self.report)

    def test_unsupported_format(self):
        with self.assertRaises(ReportRenderError):
            self.renderer.render(self.report, 'docx')

    def test_filename_and_content_type(self):
        self.assertEqual(ReportRenderer.filename(self.report, 'xlsx'), 'parcels-today.xlsx')
        self.assertEqual(ReportRenderer.filename(build_report(None), 'pdf'), 'parcels-all.pdf')
        self.assertEqual(ReportRenderer.content_type('pdf'), 'application/pdf')


# ==========================================
# MAILER & TASKS
# ==========================================

@override_settings(EMAIL_BACKEND=LOCMEM_EMAIL)
class TestReportMailer(TestCase):

    def setUp(self):
        self.company = CompanySettings.from_mapping(SMTP_SETTINGS)

    def test_send_html_message(self):
        ReportMailer(self.company).send('boss@example.com', 'Daily report', '<p>Hello</p>')

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, ['boss@example.com'])
        self.assertEqual(message.from_email, 'L&A Reports <noreply@example.com>')
        self.assertEqual(message.body, 'Hello')
        self.assertEqual(message.alternatives[0][0], '<p>Hello</p>')

    def test_disabled_smtp_raises(self):
        company = CompanySettings.from_mapping({**SMTP_SETTINGS, 'smtp_enabled': 'false'})
        with self.assertRaises(EmailNotConfigured):
            ReportMailer(company).send('boss@example.com', 'Daily report', '<p>Hello</p>')
        self.assertEqual(len(mail.outbox), 0)

    def test_connection_uses_company_smtp(self):
        with patch('reports.mailer.get_connection') as get_connection:
            ReportMailer(self.company).get_connection()
        kwargs = get_connection.call_args.kwargs
        self.assertEqual(kwargs['host'], 'smtp.example.com')
        self.assertEqual(kwargs['port'], 587)
        self.assertTrue(kwargs['use_tls'])
        self.assertFalse(kwargs['use_ssl'])

    def test_port_465_uses_ssl(self):
        company = CompanySettings.from_mapping({**SMTP_SETTINGS, 'smtp_port': '465'})
        with patch('reports.mailer.get_connection') as get_connection:
            ReportMailer(company).get_connection()
        kwargs = get_connection.call_args.kwargs
        self.assertTrue(kwargs['use_ssl'])
        self.assertFalse(kwargs['use_tls'])

    def test_plain_relay_without_starttls(self):
        company = CompanySettings.from_mapping({
            **SMTP_SETTINGS, 'smtp_port': '25', 'smtp_use_tls': 'false',
        })
        with patch('reports.mailer.get_connection') as get_connection:
            ReportMailer(company).get_connection()
        kwargs = get_connection.call_args.kwargs
        self.assertEqual(kwargs['port'], 25)
        self.assertFalse(kwargs['use_tls'])
        self.assertFalse(kwargs['use_ssl'])


@override_settings(EMAIL_BACKEND=LOCMEM_EMAIL)
class TestReportTasks(TestCase):

    def setUp(self):
        AppSetting.objects.ensure_defaults()
        AppSetting.objects.update_values(SMTP_SETTINGS)
        self.employee = make_employee()

    def test_parcel_report_email(self):
        record(self.employee, 'SPX-1', Courier.SPX, 150, same_day=True)
        record(self.employee, 'FLASH-1', Courier.FLASH, 40)

        result = send_parcel_report_email('boss@example.com', 'Today', 'today')

        self.assertEqual(result['entries'], 2)
        message = mail.outbox[0]
        self.assertEqual(message.subject, 'Today')
        html = message.alternatives[0][0]
        self.assertIn('₱190.00', html)
        self.assertIn('SPX-1', html)

    def test_employee_report_email(self):
        make_employee('juan@example.com', 'Juan Cruz')

        result = send_employee_report_email('boss@example.com', 'Employees')

        self.assertEqual(result['employees'], 2)
        html = mail.outbox[0].alternatives[0][0]
        self.assertIn('Juan Cruz', html)
        self.assertIn(self.employee.employee_id, html)
        self.assertIn('Total Employees:</strong> 2', html)

    def test_smtp_failure_is_retried(self):
        error = SMTPException('down')
        with patch('reports.mailer.ReportMailer.send', side_effect=error), \
                patch.object(send_parcel_report_email, 'retry', side_effect=Retry('retrying')) as retry:
            with self.assertRaises(Retry):
                send_parcel_report_email('boss@example.com', 'Today', 'today')

        retry.assert_called_once_with(exc=error)
        self.assertEqual(send_parcel_report_email.max_retries, 3)

    def test_employee_report_smtp_failure_is_retried(self):
        error = OSError('connection refused')
        with patch('reports.mailer.ReportMailer.send', side_effect=error), \
                patch.object(send_employee_report_email, 'retry', side_effect=Retry('retrying')) as retry:
            with self.assertRaises(Retry):
                send_employee_report_email('boss@example.com', 'Staff')

        retry.assert_called_once_with(exc=error)
        self.assertEqual(send_employee_report_email.max_retries, 3)

    def test_inline_run_fails_without_retrying(self):
        with patch('reports.mailer.ReportMailer.send', side_effect=SMTPException('down')) as send:
            result = send_parcel_report_email.apply(args=('boss@example.com', 'Today', 'today'))

        self.assertTrue(result.failed())
        self.assertIsInstance(result.result, SMTPException)
        self.assertEqual(send.call_count, 1)

    def test_fresh_settings_snapshot_per_run(self):
        AppSetting.objects.update_values({'smtp_from_name': 'Night Shift'})
        send_parcel_report_email('boss@example.com', 'Today', '')
        self.assertEqual(mail.outbox[0].from_email, 'Night Shift <noreply@example.com>')


# ==========================================
# API
# ==========================================

class TestReportAPI(TestCase):

    def setUp(self):
        self.client = APIClient()
        AppSetting.objects.ensure_defaults()
        self.admin = User.objects.create_user(
            email='admin@example.com', password='testpass123',
            name='Admin', role=UserRole.ADMIN,
        )
        self.employee = make_employee()
        record(self.employee, 'SPX-1', Courier.SPX, 150, same_day=True)
        record(self.employee, 'FLASH-1', Courier.FLASH, 40)

    # ==========================================
    # Exports
    # ==========================================

    def test_export_requires_authentication(self):
        response = self.client.get('/api/export/excel/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_excel_export(self):
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/export/excel/', {'filter': 'today'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response['Content-Disposition'], 'attachment; filename="parcels-today.xlsx"'
        )
        ws = load_workbook(BytesIO(response.content)).active
        self.assertEqual(ws.cell(row=1, column=1).value, 'Task ID')

    def test_pdf_export(self):
        self.client.force_authenticate(self.employee)

        with fake_weasyprint():
            response = self.client.get('/api/export/pdf/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertEqual(response['Content-Disposition'], 'attachment; filename="parcels-all.pdf"')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_pdf_render_failure_returns_500(self):
        self.client.force_authenticate(self.employee)

        with fake_weasyprint(BrokenHTML):
            response = self.client.get('/api/export/pdf/')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn('message', response.data)

    def test_storage_failure_returns_503(self):
        self.client.force_authenticate(self.employee)

        with patch('reports.views.build_report', side_effect=ReportStorageError('down')):
            response = self.client.get('/api/export/excel/')

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    def test_html_preview(self):
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/export/html/', {'filter': 'week'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn('Content-Disposition', response)
        self.assertIn('₱190.00', response.content.decode('utf-8'))

    # ==========================================
    # E-mail
    # ==========================================

    def test_send_report_requires_admin(self):
        self.client.force_authenticate(self.employee)

        response = self.client.post('/api/email/send-report/', {
            'to': 'boss@example.com', 'subject': 'Report',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_send_report_without_smtp_returns_400(self):
        self.client.force_authenticate(self.admin)

        with patch('reports.views.send_parcel_report_email.delay') as delay:
            response = self.client.post('/api/email/send-report/', {
                'to': 'boss@example.com', 'subject': 'Report', 'dateFilter': 'week',
            }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        delay.assert_not_called()

    def test_send_report_queues_task(self):
        AppSetting.objects.update_values(SMTP_SETTINGS)
        self.client.force_authenticate(self.admin)

        with patch('reports.views.send_parcel_report_email.delay') as delay:
            response = self.client.post('/api/email/send-report/', {
                'to': 'boss@example.com', 'subject': 'Weekly', 'dateFilter': 'week',
            }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'message': 'Report sent successfully'})
        delay.assert_called_once_with('boss@example.com', 'Weekly', 'week')

    @override_settings(EMAIL_BACKEND=LOCMEM_EMAIL)
    def test_send_report_inline_failure_returns_500(self):
        AppSetting.objects.update_values(SMTP_SETTINGS)
        self.client.force_authenticate(self.admin)

        def run_inline(*args):
            return send_parcel_report_email.apply(args=args)

        with patch('reports.views.send_parcel_report_email.delay', side_effect=run_inline), \
                patch('reports.mailer.ReportMailer.send', side_effect=SMTPException('down')) as send:
            response = self.client.post('/api/email/send-report/', {
                'to': 'boss@example.com', 'subject': 'Weekly', 'dateFilter': 'week',
            }, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'message': 'Failed to send email'})
        self.assertEqual(send.call_count, 1)

    @override_settings(EMAIL_BACKEND=LOCMEM_EMAIL)
    def test_send_report_inline_success(self):
        AppSetting.objects.update_values(SMTP_SETTINGS)
        self.client.force_authenticate(self.admin)

        def run_inline(*args):
            return send_parcel_report_email.apply(args=args)

        with patch('reports.views.send_parcel_report_email.delay', side_effect=run_inline):
            response = self.client.post('/api/email/send-report/', {
                'to': 'boss@example.com', 'subject': 'Weekly', 'dateFilter': 'week',
            }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, 'Weekly')

    @override_settings(EMAIL_BACKEND=LOCMEM_EMAIL)
    def test_send_employee_report_inline_failure_returns_500(self):
        AppSetting.objects.update_values(SMTP_SETTINGS)
        self.client.force_authenticate(self.admin)

        def run_inline(*args):
            return send_employee_report_email.apply(args=args)

        with patch('reports.views.send_employee_report_email.delay', side_effect=run_inline), \
                patch('reports.mailer.ReportMailer.send', side_effect=OSError('timed out')):
            response = self.client.post('/api/email/send-employee-report/', {
                'to': 'boss@example.com', 'subject': 'Staff',
            }, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'message': 'Failed to send email'})

    def test_send_report_validates_recipient(self):
        AppSetting.objects.update_values(SMTP_SETTINGS)
        self.client.force_authenticate(self.admin)

        response = self.client.post('/api/email/send-report/', {
            'to': 'not-an-email', 'subject': 'Weekly',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('to', response.data)

    def test_send_employee_report_queues_task(self):
        AppSetting.objects.update_values(SMTP_SETTINGS)
        self.client.force_authenticate(self.admin)

        with patch('reports.views.send_employee_report_email.delay') as delay:
            response = self.client.post('/api/email/send-employee-report/', {
                'to': 'boss@example.com', 'subject': 'Staff',
            }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        delay.assert_called_once_with('boss@example.com', 'Staff')
