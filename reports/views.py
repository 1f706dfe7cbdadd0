"""
REPORTS App - Views for Report Downloads and E-mailed Reports
"""

import logging

from celery.result import EagerResult
from django.http import HttpResponse
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.models import AppSetting
from core.permissions import IsAdminUser
from .aggregator import build_report
from .exceptions import ReportRenderError, ReportStorageError
from .mailer import ReportMailer
from .renderers import ReportFormat, ReportRenderer
from .serializers import SendEmployeeReportSerializer, SendReportSerializer
from .tasks import send_employee_report_email, send_parcel_report_email

logger = logging.getLogger(__name__)

EMAIL_NOT_CONFIGURED = 'Email is not configured. Please configure SMTP settings first.'
EMAIL_SEND_FAILED = 'Failed to send email'


# ===========================================
# DOWNLOADS
# ===========================================

class ReportExportView(APIView):
    """
    GET /api/export/<format>/?filter=today|week|month|year

    Builds the report for the filter token and returns it as a download
    (or inline for the HTML preview).
    """

    permission_classes = [permissions.IsAuthenticated]
    report_format = ReportFormat.PDF
    as_attachment = True

    def get(self, request):
        filter_token = request.query_params.get('filter', '')

        try:
            report = build_report(filter_token)
        except ReportStorageError as e:
            return Response({'message': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        renderer = ReportRenderer(AppSetting.objects.snapshot())
        try:
            content = renderer.render(report, self.report_format)
        except ReportRenderError as e:
            logger.error(f"[REPORTS] {self.report_format} export failed for {request.user.email}: {e}")
            return Response(
                {'message': f'Failed to generate {ReportFormat(self.report_format).label} report'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        response = HttpResponse(content, content_type=renderer.content_type(self.report_format))
        if self.as_attachment:
            response['Content-Disposition'] = \
                f'attachment; filename="{renderer.filename(report, self.report_format)}"'

        logger.info(
            f"[REPORTS] {request.user.email} exported {renderer.filename(report, self.report_format)} "
            f"({len(report.entries)} entries)"
        )
        return response


class PdfExportView(ReportExportView):
    report_format = ReportFormat.PDF


class ExcelExportView(ReportExportView):
    report_format = ReportFormat.XLSX


class HtmlPreviewView(ReportExportView):
    report_format = ReportFormat.HTML
    as_attachment = False


# ===========================================
# E-MAILED REPORTS (admin)
# ===========================================

def sent_inline_and_failed(result) -> bool:
    """True when the task ran in-process (CELERY_TASK_ALWAYS_EAGER) and raised."""
    return isinstance(result, EagerResult) and result.failed()


class SendReportView(APIView):
    """POST /api/email/send-report/ {to, subject, dateFilter}"""

    permission_classes = [permissions.IsAuthenticated, IsAdminUser]

    def post(self, request):
        serializer = SendReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if not ReportMailer(AppSetting.objects.snapshot()).is_configured:
            return Response({'message': EMAIL_NOT_CONFIGURED}, status=status.HTTP_400_BAD_REQUEST)

        result = send_parcel_report_email.delay(data['to'], data['subject'], data['dateFilter'])
        if sent_inline_and_failed(result):
            logger.error(f"[EMAIL] Parcel report to {data['to']} failed: {result.result}")
            return Response({'message': EMAIL_SEND_FAILED}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        logger.info(f"[EMAIL] Parcel report queued for {data['to']} by {request.user.email}")
        return Response({'message': 'Report sent successfully'})


class SendEmployeeReportView(APIView):
    """POST /api/email/send-employee-report/ {to, subject}"""

    permission_classes = [permissions.IsAuthenticated, IsAdminUser]

    def post(self, request):
        serializer = SendEmployeeReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if not ReportMailer(AppSetting.objects.snapshot()).is_configured:
            return Response({'message': EMAIL_NOT_CONFIGURED}, status=status.HTTP_400_BAD_REQUEST)

        result = send_employee_report_email.delay(data['to'], data['subject'])
        if sent_inline_and_failed(result):
            logger.error(f"[EMAIL] Employee report to {data['to']} failed: {result.result}")
            return Response({'message': EMAIL_SEND_FAILED}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        logger.info(f"[EMAIL] Employee report queued for {data['to']} by {request.user.email}")
        return Response({'message': 'Report sent successfully'})
