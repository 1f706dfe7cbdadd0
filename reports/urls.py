"""
REPORTS App - URL Configuration
"""

from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # Downloads
    path('export/pdf/', views.PdfExportView.as_view(), name='export-pdf'),
    path('export/excel/', views.ExcelExportView.as_view(), name='export-excel'),
    path('export/html/', views.HtmlPreviewView.as_view(), name='export-html'),

    # E-mailed reports
    path('email/send-report/', views.SendReportView.as_view(), name='send-report'),
    path('email/send-employee-report/', views.SendEmployeeReportView.as_view(), name='send-employee-report'),
]
