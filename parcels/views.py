"""
Parcels App Views - Parcel Entries API
"""

import logging

from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.permissions import IsAdminUser
from reports.aggregator import build_report
from reports.date_ranges import resolve_range
from reports.exceptions import ReportStorageError
from .earnings import calculate_earning
from .filters import ParcelEntryFilter
from .models import ParcelEntry
from .serializers import (
    ParcelEntrySerializer, ParcelEntryCreateSerializer, EarningEstimateSerializer
)

logger = logging.getLogger(__name__)


class ParcelEntryViewSet(mixins.ListModelMixin,
                         mixins.CreateModelMixin,
                         mixins.DestroyModelMixin,
                         viewsets.GenericViewSet):
    """
    ViewSet for parcel entries.

    Entries are immutable once logged: there is no update route.
    Any authenticated user can log entries; only admins can delete them.
    """

    queryset = ParcelEntry.objects.all()
    serializer_class = ParcelEntrySerializer
    filterset_class = ParcelEntryFilter
    permission_classes = [permissions.IsAuthenticated]

    def get_permissions(self):
        if self.action == 'destroy':
            return [permissions.IsAuthenticated(), IsAdminUser()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action == 'create':
            return ParcelEntryCreateSerializer
        return ParcelEntrySerializer

    def get_queryset(self):
        qs = ParcelEntry.objects.select_related('user')
        if self.action == 'list':
            qs = qs.in_range(resolve_range(self.request.query_params.get('filter')))
        return qs

    def perform_create(self, serializer):
        entry = serializer.save()
        logger.info(
            f"[PARCELS] {self.request.user.email} logged {entry.courier} "
            f"x{entry.quantity} (task {entry.task_id}) -> ₱{entry.total_earning}"
        )

    def perform_destroy(self, instance):
        logger.info(f"[PARCELS] {self.request.user.email} deleted entry {instance.pk} ({instance.task_id})")
        instance.delete()

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Entries of the filter range with their totals."""
        try:
            report = build_report(request.query_params.get('filter'))
        except ReportStorageError as e:
            return Response({'message': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(report.to_dict())

    @action(detail=False, methods=['get'])
    def estimate(self, request):
        """Earning the calculator would assign to a batch (live preview)."""
        serializer = EarningEstimateSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        picked_up_same_day = data['pickedUpSameDay']
        earning = calculate_earning(data['courier'], data['quantity'], picked_up_same_day)

        return Response({
            'courier': data['courier'],
            'quantity': data['quantity'],
            'pickedUpSameDay': picked_up_same_day,
            'totalEarning': earning,
        })
