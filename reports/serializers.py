from rest_framework import serializers


class SendReportSerializer(serializers.Serializer):
    to = serializers.EmailField()
    subject = serializers.CharField(max_length=200, default='Parcel Report')
    dateFilter = serializers.CharField(required=False, allow_blank=True, default='')


class SendEmployeeReportSerializer(serializers.Serializer):
    to = serializers.EmailField()
    subject = serializers.CharField(max_length=200, default='Employee Report')
