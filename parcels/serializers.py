"""
Parcels App Serializers - Parcel Entries
"""

from rest_framework import serializers

from .models import ParcelEntry, Courier


class ParcelEntrySerializer(serializers.ModelSerializer):
    """Read serializer, camelCase keys as consumed by the dashboard."""

    taskId = serializers.CharField(source='task_id', read_only=True)
    sellerId = serializers.CharField(source='seller_id', read_only=True)
    pickedUpSameDay = serializers.BooleanField(source='picked_up_same_day', read_only=True)
    totalEarning = serializers.DecimalField(
        source='total_earning', max_digits=10, decimal_places=2,
        coerce_to_string=False, read_only=True
    )
    userId = serializers.IntegerField(source='user_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = ParcelEntry
        fields = [
            'id', 'taskId', 'sellerId', 'courier', 'quantity',
            'pickedUpSameDay', 'date', 'totalEarning', 'userId', 'createdAt'
        ]
        read_only_fields = fields


class ParcelEntryCreateSerializer(serializers.Serializer):
    """
    Validates a new pickup batch.

    totalEarning is not accepted from clients: the server computes it.
    """

    taskId = serializers.CharField(max_length=100, trim_whitespace=True)
    sellerId = serializers.CharField(max_length=100, trim_whitespace=True)
    courier = serializers.ChoiceField(choices=Courier.choices)
    quantity = serializers.IntegerField(min_value=1)
    pickedUpSameDay = serializers.BooleanField(default=False)
    date = serializers.DateField(required=False)

    def create(self, validated_data):
        return ParcelEntry.objects.record(
            self.context['request'].user,
            task_id=validated_data['taskId'],
            seller_id=validated_data['sellerId'],
            courier=validated_data['courier'],
            quantity=validated_data['quantity'],
            picked_up_same_day=validated_data['pickedUpSameDay'],
            date=validated_data.get('date'),
        )

    def to_representation(self, instance):
        return ParcelEntrySerializer(instance).data


class EarningEstimateSerializer(serializers.Serializer):
    """Query parameters of the live earning preview."""

    courier = serializers.ChoiceField(choices=Courier.choices)
    quantity = serializers.IntegerField(min_value=0)
    pickedUpSameDay = serializers.BooleanField(default=False)
