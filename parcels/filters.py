import django_filters

from .models import ParcelEntry, Courier


class ParcelEntryFilter(django_filters.FilterSet):
    """Optional list filters on top of the date filter token."""

    courier = django_filters.ChoiceFilter(choices=Courier.choices)
    user = django_filters.NumberFilter(field_name='user_id')

    class Meta:
        model = ParcelEntry
        fields = ['courier', 'user']
