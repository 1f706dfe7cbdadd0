"""
PARCELS App - Parcel Pickup Entries

Handles: logged pickup batches per courier with their stored earning
"""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Courier(models.TextChoices):
    """Courier enumeration. Each member has a pricing rule in parcels.earnings."""
    SPX = 'SPX', 'SPX'
    FLASH = 'Flash', 'Flash'


class ParcelEntryQuerySet(models.QuerySet):

    def in_range(self, date_range):
        """
        Entries whose date falls inside the range (inclusive bounds).
        An unbounded side is not filtered.
        """
        qs = self
        if date_range.since is not None:
            qs = qs.filter(date__gte=date_range.since)
        if date_range.until is not None:
            qs = qs.filter(date__lte=date_range.until)
        return qs.order_by('-date', '-created_at', '-id')


class ParcelEntryManager(models.Manager.from_queryset(ParcelEntryQuerySet)):

    def record(self, user, *, task_id, seller_id, courier, quantity,
               picked_up_same_day=False, date=None) -> 'ParcelEntry':
        """
        Insert a new entry with its earning computed once, here.

        The stored total_earning is never recomputed afterwards, so
        historical entries keep their value if the formula changes.
        """
        from .earnings import calculate_earning

        if courier != Courier.SPX:
            picked_up_same_day = False

        return self.create(
            user=user,
            task_id=task_id,
            seller_id=seller_id,
            courier=courier,
            quantity=quantity,
            picked_up_same_day=picked_up_same_day,
            date=date or timezone.localdate(),
            total_earning=calculate_earning(courier, quantity, picked_up_same_day),
        )


class ParcelEntry(models.Model):
    """
    One logged pickup batch.

    Created by an employee, never edited, hard-deleted by admins only.
    """

    task_id = models.CharField(max_length=100, verbose_name="Task ID")
    seller_id = models.CharField(max_length=100, verbose_name="Seller ID")
    courier = models.CharField(
        max_length=20,
        choices=Courier.choices,
        verbose_name="Courier"
    )
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name="Quantity"
    )
    picked_up_same_day = models.BooleanField(
        default=False,
        verbose_name="Picked up same day",
        help_text="Only meaningful for SPX"
    )
    date = models.DateField(db_index=True, verbose_name="Date")
    total_earning = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        editable=False,
        verbose_name="Total earning (₱)"
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='parcel_entries',
        verbose_name="Logged by"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ParcelEntryManager()

    class Meta:
        verbose_name = "Parcel entry"
        verbose_name_plural = "Parcel entries"
        ordering = ['-date', '-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name='parcel_entry_quantity_positive',
            ),
            models.CheckConstraint(
                condition=models.Q(total_earning__gte=0),
                name='parcel_entry_earning_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.task_id} | {self.courier} x{self.quantity} | ₱{self.total_earning}"

    @property
    def same_day_applicable(self) -> bool:
        return self.courier == Courier.SPX
