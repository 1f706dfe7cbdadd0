"""
Parcel Earnings Tests
=====================

Tests for:
1. Earning Calculator (SPX cap and same-day bonus, Flash cap)
2. ParcelEntry recording (stored earning, same-day flag, date range query)
3. Parcel entries API (list, create, delete, summary, estimate)
"""

from datetime import date, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from core.models import User, UserRole
from parcels.earnings import PRICING_RULES, calculate_earning
from parcels.models import Courier, ParcelEntry
from reports.date_ranges import DateRange, UNBOUNDED


class TestEarningCalculator(SimpleTestCase):
    """Tests for the per-courier pricing rules."""

    # ==========================================
    # SPX
    # ==========================================

    def test_spx_same_day_capped_at_100_parcels(self):
        self.assertEqual(calculate_earning(Courier.SPX, 150, True), Decimal('100.00'))

    def test_spx_without_same_day(self):
        self.assertEqual(calculate_earning(Courier.SPX, 50, False), Decimal('25.00'))

    def test_spx_exactly_at_cap(self):
        self.assertEqual(calculate_earning(Courier.SPX, 100, True), Decimal('100.00'))
        self.assertEqual(calculate_earning(Courier.SPX, 100, False), Decimal('50.00'))

    def test_spx_above_cap_without_bonus(self):
        self.assertEqual(calculate_earning(Courier.SPX, 250, False), Decimal('50.00'))

    def test_spx_is_half_peso_per_parcel_up_to_cap(self):
        for quantity in range(0, 101):
            self.assertEqual(
                calculate_earning(Courier.SPX, quantity, False),
                Decimal(quantity) * Decimal('0.50'),
            )

    def test_spx_constant_above_cap(self):
        for same_day in (True, False):
            at_cap = calculate_earning(Courier.SPX, 100, same_day)
            for quantity in (101, 150, 999):
                self.assertEqual(calculate_earning(Courier.SPX, quantity, same_day), at_cap)

    def test_spx_single_parcel(self):
        self.assertEqual(calculate_earning(Courier.SPX, 1, True), Decimal('1.00'))
        self.assertEqual(calculate_earning(Courier.SPX, 1, False), Decimal('0.50'))

    # ==========================================
    # Flash
    # ==========================================

    def test_flash_below_cap(self):
        self.assertEqual(calculate_earning(Courier.FLASH, 10), Decimal('30.00'))

    def test_flash_at_cap(self):
        self.assertEqual(calculate_earning(Courier.FLASH, 30), Decimal('90.00'))

    def test_flash_above_cap(self):
        self.assertEqual(calculate_earning(Courier.FLASH, 100), Decimal('90.00'))

    def test_flash_ignores_same_day_flag(self):
        self.assertEqual(
            calculate_earning(Courier.FLASH, 12, True),
            calculate_earning(Courier.FLASH, 12, False),
        )

    # ==========================================
    # General properties
    # ==========================================

    def test_every_courier_has_a_pricing_rule(self):
        for courier in Courier:
            self.assertIn(courier, PRICING_RULES)

    def test_plain_string_courier_values_work(self):
        self.assertEqual(calculate_earning('SPX', 50, False), Decimal('25.00'))
        self.assertEqual(calculate_earning('Flash', 10), Decimal('30.00'))

    def test_unknown_courier_earns_nothing(self):
        with self.assertLogs('parcels.earnings', level='WARNING'):
            self.assertEqual(calculate_earning('LBC', 50, True), Decimal('0.00'))

    def test_result_has_two_decimals(self):
        for courier in Courier:
            for quantity in (1, 7, 33, 101):
                earning = calculate_earning(courier, quantity, True)
                self.assertEqual(earning.as_tuple().exponent, -2)

    def test_earning_never_negative_and_monotonic(self):
        for courier in Courier:
            for same_day in (True, False):
                previous = Decimal('0.00')
                for quantity in range(0, 160):
                    earning = calculate_earning(courier, quantity, same_day)
                    self.assertGreaterEqual(earning, previous)
                    previous = earning

    def test_deterministic(self):
        self.assertEqual(
            calculate_earning(Courier.SPX, 77, True),
            calculate_earning(Courier.SPX, 77, True),
        )


class TestParcelEntryModel(TestCase):
    """Tests for recording entries and querying them by date."""

    def setUp(self):
        self.employee = User.objects.create_user(
            email='maria@example.com',
            password='testpass123',
            name='Maria Santos',
        )
        self.today = timezone.localdate()

    def test_record_computes_earning(self):
        entry = ParcelEntry.objects.record(
            self.employee, task_id='T1', seller_id='S1',
            courier=Courier.SPX, quantity=150, picked_up_same_day=True,
        )
        entry.refresh_from_db()
        self.assertEqual(entry.total_earning, Decimal('100.00'))
        self.assertEqual(entry.user, self.employee)

    def test_record_defaults_date_to_today(self):
        entry = ParcelEntry.objects.record(
            self.employee, task_id='T1', seller_id='S1', courier=Courier.FLASH, quantity=5,
        )
        self.assertEqual(entry.date, self.today)

    def test_same_day_flag_forced_off_for_flash(self):
        entry = ParcelEntry.objects.record(
            self.employee, task_id='T1', seller_id='S1',
            courier=Courier.FLASH, quantity=10, picked_up_same_day=True,
        )
        entry.refresh_from_db()
        self.assertFalse(entry.picked_up_same_day)
        self.assertFalse(entry.same_day_applicable)
        self.assertEqual(entry.total_earning, Decimal('30.00'))

    def test_entries_survive_user_deletion(self):
        entry = ParcelEntry.objects.record(
            self.employee, task_id='T1', seller_id='S1', courier=Courier.SPX, quantity=10,
        )
        self.employee.delete()
        entry.refresh_from_db()
        self.assertIsNone(entry.user)
        self.assertEqual(entry.total_earning, Decimal('5.00'))

    def test_quantity_constraint(self):
        from django.db import IntegrityError, transaction
        with self.assertRaises(IntegrityError), transaction.atomic():
            ParcelEntry.objects.create(
                task_id='T1', seller_id='S1', courier=Courier.SPX,
                quantity=0, date=self.today, total_earning=Decimal('0.00'),
            )

    def test_in_range_inclusive_bounds(self):
        for offset in (0, 3, 7, 8):
            ParcelEntry.objects.record(
                self.employee, task_id=f'T{offset}', seller_id='S1',
                courier=Courier.SPX, quantity=1, date=self.today - timedelta(days=offset),
            )

        week = DateRange(since=self.today - timedelta(days=7), until=self.today)
        task_ids = list(ParcelEntry.objects.in_range(week).values_list('task_id', flat=True))

        self.assertEqual(task_ids, ['T0', 'T3', 'T7'])

    def test_in_range_unbounded_returns_all(self):
        ParcelEntry.objects.record(
            self.employee, task_id='OLD', seller_id='S1', courier=Courier.SPX,
            quantity=1, date=date(2001, 1, 1),
        )
        self.assertEqual(ParcelEntry.objects.in_range(UNBOUNDED).count(), 1)

    def test_in_range_orders_by_date_then_creation(self):
        first = ParcelEntry.objects.record(
            self.employee, task_id='A', seller_id='S1', courier=Courier.SPX, quantity=1,
        )
        second = ParcelEntry.objects.record(
            self.employee, task_id='B', seller_id='S1', courier=Courier.SPX, quantity=1,
        )
        older = ParcelEntry.objects.record(
            self.employee, task_id='C', seller_id='S1', courier=Courier.SPX, quantity=1,
            date=self.today - timedelta(days=1),
        )
        ids = list(ParcelEntry.objects.in_range(UNBOUNDED).values_list('id', flat=True))
        self.assertEqual(ids, [second.id, first.id, older.id])


class TestParcelEntryAPI(TestCase):
    """Tests for the parcel entries endpoints."""

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='admin@example.com', password='testpass123',
            name='Admin', role=UserRole.ADMIN,
        )
        self.employee = User.objects.create_user(
            email='juan@example.com', password='testpass123', name='Juan Cruz',
        )
        self.today = timezone.localdate()

    def _record(self, task_id, days_ago=0, courier=Courier.SPX, quantity=10, same_day=False):
        return ParcelEntry.objects.record(
            self.employee, task_id=task_id, seller_id='S1', courier=courier,
            quantity=quantity, picked_up_same_day=same_day,
            date=self.today - timedelta(days=days_ago),
        )

    # ==========================================
    # Authentication
    # ==========================================

    def test_list_requires_authentication(self):
        response = self.client.get('/api/parcels/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    # ==========================================
    # List & filters
    # ==========================================

    def test_list_uses_camel_case_keys(self):
        self._record('T1', quantity=150, same_day=True)
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        entry = response.data[0]
        self.assertEqual(entry['taskId'], 'T1')
        self.assertEqual(entry['sellerId'], 'S1')
        self.assertTrue(entry['pickedUpSameDay'])
        self.assertEqual(entry['totalEarning'], Decimal('100.00'))
        self.assertEqual(entry['userId'], self.employee.id)
        self.assertIn('createdAt', entry)

    def test_list_filter_today(self):
        self._record('TODAY')
        self._record('YESTERDAY', days_ago=1)
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/', {'filter': 'today'})

        self.assertEqual([e['taskId'] for e in response.data], ['TODAY'])

    def test_list_filter_week_is_rolling(self):
        self._record('IN', days_ago=7)
        self._record('OUT', days_ago=8)
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/', {'filter': 'week'})

        self.assertEqual([e['taskId'] for e in response.data], ['IN'])

    def test_list_unknown_filter_returns_everything(self):
        self._record('A')
        self._record('B', days_ago=900)
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/', {'filter': 'decade'})

        self.assertEqual(len(response.data), 2)

    def test_list_courier_filter(self):
        self._record('S', courier=Courier.SPX)
        self._record('F', courier=Courier.FLASH)
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/', {'courier': 'Flash'})

        self.assertEqual([e['taskId'] for e in response.data], ['F'])

    # ==========================================
    # Create
    # ==========================================

    def test_create_computes_earning_on_server(self):
        self.client.force_authenticate(self.employee)

        response = self.client.post('/api/parcels/', {
            'taskId': 'T1',
            'sellerId': 'S1',
            'courier': 'SPX',
            'quantity': 150,
            'pickedUpSameDay': True,
            'totalEarning': 9999,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['totalEarning'], Decimal('100.00'))
        entry = ParcelEntry.objects.get(task_id='T1')
        self.assertEqual(entry.total_earning, Decimal('100.00'))
        self.assertEqual(entry.user, self.employee)
        self.assertEqual(entry.date, self.today)

    def test_create_with_explicit_date(self):
        self.client.force_authenticate(self.employee)

        response = self.client.post('/api/parcels/', {
            'taskId': 'T2', 'sellerId': 'S2', 'courier': 'Flash',
            'quantity': 10, 'date': '2025-03-10',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['date'], '2025-03-10')
        self.assertEqual(response.data['totalEarning'], Decimal('30.00'))

    def test_create_flash_ignores_same_day(self):
        self.client.force_authenticate(self.employee)

        response = self.client.post('/api/parcels/', {
            'taskId': 'T3', 'sellerId': 'S3', 'courier': 'Flash',
            'quantity': 10, 'pickedUpSameDay': True,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['pickedUpSameDay'])

    def test_create_rejects_unknown_courier(self):
        self.client.force_authenticate(self.employee)

        response = self.client.post('/api/parcels/', {
            'taskId': 'T4', 'sellerId': 'S4', 'courier': 'LBC', 'quantity': 10,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('courier', response.data)
        self.assertFalse(ParcelEntry.objects.exists())

    def test_create_rejects_zero_quantity(self):
        self.client.force_authenticate(self.employee)

        response = self.client.post('/api/parcels/', {
            'taskId': 'T5', 'sellerId': 'S5', 'courier': 'SPX', 'quantity': 0,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_create_rejects_blank_ids(self):
        self.client.force_authenticate(self.employee)

        response = self.client.post('/api/parcels/', {
            'taskId': '  ', 'sellerId': '', 'courier': 'SPX', 'quantity': 1,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('taskId', response.data)
        self.assertIn('sellerId', response.data)

    def test_no_update_route(self):
        entry = self._record('T1')
        self.client.force_authenticate(self.admin)

        response = self.client.put(f'/api/parcels/{entry.id}/', {'quantity': 5}, format='json')

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    # ==========================================
    # Delete
    # ==========================================

    def test_admin_can_delete(self):
        entry = self._record('T1')
        self.client.force_authenticate(self.admin)

        response = self.client.delete(f'/api/parcels/{entry.id}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ParcelEntry.objects.filter(pk=entry.pk).exists())

    def test_employee_cannot_delete(self):
        entry = self._record('T1')
        self.client.force_authenticate(self.employee)

        response = self.client.delete(f'/api/parcels/{entry.id}/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(ParcelEntry.objects.filter(pk=entry.pk).exists())

    def test_delete_missing_entry(self):
        self.client.force_authenticate(self.admin)

        response = self.client.delete('/api/parcels/999999/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    # ==========================================
    # Summary & estimate
    # ==========================================

    def test_summary_totals(self):
        self._record('A', courier=Courier.SPX, quantity=150, same_day=True)
        self._record('B', courier=Courier.FLASH, quantity=10)
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/summary/', {'filter': 'today'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalQuantity'], 160)
        self.assertEqual(response.data['totalEarnings'], Decimal('130.00'))
        self.assertEqual(response.data['filter'], 'today')
        self.assertEqual(response.data['since'], self.today.isoformat())
        self.assertEqual(len(response.data['entries']), 2)

    def test_summary_empty(self):
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/summary/')

        self.assertEqual(response.data['totalQuantity'], 0)
        self.assertEqual(response.data['totalEarnings'], Decimal('0.00'))
        self.assertEqual(response.data['entries'], [])
        self.assertIsNone(response.data['since'])

    def test_estimate(self):
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/estimate/', {
            'courier': 'SPX', 'quantity': 150, 'pickedUpSameDay': 'true',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalEarning'], Decimal('100.00'))

    def test_estimate_rejects_unknown_courier(self):
        self.client.force_authenticate(self.employee)

        response = self.client.get('/api/parcels/estimate/', {'courier': 'LBC', 'quantity': 5})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
