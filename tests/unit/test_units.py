"""
Unit tests for keg / drum / liter conversions.
"""

from decimal import Decimal

from kegpos.utils.units import drum_capacity_liters, fill_details, liters_for


class TestLitersFor:

    def test_single_keg(self):
        assert liters_for(1) == Decimal('25')

    def test_drum_is_nine_kegs(self):
        assert liters_for(9) == Decimal('225')
        assert drum_capacity_liters() == Decimal('225')

    def test_custom_keg_capacity(self):
        assert liters_for(2, Decimal('30')) == Decimal('60')


class TestFillDetails:

    def test_breakdown(self):
        # 500 L = 2 drums (450 L) + 2 kegs (50 L) = 20 kegs total
        details = fill_details(Decimal('500'))
        assert details['total_drums'] == 2
        assert details['total_kegs'] == 20
        assert details['remaining_kegs'] == 2
        assert details['remaining_liters'] == Decimal('0')

    def test_partial_keg(self):
        details = fill_details(Decimal('260'))
        assert details['total_drums'] == 1
        assert details['total_kegs'] == 10
        assert details['remaining_kegs'] == 1
        assert details['remaining_liters'] == Decimal('10')

    def test_negative_pool_counts_as_empty(self):
        details = fill_details(Decimal('-50'))
        assert details['total_drums'] == 0
        assert details['total_kegs'] == 0
        assert details['remaining_liters'] == Decimal('0')
