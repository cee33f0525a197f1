"""
Tests for the amortized monthly payment formula.
Run from project root: python -m pytest tests/test_payment_calculator.py -v
"""
import unittest
from decimal import Decimal

from services.payment_calculator import calculate_monthly_payment, round_currency


class TestMonthlyPayment(unittest.TestCase):
    def test_standard_amortization(self):
        """50,000 at 7.5% over 60 months."""
        self.assertEqual(calculate_monthly_payment(Decimal("50000"), Decimal("7.5"), 60), Decimal("1001.90"))

    def test_thirty_year_mortgage(self):
        self.assertEqual(calculate_monthly_payment(100_000, 6, 360), Decimal("599.55"))

    def test_accepts_floats_without_binary_noise(self):
        self.assertEqual(
            calculate_monthly_payment(50000.0, 7.5, 60),
            calculate_monthly_payment(Decimal("50000"), Decimal("7.5"), 60),
        )

    def test_zero_rate_is_straight_division(self):
        self.assertEqual(calculate_monthly_payment(12_000, 0, 12), Decimal("1000.00"))
        self.assertEqual(calculate_monthly_payment(10_000, 0, 3), Decimal("3333.33"))

    def test_negative_rate_treated_as_interest_free(self):
        self.assertEqual(calculate_monthly_payment(6_000, -1, 6), Decimal("1000.00"))

    def test_non_positive_term_or_principal_returns_zero(self):
        self.assertEqual(calculate_monthly_payment(50_000, 7.5, 0), Decimal("0"))
        self.assertEqual(calculate_monthly_payment(50_000, 7.5, -12), Decimal("0"))
        self.assertEqual(calculate_monthly_payment(0, 7.5, 60), Decimal("0"))
        self.assertEqual(calculate_monthly_payment(-100, 7.5, 60), Decimal("0"))

    def test_single_month_repays_principal_plus_one_month_interest(self):
        """1,200 at 12% for one month -> 1,200 * 1.01."""
        self.assertEqual(calculate_monthly_payment(1_200, 12, 1), Decimal("1212.00"))

    def test_result_has_two_decimal_places(self):
        payment = calculate_monthly_payment(35_000, Decimal("5.99"), 72)
        self.assertEqual(payment.as_tuple().exponent, -2)


class TestRoundCurrency(unittest.TestCase):
    def test_half_rounds_away_from_zero(self):
        self.assertEqual(round_currency(Decimal("1.005")), Decimal("1.01"))
        self.assertEqual(round_currency(Decimal("2.675")), Decimal("2.68"))
        self.assertEqual(round_currency(Decimal("2.665")), Decimal("2.67"))

    def test_below_half_rounds_down(self):
        self.assertEqual(round_currency(Decimal("1001.8949")), Decimal("1001.89"))


if __name__ == "__main__":
    unittest.main()
