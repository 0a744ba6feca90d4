from decimal import Decimal

import pytest

from src.exceptions import InvalidInputError
from src.orders.pricing_service import PricingService


class TestPricingService:
    @pytest.fixture
    def pricing(self):
        return PricingService(tax_rate=Decimal("0.10"))

    def test_three_adults(self, pricing):
        price = pricing.calculate(Decimal("100"), passenger_count=3, infant_count=0)
        assert price.total == Decimal("300")
        assert price.pre_tax == Decimal("330")
        assert price.net == Decimal("300")
        assert price.tax == Decimal("30.00")

    def test_infant_rides_free(self, pricing):
        price = pricing.calculate(Decimal("100"), passenger_count=3, infant_count=1)
        assert price.total == Decimal("200")
        assert price.pre_tax == Decimal("220")
        assert price.tax == Decimal("20.00")

    def test_only_infants_costs_nothing(self, pricing):
        price = pricing.calculate(Decimal("100"), passenger_count=2, infant_count=2)
        assert price.total == Decimal("0")
        assert price.pre_tax == Decimal("0")
        assert price.tax == Decimal("0.00")

    def test_tax_rounds_half_up(self, pricing):
        # pre_tax 0.055, net 0.05 -> tax 0.005 rounds to 0.01
        price = pricing.calculate(Decimal("0.05"), passenger_count=1)
        assert price.tax == Decimal("0.01")

    def test_tax_is_exact_for_fractional_fares(self, pricing):
        price = pricing.calculate(Decimal("123.45"), passenger_count=2)
        assert price.total == Decimal("246.90")
        assert price.pre_tax == Decimal("271.59")
        assert price.tax == Decimal("24.69")

    def test_configurable_rate(self):
        price = PricingService(tax_rate=Decimal("0.20")).calculate(Decimal("50"), passenger_count=2)
        assert price.pre_tax == Decimal("120")
        assert price.net == Decimal("100")
        assert price.tax == Decimal("20.00")

    def test_calculate_for_items_counts_infants(self, pricing, passenger):
        items = [passenger(), passenger(is_infant=True), passenger()]
        price = pricing.calculate_for_items(Decimal("100"), items)
        assert price.total == Decimal("200")

    @pytest.mark.parametrize(
        "passengers, infants",
        [(0, 0), (2, 3), (2, -1)],
    )
    def test_rejects_invalid_counts(self, pricing, passengers, infants):
        with pytest.raises(InvalidInputError):
            pricing.calculate(Decimal("100"), passenger_count=passengers, infant_count=infants)

    def test_rejects_negative_fare(self, pricing):
        with pytest.raises(InvalidInputError):
            pricing.calculate(Decimal("-1"), passenger_count=1)
