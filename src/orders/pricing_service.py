from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from src.config import settings
from src.exceptions import InvalidInputError
from src.orders.schemas import PriceBreakdown

CENT = Decimal("0.01")

class PricingService:
    """Price and tax arithmetic for an order.

    For fare ``F``, ``N`` passengers and ``I`` infants (who ride free):

        total   = (N - I) * F
        pre_tax = total + total * rate
        net     = pre_tax / (1 + rate)
        tax     = round_half_up(pre_tax - net, 2)
    """

    def __init__(self, tax_rate: Optional[Decimal] = None):
        self.tax_rate = Decimal(str(settings.TAX_RATE if tax_rate is None else tax_rate))
        if self.tax_rate < 0:
            raise InvalidInputError("Tax rate cannot be negative")

    def calculate(self, fare, passenger_count: int, infant_count: int = 0) -> PriceBreakdown:
        fare = Decimal(str(fare))
        if fare < 0:
            raise InvalidInputError("Fare cannot be negative")
        if passenger_count < 1:
            raise InvalidInputError("At least one passenger is required")
        if not 0 <= infant_count <= passenger_count:
            raise InvalidInputError("Infant count must be between 0 and the passenger count")

        total = (passenger_count - infant_count) * fare
        pre_tax = total + total * self.tax_rate
        net = pre_tax / (1 + self.tax_rate)
        tax = (pre_tax - net).quantize(CENT, rounding=ROUND_HALF_UP)

        return PriceBreakdown(
            total=total.quantize(CENT, rounding=ROUND_HALF_UP),
            pre_tax=pre_tax.quantize(CENT, rounding=ROUND_HALF_UP),
            net=net.quantize(CENT, rounding=ROUND_HALF_UP),
            tax=tax
        )

    def calculate_for_items(self, fare, items: Iterable) -> PriceBreakdown:
        """Price a set of order items (anything with an ``is_infant`` flag)"""
        items = list(items)
        infants = sum(1 for item in items if item.is_infant)
        return self.calculate(fare, len(items), infants)
