"""
Ticket inventory module.

- inventory_service.py: remaining-seat ledger with guarded reserve/release
- seat_service.py: per-ticket seat numbering for new passengers
- router.py: read-only ticket endpoint
"""

from .router import router
from .inventory_service import InventoryService
from .seat_service import SeatAllocationService

__all__ = [
    "router",
    "InventoryService",
    "SeatAllocationService",
]
