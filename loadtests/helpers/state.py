"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class VendorState:
    """Tracks state for a single simulated vendor."""

    vendor_id: str | None = None
    menu_item_ids: list[str] = field(default_factory=list)


@dataclass
class BuyerState:
    """Tracks a buyer from browsing through payment."""

    user_id: str | None = None
    vendor_id: str | None = None
    menu_item_ids: list[str] = field(default_factory=list)
    line_ids: list[str] = field(default_factory=list)
    checkout_batch_id: str | None = None
    order_ids: list[str] = field(default_factory=list)
    payment_reference: str | None = None
