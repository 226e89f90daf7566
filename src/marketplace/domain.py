"""Marketplace bounded context: vendors, carts, orders and their fulfillment.

Customers browse vendor menus, fill a cart and check out; the cart is split
into one order per line, each owned by the vendor that sells the product.
Vendors drive orders through their lifecycle, riders carry paid orders to
the customer, and every transition of interest fans out notifications.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging

# Configure logging for the application
configure_logging()

# Domain Composition Root
marketplace = Domain(name="marketplace")
