"""Multi-vendor food marketplace: catalog, cart, checkout, orders, payments,
delivery tasks and notifications on a single Protean domain."""
