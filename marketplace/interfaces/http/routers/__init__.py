"""HTTP routers grouped by entity."""
