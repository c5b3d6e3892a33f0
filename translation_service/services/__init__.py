"""Services: cache layer, invalidation, record store, export engine."""
