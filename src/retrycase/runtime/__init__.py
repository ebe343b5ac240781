"""Runtime - retry execution and its observability."""
