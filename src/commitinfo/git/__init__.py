"""Read-only git queries."""
