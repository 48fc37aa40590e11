"""Market data sources: Polymarket CLI runner and built-in mock data."""
