"""Order validation, dry-run commands and gated execution via the Polymarket CLI."""
