"""Infrastructure layer - clocks, locks, and storage adapters."""
