"""HTTP query API for the pool engine."""
