"""Cart domain objects."""
