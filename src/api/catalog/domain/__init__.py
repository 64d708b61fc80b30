"""Catalog domain layer: aggregates, value objects and domain errors."""
