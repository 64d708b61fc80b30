"""Catalog infrastructure: PostgreSQL repositories and image storage adapters."""
