"""Ports (interfaces) for the Catalog bounded context."""
