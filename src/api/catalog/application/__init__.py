"""Catalog application layer: use-case services, access policy and probes."""
