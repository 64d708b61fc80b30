"""Catalog bounded context.

Art groups, their format variations, designer statistics and the shared
reference data (categories, formats, file types) they point at.
"""
