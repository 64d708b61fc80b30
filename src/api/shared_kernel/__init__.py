"""Components shared by the catalog and any future bounded context.

Holds bearer-token validation and the observation context handed to every
probe. Nothing here may import from a bounded context.
"""
