"""
PetSocial API backend.

Lookup tables (pet types, breeds, colors, foods, user types) served through a
cache-aside layer that is invalidated from the ORM commit path.
"""

__version__ = "0.1.0"
