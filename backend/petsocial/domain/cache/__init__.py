"""
Lookup cache domain.

Cache keys, TTLs, change-set entries and the invalidation rules that map a
committed change set to the cache keys it could have staled.
"""
