"""
HTTP API for verdict fusion and IOC history lookups.
"""
