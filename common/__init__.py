"""
Shared building blocks: Extent geometry, data model, tagged errors, JSON logging.
"""
