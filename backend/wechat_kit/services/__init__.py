"""Service layer: credentials, signing and the feature services.

Subpackages are imported explicitly; this package re-exports nothing so that
the schemas can import service DTOs without import cycles.
"""
