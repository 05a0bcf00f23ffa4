"""Credential store and single-flight token cache manager."""
