"""Framework-agnostic primitives shared by every service."""
