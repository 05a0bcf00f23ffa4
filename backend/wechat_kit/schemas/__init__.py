"""Marshmallow schemas decoding platform responses into service DTOs."""
