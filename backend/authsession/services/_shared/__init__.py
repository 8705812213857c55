"""Shared service primitives: base service, error taxonomy and ports."""
