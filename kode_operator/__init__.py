"""Envoy bootstrap generation, Envoy configuration types, shared constants and validation for Kode workspaces."""

__version__ = "0.1.0"
__all__ = ["bootstrap", "constants", "envoy_types", "validation"]