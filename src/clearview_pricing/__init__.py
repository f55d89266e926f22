"""
ClearView Pricing Package

Quoting backend for window and exterior-cleaning jobs.
Resolves a service from the catalog, applies buffer and minimum-charge policy,
and returns a taxed quote breakdown.
"""

__version__ = "1.0.0"
