"""Tiered margin rollup engine for calculation quotes."""

__version__ = "0.1.0"
