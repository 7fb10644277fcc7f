"""User interfaces of the margin rollup."""

__all__ = []
