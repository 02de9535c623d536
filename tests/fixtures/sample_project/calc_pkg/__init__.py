"""Tiny library used as a resolution target by the introspection tests."""
from calc_pkg.core import Calculator

__all__ = ["Calculator"]
