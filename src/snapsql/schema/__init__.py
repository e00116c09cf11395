"""
Schema bootstrap utilities.
"""

from .bootstrap import SchemaBootstrapper

__all__ = ["SchemaBootstrapper"]
