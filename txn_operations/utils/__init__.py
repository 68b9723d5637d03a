"""
Transaction Operations Utilities

Exports the predicate-driven retry helper.
"""

from .retry import retry_request

__all__ = ['retry_request']
