"""
Tale engine - content-agnostic infrastructure for the session core.

Subpackages:
- core: data record bases, event bus, actions, scheduler
- resources: catalog database with schema validation, key-value stores
"""

__version__ = "0.1.0"
