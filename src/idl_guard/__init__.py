"""
IDL Guard package initializer.

This package exposes the primary coroutine ``run_check`` for external
usage.  Data sources and the individual check stages should be imported
explicitly from their respective modules.
"""

from .checker import run_check  # noqa: F401

__all__ = ["run_check"]
