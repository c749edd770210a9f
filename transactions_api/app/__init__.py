"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Configuration, logging, error types and the record store
live in ``core``; request/response models in ``schemas``; query and
seed logic in ``services``; and the HTTP routes under
``api/<version>/``.
"""

from .main import app  # noqa: F401
