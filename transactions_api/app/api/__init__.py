"""
API package containing versioned routes.

This package groups API versions under subpackages such as ``v1``.  A
version subpackage typically exposes a top‑level ``router`` which
includes all of its endpoints.  Request-scoped dependencies shared by
every version live in ``deps``.
"""
