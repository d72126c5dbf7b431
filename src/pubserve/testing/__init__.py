"""Test utilities for pubserve servers.

Provides an in-process async test client::

    from pubserve.testing import TestClient
"""

from pubserve.testing.client import TestClient

__all__ = [
    "TestClient",
]
