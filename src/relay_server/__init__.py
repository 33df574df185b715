"""Relay server package: an ephemeral, room-scoped store for E2E-encrypted chat.

The server only ever sees opaque ciphertext, signatures and public keys.
It provides a FastAPI application factory named ``create_app`` inside
``relay_server/server.py`` (see :func:`create_app`).

Typical usage
-------------
from relay_server import create_app
app = create_app()

or, from the provided launcher:

python scripts/run_server.py --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from .errors import ValidationError
from .server import create_app
from .store import RelayStore

__all__ = ["create_app", "RelayStore", "ValidationError", "__version__", "get_version"]

# ---------------------------------------------------------------------
# Version handling
# ---------------------------------------------------------------------
__version__ = "1.0.0"


def get_version() -> str:
    """Return the package version."""
    return __version__
