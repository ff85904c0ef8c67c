"""rawrelay: an authenticated relay for raw text resources with a revalidating cache."""

from .app import create_app as create_app
from .config import RelaySettings as RelaySettings
from .engine import ResourceCache as ResourceCache
from .origin import OriginClient as OriginClient
from .routes import add_routes as add_routes
from .types import Provenance as Provenance

__all__ = [
    "OriginClient",
    "Provenance",
    "RelaySettings",
    "ResourceCache",
    "add_routes",
    "create_app",
]
