"""Runtime components."""

from pyportal.runtime.app import PortalApp
from pyportal.runtime.context import current_registry, use_registry
from pyportal.runtime.middleware import PortalMiddleware
from pyportal.runtime.registry import BucketKind, PortalRegistry
from pyportal.runtime.rendering import PortalRenderer
from pyportal.runtime.templating import PortalExtension, create_environment, install_portal

__all__ = [
    "BucketKind",
    "PortalRegistry",
    "PortalMiddleware",
    "PortalRenderer",
    "PortalExtension",
    "PortalApp",
    "current_registry",
    "use_registry",
    "install_portal",
    "create_environment",
]
