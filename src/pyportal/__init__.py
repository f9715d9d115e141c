"""Per-request portals that carry markup from child views to their layouts."""

from pyportal.exceptions import PortalContextError, PortalError, PortalPathError
from pyportal.runtime.registry import BucketKind, PortalRegistry

__version__ = "0.1.0"

__all__ = [
    "BucketKind",
    "PortalRegistry",
    "PortalError",
    "PortalPathError",
    "PortalContextError",
]
