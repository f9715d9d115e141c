"""Asset path resolution."""
import re
from typing import Callable

from pyportal.exceptions import PortalPathError

# Resolver signature: resolver(path) -> site path
PathResolver = Callable[[str], str]

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def is_absolute(path: str) -> bool:
    """True for site-absolute paths, protocol-relative and scheme URLs."""
    return path.startswith("/") or bool(_SCHEME_RE.match(path))


def resolve_path(path: str, root_path: str = "") -> str:
    """
    Turn an app-relative reference into a site path.

    '~/content/a.css' with root_path '/shop' -> '/shop/content/a.css'
    '/content/a.css' and 'https://cdn/x.js' are returned unchanged.
    Anything else is ambiguous and raises PortalPathError.
    """
    if path == "~" or path.startswith("~/"):
        root = root_path.rstrip("/")
        rest = path[2:]
        return f"{root}/{rest}"

    if is_absolute(path):
        return path

    raise PortalPathError("Relative asset path must start with '~/' or '/'", path)


def make_resolver(root_path: str = "") -> PathResolver:
    """Bind resolve_path to an application root."""

    def resolver(path: str) -> str:
        return resolve_path(path, root_path)

    return resolver
