"""Ambient binding of the current request's portal registry."""
import contextvars
from contextlib import contextmanager
from typing import Iterator, Optional

from pyportal.exceptions import PortalContextError
from pyportal.runtime.registry import PortalRegistry

# Registry for the current request/render. asyncio copies context per task,
# so concurrent requests each see their own value.
portal_ctx: contextvars.ContextVar[Optional[PortalRegistry]] = contextvars.ContextVar(
    "portal_ctx", default=None
)


def current_registry() -> PortalRegistry:
    """Registry bound to the running request."""
    registry = portal_ctx.get()
    if registry is None:
        raise PortalContextError(
            "No portal registry is bound. Pass one as 'portal' in the template context "
            "or wrap the app with PortalMiddleware."
        )
    return registry


@contextmanager
def use_registry(registry: Optional[PortalRegistry] = None) -> Iterator[PortalRegistry]:
    """Bind a registry (a fresh one by default) for the duration of the block."""
    if registry is None:
        registry = PortalRegistry()
    token = portal_ctx.set(registry)
    try:
        yield registry
    finally:
        portal_ctx.reset(token)
