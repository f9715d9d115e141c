"""ASGI middleware giving every HTTP request its own portal registry."""
import logging
from typing import Optional

from starlette.types import ASGIApp, Receive, Scope, Send

from pyportal.runtime.context import portal_ctx
from pyportal.runtime.registry import PortalRegistry

logger = logging.getLogger(__name__)


class PortalMiddleware:
    """
    Creates a PortalRegistry on request entry and exposes it as
    request.state.portal and through the portal context variable.
    The binding is dropped when the request finishes.
    """

    def __init__(self, app: ASGIApp, root_path: Optional[str] = None):
        self.app = app
        self.root_path = root_path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        root_path = self.root_path if self.root_path is not None else scope.get("root_path", "")
        registry = PortalRegistry(root_path=root_path)
        scope.setdefault("state", {})["portal"] = registry

        token = portal_ctx.set(registry)
        logger.debug("portal registry bound for %s", scope.get("path"))
        try:
            await self.app(scope, receive, send)
        finally:
            portal_ctx.reset(token)

    def __getattr__(self, name):
        return getattr(self.app, name)
