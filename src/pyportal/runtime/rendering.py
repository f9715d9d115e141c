"""Children-first rendering of a view inside its layouts."""
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from jinja2 import Environment
from markupsafe import Markup
from starlette.requests import Request
from starlette.responses import HTMLResponse

from pyportal.runtime.context import portal_ctx
from pyportal.runtime.registry import PortalRegistry
from pyportal.runtime.templating import PORTAL_VAR

logger = logging.getLogger(__name__)

Layouts = Union[str, Sequence[str], None]


def _layout_chain(layout: Layouts) -> list[str]:
    if layout is None:
        return []
    if isinstance(layout, str):
        return [layout]
    return list(layout)


class PortalRenderer:
    """
    Renders a view, then each layout around it.

    The view always runs first so everything it pushes into a portal is
    available when the layout flushes. With a list of layouts, the first
    entry is the innermost and receives the view's output as `body`.
    """

    def __init__(self, env: Environment, layout: Layouts = None, root_path: str = ""):
        self.env = env
        self.layout = layout
        self.root_path = root_path

    def render(
        self,
        view: str,
        layout: Layouts = None,
        registry: Optional[PortalRegistry] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Render view (and layouts) to a string sharing a single registry.
        context holds the template variables; any name is allowed.
        """
        if registry is None:
            registry = portal_ctx.get()
        if registry is None:
            registry = PortalRegistry(root_path=self.root_path)
        chain = _layout_chain(layout if layout is not None else self.layout)

        variables = dict(context or {})
        variables[PORTAL_VAR] = registry
        token = portal_ctx.set(registry)
        try:
            html = self.env.get_template(view).render(**variables)
            for name in chain:
                logger.debug("rendering layout %s around %s", name, view)
                variables["body"] = Markup(html)
                html = self.env.get_template(name).render(**variables)
        finally:
            portal_ctx.reset(token)
        return html

    def response(
        self,
        request: Request,
        view: str,
        layout: Layouts = None,
        status_code: int = 200,
        context: Optional[Mapping[str, Any]] = None,
    ) -> HTMLResponse:
        """HTMLResponse for view using the registry PortalMiddleware attached."""
        registry = getattr(request.state, PORTAL_VAR, None)
        if registry is None:
            registry = PortalRegistry(root_path=request.scope.get("root_path", ""))
        variables = {"request": request, **(context or {})}
        html = self.render(view, layout=layout, registry=registry, context=variables)
        return HTMLResponse(html, status_code=status_code)
