"""Preview ASGI application: serves Jinja2 views wrapped in a layout."""
import logging
from pathlib import Path
from typing import List, Optional

from jinja2 import TemplateNotFound
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles
from starlette.types import Receive, Scope, Send

from pyportal.runtime.middleware import PortalMiddleware
from pyportal.runtime.rendering import PortalRenderer
from pyportal.runtime.templating import create_environment

logger = logging.getLogger(__name__)


class PortalApp:
    """Main ASGI application and configuration."""

    def __init__(
        self,
        templates_dir: Optional[str] = None,
        layout: Optional[str] = None,
        debug: bool = False,
        static_dir: Optional[str] = None,
        static_path: str = "/static",
        root_path: Optional[str] = None,
    ):
        if templates_dir is None:
            # Auto-discovery
            cwd = Path.cwd()
            potential_paths = [cwd / "templates", cwd / "src" / "templates"]
            self.templates_dir = Path("templates")
            for path in potential_paths:
                if path.is_dir():
                    self.templates_dir = path
                    break
        else:
            self.templates_dir = Path(templates_dir)

        # User configured static directory (disabled by default)
        self.static_dir = None
        if static_dir:
            path = Path(static_dir)
            if not path.is_absolute():
                potential = Path.cwd() / path
                if not potential.exists():
                    src_potential = Path.cwd() / "src" / path
                    if src_potential.exists():
                        potential = src_potential
                self.static_dir = potential.resolve()
            else:
                self.static_dir = path

        self.static_url_path = static_path
        self.layout = layout
        self.debug = debug

        self.env = create_environment(self.templates_dir)
        self.renderer = PortalRenderer(self.env, layout=layout)

        routes = []
        if self.static_dir:
            if not self.static_dir.exists():
                print(f"Warning: Configured static directory '{self.static_dir}' does not exist.")
            else:
                routes.append(
                    Mount(
                        self.static_url_path,
                        app=StaticFiles(directory=str(self.static_dir)),
                        name="static",
                    )
                )
        routes.append(Route("/{path:path}", self._handle_page, methods=["GET"]))

        self.app = Starlette(
            debug=debug,
            routes=routes,
            middleware=[Middleware(PortalMiddleware, root_path=root_path)],
        )

    def view_candidates(self, path: str) -> List[str]:
        """Template names that may serve a URL path, in lookup order."""
        path = path.strip("/")
        if not path:
            names = ["index.html"]
        elif path.endswith(".html"):
            names = [path]
        else:
            names = [f"{path}.html", f"{path}/index.html"]
        # Partials and layouts are underscore-prefixed and never routed directly
        return [n for n in names if not Path(n).name.startswith("_") and n != self.layout]

    def _resolve_view(self, path: str) -> Optional[str]:
        for name in self.view_candidates(path):
            try:
                self.env.get_template(name)
                return name
            except TemplateNotFound:
                continue
        return None

    def _handle_page(self, request: Request) -> Response:
        # Sync on purpose: Starlette runs it in the threadpool, off the event loop
        view = self._resolve_view(request.path_params.get("path", ""))
        if view is None:
            return PlainTextResponse("Not Found", status_code=404)

        logger.info("GET %s -> %s", request.url.path, view)
        return self.renderer.response(request, view, context={"query": dict(request.query_params)})

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.app(scope, receive, send)
