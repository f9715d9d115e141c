"""Main CLI entry point."""
import logging
from typing import Dict, Tuple

import click
from jinja2 import TemplateNotFound

from pyportal.config import load_config
from pyportal.exceptions import PortalError


def _parse_vars(values: Tuple[str, ...]) -> Dict[str, str]:
    """Turn ('title=Home', ...) into {'title': 'Home'}."""
    parsed = {}
    for item in values:
        if "=" not in item:
            raise click.BadParameter(f"Expected KEY=VALUE, got '{item}'", param_hint="--var")
        key, value = item.split("=", 1)
        parsed[key.strip()] = value
    return parsed


def _option(ctx: click.Context, name: str, value, default=None):
    """CLI value, else pyportal.config.py value, else default."""
    if value is not None:
        return value
    return ctx.obj["config"].get(name, default)


@click.group()
@click.version_option(package_name="pyportal")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
              help="Config file (default: ./pyportal.config.py)")
@click.option("--debug/--no-debug", default=None, help="Verbose logging")
@click.pass_context
def cli(ctx, config_path, debug):
    """pyportal CLI.

    Run 'pyportal render VIEW' to print a view rendered inside its layout.
    Run 'pyportal serve' to preview a templates directory in the browser.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)
    debug = _option(ctx, "debug", debug, False)
    ctx.obj["debug"] = debug
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)


@cli.command()
@click.argument("view")
@click.option("--templates", "templates_dir", default=None, help="Templates directory")
@click.option("--layout", "layouts", multiple=True, help="Layout template, innermost first")
@click.option("--root-path", default=None, help="Site root used to resolve '~/' asset paths")
@click.option("--var", "variables", multiple=True, help="Template variable as KEY=VALUE")
@click.option("-o", "--output", type=click.File("w"), default="-", help="Output file")
@click.pass_context
def render(ctx, view, templates_dir, layouts, root_path, variables, output):
    """Render VIEW and its layouts to stdout."""
    from pyportal.runtime.registry import PortalRegistry
    from pyportal.runtime.rendering import PortalRenderer
    from pyportal.runtime.templating import create_environment

    templates_dir = _option(ctx, "templates_dir", templates_dir, "templates")
    root_path = _option(ctx, "root_path", root_path, "")
    layout = list(layouts) or _option(ctx, "layout", None)
    context = _parse_vars(variables)

    renderer = PortalRenderer(create_environment(templates_dir), root_path=root_path)
    try:
        html = renderer.render(
            view, layout=layout, registry=PortalRegistry(root_path=root_path), context=context
        )
    except TemplateNotFound as e:
        raise click.ClickException(f"Template not found: {e.name}")
    except PortalError as e:
        raise click.ClickException(str(e))

    output.write(html)
    if not html.endswith("\n"):
        output.write("\n")


@cli.command()
@click.option("--templates", "templates_dir", default=None, help="Templates directory")
@click.option("--layout", default=None, help="Layout wrapped around every view")
@click.option("--static-dir", default=None, help="Directory served under --static-path")
@click.option("--static-path", default=None, help="URL prefix for static files")
@click.option("--root-path", default=None, help="Site root used to resolve '~/' asset paths")
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.pass_context
def serve(ctx, templates_dir, layout, static_dir, static_path, root_path, host, port):
    """Preview a templates directory using Uvicorn."""
    import uvicorn

    from pyportal.runtime.app import PortalApp

    host = _option(ctx, "host", host, "127.0.0.1")
    port = _option(ctx, "port", port, 3000)

    app = PortalApp(
        templates_dir=_option(ctx, "templates_dir", templates_dir),
        layout=_option(ctx, "layout", layout),
        debug=ctx.obj["debug"],
        static_dir=_option(ctx, "static_dir", static_dir),
        static_path=_option(ctx, "static_path", static_path, "/static"),
        root_path=_option(ctx, "root_path", root_path),
    )

    click.echo(f"🚀 Serving {app.templates_dir} on http://{host}:{port}")
    if app.layout:
        click.echo(f"🧱 Layout: {app.layout}")

    uvicorn.run(app, host=host, port=port, log_level="debug" if ctx.obj["debug"] else "info")


if __name__ == "__main__":
    cli()
