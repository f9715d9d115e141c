"""Jinja2 integration: portal helpers and the {% portal %} block tag."""
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, nodes, pass_context, select_autoescape
from jinja2.ext import Extension
from jinja2.runtime import Context
from markupsafe import Markup

from pyportal.runtime.context import current_registry
from pyportal.runtime.registry import BucketKind, PortalRegistry

# Template variable holding the request's registry
PORTAL_VAR = "portal"

# Marks an omitted text argument; None is a value a template can pass
_MISSING = object()


def registry_from(context: Context) -> PortalRegistry:
    """Registry passed to the template, falling back to the ambient one."""
    registry = context.get(PORTAL_VAR)
    if isinstance(registry, PortalRegistry):
        return registry
    return current_registry()


@pass_context
def portal_in(context: Context, key_or_text: str, text: Any = _MISSING) -> str:
    """portal_in(html) or portal_in(key, html)."""
    registry = registry_from(context)
    if text is _MISSING:
        registry.append(BucketKind.DEFAULT, str(key_or_text))
    else:
        registry.append(key_or_text, str(text))
    return ""


@pass_context
def portal_in_unique(context: Context, key_or_text: str, text: Any = _MISSING) -> str:
    registry = registry_from(context)
    if text is _MISSING:
        registry.append_unique(BucketKind.DEFAULT, str(key_or_text))
    else:
        registry.append_unique(key_or_text, str(text))
    return ""


@pass_context
def portal_in_css(context: Context, path: str) -> str:
    registry_from(context).add_css(path)
    return ""


@pass_context
def portal_in_css_absolute(context: Context, path: str) -> str:
    registry_from(context).add_css_absolute(path)
    return ""


@pass_context
def portal_in_js(context: Context, path: str) -> str:
    registry_from(context).add_js(path)
    return ""


@pass_context
def portal_in_js_absolute(context: Context, path: str) -> str:
    registry_from(context).add_js_absolute(path)
    return ""


@pass_context
def portal_in_script(context: Context, text: str) -> str:
    registry_from(context).add_script(str(text))
    return ""


@pass_context
def portal_in_script_unique(context: Context, text: str) -> str:
    registry_from(context).add_script_unique(str(text))
    return ""


@pass_context
def portal_clear(context: Context, key: Optional[str] = None) -> str:
    registry_from(context).clear(BucketKind.DEFAULT if key is None else key)
    return ""


@pass_context
def portal_out(context: Context, key: Optional[str] = None) -> Markup:
    return Markup(registry_from(context).render(BucketKind.DEFAULT if key is None else key))


@pass_context
def portal_out_css(context: Context) -> Markup:
    return Markup(registry_from(context).render(BucketKind.STYLESHEET))


@pass_context
def portal_out_js(context: Context) -> Markup:
    return Markup(registry_from(context).render(BucketKind.SCRIPT_FILE))


@pass_context
def portal_out_script(context: Context) -> Markup:
    return Markup(registry_from(context).render(BucketKind.SCRIPT_BLOCK))


PORTAL_GLOBALS: Dict[str, Callable[..., Any]] = {
    "portal_in": portal_in,
    "portal_in_unique": portal_in_unique,
    "portal_in_css": portal_in_css,
    "portal_in_css_absolute": portal_in_css_absolute,
    "portal_in_js": portal_in_js,
    "portal_in_js_absolute": portal_in_js_absolute,
    "portal_in_script": portal_in_script,
    "portal_in_script_unique": portal_in_script_unique,
    "portal_clear": portal_clear,
    "portal_out": portal_out,
    "portal_out_css": portal_out_css,
    "portal_out_js": portal_out_js,
    "portal_out_script": portal_out_script,
}


class PortalExtension(Extension):
    """
    Capture a rendered block into a portal.

        {% portal %}<div>to the default portal</div>{% endportal %}
        {% portal "sidebar" unique %}<nav>...</nav>{% endportal %}
        {% portal script %}<script>init();</script>{% endportal %}
    """

    tags = {"portal"}

    def parse(self, parser: Any) -> nodes.Node:
        lineno = next(parser.stream).lineno

        target: nodes.Expr = nodes.Const(None)
        if parser.stream.skip_if("name:script"):
            target = nodes.Const(BucketKind.SCRIPT_BLOCK.value)
        elif parser.stream.current.type != "block_end" and not parser.stream.current.test(
            "name:unique"
        ):
            target = parser.parse_expression()
        unique = parser.stream.skip_if("name:unique")

        body = parser.parse_statements(("name:endportal",), drop_needle=True)
        call = self.call_method(
            "_capture", [nodes.ContextReference(), target, nodes.Const(unique)]
        )
        return nodes.CallBlock(call, [], [], body).set_lineno(lineno)

    def _capture(
        self, context: Context, target: Optional[str], unique: bool, caller: Callable[[], str]
    ) -> str:
        registry = registry_from(context)
        text = str(caller())
        bucket = BucketKind.DEFAULT if target is None else target
        if unique:
            registry.append_unique(bucket, text)
        else:
            registry.append(bucket, text)
        return ""


def install_portal(env: Environment) -> Environment:
    """Register the portal tag and helpers on an existing environment."""
    env.add_extension(PortalExtension)
    env.globals.update(PORTAL_GLOBALS)
    return env


def create_environment(templates_dir: Union[str, Path], **options: Any) -> Environment:
    """File-system Jinja2 environment with portals installed."""
    options.setdefault("autoescape", select_autoescape(["html", "htm", "xml"]))
    env = Environment(loader=FileSystemLoader(str(templates_dir)), **options)
    return install_portal(env)
