"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for code generation.
"""

import math
from typing import Dict, Any, Optional
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    DictLoader,
    StrictUndefined,
    TemplateNotFound,
    select_autoescape,
)

from .naming import snake_to_camel


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


_GO_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def go_string_literal(value: Any) -> str:
    """Render a value as an interpreted Go string literal."""
    out = ['"']
    for char in str(value):
        if char in _GO_ESCAPES:
            out.append(_GO_ESCAPES[char])
        elif 0xD800 <= ord(char) <= 0xDFFF:
            # lone surrogates have no valid Go encoding
            out.append("\\ufffd")
        elif not char.isprintable():
            code = ord(char)
            out.append(f"\\u{code:04x}" if code <= 0xFFFF else f"\\U{code:08x}")
        else:
            out.append(char)
    out.append('"')
    return "".join(out)


def go_float_literal(value: float) -> str:
    """Render a finite float as the shortest Go literal that round-trips."""
    value = float(value)
    if not math.isfinite(value):
        raise TemplateError(f"cannot render non-finite float {value!r} as a Go literal")
    text = repr(value)
    if text.endswith(".0"):
        text = text[:-2]
    return text


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            # Use in-memory templates
            loader = DictLoader({})

        self._env = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        # Add custom filters for code generation
        self._env.filters["camel"] = snake_to_camel
        self._env.filters["go_string"] = go_string_literal
        self._env.filters["go_float"] = go_float_literal

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except TemplateError:
            raise
        except Exception as e:
            raise TemplateError(
                f"Failed to render template {template_name}: {str(e)}"
            ) from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Args:
            template_string: Template content as string
            context: Variables to pass to template

        Returns:
            Rendered content
        """
        try:
            template = self._env.from_string(template_string)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template string: {str(e)}") from e

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template.

        Args:
            name: Template name
            content: Template content
        """
        if not isinstance(self._env.loader, DictLoader):
            # Convert to DictLoader to support in-memory templates
            self._env.loader = DictLoader({})

        self._env.loader.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        """Check if a template can be loaded."""
        try:
            self._env.get_template(template_name)
        except TemplateNotFound:
            return False
        return True


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, optionally bound to a template directory."""
    return TemplateEngine(template_dir)
