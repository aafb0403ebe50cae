"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``forge_npm_pkg/scaffolder/templates/`` directory and renders them with
project-specific context data.

GitHub workflow templates need literal ``${{ ... }}`` expressions, which
clash with Jinja's own delimiters; templates emit them through the ``gh()``
global instead (``{{ gh("matrix.node-version") }}``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for the generated npm package.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined variables raise immediately so a missing
    context key never renders as an empty string into a config file.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["js_list"] = _js_list_filter
        self.env.filters["flow_list"] = _flow_list_filter
        self.env.globals["gh"] = github_expression

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"workflows/ci.yml.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _js_list_filter(values: list[Any]) -> str:
    """Render ``["cjs", "esm"]`` as ``'cjs', 'esm'`` for JS/TS source."""
    return ", ".join(f"'{v}'" for v in values)


def _flow_list_filter(values: list[Any]) -> str:
    """Render a YAML flow sequence: ``[20, 22]``."""
    return "[" + ", ".join(str(v) for v in values) + "]"


def github_expression(expression: str) -> str:
    """Wrap *expression* in GitHub Actions ``${{ }}`` syntax."""
    return "${{ " + expression + " }}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
