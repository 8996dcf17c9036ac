"""Pure rendering functions: structured data -> HTML strings.

All renderers follow the same pattern:
  - Input: CSV rows, dataclasses (from datasources/) or dicts
  - Output: str (HTML)
  - No side effects, no I/O, no Prefect decorators

Photo and profile lookups happen in flows/render.py, which passes the results
in; renderers never call the API themselves.

Public API:
  - report: build_report_html, build_least_observed_cards, build_oldest_seen_cards
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for all renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)
