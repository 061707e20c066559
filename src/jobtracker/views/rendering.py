from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "web" / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))


def render_template(name: str, **context: Any) -> str:
    return templates.get_template(name).render(**context)
