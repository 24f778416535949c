# sensordash/core/views.py
from pathlib import Path

from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape

# Templates
templates_path = Path(__file__).resolve().parent.parent / "templates"
jinja_env = Environment(
    loader=FileSystemLoader(templates_path),
    autoescape=select_autoescape(["html"]),
)


def render_template(template_name: str, context: dict) -> str:
    template = jinja_env.get_template(template_name)
    return template.render(**context)


def render_page(
    template_name: str,
    status_code: int = 200,
    **context,
) -> HTMLResponse:
    """Render `pages/<template_name>.html` into an HTMLResponse."""
    content = render_template(f"pages/{template_name}.html", context)
    return HTMLResponse(content=content, status_code=status_code)


def render_login(message: str | None = None, status_code: int = 200) -> HTMLResponse:
    return render_page("login", status_code=status_code, message=message)
