"""HTML invoice rendering with Jinja2."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ordering.invoice.view import InvoiceView

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _money(amount) -> str:
    return f"${amount:,.2f}"


_environment = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)
_environment.filters["money"] = _money


class InvoiceHtmlTemplate:
    content_type = "text/html; charset=utf-8"
    template_name = "invoice.html"

    @staticmethod
    def render(view: InvoiceView) -> str:
        return _environment.get_template(InvoiceHtmlTemplate.template_name).render(view=view)
