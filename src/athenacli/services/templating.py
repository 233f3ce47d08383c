"""Template rendering for query text and result paths."""
import os
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from jinja2 import Environment, StrictUndefined, TemplateError

from athenacli.core.exceptions import TemplateRenderError

_environment = Environment(
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


def _split(value: str, sep: Optional[str] = None):
    return value.split(sep)


_environment.globals["split"] = _split


def render_template(
    template: str,
    values: Optional[Mapping[str, Any]] = None,
    functions: Optional[Dict[str, Callable]] = None,
) -> str:
    """
    Render a jinja2 template.

    Args:
        template: Template source
        values: Variables available to the template; defaults to os.environ
        functions: Extra callables exposed next to the values

    Returns:
        str: Rendered text

    Raises:
        TemplateRenderError: If the template is invalid or references an
            undefined name
    """
    context: Dict[str, Any] = dict(os.environ if values is None else values)
    if functions:
        context.update(functions)
    try:
        return _environment.from_string(template).render(context)
    except TemplateError as e:
        raise TemplateRenderError(f"could not render template: {e}") from e


def render_query(query: str) -> str:
    """Render one query with the process environment as variables."""
    return render_template(query)


def render_result_path(
    template: str,
    region: str,
    account: Callable[[], str],
    now: Optional[datetime] = None,
) -> str:
    """
    Render the result-path template.

    account is only called if the template uses it, so rendering a
    literal path never touches the identity service.
    """
    return render_template(
        template,
        values={"region": region},
        functions={
            "account": account,
            "now": now or datetime.now(),
        },
    )
