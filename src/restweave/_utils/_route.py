import re
from typing import Any, Mapping
from urllib.parse import quote

from ..models.errors import ValidationError
from ._values import value_as_string

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def fill_route(template: str, values: Mapping[str, Any]) -> str:
    """Substitute ``{name}`` placeholders of a route template.

    Positional bindings use the index as name, so ``users/{0}`` is filled
    from the value bound to ``"0"``. Values are percent-encoded.

    Args:
        template: The resource template, e.g. ``users/{id}/orders``.
        values: The bound route values by name.

    Returns:
        The resolved resource path.

    Raises:
        ValidationError: If a placeholder has no bound value.

    Examples:
        >>> fill_route("users/{0}", {"0": 42})
        'users/42'
    """

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        if name not in values:
            raise ValidationError(
                f"The route parameter '{name}' of '{template}' was not provided"
            )
        return quote(value_as_string(values[name]), safe="")

    return _PLACEHOLDER.sub(_substitute, template)
