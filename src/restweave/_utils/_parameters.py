from typing import Any, Iterable, List, Mapping, Protocol, runtime_checkable

from pydantic import BaseModel

from ..models.enums import RequestParameterType
from ..models.errors import ValidationError
from ..models.parameters import Parameter, RequestBody, RequestFile, RequestParameter


@runtime_checkable
class ParameterSource(Protocol):
    """Opt-in protocol for objects that expose themselves as parameters."""

    def as_parameter_values(self) -> Mapping[str, Any]: ...


def create_parameter(
    parameter_type: RequestParameterType, name: str, value: Any
) -> Parameter:
    """Create a single parameter of the given kind.

    Raises:
        ValidationError: If a file value is not a binary stream, or a
            route/query/header parameter has no name.
    """
    if parameter_type == RequestParameterType.BODY:
        return RequestBody(value=value, name=name or None)
    if parameter_type == RequestParameterType.FILE:
        if not hasattr(value, "read"):
            raise ValidationError(f"The file parameter {name} must be a stream")
        return RequestFile(name=name, file_name=name, stream=value)
    return RequestParameter(parameter_type, name, value)


def _iter_pairs(values: Any) -> Iterable[tuple[str, Any]]:
    if isinstance(values, BaseModel):
        return values.model_dump(by_alias=True).items()
    if isinstance(values, ParameterSource):
        return values.as_parameter_values().items()
    if isinstance(values, Mapping):
        return values.items()
    if isinstance(values, (str, bytes)):
        raise ValidationError(
            f"Cannot convert a value of type {type(values).__name__} to parameters"
        )
    try:
        return [(str(name), value) for name, value in values]
    except (TypeError, ValueError):
        raise ValidationError(
            f"Cannot convert a value of type {type(values).__name__} to parameters"
        ) from None


def as_parameters(
    values: Any, parameter_type: RequestParameterType
) -> List[Parameter]:
    """Convert a structured value into a list of parameters of one kind.

    Accepts a mapping, a pydantic model, a ``ParameterSource`` or an
    iterable of ``(name, value)`` pairs. The order of the keys (or model
    fields) is preserved and ``None`` values are skipped.

    Args:
        values: The structured value to convert.
        parameter_type: The kind of every produced parameter.

    Returns:
        The parameters, in key order.

    Examples:
        >>> [p.name for p in as_parameters({"a": 1, "b": None}, RequestParameterType.QUERY_STRING)]
        ['a']
    """
    if values is None:
        return []
    return [
        create_parameter(parameter_type, name, value)
        for name, value in _iter_pairs(values)
        if value is not None
    ]
