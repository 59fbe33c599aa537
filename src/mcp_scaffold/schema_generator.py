"""Generate JSON schemas from Python type annotations and decode arguments against them."""

import inspect
import typing
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union, get_args, get_origin

from .descriptors import MISSING, ParameterSpec
from .errors import InvalidArgumentError


def python_type_to_json_schema(type_hint: Any) -> Dict[str, Any]:
    """Convert a Python type hint to a JSON schema definition.

    Args:
        type_hint: The Python type annotation

    Returns:
        JSON schema dictionary
    """
    if type_hint is Any or type_hint is inspect.Parameter.empty:
        return {}

    if type_hint is type(None):
        return {"type": "null"}

    if type_hint is str:
        return {"type": "string"}
    elif type_hint is bool:
        return {"type": "boolean"}
    elif type_hint is int:
        return {"type": "integer"}
    elif type_hint is float:
        return {"type": "number"}
    elif type_hint is datetime:
        return {"type": "string", "format": "date-time"}
    elif type_hint is date:
        return {"type": "string", "format": "date"}
    elif type_hint is list:
        return {"type": "array"}
    elif type_hint is dict:
        return {"type": "object"}

    origin = get_origin(type_hint)
    args = get_args(type_hint)

    if origin is Union:
        non_none_args = [arg for arg in args if arg is not type(None)]
        if len(non_none_args) == 1:
            # Optional[T]: absence is expressed by leaving it out of "required"
            return python_type_to_json_schema(non_none_args[0])
        return {"oneOf": [python_type_to_json_schema(arg) for arg in non_none_args]}

    elif origin is list:
        if args:
            return {"type": "array", "items": python_type_to_json_schema(args[0])}
        return {"type": "array"}

    elif origin is dict:
        if len(args) >= 2 and args[0] is str:
            return {
                "type": "object",
                "additionalProperties": python_type_to_json_schema(args[1]),
            }
        return {"type": "object"}

    elif origin is typing.Literal:
        return {"enum": list(args)}

    elif inspect.isclass(type_hint) and issubclass(type_hint, Enum):
        return {"enum": [item.value for item in type_hint]}

    # Default to string for unknown types
    return {"type": "string"}


def is_optional_type(type_hint: Any) -> bool:
    """Return True for ``Optional[T]`` / ``Union[..., None]`` hints."""
    return get_origin(type_hint) is Union and type(None) in get_args(type_hint)


def extract_parameters(func: Callable[..., Any]) -> List[ParameterSpec]:
    """Build the ordered parameter list of a handler from its signature.

    A parameter is required when it has no default and is not ``Optional``.
    Descriptions come from the Google-style ``Args:`` section of the docstring.
    """
    signature = inspect.signature(func)
    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError):
        hints = {}
    descriptions = parse_docstring_params(func.__doc__)

    params = []
    for param_name, param in signature.parameters.items():
        if param_name == "self":
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        type_hint = hints.get(param_name, param.annotation)
        has_default = param.default is not inspect.Parameter.empty
        params.append(
            ParameterSpec(
                name=param_name,
                type_hint=type_hint,
                required=not has_default and not is_optional_type(type_hint),
                default=param.default if has_default else MISSING,
                description=descriptions.get(param_name),
            )
        )
    return params


def extract_parameter_schema(parameters: List[ParameterSpec]) -> Dict[str, Any]:
    """Build the JSON input schema for a list of parameters.

    Args:
        parameters: Parameters in declaration order

    Returns:
        JSON schema of type "object" describing the parameters
    """
    properties = {}
    required = []

    for param in parameters:
        param_schema = python_type_to_json_schema(param.type_hint)
        param_schema["description"] = param.description or f"Parameter: {param.name}"
        if param.has_default and param.default is not None:
            param_schema["default"] = _json_default(param.default)
        properties[param.name] = param_schema
        if param.required:
            required.append(param.name)

    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def schema_type_label(schema: Dict[str, Any]) -> str:
    """Short human-readable type of a property schema, e.g. ``array[string]``."""
    if "enum" in schema:
        return "enum(" + ", ".join(repr(v) for v in schema["enum"]) + ")"
    if "oneOf" in schema:
        return " | ".join(schema_type_label(s) for s in schema["oneOf"])
    schema_type = schema.get("type", "any")
    if schema_type == "array" and "items" in schema:
        return f"array[{schema_type_label(schema['items'])}]"
    return schema_type


def parse_docstring_params(docstring: Optional[str]) -> Dict[str, str]:
    """Parse parameter descriptions from a Google-style docstring.

    Args:
        docstring: The function's docstring

    Returns:
        Dictionary mapping parameter names to descriptions
    """
    if not docstring:
        return {}

    params: Dict[str, str] = {}
    lines = inspect.cleandoc(docstring).split("\n")

    in_params_section = False
    section_indent = 0
    param_indent = 0
    current_param = None
    current_desc: List[str] = []

    for raw_line in lines:
        line = raw_line.strip()
        indent = len(raw_line) - len(raw_line.lstrip())

        if line in ("Args:", "Arguments:", "Parameters:", "Params:"):
            in_params_section = True
            section_indent = indent
            continue

        if not in_params_section or not line:
            continue

        if indent <= section_indent:
            # Another section started
            in_params_section = False
            continue

        if current_param is None or indent <= param_indent:
            if ":" not in line:
                continue
            if current_param and current_desc:
                params[current_param] = " ".join(current_desc)
            param_part, desc_part = line.split(":", 1)
            # "name (type): desc" style
            current_param = param_part.split("(")[0].strip()
            current_desc = [desc_part.strip()] if desc_part.strip() else []
            param_indent = indent
        else:
            current_desc.append(line)

    if current_param and current_desc:
        params[current_param] = " ".join(current_desc)

    return params


def decode_value(value: Any, type_hint: Any, path: str) -> Any:
    """Decode a JSON-style value into the declared parameter type.

    Args:
        value: The raw argument value
        type_hint: The declared annotation
        path: Parameter name (and index) used in error messages

    Returns:
        The decoded value

    Raises:
        InvalidArgumentError: If the value does not fit the declared type
    """
    if type_hint is Any or type_hint is inspect.Parameter.empty:
        return value

    if type_hint is type(None):
        if value is None:
            return None
        raise _mismatch(path, "null", value)

    if type_hint is str:
        if isinstance(value, str):
            return value
        raise _mismatch(path, "string", value)

    if type_hint is bool:
        if isinstance(value, bool):
            return value
        raise _mismatch(path, "boolean", value)

    if type_hint is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        raise _mismatch(path, "integer", value)

    if type_hint is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise _mismatch(path, "number", value)

    if type_hint in (datetime, date):
        if isinstance(value, str):
            try:
                return type_hint.fromisoformat(value)
            except ValueError:
                pass
        raise _mismatch(path, f"ISO {type_hint.__name__} string", value)

    if type_hint is list:
        if isinstance(value, list):
            return value
        raise _mismatch(path, "array", value)

    if type_hint is dict:
        if isinstance(value, dict):
            return value
        raise _mismatch(path, "object", value)

    origin = get_origin(type_hint)
    args = get_args(type_hint)

    if origin is Union:
        if value is None and type(None) in args:
            return None
        for arg in args:
            if arg is type(None):
                continue
            try:
                return decode_value(value, arg, path)
            except InvalidArgumentError:
                continue
        expected = " or ".join(schema_type_label(python_type_to_json_schema(a)) for a in args)
        raise _mismatch(path, expected, value)

    if origin is list:
        if not isinstance(value, list):
            raise _mismatch(path, "array", value)
        if not args:
            return value
        return [decode_value(item, args[0], f"{path}[{i}]") for i, item in enumerate(value)]

    if origin is dict:
        if not isinstance(value, dict):
            raise _mismatch(path, "object", value)
        if len(args) < 2:
            return value
        return {key: decode_value(item, args[1], f"{path}.{key}") for key, item in value.items()}

    if origin is typing.Literal:
        if value in args:
            return value
        raise InvalidArgumentError(
            f"Invalid value for '{path}': {value!r}. Allowed: {', '.join(repr(a) for a in args)}"
        )

    if inspect.isclass(type_hint) and issubclass(type_hint, Enum):
        try:
            return type_hint(value)
        except ValueError:
            allowed = ", ".join(repr(item.value) for item in type_hint)
            raise InvalidArgumentError(
                f"Invalid value for '{path}': {value!r}. Allowed: {allowed}"
            ) from None

    return value


def _mismatch(path: str, expected: str, value: Any) -> InvalidArgumentError:
    return InvalidArgumentError(
        f"Invalid type for '{path}': expected {expected}, got {_json_type_name(value)}"
    )


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
