"""
Argument marshaling for tool calls.

Models regularly emit numbers as strings ("per_page": "3"). The GitHub MCP
server validates arguments against its JSON schema and rejects stringified
numbers, so values are coerced to the schema's numeric type before the call
is forwarded.
"""
import re
from typing import Any, Dict, Mapping, Optional

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def _schema_types(schema: Mapping[str, Any]) -> set:
    declared = schema.get("type")
    if isinstance(declared, str):
        types = {declared}
    elif isinstance(declared, (list, tuple)):
        types = set(declared)
    else:
        types = set()
    for option in schema.get("anyOf", []) or schema.get("oneOf", []) or []:
        if isinstance(option, Mapping):
            types |= _schema_types(option)
    return types


def coerce_value(value: Any, schema: Optional[Mapping[str, Any]]) -> Any:
    """Coerce a single value according to its property schema."""
    if not schema:
        return value
    types = _schema_types(schema)

    if isinstance(value, str) and "string" not in types:
        text = value.strip()
        if "integer" in types and _INTEGER_RE.match(text):
            return int(text)
        if "number" in types and _NUMBER_RE.match(text):
            number = float(text)
            return int(number) if number.is_integer() and _INTEGER_RE.match(text) else number
        return value

    if isinstance(value, float) and "integer" in types and "number" not in types and value.is_integer():
        return int(value)

    if isinstance(value, list) and "array" in types:
        items = schema.get("items")
        if isinstance(items, Mapping):
            return [coerce_value(item, items) for item in value]
        return value

    if isinstance(value, dict) and "object" in types:
        return coerce_arguments(value, schema)

    return value


def coerce_arguments(arguments: Optional[Mapping[str, Any]], schema: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Return a copy of `arguments` with numeric properties typed as numbers.

    Properties the schema does not describe are passed through unchanged.
    Booleans are never treated as numbers.
    """
    arguments = dict(arguments or {})
    properties = (schema or {}).get("properties") or {}
    for key, value in arguments.items():
        prop_schema = properties.get(key)
        if isinstance(prop_schema, Mapping) and not isinstance(value, bool):
            arguments[key] = coerce_value(value, prop_schema)
    return arguments
