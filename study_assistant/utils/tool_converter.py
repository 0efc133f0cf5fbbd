"""Utilities for converting tools between provider formats."""

from typing import Any

from study_assistant.models.tools import Tool


def convert_tools_for_provider(
    tools: list[Tool],
    provider: str,
) -> list[dict[str, Any]]:
    """
    Convert a list of tools to a specific provider's format.

    Args:
        tools: List of Tool objects
        provider: Provider name (anthropic, bedrock, openai)

    Returns:
        List of tools in provider-specific format

    Raises:
        ValueError: If provider is unknown
    """
    converters = {
        "anthropic": lambda t: t.to_anthropic_format(),
        "bedrock": lambda t: t.to_anthropic_format(),
        "openai": lambda t: t.to_openai_format(),
    }

    converter = converters.get(provider)
    if not converter:
        raise ValueError(f"Unknown provider: {provider}")

    return [converter(tool) for tool in tools]


def validate_tool_arguments(
    schema: dict[str, Any],
    arguments: dict[str, Any],
) -> tuple[dict[str, Any], list[str]]:
    """
    Validate arguments against a tool's parameter schema.

    Checks required parameters, unknown parameters, JSON types and enums.
    Integral floats (``101.0``) are accepted for ``integer`` and coerced.

    Args:
        schema: JSON Schema of the tool input
        arguments: Arguments supplied by the model

    Returns:
        Tuple of (cleaned arguments, list of error messages)
    """
    errors: list[str] = []
    cleaned: dict[str, Any] = {}
    properties = schema.get("properties", {})

    for param in schema.get("required", []):
        if arguments.get(param) is None:
            errors.append(f"Missing required parameter: {param}")

    for arg_name, arg_value in arguments.items():
        if arg_name not in properties:
            errors.append(f"Unknown parameter: {arg_name}")
            continue
        if arg_value is None:
            continue

        spec = properties[arg_name]
        expected_type = spec.get("type")
        if expected_type == "integer" and isinstance(arg_value, float) and arg_value.is_integer():
            arg_value = int(arg_value)

        if not _check_type(arg_value, expected_type):
            errors.append(f"Invalid type for {arg_name}: expected {expected_type}")
            continue

        if "enum" in spec and arg_value not in spec["enum"]:
            allowed = ", ".join(str(v) for v in spec["enum"])
            errors.append(f"Invalid value for {arg_name}: must be one of {allowed}")
            continue

        cleaned[arg_name] = arg_value

    return cleaned, errors


def _check_type(value: Any, expected_type: str | None) -> bool:
    """Check if a value matches the expected JSON Schema type."""
    if expected_type is None:
        return True

    # bool is a subclass of int but never a JSON number
    if expected_type in ("integer", "number") and isinstance(value, bool):
        return False

    type_map = {
        "string": str,
        "number": (int, float),
        "integer": int,
        "boolean": bool,
        "array": list,
        "object": dict,
        "null": type(None),
    }

    expected = type_map.get(expected_type)
    if expected is None:
        return True  # Unknown type, allow

    return isinstance(value, expected)
