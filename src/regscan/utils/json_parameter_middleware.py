"""JSON Parameter Middleware for FastMCP.

MCP clients frequently send list and dict arguments as JSON strings. The
``json_convert`` decorator parses such strings into the types declared on the
tool function before the tool runs.
"""

import functools
import inspect
import json
import logging
import types
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar, get_args, get_origin, get_type_hints

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_COLLECTION_TYPES = (list, dict, set, tuple)


class JSONParameterMiddleware:
    """
    Converts JSON string arguments to the annotated parameter types.

    Usage:
        middleware = JSONParameterMiddleware()

        @mcp.tool
        @middleware.convert
        def write_registry_info(items: list[str] | None = None) -> dict:
            ...
    """

    def _should_try_json_parse(self, value: Any, expected_type: type) -> bool:
        if not isinstance(value, str):
            return False

        origin = get_origin(expected_type)
        if origin in _COLLECTION_TYPES or expected_type in _COLLECTION_TYPES:
            return True
        if origin and issubclass(origin, Mapping | Sequence):
            return True

        stripped = value.strip()
        return stripped.startswith(("[", "{", '"')) and stripped.endswith(("]", "}", '"'))

    def _convert_value(self, value: Any, expected_type: type, param_name: str) -> Any:
        """
        Convert ``value`` to ``expected_type``, parsing JSON if necessary.

        Raises:
            ValueError: If the JSON is malformed or has the wrong shape
        """
        if value is None:
            return None

        origin = get_origin(expected_type)

        if origin is types.UnionType:
            last_error = None
            for arg_type in get_args(expected_type):
                if arg_type is type(None):
                    continue
                try:
                    return self._convert_value(value, arg_type, param_name)
                except ValueError as e:
                    last_error = e
            if last_error:
                raise last_error
            return value

        if self._should_try_json_parse(value, expected_type):
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError as e:
                if expected_type is str:
                    return value
                raise ValueError(f"Invalid JSON in parameter '{param_name}': {e}") from e

            converted = _coerce_parsed(parsed, origin or expected_type)
            if converted is not None:
                logger.debug("Converted %s from JSON string to %s", param_name, type(converted).__name__)
                return converted

            expected_name = (origin or expected_type).__name__
            raise ValueError(
                f"Parameter '{param_name}' must be a {expected_name}, got {type(parsed).__name__} from JSON"
            )

        return value

    def _convert_arguments(self, sig, type_hints, args, kwargs) -> dict[str, Any]:
        bound_args = sig.bind(*args, **kwargs)
        bound_args.apply_defaults()

        converted = {}
        for param_name, param_value in bound_args.arguments.items():
            if param_name not in type_hints:
                converted[param_name] = param_value
                continue
            converted[param_name] = self._convert_value(param_value, type_hints[param_name], param_name)
        return converted

    def convert(self, func: F) -> F:
        """Wrap ``func`` so its arguments are converted before each call."""
        sig = inspect.signature(func)
        type_hints = get_type_hints(func)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    converted = self._convert_arguments(sig, type_hints, args, kwargs)
                except ValueError as e:
                    return {"error": {"code": "INVALID_INPUT", "message": str(e)}}
                return await func(**converted)

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                converted = self._convert_arguments(sig, type_hints, args, kwargs)
            except ValueError as e:
                return {"error": {"code": "INVALID_INPUT", "message": str(e)}}
            return func(**converted)

        return wrapper  # type: ignore


def _coerce_parsed(parsed: Any, target: type) -> Any:
    if target is str:
        return parsed if isinstance(parsed, str) else None
    if target in (list, dict) and isinstance(parsed, target):
        return parsed
    if target in (set, tuple) and isinstance(parsed, list):
        return target(parsed)
    if isinstance(target, type) and issubclass(target, Mapping) and isinstance(parsed, dict):
        return parsed
    if isinstance(target, type) and issubclass(target, Sequence) and isinstance(parsed, list):
        return parsed
    return None


_default_middleware = JSONParameterMiddleware()


def json_convert(func: F) -> F:
    """
    Apply JSON parameter conversion to a tool function.

    Usage:
        @mcp.tool
        @json_convert
        def my_tool(items: list[str]) -> dict:
            return {"count": len(items)}
    """
    return _default_middleware.convert(func)
