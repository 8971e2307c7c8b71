from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, get_type_hints

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from ..domain import SchoolVacationError, ToolArgumentsError, UnknownToolError

JsonSchema = Dict[str, Any]

logger = logging.getLogger(__name__)


class _Arguments(BaseModel):
    model_config = ConfigDict(extra="ignore")


def _arguments_model(name: str, func: Callable[..., Any]) -> Type[BaseModel]:
    hints = get_type_hints(func, include_extras=True)
    fields: Dict[str, Any] = {}
    for param in inspect.signature(func).parameters.values():
        annotation = hints.get(param.name, Any)
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (annotation, default)
    model_name = "".join(part.capitalize() for part in name.split("_")) + "Arguments"
    return create_model(model_name, __base__=_Arguments, **fields)


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(problems)


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    signature: inspect.Signature
    arguments: Type[BaseModel] = field(repr=False)

    @property
    def parameter_schema(self) -> JsonSchema:
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    def validate(self, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ToolArgumentsError(self.name, "arguments must be an object")
        try:
            parsed = self.arguments.model_validate(dict(arguments))
        except ValidationError as exc:
            raise ToolArgumentsError(self.name, _format_validation_error(exc)) from exc
        return {name: getattr(parsed, name) for name in self.signature.parameters}

    def as_tool(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameter_schema,
        }


@dataclass(frozen=True)
class ToolOutcome:
    tool: str
    payload: Dict[str, Any]
    is_error: bool = False


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            signature=inspect.signature(func),
            arguments=_arguments_model(name, func),
        )
        return func

    return decorator


def get_api_functions() -> List[ApiFunction]:
    return list(REGISTRY.values())


def get_api_function(name: str) -> ApiFunction:
    try:
        return REGISTRY[name]
    except KeyError:
        raise UnknownToolError(name) from None


def call_api(name: str, arguments: Optional[Mapping[str, Any]] = None) -> Any:
    spec = get_api_function(name)
    return spec.func(**spec.validate(arguments))


def error_payload(exc: BaseException, tool: str, arguments: Any) -> Dict[str, Any]:
    if isinstance(arguments, Mapping):
        arguments = dict(arguments)
    return {"error": str(exc) or "Unknown error occurred", "tool": tool, "arguments": arguments}


def invoke_tool(name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolOutcome:
    """Run a registered tool, turning every failure into an error payload for that call."""

    try:
        result = call_api(name, arguments)
    except SchoolVacationError as exc:
        logger.info("Tool %s rejected: %s", name, exc)
        return ToolOutcome(tool=name, payload=error_payload(exc, name, arguments), is_error=True)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Tool %s failed", name)
        return ToolOutcome(tool=name, payload=error_payload(exc, name, arguments), is_error=True)
    logger.debug("Tool %s executed successfully", name)
    return ToolOutcome(tool=name, payload=result)
