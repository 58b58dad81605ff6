"""Formula metadata, registration and argument resolution.

A formula is a named, parameterized operation. Its parameters carry the type,
default and autocomplete suggestions; ``FormulaSpec.resolve`` applies defaults
and coerces raw arguments before the formula body runs.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

import pydantic
from pydantic import ConfigDict, create_model

from openai_pack.common.config import ExecutionContext
from openai_pack.common.errors import ValidationError, handle_error

LOGGER = logging.getLogger("openai_pack.formulas")

ParamType = Literal["string", "number", "boolean", "string_array"]

_PY_TYPES: dict[str, Any] = {
    "string": str,
    "number": float,
    "boolean": bool,
    "string_array": list[str],
}


@dataclass(frozen=True)
class ParamSpec:
    name: str
    type: ParamType
    description: str
    optional: bool = False
    default: Any = None
    suggestions: tuple[str, ...] = ()

    def with_default(self, default: Any) -> "ParamSpec":
        return ParamSpec(
            name=self.name,
            type=self.type,
            description=self.description,
            optional=self.optional,
            default=default,
            suggestions=self.suggestions,
        )

    def describe(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "optional": self.optional,
        }
        if self.default is not None:
            out["default"] = self.default
        if self.suggestions:
            out["suggestions"] = list(self.suggestions)
        return out


@dataclass
class FormulaSpec:
    name: str
    description: str
    params: tuple[ParamSpec, ...]
    execute: Callable[..., str]
    result_type: str = "string"
    is_action: bool = False
    is_experimental: bool = False
    cache_ttl_secs: int | None = None
    value_hint: str | None = None
    _args_model: type[pydantic.BaseModel] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        definitions: dict[str, Any] = {}
        for p in self.params:
            py_type = _PY_TYPES[p.type]
            if p.optional:
                definitions[p.name] = (py_type | None, p.default)
            else:
                definitions[p.name] = (py_type, ...)
        self._args_model = create_model(
            f"{self.name}Args",
            __config__=ConfigDict(extra="forbid"),
            **definitions,
        )

    def param(self, name: str) -> ParamSpec:
        for p in self.params:
            if p.name == name:
                return p
        raise ValidationError(f"Formula {self.name} has no parameter named {name!r}")

    def autocomplete(self, name: str) -> list[str]:
        return list(self.param(name).suggestions)

    def resolve(self, args: Mapping[str, Any]) -> dict[str, Any]:
        """
        Apply defaults and coerce raw arguments to the declared parameter types.

        Args:
            args: Raw arguments keyed by parameter name.

        Returns:
            Arguments for every parameter, defaults filled in.

        Raises:
            ValidationError: missing required parameter, unknown name or bad type.
        """
        # an explicit None means "use the default"
        defaulted = {p.name for p in self.params if p.optional and p.default is not None}
        raw = {k: v for k, v in args.items() if not (v is None and k in defaulted)}
        try:
            resolved = self._args_model.model_validate(raw)
        except pydantic.ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'args'}: {err['msg']}" for err in e.errors()
            )
            raise ValidationError(f"Invalid arguments for {self.name}: {problems}") from e
        return resolved.model_dump()

    def __call__(self, context: ExecutionContext, /, *args: Any, **kwargs: Any) -> str:
        """Run the formula; positional arguments follow the declared parameter order."""
        if len(args) > len(self.params):
            raise ValidationError(f"{self.name} takes at most {len(self.params)} arguments")
        raw = dict(zip((p.name for p in self.params), args))
        overlap = set(raw) & set(kwargs)
        if overlap:
            raise ValidationError(f"{self.name} got multiple values for {', '.join(sorted(overlap))}")
        raw.update(kwargs)
        try:
            resolved = self.resolve(raw)
            return self.execute(context, **resolved)
        except Exception as e:  # every failure goes through the translator
            handle_error(e)

    def describe(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "result_type": self.result_type,
            "params": [p.describe() for p in self.params],
            "is_action": self.is_action,
            "is_experimental": self.is_experimental,
        }
        if self.cache_ttl_secs is not None:
            out["cache_ttl_secs"] = self.cache_ttl_secs
        if self.value_hint is not None:
            out["value_hint"] = self.value_hint
        return out


FORMULAS: dict[str, FormulaSpec] = {}


def formula(
    name: str,
    description: str,
    params: Sequence[ParamSpec],
    **options: Any,
) -> Callable[[Callable[..., str]], FormulaSpec]:
    """Register ``fn`` as the body of formula ``name`` and return its spec."""

    def register(fn: Callable[..., str]) -> FormulaSpec:
        if name in FORMULAS:
            raise ValueError(f"Formula {name} is already registered")
        spec = FormulaSpec(name=name, description=description, params=tuple(params), execute=fn, **options)
        FORMULAS[name] = spec
        return spec

    return register


def get_formula(name: str) -> FormulaSpec:
    spec = FORMULAS.get(name)
    if spec is None:
        raise KeyError(name)
    return spec


def run_formula(name: str, args: Mapping[str, Any], context: ExecutionContext) -> str:
    """
    Look up a formula by name and run it with keyword arguments.

    Raises:
        ValidationError: unknown formula name or invalid arguments.
    """
    spec = FORMULAS.get(name)
    if spec is None:
        raise ValidationError(f"Unknown formula: {name}")
    LOGGER.info("Running formula %s", name)
    return spec(context, **args)


def assert_condition(condition: bool, message: str) -> None:
    """Reject formula input with a user-facing message when ``condition`` is false."""
    if not condition:
        raise ValidationError(message)
