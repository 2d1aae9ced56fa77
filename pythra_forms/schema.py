# pythra_forms/schema.py
"""
Attribute schemas for widget configuration.

A schema maps attribute names to validators:

    schema = AttributeSchema(
        {"format": [required(True), is_string()],
         "disablePast": [required(False), is_boolean()]},
        defaults={"disablePast": False},
    )
    attrs = schema.with_defaults(given)
    schema.check(attrs, owner="DatePicker")   # logs, never raises

Configuration problems are reported, never fatal: a widget with a bad
attribute still renders with whatever defaults it has.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Validator:
    name: str
    check: Callable[[Any], bool]
    message: str
    # Only set by `required()`: True/False declares the attribute required/optional.
    required: Optional[bool] = None


@dataclass(frozen=True)
class SchemaViolation:
    attribute: str
    message: str

    def __str__(self):
        return f"'{self.attribute}' {self.message}"


def required(flag: bool = True) -> Validator:
    return Validator("required", lambda value: True, "is required", required=bool(flag))


def is_string() -> Validator:
    return Validator("is_string", lambda value: isinstance(value, str), "should be a string")


def is_boolean() -> Validator:
    return Validator("is_boolean", lambda value: isinstance(value, bool), "should be a boolean")


def is_pattern() -> Validator:
    return Validator(
        "is_pattern",
        lambda value: isinstance(value, str) and bool(value.strip()),
        "should be a non-empty date pattern",
    )


def is_callable() -> Validator:
    return Validator("is_callable", callable, "should be callable")


def is_instance(*types: type) -> Validator:
    names = " or ".join(t.__name__ for t in types)
    return Validator("is_instance", lambda value: isinstance(value, types), f"should be an instance of {names}")


def is_in(choices: Iterable[Any]) -> Validator:
    options = tuple(choices)
    return Validator("is_in", lambda value: value in options, f"should be one of {list(options)}")


class AttributeSchema:
    """
    Validators and defaults for a widget's attributes.

    An attribute is *missing* when it is absent or ``None``. A missing attribute
    is a violation only if the attribute is declared ``required(True)``; type
    validators run only on attributes that are present.
    """
    def __init__(self, fields: Mapping[str, List[Validator]], defaults: Optional[Mapping[str, Any]] = None):
        self.fields: Dict[str, List[Validator]] = {name: list(vs) for name, vs in fields.items()}
        self.defaults: Dict[str, Any] = dict(defaults or {})

    def is_required(self, name: str) -> bool:
        return any(v.required for v in self.fields.get(name, []))

    def with_defaults(self, attrs: Mapping[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``attrs`` where missing attributes take their default."""
        merged = dict(self.defaults)
        merged.update({k: v for k, v in attrs.items() if v is not None})
        return merged

    def _violations_of(self, name: str, value: Any) -> List[SchemaViolation]:
        if value is None:
            return [SchemaViolation(name, "is required")] if self.is_required(name) else []
        return [
            SchemaViolation(name, f"{validator.message}, got {type(value).__name__} {value!r}")
            for validator in self.fields.get(name, [])
            if validator.required is None and not validator.check(value)
        ]

    def is_valid(self, name: str, value: Any) -> bool:
        """True if ``value`` passes every validator declared for ``name``."""
        return not self._violations_of(name, value)

    def validate(self, attrs: Mapping[str, Any]) -> List[SchemaViolation]:
        violations: List[SchemaViolation] = []
        for name in self.fields:
            violations.extend(self._violations_of(name, attrs.get(name)))
        return violations

    def undeclared(self) -> List[str]:
        """
        Attributes that are neither required nor given a default. Every
        attribute a widget consumes should be one or the other.
        """
        return [name for name in self.fields if not self.is_required(name) and name not in self.defaults]

    def check(self, attrs: Mapping[str, Any], owner: str = "widget") -> List[SchemaViolation]:
        """Validate ``attrs`` and log every violation as a warning."""
        violations = self.validate(attrs)
        for violation in violations:
            logger.warning("%s: attribute %s", owner, violation)
        return violations

    def resolve(self, attrs: Mapping[str, Any], owner: str = "widget",
                fallbacks: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Apply defaults, validate and log, then replace every invalid attribute
        with its default. A default that is itself invalid (e.g. a bad value in
        the config file) gives way to ``fallbacks``, and to None after that.
        The result is safe to render with.
        """
        fallbacks = fallbacks or {}
        resolved = self.with_defaults(attrs)
        for name in {v.attribute for v in self.check(resolved, owner=owner)}:
            default = self.defaults.get(name)
            if default is not None and not self.is_valid(name, default):
                logger.warning("%s: default for '%s' is invalid (%r), using %r",
                               owner, name, default, fallbacks.get(name))
                default = fallbacks.get(name)
            resolved[name] = default
        return resolved
