"""Validation of Kode resources and reporting of the result as a condition."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from kode_operator.constants import ConditionStatus, ConditionType


class ConditionHolder(Protocol):
    """A resource status that can record a condition."""

    def set_condition(
        self,
        condition_type: ConditionType,
        status: ConditionStatus,
        reason: str,
        message: str,
    ) -> Any: ...


@dataclass
class ValidationResult:
    """Outcome of validating a resource."""

    valid: bool = True
    errors: list[str] = field(default_factory=list)


def _image_of(plugin: Any) -> str:
    if isinstance(plugin, Mapping):
        image = plugin.get("image")
    else:
        image = getattr(plugin, "image", None)
    return image or ""


def validate_init_plugins(plugins: Iterable[Any]) -> ValidationResult:
    """Check that every init plugin names an image.

    Plugins may be mappings or objects with an ``image`` attribute.
    """
    errors = [
        f"initPlugin[{index}]: image is required"
        for index, plugin in enumerate(plugins or ())
        if not _image_of(plugin)
    ]
    return ValidationResult(valid=not errors, errors=errors)


def set_validation_condition(status: ConditionHolder, result: ValidationResult) -> None:
    """Record the validation result as the ``Validated`` condition of ``status``."""
    if result.valid:
        status.set_condition(
            ConditionType.VALIDATED,
            ConditionStatus.TRUE,
            "ValidationSucceeded",
            "Resource validation succeeded",
        )
    else:
        message = "; ".join(result.errors)
        status.set_condition(
            ConditionType.VALIDATED,
            ConditionStatus.FALSE,
            "ValidationFailed",
            f"Resource validation failed: {message}",
        )