"""Structural checks for YAML configuration documents.

pydantic validates the values of each section; this module checks the
shape around them (top-level mapping, known sections, known fields) so a
typo in a config file fails loudly instead of silently keeping a default.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from snl_timeline.config.exceptions import ConfigurationError

__all__ = ["FieldValidator"]


class FieldValidator:
    """Validator for one level of a configuration document.

    Example:
        v = FieldValidator(document, "timeline.yaml")
        v.reject_unknown({"timeline", "logging"})
        timeline = v.section("timeline", TimelineSettings)

    """

    def __init__(self, data: Any, context: str) -> None:
        """Initialize the validator.

        Args:
            data: The parsed document (or section) to check.
            context: Where the data came from, used in error messages.

        Raises:
            ConfigurationError: If data is not a mapping.

        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid structure: expected mapping, got {type(data).__name__} "
                f"in {context}"
            )
        self._data: dict[str, Any] = data
        self._context = context

    @property
    def data(self) -> dict[str, Any]:
        """Get the underlying mapping."""
        return self._data

    @property
    def context(self) -> str:
        return self._context

    def reject_unknown(self, allowed: Iterable[str]) -> None:
        """Fail on keys outside the allowed set.

        Raises:
            ConfigurationError: Naming every unknown key.

        """
        unknown = sorted(str(key) for key in set(self._data) - set(allowed))
        if unknown:
            raise ConfigurationError(
                f"Unknown field(s) {', '.join(unknown)} in {self._context}"
            )

    def section(self, name: str, model: type[BaseModel]) -> dict[str, Any]:
        """Extract a section whose keys must be fields of a settings model.

        A missing or null section yields an empty mapping so the model's
        defaults (and environment overrides) apply.

        Args:
            name: Section key at this level.
            model: Settings model the section is validated against later.

        Returns:
            The section's mapping.

        Raises:
            ConfigurationError: If the section is not a mapping or names
                fields the model does not have.

        """
        value = self._data.get(name)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ConfigurationError(
                f"Invalid '{name}': expected mapping, got {type(value).__name__} "
                f"in {self._context}"
            )
        FieldValidator(value, f"{self._context} [{name}]").reject_unknown(
            model.model_fields
        )
        return value
