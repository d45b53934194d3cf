"""TimelineEntry model for snl-timeline.

This module defines the TimelineEntry model which records one activity in
a user's timeline, together with the factories and mutators callers use to
build entries before handing them to the TimelineStore.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import ConfigDict, Field, computed_field, field_validator
from pydantic import ValidationError as PydanticValidationError

from snl_timeline.models.base import BaseSchema
from snl_timeline.models.enums import EntryCategory, EntryStatus
from snl_timeline.models.exceptions import ValidationError

__all__ = [
    "RESERVED_ID_CHARACTERS",
    "TimelineEntry",
    "format_duration",
    "generate_entry_id",
]

# SNL path separator and key wildcard
RESERVED_ID_CHARACTERS = ".*"


def generate_entry_id() -> str:
    """Generate a unique timeline entry id.

    Returns:
        An id of the form ``timeline_<epoch-ms>_<9 hex chars>``.

    """
    return f"timeline_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validation_error(e: PydanticValidationError) -> ValidationError:
    errors = [
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
    ]
    return ValidationError(
        f"Timeline entry validation failed: {'; '.join(errors)}", errors=errors
    )


def format_duration(duration: float) -> str:
    """Format a duration in milliseconds for display.

    Args:
        duration: Elapsed time in milliseconds.

    Returns:
        "850ms", "12.5s" or "3m 5s" depending on magnitude.

    """
    if duration < 1000:
        return f"{int(duration)}ms"
    if duration < 60000:
        return f"{duration / 1000:.1f}s"
    minutes = int(duration // 60000)
    seconds = int((duration % 60000) // 1000)
    return f"{minutes}m {seconds}s"


class TimelineEntry(BaseSchema):
    """One recorded activity in a user's timeline.

    The calendar components (year, month, day, hour, minute) are computed
    from created_at in UTC. They are written into stored payloads so the
    store can be browsed, but they are ignored when a payload is read back,
    so they always agree with created_at.

    Attributes:
        id: Unique, immutable entry identifier.
        user_id: Identifier of the acting user.
        user_email: Email of the acting user; determines the namespace.
        ai_name: Name of the AI the activity belongs to.
        action: Free-text description of what happened.
        category: Classification of the activity.
        input_data: Opaque JSON value given to the activity.
        output_data: Opaque JSON value produced by the activity.
        input_summary: Short text used for search and display.
        output_summary: Short text used for search and display.
        status: Outcome of the activity.
        error_message: Failure description, only set when status is error.
        duration: Elapsed milliseconds, never negative.
        metadata: Opaque JSON mapping.
        tags: Labels without duplicates, in insertion order.
        is_system_generated: Exempts the entry from retention purges.
        created_at: When the activity happened (UTC), immutable.

    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=generate_entry_id, min_length=1, frozen=True)
    user_id: str = ""
    user_email: str = ""
    ai_name: str = ""
    action: str = ""
    category: EntryCategory = EntryCategory.general
    input_data: Any = None
    output_data: Any = None
    input_summary: str = ""
    output_summary: str = ""
    status: EntryStatus = EntryStatus.success
    error_message: str | None = None
    duration: float = Field(default=0, ge=0)
    # Opaque: keys are neither validated nor stripped
    metadata: dict[Any, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    is_system_generated: bool = False
    created_at: datetime = Field(default_factory=_utcnow, frozen=True)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Reject characters that would change the meaning of storage paths."""
        if any(c in v for c in RESERVED_ID_CHARACTERS):
            raise ValueError(f"id must not contain any of {RESERVED_ID_CHARACTERS!r}")
        return v

    @field_validator("input_summary", "output_summary", mode="before")
    @classmethod
    def validate_summary(cls, v: Any) -> Any:
        """Treat a missing summary as empty text."""
        return "" if v is None else v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Drop duplicate tags, keeping the first occurrence."""
        return list(dict.fromkeys(v))

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: datetime) -> datetime:
        """Normalize to UTC; naive timestamps are taken to be UTC already."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def year(self) -> int:
        """Calendar year of created_at."""
        return self.created_at.year

    @computed_field  # type: ignore[prop-decorator]
    @property
    def month(self) -> int:
        """Calendar month of created_at (1-12)."""
        return self.created_at.month

    @computed_field  # type: ignore[prop-decorator]
    @property
    def day(self) -> int:
        """Day of month of created_at."""
        return self.created_at.day

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hour(self) -> int:
        """Hour of day of created_at (0-23)."""
        return self.created_at.hour

    @computed_field  # type: ignore[prop-decorator]
    @property
    def minute(self) -> int:
        """Minute of created_at."""
        return self.created_at.minute

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimelineEntry:
        """Build an entry, reporting constraint failures as ValidationError.

        Args:
            data: Field values, by Python name or stored (camelCase) name.

        Returns:
            The constructed entry.

        Raises:
            ValidationError: If a value has the wrong type or is out of range.

        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise _validation_error(e) from e

    def __setattr__(self, name: str, value: Any) -> None:
        """Assign a field, reporting constraint failures as ValidationError."""
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as e:
            raise _validation_error(e) from e

    @classmethod
    def from_storage(cls, record: dict[str, Any]) -> TimelineEntry:
        """Decode a payload read from the store."""
        return cls.from_dict(record)

    def to_storage(self) -> dict[str, Any]:
        """Encode the entry as a JSON-compatible payload with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def validation_errors(self) -> list[str]:
        """Check the rules an entry must satisfy before it is persisted.

        Returns:
            Human-readable violations; empty when the entry is valid.

        """
        errors: list[str] = []
        if not self.user_id:
            errors.append("User ID is required")
        if not self.user_email:
            errors.append("User email is required")
        if not self.ai_name:
            errors.append("AI name is required")
        if not self.action:
            errors.append("Action is required")
        if self.error_message is not None and self.status != EntryStatus.error:
            errors.append("Error message is only allowed when status is error")
        return errors

    def validate_entry(self) -> None:
        """Raise ValidationError if validation_errors() reports anything."""
        errors = self.validation_errors()
        if errors:
            raise ValidationError(
                f"Timeline entry validation failed: {', '.join(errors)}",
                errors=errors,
            )

    def add_tag(self, tag: str) -> None:
        """Append a tag unless it is already present."""
        tag = tag.strip()
        if tag and tag not in self.tags:
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> None:
        """Remove a tag if present."""
        if tag in self.tags:
            self.tags.remove(tag)

    def set_error(self, error_message: str) -> None:
        """Mark the activity as failed."""
        self.status = EntryStatus.error
        self.error_message = error_message

    def set_success(self, duration: float = 0) -> None:
        """Mark the activity as completed and clear any error."""
        self.duration = duration
        self.error_message = None
        self.status = EntryStatus.success

    def set_summaries(self, input_summary: str | None, output_summary: str | None) -> None:
        """Set the search/display summaries."""
        self.input_summary = input_summary or ""
        self.output_summary = output_summary or ""

    @property
    def formatted_duration(self) -> str:
        """Duration rendered by format_duration()."""
        return format_duration(self.duration)

    # Factories for the common kinds of activity

    @classmethod
    def ai_interaction(
        cls,
        user_id: str,
        user_email: str,
        ai_name: str,
        action: str,
        input_data: Any = None,
        output_data: Any = None,
    ) -> TimelineEntry:
        """Create an entry for an interaction with an AI."""
        return cls(
            user_id=user_id,
            user_email=user_email,
            ai_name=ai_name,
            action=action,
            category=EntryCategory.ai,
            input_data=input_data,
            output_data=output_data,
        )

    @classmethod
    def workflow_execution(
        cls,
        user_id: str,
        user_email: str,
        ai_name: str,
        workflow_id: str,
        input_data: Any = None,
        output_data: Any = None,
    ) -> TimelineEntry:
        """Create an entry for a workflow run."""
        return cls(
            user_id=user_id,
            user_email=user_email,
            ai_name=ai_name,
            action=f"workflow_execution:{workflow_id}",
            category=EntryCategory.workflow,
            input_data=input_data,
            output_data=output_data,
            metadata={"workflowId": workflow_id},
        )

    @classmethod
    def command_execution(
        cls,
        user_id: str,
        user_email: str,
        ai_name: str,
        command_id: str,
        input_data: Any = None,
        output_data: Any = None,
    ) -> TimelineEntry:
        """Create an entry for a command run."""
        return cls(
            user_id=user_id,
            user_email=user_email,
            ai_name=ai_name,
            action=f"command_execution:{command_id}",
            category=EntryCategory.command,
            input_data=input_data,
            output_data=output_data,
            metadata={"commandId": command_id},
        )

    @classmethod
    def security_action(
        cls,
        user_id: str,
        user_email: str,
        ai_name: str,
        action: str,
        metadata: dict[str, Any] | None = None,
    ) -> TimelineEntry:
        """Create a system-generated entry for a security-relevant action."""
        return cls(
            user_id=user_id,
            user_email=user_email,
            ai_name=ai_name,
            action=action,
            category=EntryCategory.security,
            metadata=metadata or {},
            is_system_generated=True,
        )

    @classmethod
    def config_change(
        cls,
        user_id: str,
        user_email: str,
        ai_name: str,
        config_type: str,
        changes: Any,
    ) -> TimelineEntry:
        """Create an entry for a configuration change."""
        return cls(
            user_id=user_id,
            user_email=user_email,
            ai_name=ai_name,
            action=f"config_change:{config_type}",
            category=EntryCategory.config,
            input_data=changes,
            metadata={"configType": config_type},
        )
