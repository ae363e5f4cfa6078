"""Metrics collection for the binding tree."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class BindMetrics:
    """Metrics for parse and render cycles.

    Attributes:
        store_writes_total: Successful option or section writes.
        store_deletes_total: Successful option or section deletes.
        store_failures_total: Store calls that reported failure.
        validation_failures_total: Submitted values rejected by validation.
        sections_created_total: Sections created from form requests.
        sections_removed_total: Sections removed from form requests.
        dynamic_fields_total: Value nodes synthesized from unmodeled keys.
        parse_duration_ms: Duration of the last map parse.
        render_duration_ms: Duration of the last map render.
    """

    store_writes_total: int = 0
    store_deletes_total: int = 0
    store_failures_total: int = 0
    validation_failures_total: int = 0
    sections_created_total: int = 0
    sections_removed_total: int = 0
    dynamic_fields_total: int = 0
    parse_duration_ms: float = 0.0
    render_duration_ms: float = 0.0

    _instance: ClassVar["BindMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "BindMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_write(self) -> None:
        """Record a successful store write."""
        self.store_writes_total += 1

    def record_delete(self) -> None:
        """Record a successful store delete."""
        self.store_deletes_total += 1

    def record_store_failure(self) -> None:
        """Record a failed store call."""
        self.store_failures_total += 1

    def record_validation_failure(self) -> None:
        """Record a rejected form value."""
        self.validation_failures_total += 1

    def record_section_created(self) -> None:
        """Record a section created on request."""
        self.sections_created_total += 1

    def record_section_removed(self) -> None:
        """Record a section removed on request."""
        self.sections_removed_total += 1

    def record_dynamic_field(self) -> None:
        """Record a synthesized dynamic field."""
        self.dynamic_fields_total += 1

    def record_parse_duration(self, duration_ms: float) -> None:
        """Record parse duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.parse_duration_ms = duration_ms

    def record_render_duration(self, duration_ms: float) -> None:
        """Record render duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.render_duration_ms = duration_ms

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "store_writes_total": self.store_writes_total,
            "store_deletes_total": self.store_deletes_total,
            "store_failures_total": self.store_failures_total,
            "validation_failures_total": self.validation_failures_total,
            "sections_created_total": self.sections_created_total,
            "sections_removed_total": self.sections_removed_total,
            "dynamic_fields_total": self.dynamic_fields_total,
            "parse_duration_ms": self.parse_duration_ms,
            "render_duration_ms": self.render_duration_ms,
        }
