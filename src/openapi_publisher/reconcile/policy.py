"""Extension policy applied to the schemas that survive reconciliation."""

from dataclasses import dataclass, field

from openapi_publisher.parser.base import PUBLISH_INCLUDE_EXTENSION

RENAME_EXTENSION = "x-basename"


@dataclass(frozen=True)
class Extensions:
    """Which extension keys are illegal, which get stripped, and which tags force inclusion.

    Any iterable of strings is accepted for each field; they are stored as
    frozensets. The publish-include marker is always part of
    ``object_extensions`` so it never leaks into the reconciled document.
    """

    force_include_tag_values: frozenset[str] = field(default_factory=frozenset)
    object_extensions: frozenset[str] = field(default_factory=frozenset)
    property_extensions: frozenset[str] = field(default_factory=frozenset)
    illegal_extensions: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "force_include_tag_values", frozenset(self.force_include_tag_values))
        object.__setattr__(
            self, "object_extensions", frozenset(self.object_extensions) | {PUBLISH_INCLUDE_EXTENSION}
        )
        object.__setattr__(self, "property_extensions", frozenset(self.property_extensions))
        object.__setattr__(self, "illegal_extensions", frozenset(self.illegal_extensions))

    def forces_inclusion(self, marker: str | None) -> bool:
        """True when a publish-include marker value keeps its schema."""
        if marker is None:
            return False
        if marker == "true":
            return True
        return any(token.strip() in self.force_include_tag_values for token in marker.split(","))
