from __future__ import annotations

from .enums import EvaluationErrorKind


class FilterError(Exception):
    """Base class for filter tree failures."""


class FilterValidationError(FilterError):
    """A filter node is malformed or incomplete.

    ``field`` names the offending attribute (``id``, ``type``, ``property``,
    ``operator``, ``value``, ``conjunction`` or ``children``) so editors can
    show the error next to the right input.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        node_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.node_id = node_id


class FilterEvaluationError(FilterError):
    """A node passed validation but could not be evaluated."""

    def __init__(
        self,
        message: str,
        kind: EvaluationErrorKind | None = None,
        node_id: str | None = None,
        property: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.node_id = node_id
        self.property = property

    def with_node(self, node_id: str) -> FilterEvaluationError:
        if self.node_id:
            return self
        return FilterEvaluationError(self.message, self.kind, node_id, self.property)
