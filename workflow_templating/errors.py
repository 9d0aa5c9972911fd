"""
Shared exception hierarchy for the workflow templating engine.
"""


class WorkflowTemplatingError(Exception):
    """Base class for all templating related errors."""


class SchemaDecodeError(WorkflowTemplatingError):
    """Raised when a declared schema string cannot be decoded into schema fields."""


class TokenParseError(WorkflowTemplatingError):
    """Raised when text does not match the ``{{@id:name.path}}`` token grammar."""


class ActionNotFoundError(KeyError):
    """Raised when attempting to access an unregistered plugin action."""
