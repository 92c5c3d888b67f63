"""Exception types raised by pipeml."""

from __future__ import annotations


class PipemlError(Exception):
    """Base class for all pipeml errors."""


class ArgumentError(PipemlError):
    """A command-line parameter is missing or invalid."""


class ConfigurationError(PipemlError):
    """A referenced file is missing or malformed, or a path cannot be classified."""


class CollaboratorError(PipemlError):
    """No collaborator is available for the requested task or procedure."""
