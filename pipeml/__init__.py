"""
pipeml: command-line training, evaluation and cross validation of
sequence labelers, constituent parsers and document classifiers.

The learning algorithms are provided by collaborator packages registered
under the ``pipeml.collaborators`` entry point group.
"""

__version__ = "1.0.0"

from pipeml.collaborator_registry import register_collaborator
from pipeml.collaborator_spec import CollaboratorSpec
from pipeml.operations import OPERATIONS, OperationRequest, build_request
from pipeml.router import OperationRouter

__all__ = [
    'CollaboratorSpec',
    'OPERATIONS',
    'OperationRequest',
    'OperationRouter',
    'build_request',
    'register_collaborator',
    '__version__',
]
