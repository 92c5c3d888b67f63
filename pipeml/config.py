"""
Configuration classes for pipeml evaluations.
"""

from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Mapping, Optional

from .operations import (
    DEFAULT_EVAL_FORMAT,
    DEFAULT_EVALUATE_MODEL,
    DEFAULT_FEATURE_FLAG,
    DEFAULT_METRIC,
    DEFAULT_SEQUENCE_TYPES,
    OperationRequest,
)


class _EvalConfig:
    """Shared helpers; subclasses are frozen dataclasses."""

    # Field name -> key seen by the evaluator
    PROPERTY_KEYS: Mapping[str, str] = MappingProxyType({})
    # Fields that select the procedure and are not passed to the evaluator
    EXCLUDED: frozenset = frozenset()

    @classmethod
    def from_request(cls, request: OperationRequest):
        values = {f.name: request.get(f.name) for f in fields(cls) if request.get(f.name) is not None}
        return cls(**values)

    def as_properties(self) -> Mapping[str, str]:
        """Read-only property map handed to the evaluator."""
        props = {}
        for f in fields(self):
            if f.name in self.EXCLUDED:
                continue
            value = getattr(self, f.name)
            if value is not None:
                props[self.PROPERTY_KEYS.get(f.name, f.name)] = value
        return MappingProxyType(props)


@dataclass(frozen=True)
class SequenceEvalConfig(_EvalConfig):
    """Inputs of a sequence labeler evaluation."""
    language: str
    testset: str
    model: str = DEFAULT_EVALUATE_MODEL
    corpus_format: str = DEFAULT_EVAL_FORMAT
    types: str = DEFAULT_SEQUENCE_TYPES
    clear_features: str = DEFAULT_FEATURE_FLAG
    unknown_accuracy: str = DEFAULT_FEATURE_FLAG
    metric: str = DEFAULT_METRIC
    eval_report: Optional[str] = None  # None means detailed

    PROPERTY_KEYS = MappingProxyType({
        "corpus_format": "corpusFormat",
        "clear_features": "clearFeatures",
        "unknown_accuracy": "unknownAccuracy",
    })
    EXCLUDED = frozenset({"metric", "eval_report"})


@dataclass(frozen=True)
class ParseEvalConfig(_EvalConfig):
    """Inputs of a constituent parser evaluation."""
    language: str
    testset: str
    model: str = DEFAULT_EVALUATE_MODEL
    clear_features: str = DEFAULT_FEATURE_FLAG

    PROPERTY_KEYS = MappingProxyType({"clear_features": "clearFeatures"})


@dataclass(frozen=True)
class DocEvalConfig(_EvalConfig):
    """Inputs of a document classifier evaluation."""
    testset: str
    model: str = DEFAULT_EVALUATE_MODEL
    clear_features: str = DEFAULT_FEATURE_FLAG

    PROPERTY_KEYS = MappingProxyType({"clear_features": "clearFeatures"})


@dataclass(frozen=True)
class TokenizerEvalConfig(_EvalConfig):
    """Inputs of a tokenizer evaluation."""
    language: str
    testset: str
