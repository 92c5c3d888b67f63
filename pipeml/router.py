"""
Operation dispatch.

An OperationRouter runs exactly one operation: it loads and completes the
configuration, picks the tagger and report strategies, calls the
registered collaborator, and writes the trained model or prints the
evaluation results.
"""

from __future__ import annotations

import enum
import logging
import sys
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, TextIO

from tabulate import tabulate

from .acquisition import PretrainedTagger, TaggerTrainingRecipe, acquire_tagger
from .collaborator_registry import CollaboratorRegistry, get_registry
from .config import DocEvalConfig, ParseEvalConfig, SequenceEvalConfig, TokenizerEvalConfig
from .errors import ArgumentError, ConfigurationError
from .model_io import MODEL_FORMAT_TAG, write_model
from .operations import OPERATIONS, OperationRequest
from .params import load_training_parameters
from .reports import ReportMode, call_procedure, run_report, select_report_mode
from .resolver import resolve_output_model

logger = logging.getLogger(__name__)


class RouterState(enum.Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class OperationRouter:
    """Single-use dispatcher for one OperationRequest."""

    def __init__(
        self,
        registry: Optional[CollaboratorRegistry] = None,
        *,
        model_writer: Callable[[str, Any, Any], Any] = write_model,
        report_stream: Optional[TextIO] = None,
    ) -> None:
        self._registry = registry
        self._write_model = model_writer
        self._report_stream = report_stream
        self.state = RouterState.IDLE
        self._handlers: Mapping[str, Callable[[OperationRequest], Any]] = MappingProxyType({
            "sequenceTrainer": self._train,
            "parserTrainer": self._parser_train,
            "docTrainer": self._train,
            "sequenceval": self._sequence_eval,
            "parseval": self._parse_eval,
            "doceval": self._doc_eval,
            "tokeval": self._tokenizer_eval,
            "crosseq": self._cross_validate,
            "crossdoc": self._cross_validate,
        })
        missing = set(OPERATIONS) - set(self._handlers)
        if missing:  # pragma: no cover - guards the operation table
            raise RuntimeError(f"No handler for operations: {', '.join(sorted(missing))}")

    @property
    def registry(self) -> CollaboratorRegistry:
        if self._registry is None:
            self._registry = get_registry()
        return self._registry

    def dispatch(self, request: OperationRequest) -> Any:
        """
        Run ``request`` and return the operation result.

        Training operations return the path of the written model;
        evaluation and cross validation operations return whatever the
        collaborator procedure returned.

        Raises:
            ArgumentError: for an unrecognized operation name (no collaborator
                is touched).
            Exception: anything raised while running the operation, unchanged.
        """
        if self.state is not RouterState.IDLE:
            raise RuntimeError(f"OperationRouter already used (state: {self.state.value})")
        handler = self._handlers.get(request.operation)
        if handler is None:
            self.state = RouterState.FAILED
            raise ArgumentError(
                f"Unknown operation '{request.operation}'. Supported operations: {', '.join(self._handlers)}"
            )
        self.state = RouterState.DISPATCHING
        spec = OPERATIONS[request.operation]
        logger.info("Running %s (%s %s)", spec.name, spec.family, spec.action)
        try:
            result = handler(request)
        except Exception:
            self.state = RouterState.FAILED
            logger.debug("%s failed", request.operation, exc_info=True)
            raise
        self.state = RouterState.SUCCEEDED
        return result

    # training ---------------------------------------------------------------

    def _train(self, request: OperationRequest) -> Path:
        task = OPERATIONS[request.operation].family
        params_file = request.params["params"]
        params = load_training_parameters(params_file)
        output_model = resolve_output_model(params, params_file)
        trainer = self.registry.factory(task, "trainer")(params)
        model = trainer.train(params)
        return self._write_model(MODEL_FORMAT_TAG, Path(output_model), model)

    def _parser_train(self, request: OperationRequest) -> Path:
        params_file = request.params["params"]
        params = load_training_parameters(params_file)
        chunker_params = load_training_parameters(request.params["chunker_params"])
        output_model = resolve_output_model(params, params_file)
        tagger = acquire_tagger(request.params["tagger_params"])
        trainer = self.registry.factory("parser", "trainer")(params, chunker_params)

        if isinstance(tagger, PretrainedTagger):
            with tagger.open() as tagger_stream:
                model = trainer.train(params, tagger_stream, chunker_params)
        elif isinstance(tagger, TaggerTrainingRecipe):
            logger.info("Training the POS tagger from %s before the parser", tagger.path)
            model = trainer.train(params, tagger.params, chunker_params)
        else:
            raise ConfigurationError(f"Cannot classify tagger source: {tagger!r}")
        return self._write_model(MODEL_FORMAT_TAG, Path(output_model), model)

    # evaluation -------------------------------------------------------------

    def _sequence_eval(self, request: OperationRequest) -> Any:
        config = SequenceEvalConfig.from_request(request)
        mode = select_report_mode(config.metric, config.eval_report)
        evaluator = self.registry.factory("sequence", "evaluator")(config.as_properties())
        return self._report(run_report(evaluator, mode), f"Sequence labeler ({mode.value})")

    def _parse_eval(self, request: OperationRequest) -> Any:
        config = ParseEvalConfig.from_request(request)
        evaluator = self.registry.factory("parser", "evaluator")(config.as_properties())
        return self._report(call_procedure(evaluator, "evaluate"), "Parseval")

    def _doc_eval(self, request: OperationRequest) -> Any:
        config = DocEvalConfig.from_request(request)
        evaluator = self.registry.factory("document", "evaluator")(config.as_properties())
        return self._report(call_procedure(evaluator, "evaluate"), "Document classifier")

    def _tokenizer_eval(self, request: OperationRequest) -> Any:
        config = TokenizerEvalConfig.from_request(request)
        evaluator = self.registry.factory("tokenizer", "evaluator")(config.as_properties())
        return self._report(run_report(evaluator, ReportMode.ACCURACY), "Tokenizer")

    # cross validation -------------------------------------------------------

    def _cross_validate(self, request: OperationRequest) -> Any:
        task = OPERATIONS[request.operation].family
        params = load_training_parameters(request.params["params"])
        validator = self.registry.factory(task, "cross_validator")(params)
        result = validator.cross_validate(params)
        return self._report(result, f"{task.capitalize()} cross validation")

    def _report(self, result: Any, title: str) -> Any:
        """Print mapping results as a metric table; other results are left to the collaborator."""
        if isinstance(result, Mapping) and result:
            stream = self._report_stream or sys.stdout
            rows = [(name, value) for name, value in result.items()]
            print(f"{title}:", file=stream)
            print(tabulate(rows, headers=["Metric", "Value"], floatfmt=".4f"), file=stream)
        return result
