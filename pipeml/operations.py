"""Central definitions for pipeml operations and their parameters."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import langcodes

from .errors import ArgumentError

# Defaults shared by the evaluation operations.
DEFAULT_EVALUATE_MODEL = "off"
DEFAULT_FEATURE_FLAG = "no"
DEFAULT_EVAL_FORMAT = "conll02"
DEFAULT_SEQUENCE_TYPES = "off"
DEFAULT_METRIC = "fmeasure"

SEQUENCE_LANGUAGES = ("de", "en", "es", "eu", "gl", "it", "nl")
PARSE_LANGUAGES = ("ca", "de", "en", "es", "eu", "fr", "it")
FEATURE_FLAGS = ("yes", "no", "docstart")
CORPUS_FORMATS = ("conll02", "conll03", "lemmatizer", "tabulated")
METRICS = ("accuracy", "fmeasure")
EVAL_REPORTS = ("brief", "detailed", "error")

# Value kinds understood by the parameter validators
TEXT = "text"
FILE = "file"
LANGUAGE = "language"


@dataclass(frozen=True)
class ParamSpec:
    """Declarative description of one operation parameter."""

    dest: str
    flags: Tuple[str, ...]
    help: str
    required: bool = False
    kind: str = TEXT
    choices: Optional[Tuple[str, ...]] = None
    default: Optional[str] = None

    @property
    def long_flag(self) -> str:
        return next(flag for flag in self.flags if flag.startswith("--"))

    def convert(self, value: Any) -> str:
        """Validate a raw value and return its normalized string form."""
        if value is None:
            raise ValueError(f"{self.long_flag} requires a value")
        text = str(value).strip()
        if not text:
            raise ValueError(f"{self.long_flag} must not be empty")
        if self.kind == LANGUAGE:
            text = normalize_language(text)
        elif self.kind == FILE and not Path(text).is_file():
            raise ValueError(f"{self.long_flag}: file not found: {text}")
        if self.choices is not None and text.lower() not in self.choices:
            raise ValueError(
                f"{self.long_flag}: invalid choice '{text}' (choose from {', '.join(self.choices)})"
            )
        return text.lower() if self.choices is not None else text


@dataclass(frozen=True)
class OperationSpec:
    """An operation name together with its parameter schema."""

    name: str
    family: str
    action: str
    help: str
    params: Tuple[ParamSpec, ...] = field(default_factory=tuple)


def normalize_language(value: str) -> str:
    """Map spellings such as ``EN`` or ``eng`` to their shortest BCP 47 tag."""
    try:
        return langcodes.standardize_tag(value)
    except ValueError as exc:
        raise ValueError(f"invalid language code '{value}'") from exc


def describe_languages(codes: Tuple[str, ...]) -> str:
    names = []
    for code in codes:
        try:
            names.append(f"{code}={langcodes.Language.get(code).display_name()}")
        except (LookupError, ValueError):
            names.append(code)
    return ", ".join(names)


def _params_file(help_text: str) -> ParamSpec:
    return ParamSpec(dest="params", flags=("-p", "--params"), help=help_text, required=True, kind=FILE)


def _language(choices: Tuple[str, ...]) -> ParamSpec:
    return ParamSpec(
        dest="language",
        flags=("-l", "--language"),
        help=f"Choose language ({describe_languages(choices)}).",
        required=True,
        kind=LANGUAGE,
        choices=choices,
    )


_MODEL = ParamSpec(
    dest="model",
    flags=("-m", "--model"),
    help="Pass the model to evaluate as a parameter.",
    default=DEFAULT_EVALUATE_MODEL,
)
_TESTSET = ParamSpec(
    dest="testset",
    flags=("-t", "--testset"),
    help="The test or reference corpus.",
    required=True,
)
_CLEAR_FEATURES = ParamSpec(
    dest="clear_features",
    flags=("--clearFeatures",),
    help="Reset the adaptive features; defaults to 'no'.",
    choices=FEATURE_FLAGS,
    default=DEFAULT_FEATURE_FLAG,
)


def _build_operations() -> Mapping[str, OperationSpec]:
    specs = (
        OperationSpec(
            name="sequenceTrainer",
            family="sequence",
            action="train",
            help="Sequence Labeler training CLI",
            params=(_params_file("Load the training parameters file."),),
        ),
        OperationSpec(
            name="parserTrainer",
            family="parser",
            action="train",
            help="Constituent Parser training CLI",
            params=(
                _params_file("Load the parsing training parameters file."),
                ParamSpec(
                    dest="tagger_params",
                    flags=("-t", "--taggerParams"),
                    help="Load the tagger training parameters file or an already trained POS tagger model.",
                    required=True,
                    kind=FILE,
                ),
                ParamSpec(
                    dest="chunker_params",
                    flags=("-c", "--chunkerParams"),
                    help="Load the chunker training parameters file.",
                    required=True,
                    kind=FILE,
                ),
            ),
        ),
        OperationSpec(
            name="docTrainer",
            family="document",
            action="train",
            help="Document Classification training CLI",
            params=(_params_file("Load the training parameters file."),),
        ),
        OperationSpec(
            name="sequenceval",
            family="sequence",
            action="evaluate",
            help="Sequence Labeler Evaluation CLI",
            params=(
                ParamSpec(
                    dest="metric",
                    flags=("--metric",),
                    help="Choose evaluation metric for Sequence Labeler; it defaults to fmeasure.",
                    choices=METRICS,
                    default=DEFAULT_METRIC,
                ),
                _language(SEQUENCE_LANGUAGES),
                _MODEL,
                _TESTSET,
                _CLEAR_FEATURES,
                ParamSpec(
                    dest="corpus_format",
                    flags=("-f", "--corpusFormat"),
                    help="Choose format of reference corpus; it defaults to conll02 format.",
                    choices=CORPUS_FORMATS,
                    default=DEFAULT_EVAL_FORMAT,
                ),
                ParamSpec(
                    dest="eval_report",
                    flags=("--evalReport",),
                    help="Choose level of detail of evaluation report; it defaults to detailed evaluation.",
                    choices=EVAL_REPORTS,
                ),
                ParamSpec(
                    dest="types",
                    flags=("--types",),
                    help=(
                        "Choose which Sequence types used for evaluation; the argument must be a comma "
                        "separated string; e.g., 'person,organization'."
                    ),
                    default=DEFAULT_SEQUENCE_TYPES,
                ),
                ParamSpec(
                    dest="unknown_accuracy",
                    flags=("-u", "--unknownAccuracy"),
                    help="Pass the model training set to evaluate unknown and known word accuracy.",
                    default=DEFAULT_FEATURE_FLAG,
                ),
            ),
        ),
        OperationSpec(
            name="parseval",
            family="parser",
            action="evaluate",
            help="Parseval CLI",
            params=(_language(PARSE_LANGUAGES), _MODEL, _TESTSET, _CLEAR_FEATURES),
        ),
        OperationSpec(
            name="doceval",
            family="document",
            action="evaluate",
            help="Document Classification Evaluation CLI",
            params=(_MODEL, _TESTSET, _CLEAR_FEATURES),
        ),
        OperationSpec(
            name="tokeval",
            family="tokenizer",
            action="evaluate",
            help="Tokenizer Evaluation CLI",
            params=(_language(PARSE_LANGUAGES), _TESTSET),
        ),
        OperationSpec(
            name="crosseq",
            family="sequence",
            action="cross_validate",
            help="Cross validation CLI for the Sequence Labeler",
            params=(_params_file("Load the Cross validation parameters file."),),
        ),
        OperationSpec(
            name="crossdoc",
            family="document",
            action="cross_validate",
            help="Cross Validation CLI for the Document Classifier",
            params=(_params_file("Load the Cross Validation parameters file for the Document Classifier."),),
        ),
    )
    return MappingProxyType({spec.name: spec for spec in specs})


OPERATIONS: Mapping[str, OperationSpec] = _build_operations()
OPERATION_NAMES: Tuple[str, ...] = tuple(OPERATIONS)


@dataclass(frozen=True)
class OperationRequest:
    """A recognized operation name plus its validated parameters."""

    operation: str
    params: Mapping[str, str]

    def get(self, dest: str, default: Optional[str] = None) -> Optional[str]:
        return self.params.get(dest, default)


def build_request(
    operation: str,
    params: Mapping[str, Any],
    operations: Mapping[str, OperationSpec] = OPERATIONS,
) -> OperationRequest:
    """
    Validate raw parameters against an operation schema.

    Missing optional parameters take their declared default; optional
    parameters without a default stay absent. Unknown parameter names are
    rejected.

    Raises:
        ArgumentError: if the operation is unknown or a parameter is
            missing or invalid.
    """
    spec = operations.get(operation)
    if spec is None:
        raise ArgumentError(f"Unknown operation '{operation}'. Supported operations: {', '.join(operations)}")

    known = {param.dest for param in spec.params}
    unexpected = sorted(key for key, value in params.items() if key not in known and value is not None)
    if unexpected:
        raise ArgumentError(f"Unexpected {operation} parameters: {', '.join(unexpected)}")

    resolved: Dict[str, str] = {}
    for param in spec.params:
        value = params.get(param.dest)
        if value is None:
            if param.required:
                raise ArgumentError(f"{operation}: the following argument is required: {param.long_flag}")
            if param.default is not None:
                resolved[param.dest] = param.default
            continue
        try:
            resolved[param.dest] = param.convert(value)
        except ValueError as exc:
            raise ArgumentError(f"{operation}: {exc}") from exc
    return OperationRequest(operation=operation, params=MappingProxyType(resolved))


def request_from_namespace(args: argparse.Namespace, operations: Mapping[str, OperationSpec] = OPERATIONS) -> OperationRequest:
    spec = operations[args.operation]
    values = {param.dest: getattr(args, param.dest, None) for param in spec.params}
    return build_request(args.operation, values, operations)
