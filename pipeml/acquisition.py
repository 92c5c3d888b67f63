"""
Tagger acquisition for constituent parser training.

The parser trainer needs a POS tagger. It either receives an already
trained tagger model (``*.bin``) as a binary stream, or a training
parameters file from which it trains the tagger itself.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from .errors import ConfigurationError
from .params import TrainingParameters, load_training_parameters
from .resolver import MODEL_EXTENSION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PretrainedTagger:
    """A serialized tagger model to be handed over as a stream."""

    path: Path

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        with self.path.open("rb") as handle:
            yield handle


@dataclass(frozen=True)
class TaggerTrainingRecipe:
    """Tagger training parameters; the parser trainer trains the tagger first."""

    path: Path
    params: TrainingParameters


TaggerSource = Union[PretrainedTagger, TaggerTrainingRecipe]


def is_serialized_model(path: Union[str, Path]) -> bool:
    return str(path).endswith(MODEL_EXTENSION)


def acquire_tagger(path: Union[str, Path]) -> TaggerSource:
    """
    Classify ``path`` by its suffix and prepare the matching tagger source.

    Raises:
        ConfigurationError: if a ``.bin`` path does not exist, or a
            parameters path is missing, binary or malformed.
    """
    tagger_path = Path(path)
    if is_serialized_model(path):
        if not tagger_path.is_file():
            raise ConfigurationError(f"Tagger model not found: {tagger_path}")
        logger.info("Using pre-trained tagger model %s", tagger_path)
        return PretrainedTagger(tagger_path)
    params = load_training_parameters(tagger_path)
    return TaggerTrainingRecipe(tagger_path, params)
