"""Fill in training settings that can be derived from others."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from .params import OUTPUT_MODEL_KEY, TrainingParameters

logger = logging.getLogger(__name__)

MODEL_EXTENSION = ".bin"


def default_output_model(params_file: Union[str, Path]) -> str:
    """``conf/en-ner.properties`` -> ``en-ner.bin``."""
    return Path(params_file).stem + MODEL_EXTENSION


def resolve_output_model(params: TrainingParameters, params_file: Union[str, Path]) -> str:
    """
    Return the path the trained model will be written to.

    A non-empty OutputModel setting wins. Otherwise the path is derived from
    the parameters file name and stored back into ``params`` so the trainer
    sees the same value.
    """
    declared = params.get_output_model()
    if declared is not None:
        return declared
    output_model = default_output_model(params_file)
    params[OUTPUT_MODEL_KEY] = output_model
    logger.info("No %s given in %s; using %s", OUTPUT_MODEL_KEY, params_file, output_model)
    return output_model
