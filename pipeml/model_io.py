"""Writing trained models to disk."""

from __future__ import annotations

import logging
import os
import pickle
import sys
import tempfile
import time
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)

MODEL_FORMAT_TAG = "pipeml"


def _serialize(model: Any, handle: Any) -> None:
    serialize = getattr(model, "serialize", None)
    if callable(serialize):
        serialize(handle)
    else:
        pickle.dump(model, handle, protocol=pickle.HIGHEST_PROTOCOL)


def write_model(format_tag: str, path: Union[str, Path], model: Any) -> Path:
    """
    Serialize ``model`` to ``path``.

    The model is written to a temporary file next to ``path`` and renamed
    into place, so ``path`` either holds a complete model or is untouched.
    """
    if model is None:
        raise ValueError("Trainer returned no model")
    target = Path(path)
    directory = target.parent
    directory.mkdir(parents=True, exist_ok=True)

    print(f"[pipeml] Writing {format_tag} model ... ", end="", file=sys.stderr, flush=True)
    start = time.perf_counter()
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            _serialize(model, handle)
        os.replace(tmp_name, target)
    except BaseException:
        print("failed", file=sys.stderr)
        Path(tmp_name).unlink(missing_ok=True)
        raise
    elapsed = time.perf_counter() - start
    print(f"done ({elapsed:.3f}s)", file=sys.stderr)
    print(f"[pipeml] Wrote {format_tag} model to path: {target.resolve()}", file=sys.stderr)
    logger.debug("Model %s written in %.3fs", target, elapsed)
    return target
