"""
Training parameters files.

Parameters files use the Java properties syntax: one ``key=value``,
``key: value`` or ``key value`` setting per logical line, ``#`` and ``!``
comment lines, backslash escapes (``\\:``, ``\\=``, ``\\ ``, ``\\\\``,
``\\t``, ``\\uXXXX``) and a trailing backslash to continue a setting on
the next line. A key on its own gets an empty value.

Files are decoded as UTF-8, falling back to ISO-8859-1.
"""

from __future__ import annotations

import logging
import re
import string
from pathlib import Path
from typing import Dict, Iterator, MutableMapping, Optional, Tuple, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

OUTPUT_MODEL_KEY = "OutputModel"
_COMMENT_PREFIXES = ("#", "!")
_SEPARATORS = "=:"
_WHITESPACE = " \t\f"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
# Control bytes that never occur in a text file
_BINARY_BYTES = re.compile(rb"[\x00-\x08\x0b\x0e-\x1f]")


class TrainingParameters(MutableMapping[str, str]):
    """Mutable settings map loaded from a parameters file."""

    def __init__(self, settings: Optional[Dict[str, str]] = None, source: Optional[Path] = None) -> None:
        self._settings: Dict[str, str] = dict(settings or {})
        self.source = source

    def __getitem__(self, key: str) -> str:
        return self._settings[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._settings[key] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._settings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._settings)

    def __len__(self) -> int:
        return len(self._settings)

    def __repr__(self) -> str:
        return f"TrainingParameters({self._settings!r}, source={self.source!r})"

    def get_output_model(self) -> Optional[str]:
        """Return the declared OutputModel with surrounding whitespace removed, or None if unset."""
        value = self._settings.get(OUTPUT_MODEL_KEY)
        if value is None:
            return None
        value = value.strip()
        return value or None


def _continues(line: str) -> bool:
    """A line continues when it ends with an odd number of backslashes."""
    return (len(line) - len(line.rstrip("\\"))) % 2 == 1


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    lines = _LINE_BREAK.split(text)
    index = 0
    while index < len(lines):
        lineno = index + 1
        line = lines[index].lstrip(_WHITESPACE)
        index += 1
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        while _continues(line):
            line = line[:-1]
            if index >= len(lines):
                break
            line += lines[index].lstrip(_WHITESPACE)
            index += 1
        yield lineno, line


def _unescape(text: str, label: str, lineno: int) -> str:
    chars = []
    index = 0
    while index < len(text):
        char = text[index]
        index += 1
        if char != "\\":
            chars.append(char)
            continue
        if index >= len(text):
            break
        escaped = text[index]
        index += 1
        if escaped == "u":
            digits = text[index:index + 4]
            if len(digits) != 4 or any(digit not in string.hexdigits for digit in digits):
                raise ConfigurationError(f"{label}:{lineno}: malformed \\uxxxx escape")
            chars.append(chr(int(digits, 16)))
            index += 4
        else:
            chars.append(_ESCAPES.get(escaped, escaped))
    return "".join(chars)


def _split_line(line: str) -> Tuple[str, str]:
    """Split at the first unescaped separator or whitespace; return the raw key and value."""
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1
    key = line[:index]
    rest = line[index:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def parse_training_parameters(text: str, source: Optional[Path] = None) -> TrainingParameters:
    settings: Dict[str, str] = {}
    label = str(source) if source else "<string>"
    for lineno, line in _logical_lines(text):
        raw_key, raw_value = _split_line(line)
        if not raw_key:
            raise ConfigurationError(f"{label}:{lineno}: setting has no key: '{line}'")
        settings[_unescape(raw_key, label, lineno)] = _unescape(raw_value, label, lineno)
    return TrainingParameters(settings, source=source)


def _decode(data: bytes, path: Path) -> str:
    if _BINARY_BYTES.search(data):
        raise ConfigurationError(f"{path}: not a text parameters file")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("%s is not UTF-8, reading it as ISO-8859-1", path)
        return data.decode("latin-1")


def load_training_parameters(path: Union[str, Path]) -> TrainingParameters:
    """
    Load a training parameters file.

    Raises:
        ConfigurationError: if the file does not exist, holds binary data,
            or a setting is malformed.
        OSError: if the file exists but cannot be read.
    """
    params_path = Path(path)
    if not params_path.is_file():
        raise ConfigurationError(f"Training parameters file not found: {params_path}")
    params = parse_training_parameters(_decode(params_path.read_bytes(), params_path), source=params_path)
    logger.debug("Loaded %d training settings from %s", len(params), params_path)
    return params
