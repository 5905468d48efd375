from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.document import UNSPECIFIED_UNIT

"""Engine configuration loader.

Responsibilities:
- Load an optional YAML config file
- Validate it against config_schema.json (unknown keys rejected)
- Fill every missing key with the built-in defaults

The header vocabularies used for column-role inference live here so they can be
extended without touching the classifier.
"""

__all__ = [
    "ConfigError",
    "ColumnVocabulary",
    "EngineConfig",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_DATE_KEYWORDS = ("datum", "dne", "kdy", "termín", "date")
DEFAULT_LENGTH_KEYWORDS = ("délka", "delka", "metr", "metráž", "length", "footage")
DEFAULT_LENGTH_EXACT_TOKENS = ("m", "bm")
DEFAULT_LENGTH_PRIORITY_TOKENS = ("zkontrolováno", "zkontrolovano")
DEFAULT_NEAR_TARGET_RATIO = 0.8


class ConfigError(Exception):
    pass


def _lowered(words: Any) -> tuple[str, ...]:
    return tuple(str(w).lower() for w in words)


@dataclass(frozen=True)
class ColumnVocabulary:
    """Header words that mark the date and length columns (compared lower-cased)."""
    date_keywords: tuple[str, ...] = DEFAULT_DATE_KEYWORDS  # substring match
    length_keywords: tuple[str, ...] = DEFAULT_LENGTH_KEYWORDS  # substring match
    length_exact_tokens: tuple[str, ...] = DEFAULT_LENGTH_EXACT_TOKENS  # whole header
    length_priority_tokens: tuple[str, ...] = DEFAULT_LENGTH_PRIORITY_TOKENS  # whole header, checked first


@dataclass(frozen=True)
class EngineConfig:
    vocabulary: ColumnVocabulary = field(default_factory=ColumnVocabulary)
    unspecified_unit: str = UNSPECIFIED_UNIT
    near_target_ratio: float = DEFAULT_NEAR_TARGET_RATIO


def default_config() -> EngineConfig:
    return EngineConfig()


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: if the schema file is missing or invalid, or the data
            violates it (wrong types, unknown keys, out-of-range ratio).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> EngineConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    vocabulary = ColumnVocabulary(
        date_keywords=_lowered(data.get("date_keywords", DEFAULT_DATE_KEYWORDS)),
        length_keywords=_lowered(data.get("length_keywords", DEFAULT_LENGTH_KEYWORDS)),
        length_exact_tokens=_lowered(data.get("length_exact_tokens", DEFAULT_LENGTH_EXACT_TOKENS)),
        length_priority_tokens=_lowered(
            data.get("length_priority_tokens", DEFAULT_LENGTH_PRIORITY_TOKENS)
        ),
    )
    return EngineConfig(
        vocabulary=vocabulary,
        unspecified_unit=data.get("unspecified_unit", UNSPECIFIED_UNIT),
        near_target_ratio=float(data.get("near_target_ratio", DEFAULT_NEAR_TARGET_RATIO)),
    )
