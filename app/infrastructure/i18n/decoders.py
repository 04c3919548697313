"""Decoders turning raw resource bytes into nested translation data.

Supports YAML, JSON, TOML and INI, chosen by file extension. Unknown
extensions are decoded as YAML.
"""

import configparser
import json
import os
import tomllib
from typing import Any, Callable, Dict, Mapping

import yaml

from infrastructure.i18n.errors import TranslationLoadError


def _decode_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _decode_json(text: str) -> Any:
    return json.loads(text) if text.strip() else None


def _decode_toml(text: str) -> Any:
    return tomllib.loads(text)


def _decode_ini(text: str) -> Any:
    # DEFAULT is read as a plain section so its keys are not copied into
    # every other section.
    parser = configparser.ConfigParser(interpolation=None, default_section="\x00")
    # Keep key case, messages are addressed case-sensitively.
    parser.optionxform = str
    parser.read_string(text)

    data: Dict[str, Any] = {}
    for section in parser.sections():
        values = dict(parser.items(section))
        if section == "DEFAULT":
            data.update(values)
        else:
            data[section] = values
    return data


DECODERS: Dict[str, Callable[[str], Any]] = {
    ".yml": _decode_yaml,
    ".yaml": _decode_yaml,
    ".json": _decode_json,
    ".toml": _decode_toml,
    ".tml": _decode_toml,
    ".ini": _decode_ini,
}


def decode(name: str, data: bytes) -> Mapping[str, Any]:
    """Decode a raw translation resource.

    Args:
        name: Resource name, its extension selects the format.
        data: Raw UTF-8 content.

    Returns:
        Nested mapping (empty for an empty document).

    Raises:
        TranslationLoadError: If the content cannot be parsed or is not a
            mapping at the top level.
    """
    ext = os.path.splitext(name)[1].lower()
    decoder = DECODERS.get(ext, _decode_yaml)

    try:
        parsed = decoder(data.decode("utf-8-sig"))
    except (
        UnicodeDecodeError,
        yaml.YAMLError,
        json.JSONDecodeError,
        tomllib.TOMLDecodeError,
        configparser.Error,
    ) as e:
        raise TranslationLoadError(f"Failed to parse {name}: {e}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise TranslationLoadError(
            f"Failed to parse {name}: expected a mapping, got {type(parsed).__name__}"
        )
    return parsed
