"""
Configuration for the CSV localization tool.

Provides YAML round-trip via intermediate dict representation, the same
way every other persisted structure in this package is converted.

Example config.yaml:

    csv_directory: Resources/Dialogue Editor/CSV File
    csv_file_name: DialogueCSV_Save.csv
    encoding: utf-8
    line_terminator: "\\r\\n"
    languages: [English, German, Danish]
    strict: false
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from dialogue_csv.codec import CRLF, LINE_TERMINATORS, DialogueCSVError
from dialogue_csv.model import Language


DEFAULT_CSV_DIRECTORY = "Resources/Dialogue Editor/CSV File"
DEFAULT_CSV_FILE_NAME = "DialogueCSV_Save.csv"


class ConfigError(DialogueCSVError):
    """Raised when a configuration is invalid."""
    pass


def _all_languages() -> List[Language]:
    return list(Language)


@dataclass
class LocalizationConfig:
    """
    Settings for saving and loading the localization CSV.

    Properties:
        csv_directory: Directory of the CSV file, relative to the project root
        csv_file_name: CSV file name
        encoding: Text encoding of the file
        line_terminator: Row separator written on save ("\\r\\n" or "\\n")
        languages: Language columns written on save, in order
        strict: Reject unterminated quoted fields on load
    """

    csv_directory: str = DEFAULT_CSV_DIRECTORY
    csv_file_name: str = DEFAULT_CSV_FILE_NAME
    encoding: str = "utf-8"
    line_terminator: str = CRLF
    languages: List[Language] = field(default_factory=_all_languages)
    strict: bool = False

    def csv_path(self, root: str | Path = ".") -> Path:
        """Full path of the CSV file under a project root."""
        return Path(root) / self.csv_directory / self.csv_file_name


def language_from_name(name: str) -> Language:
    try:
        return Language(name)
    except ValueError:
        valid = [language.value for language in Language]
        raise ConfigError(f"Unknown language '{name}', expected one of {valid}")


def config_to_dict(c: LocalizationConfig) -> Dict[str, Any]:
    return {
        "csv_directory": c.csv_directory,
        "csv_file_name": c.csv_file_name,
        "encoding": c.encoding,
        "line_terminator": c.line_terminator,
        "languages": [language.value for language in c.languages],
        "strict": c.strict,
    }


_CONFIG_KEYS = ("csv_directory", "csv_file_name", "encoding",
                "line_terminator", "languages", "strict")


def _string_option(d: Dict[str, Any], key: str, default: str) -> str:
    value = d.get(key, default)
    if value is None:
        raise ConfigError(f"{key} must not be empty")
    return str(value)


def config_from_dict(d: Dict[str, Any] | None) -> LocalizationConfig:
    if d is None:
        return LocalizationConfig()
    if not isinstance(d, dict):
        raise ConfigError(f"Config must be a mapping, got {type(d).__name__}")

    c = LocalizationConfig()
    unknown = sorted(str(key) for key in d if key not in _CONFIG_KEYS)
    if unknown:
        warnings.warn(f"Unknown config keys ignored: {unknown}", UserWarning)

    c.csv_directory = _string_option(d, "csv_directory", c.csv_directory)
    c.csv_file_name = _string_option(d, "csv_file_name", c.csv_file_name)
    c.encoding = _string_option(d, "encoding", c.encoding)

    strict = d.get("strict", c.strict)
    if not isinstance(strict, bool):
        raise ConfigError(f"strict must be a boolean, got {strict!r}")
    c.strict = strict

    terminator = d.get("line_terminator", c.line_terminator)
    if terminator not in LINE_TERMINATORS:
        raise ConfigError(f"Unsupported line terminator: {terminator!r}")
    c.line_terminator = terminator

    if "languages" in d:
        names = d["languages"] or []
        c.languages = [language_from_name(name) for name in names]
    return c


def config_to_yaml(c: LocalizationConfig) -> str:
    return yaml.safe_dump(config_to_dict(c), sort_keys=False)


def config_from_yaml(s: str) -> LocalizationConfig:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML config: {e}")
    return config_from_dict(d)


def load_config(filepath: str | Path | None = None) -> LocalizationConfig:
    """
    Load a config file, or the defaults if no path is given.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the file is not a valid config
    """
    if filepath is None:
        return LocalizationConfig()
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {filepath}")
    return config_from_yaml(content)


def save_config(c: LocalizationConfig, filepath: str | Path) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(config_to_yaml(c))
