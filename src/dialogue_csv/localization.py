"""
Localization CSV — export dialogue text to a table and import it back.

Layout:
    Dialogue Name, Node Guid ID, Text Guid ID, <one column per language>

    - One row per dialogue text entry
    - One row per choice node (empty Text Guid ID)
    - Language columns are located by header name, identifier columns
      by fixed position

IMPORTANT: Loading is fail-soft. Rows that match nothing, records that
no row matches and cells missing from short rows are skipped; they are
reported in LoadReport, never raised.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from dialogue_csv.codec import Row, Table, parse_file, write_file
from dialogue_csv.config import LocalizationConfig
from dialogue_csv.model import ChoiceNode, DialogueContainer, DialogueText, Language


DIALOGUE_NAME_HEADER = "Dialogue Name"
NODE_GUID_HEADER = "Node Guid ID"
TEXT_GUID_HEADER = "Text Guid ID"
IDENTIFIER_HEADERS = [DIALOGUE_NAME_HEADER, NODE_GUID_HEADER, TEXT_GUID_HEADER]

NODE_GUID_COLUMN = 1
TEXT_GUID_COLUMN = 2


def build_header(languages: Sequence[Language]) -> Row:
    return IDENTIFIER_HEADERS + [language.value for language in languages]


def build_table(containers: Iterable[DialogueContainer],
                languages: Optional[Sequence[Language]] = None) -> Table:
    """
    Build the localization table for a set of dialogue containers.

    Args:
        containers: Dialogue containers to export
        languages: Language columns, in order (defaults to all)

    Returns:
        Table with a header row
    """
    if languages is None:
        languages = list(Language)

    table = [build_header(languages)]
    for container in containers:
        for node in container.dialogue_nodes:
            for text in node.texts:
                table.append(
                    [container.name, node.node_guid, text.guid]
                    + [text.texts.get(language, "") for language in languages]
                )
        for choice in container.choice_nodes:
            table.append(
                [container.name, choice.node_guid, ""]
                + [choice.texts.get(language, "") for language in languages]
            )
    return table


@dataclass
class LanguageColumns:
    """
    Column index -> Language mapping for one header row.

    Headers that do not name a supported language (identifier columns,
    unknown languages) are left out.
    """

    columns: Dict[int, Language] = field(default_factory=dict)

    @classmethod
    def from_header(cls, header: Row,
                    languages: Optional[Sequence[Language]] = None) -> LanguageColumns:
        allowed = list(Language) if languages is None else list(languages)
        by_name = {language.value: language for language in allowed}
        columns = {}
        for index, name in enumerate(header):
            if index < len(IDENTIFIER_HEADERS):
                continue
            language = by_name.get(name.strip())
            if language is not None:
                columns[index] = language
        return cls(columns=columns)

    def __bool__(self) -> bool:
        return bool(self.columns)

    def apply(self, row: Row, texts: Dict[Language, str]) -> int:
        """Copy this row's language cells into `texts`; returns cells written."""
        written = 0
        for index, language in self.columns.items():
            if index < len(row):
                texts[language] = row[index]
                written += 1
        return written


@dataclass
class LoadReport:
    """Outcome of applying a localization table."""

    total_rows: int = 0
    updated_texts: int = 0
    updated_choices: int = 0
    unmatched_rows: List[int] = field(default_factory=list)
    missing_texts: List[str] = field(default_factory=list)
    missing_choices: List[str] = field(default_factory=list)

    @property
    def updated(self) -> int:
        return self.updated_texts + self.updated_choices


def _index_rows(rows: Table, column: int) -> Dict[str, int]:
    """Map a key column to row number; later rows win."""
    index = {}
    for row_num, row in enumerate(rows):
        if len(row) > column and row[column]:
            index[row[column]] = row_num
    return index


def apply_table(table: Table, containers: Iterable[DialogueContainer],
                languages: Optional[Sequence[Language]] = None) -> LoadReport:
    """
    Write the language cells of a localization table into containers.

    Dialogue texts are matched on the Text Guid ID column, choice nodes
    on the Node Guid ID column.

    Args:
        table: Parsed table, header first
        containers: Dialogue containers to update in place
        languages: Languages to import (defaults to all)

    Returns:
        LoadReport
    """
    report = LoadReport()
    if not table:
        warnings.warn("Localization table is empty; nothing to load", UserWarning)
        return report

    header, rows = table[0], table[1:]
    report.total_rows = len(rows)

    columns = LanguageColumns.from_header(header, languages)
    if not columns:
        warnings.warn(f"No language columns in header {header}; nothing to load", UserWarning)
        report.unmatched_rows = list(range(2, len(rows) + 2))
        return report

    by_text_guid = _index_rows(rows, TEXT_GUID_COLUMN)
    by_node_guid = _index_rows(rows, NODE_GUID_COLUMN)
    matched = set()

    for container in containers:
        for text in container.all_texts():
            row_num = by_text_guid.get(text.guid)
            if row_num is None:
                report.missing_texts.append(text.guid)
                continue
            columns.apply(rows[row_num], text.texts)
            matched.add(row_num)
            report.updated_texts += 1

        for choice in container.choice_nodes:
            row_num = by_node_guid.get(choice.node_guid)
            if row_num is None:
                report.missing_choices.append(choice.node_guid)
                continue
            columns.apply(rows[row_num], choice.texts)
            matched.add(row_num)
            report.updated_choices += 1

    # Row numbers as a spreadsheet shows them (header is line 1)
    report.unmatched_rows = [n + 2 for n in range(len(rows)) if n not in matched]
    return report


def save_csv(containers: Iterable[DialogueContainer],
             config: Optional[LocalizationConfig] = None,
             root: str | Path = ".") -> Path:
    """
    Export containers to the configured CSV file.

    Returns:
        Path of the written file
    """
    if config is None:
        config = LocalizationConfig()

    path = config.csv_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    table = build_table(containers, config.languages)
    write_file(str(path), table, encoding=config.encoding,
               line_terminator=config.line_terminator)
    return path


def load_csv(containers: Iterable[DialogueContainer],
             config: Optional[LocalizationConfig] = None,
             root: str | Path = ".") -> LoadReport:
    """
    Import the configured CSV file into containers.

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
        MalformedQuotingError: If config.strict and a quoted field is unterminated
    """
    if config is None:
        config = LocalizationConfig()

    table = parse_file(str(config.csv_path(root)), encoding=config.encoding,
                       strict=config.strict)
    return apply_table(table, containers, config.languages)


__all__ = [
    "DIALOGUE_NAME_HEADER",
    "NODE_GUID_HEADER",
    "TEXT_GUID_HEADER",
    "IDENTIFIER_HEADERS",
    "build_header",
    "build_table",
    "LanguageColumns",
    "LoadReport",
    "apply_table",
    "save_csv",
    "load_csv",
]
