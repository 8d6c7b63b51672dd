"""
Tests for the localization layer (dialogue containers <-> table).

Tests verify that:
    - Export writes identifier columns then one column per language
    - Import matches texts by text guid and choices by node guid
    - Language columns are found by header name, in any order
    - Short rows, unknown rows and unknown headers are skipped, not fatal
"""

import pytest
from dialogue_csv.codec import format_table, parse
from dialogue_csv.config import LocalizationConfig
from dialogue_csv.examples import build_example_dialogue
from dialogue_csv.localization import (
    IDENTIFIER_HEADERS,
    LanguageColumns,
    apply_table,
    build_header,
    build_table,
    load_csv,
    save_csv,
)
from dialogue_csv.model import ChoiceNode, DialogueContainer, DialogueNode, DialogueText, Language


@pytest.fixture
def dialogue():
    return build_example_dialogue()


def _blank_copy(container: DialogueContainer) -> DialogueContainer:
    """Same guids, no text."""
    return DialogueContainer(
        name=container.name,
        dialogue_nodes=[
            DialogueNode(node_guid=node.node_guid,
                         texts=[DialogueText(guid=t.guid) for t in node.texts])
            for node in container.dialogue_nodes
        ],
        choice_nodes=[ChoiceNode(node_guid=c.node_guid) for c in container.choice_nodes],
    )


class TestBuildTable:
    """Export layout."""

    def test_header(self):
        assert build_header([Language.ENGLISH, Language.DANISH]) == [
            "Dialogue Name", "Node Guid ID", "Text Guid ID", "English", "Danish"]

    def test_default_languages(self, dialogue):
        table = build_table([dialogue])
        assert table[0] == IDENTIFIER_HEADERS + [language.value for language in Language]

    def test_one_row_per_text_and_choice(self, dialogue):
        table = build_table([dialogue])
        # 3 dialogue texts + 2 choices
        assert len(table) == 1 + 3 + 2

    def test_text_row(self, dialogue):
        table = build_table([dialogue], [Language.ENGLISH])
        assert table[1] == ["Shopkeeper", "node-greeting", "text-greeting-1", "Welcome, traveller!"]

    def test_choice_row_has_empty_text_guid(self, dialogue):
        table = build_table([dialogue], [Language.ENGLISH])
        assert table[-1] == ["Shopkeeper", "choice-leave", "", "Nothing, thanks."]

    def test_multiple_containers(self, dialogue):
        other = DialogueContainer(name="Guard", choice_nodes=[ChoiceNode(node_guid="g1")])
        table = build_table([dialogue, other])
        assert table[-1][:3] == ["Guard", "g1", ""]


class TestLanguageColumns:
    """Header name -> Language mapping."""

    def test_maps_language_headers(self):
        header = IDENTIFIER_HEADERS + ["German", "English"]
        columns = LanguageColumns.from_header(header)
        assert columns.columns == {3: Language.GERMAN, 4: Language.ENGLISH}

    def test_ignores_unknown_and_identifier_headers(self):
        header = ["English", "Node Guid ID", "Text Guid ID", "Klingon", "Danish"]
        columns = LanguageColumns.from_header(header)
        assert columns.columns == {4: Language.DANISH}

    def test_restricted_languages(self):
        header = IDENTIFIER_HEADERS + ["English", "German"]
        columns = LanguageColumns.from_header(header, [Language.GERMAN])
        assert columns.columns == {4: Language.GERMAN}

    def test_apply_skips_missing_cells(self):
        columns = LanguageColumns.from_header(IDENTIFIER_HEADERS + ["English", "German"])
        texts = {Language.ENGLISH: "old", Language.GERMAN: "alt"}
        written = columns.apply(["d", "n", "t", "new"], texts)
        assert written == 1
        assert texts == {Language.ENGLISH: "new", Language.GERMAN: "alt"}


class TestApplyTable:
    """Import matching."""

    def test_round_trip_through_text(self, dialogue):
        text = format_table(build_table([dialogue]))
        target = _blank_copy(dialogue)
        report = apply_table(parse(text), [target])

        assert report.updated_texts == 3
        assert report.updated_choices == 2
        assert report.unmatched_rows == []
        assert target == dialogue

    def test_columns_in_any_order(self, dialogue):
        table = [
            IDENTIFIER_HEADERS + ["German", "English"],
            ["Shopkeeper", "node-farewell", "text-farewell-1", "Gute Reise.", "Safe travels."],
        ]
        apply_table(table, [dialogue])
        text = dialogue.get_text("text-farewell-1")
        assert text.texts[Language.GERMAN] == "Gute Reise."
        assert text.texts[Language.ENGLISH] == "Safe travels."

    def test_choice_matched_by_node_guid(self, dialogue):
        table = [
            IDENTIFIER_HEADERS + ["Danish"],
            ["", "choice-buy", "", "Vis mig dine varer"],
        ]
        report = apply_table(table, [dialogue])
        assert report.updated_choices == 1
        assert dialogue.get_choice("choice-buy").texts[Language.DANISH] == "Vis mig dine varer"

    def test_short_row_updates_only_present_cells(self, dialogue):
        table = [
            IDENTIFIER_HEADERS + ["English", "German"],
            ["Shopkeeper", "node-greeting", "text-greeting-1", "Hi"],
        ]
        apply_table(table, [dialogue])
        text = dialogue.get_text("text-greeting-1")
        assert text.texts[Language.ENGLISH] == "Hi"
        assert text.texts[Language.GERMAN] == ""

    def test_unmatched_rows_and_records_are_reported(self, dialogue):
        table = [
            IDENTIFIER_HEADERS + ["English"],
            ["Shopkeeper", "node-greeting", "text-greeting-1", "Hi"],
            ["Shopkeeper", "node-gone", "text-gone", "Lost"],
            ["x"],
        ]
        report = apply_table(table, [dialogue])
        assert report.total_rows == 3
        assert report.updated_texts == 1
        assert report.unmatched_rows == [3, 4]
        assert "text-farewell-1" in report.missing_texts
        assert report.missing_choices == ["choice-buy", "choice-leave"]

    def test_last_duplicate_row_wins(self, dialogue):
        table = [
            IDENTIFIER_HEADERS + ["English"],
            ["Shopkeeper", "node-farewell", "text-farewell-1", "first"],
            ["Shopkeeper", "node-farewell", "text-farewell-1", "second"],
        ]
        apply_table(table, [dialogue])
        assert dialogue.get_text("text-farewell-1").texts[Language.ENGLISH] == "second"

    def test_empty_table_warns(self, dialogue):
        with pytest.warns(UserWarning, match="empty"):
            report = apply_table([], [dialogue])
        assert report.updated == 0

    def test_header_without_languages_warns(self, dialogue):
        table = [IDENTIFIER_HEADERS, ["Shopkeeper", "node-farewell", "text-farewell-1"]]
        with pytest.warns(UserWarning, match="No language columns"):
            report = apply_table(table, [dialogue])
        assert report.updated == 0
        assert report.unmatched_rows == [2]


class TestFiles:
    """save_csv / load_csv use the configured location."""

    def test_save_creates_configured_path(self, dialogue, tmp_path):
        path = save_csv([dialogue], root=tmp_path)
        assert path == tmp_path / "Resources" / "Dialogue Editor" / "CSV File" / "DialogueCSV_Save.csv"
        assert path.read_bytes().startswith(b"Dialogue Name,Node Guid ID,Text Guid ID,English")
        assert b"\r\n" in path.read_bytes()

    def test_save_then_load(self, dialogue, tmp_path):
        config = LocalizationConfig(csv_directory="loc", line_terminator="\n",
                                    languages=[Language.ENGLISH])
        save_csv([dialogue], config, root=tmp_path)

        target = _blank_copy(dialogue)
        report = load_csv([target], config, root=tmp_path)
        assert report.updated == 5
        assert target.get_text("text-greeting-2").texts[Language.ENGLISH] == \
            'They call me "Old Bram".\nWhat do you need?'

    def test_load_missing_file(self, dialogue, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_csv([dialogue], root=tmp_path)
