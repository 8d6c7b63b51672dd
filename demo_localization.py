#!/usr/bin/env python3
"""
Localization Round-Trip Demo: Dialogue → CSV → Translation → Dialogue

Shows the full workflow:
1. Export an example dialogue to CSV
2. Fill in the German column, as a translator would
3. Load the CSV back into the dialogue
4. Report what was updated
"""

import sys
import tempfile

from dialogue_csv.codec import format_table, parse_file, write_file
from dialogue_csv.config import load_config
from dialogue_csv.examples import build_example_dialogue
from dialogue_csv.localization import load_csv, save_csv
from dialogue_csv.model import Language


def main():
    config = load_config(sys.argv[1] if len(sys.argv) > 1 else None)
    root = tempfile.mkdtemp(prefix="dialogue_csv_")

    print("=" * 80)
    print("LOCALIZATION DEMO: Dialogue → CSV → Translation → Dialogue")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Export
    # =========================================================================
    print("\n1. SAVING CSV...")
    dialogue = build_example_dialogue()
    path = save_csv([dialogue], config, root=root)
    print(f"   ✓ Saved {path}")

    # =========================================================================
    # STEP 2: Translate
    # =========================================================================
    print("\n2. TRANSLATING...")
    table = parse_file(str(path), encoding=config.encoding)
    header = table[0]
    if Language.GERMAN.value not in header or Language.ENGLISH.value not in header:
        print("   English and German columns are both needed, nothing to translate")
    else:
        source = header.index(Language.ENGLISH.value)
        target = header.index(Language.GERMAN.value)
        for row in table[1:]:
            row[target] = f"[de] {row[source]}"
        write_file(str(path), table, encoding=config.encoding,
                   line_terminator=config.line_terminator)
        print(f"   ✓ Filled {len(table) - 1} German cells")

    print("\n   CSV contents:")
    print("-" * 80)
    for line in format_table(table, line_terminator="\n").split("\n"):
        print(f"   {line}")

    # =========================================================================
    # STEP 3: Import
    # =========================================================================
    print("\n3. LOADING CSV...")
    report = load_csv([dialogue], config, root=root)
    print(f"   ✓ Rows read: {report.total_rows}")
    print(f"   ✓ Texts updated: {report.updated_texts}")
    print(f"   ✓ Choices updated: {report.updated_choices}")
    if report.unmatched_rows:
        print(f"   Unmatched rows: {report.unmatched_rows}")

    # =========================================================================
    # STEP 4: Result
    # =========================================================================
    print("\n4. GERMAN TEXT:")
    print("-" * 80)
    for text in dialogue.all_texts():
        print(f"   {text.guid}: {text.texts[Language.GERMAN]!r}")
    for choice in dialogue.choice_nodes:
        print(f"   {choice.node_guid}: {choice.texts[Language.GERMAN]!r}")

    print("\n" + "=" * 80)
    print("DEMO COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
