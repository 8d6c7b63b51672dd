"""
Dialogue Model Objects

In-memory stand-ins for the dialogue editor's assets.

These are pure data classes representing:
    - Languages (localization slots)
    - Dialogue texts (one localized line of a dialogue node)
    - Dialogue nodes (a speaker node holding several texts)
    - Choice nodes (a single localized player choice)
    - Dialogue containers (root container, one per dialogue asset)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about CSV layout
        - Know nothing about graph rendering
        - Carry one text slot per Language, always
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Language(Enum):
    """
    Supported languages.

    The value is the canonical name used as the CSV column header.
    """

    ENGLISH = "English"
    GERMAN = "German"
    DANISH = "Danish"


def empty_texts() -> Dict[Language, str]:
    """One empty text slot per language."""
    return {language: "" for language in Language}


@dataclass
class DialogueText:
    """
    A single localized line inside a dialogue node.

    Properties:
        guid:
            Stable identifier of this text entry
            (the "Text Guid ID" CSV column)

        texts:
            Text per language
    """

    guid: str
    texts: Dict[Language, str] = field(default_factory=empty_texts)


@dataclass
class DialogueNode:
    """
    A dialogue node: one speaker turn made of one or more texts.

    Properties:
        node_guid: Stable node identifier
        texts: Ordered text entries
    """

    node_guid: str
    texts: List[DialogueText] = field(default_factory=list)


@dataclass
class ChoiceNode:
    """A player choice, localized directly on the node."""

    node_guid: str
    texts: Dict[Language, str] = field(default_factory=empty_texts)


@dataclass
class DialogueContainer:
    """
    Root container for one dialogue asset.

    Properties:
        name:
            Dialogue name (the "Dialogue Name" CSV column)

        dialogue_nodes:
            All dialogue nodes

        choice_nodes:
            All choice nodes

    INVARIANTS:
        - Text guids are unique across the container
        - Node guids are unique across the container
    """

    name: str
    dialogue_nodes: List[DialogueNode] = field(default_factory=list)
    choice_nodes: List[ChoiceNode] = field(default_factory=list)

    def get_text(self, guid: str) -> Optional[DialogueText]:
        """
        Retrieve a dialogue text entry by guid.

        Args:
            guid: Text guid

        Returns:
            DialogueText or None if not found
        """
        for node in self.dialogue_nodes:
            for text in node.texts:
                if text.guid == guid:
                    return text
        return None

    def get_choice(self, node_guid: str) -> Optional[ChoiceNode]:
        """Retrieve a choice node by node guid, or None."""
        for choice in self.choice_nodes:
            if choice.node_guid == node_guid:
                return choice
        return None

    def all_texts(self) -> List[DialogueText]:
        """All dialogue text entries, in node order."""
        return [text for node in self.dialogue_nodes for text in node.texts]
