"""
Example dialogue builder for demos and tests.

Builds a small shop-keeper dialogue with two dialogue nodes and two
choices. English text is filled in, the other languages are left empty
for translators. Some lines deliberately contain commas, quotes and line
breaks so every quoting path of the codec is exercised on export.
"""
from dialogue_csv.model import ChoiceNode, DialogueContainer, DialogueNode, DialogueText, Language


def _text(guid: str, english: str) -> DialogueText:
    text = DialogueText(guid=guid)
    text.texts[Language.ENGLISH] = english
    return text


def _choice(node_guid: str, english: str) -> ChoiceNode:
    choice = ChoiceNode(node_guid=node_guid)
    choice.texts[Language.ENGLISH] = english
    return choice


def build_example_dialogue(name: str = "Shopkeeper") -> DialogueContainer:
    container = DialogueContainer(name=name)

    container.dialogue_nodes = [
        DialogueNode(
            node_guid="node-greeting",
            texts=[
                _text("text-greeting-1", "Welcome, traveller!"),
                _text("text-greeting-2", 'They call me "Old Bram".\nWhat do you need?'),
            ],
        ),
        DialogueNode(
            node_guid="node-farewell",
            texts=[_text("text-farewell-1", "Safe roads.")],
        ),
    ]

    container.choice_nodes = [
        _choice("choice-buy", "Show me your wares"),
        _choice("choice-leave", "Nothing, thanks."),
    ]

    return container
