"""
Tests for the help embeds (common/commands/help.py).
"""
from common.commands.help import HELP_TOPICS, create_help_embed


def test_every_topic_builds_an_embed():
    for topic in HELP_TOPICS:
        embed = create_help_embed(topic, "!")
        assert embed.title
        assert embed.fields


def test_unknown_topic_falls_back_to_overview():
    assert create_help_embed("nope", "!").title == "Memory Match Help"


def test_commands_use_prefix():
    values = " ".join(field.value for field in create_help_embed("commands", "?").fields)
    assert "?memory_start" in values
    assert "?memory_end" in values
