from __future__ import annotations

from datetime import datetime

import pytest

from termfolio.kernel.content import build_default_registry, parse_joke_payload, parse_waifu_payload
from termfolio.kernel.registry import CommandRegistry
from termfolio.kernel.types import AsyncCellResult, CommandDescriptor, RichBlock, RichResult, TextResult


def _text(value: str):
    return lambda: TextResult(value)


def test_default_registry_lists_commands_in_registration_order():
    registry = build_default_registry()

    assert registry.names() == [
        "help",
        "about",
        "skills",
        "projects",
        "experience",
        "education",
        "achievements",
        "contact",
        "whoami",
        "date",
        "clear",
        "waifu",
        "joke",
    ]
    summaries = registry.list_commands()
    assert summaries[0].name == "help"
    assert summaries[0].description == "Show this help message"


def test_lookup_is_case_insensitive_and_trims():
    registry = build_default_registry()

    assert registry.lookup("  ABOUT ") is registry.lookup("about")
    assert registry.lookup("nope") is None
    assert "Whoami" in registry
    assert 42 not in registry


def test_registry_rejects_duplicate_and_empty_names():
    with pytest.raises(ValueError):
        CommandRegistry(
            [
                CommandDescriptor("help", "a", _text("a")),
                CommandDescriptor("HELP", "b", _text("b")),
            ]
        )
    with pytest.raises(ValueError):
        CommandRegistry([CommandDescriptor("  ", "blank", _text(""))])


def test_complete_matches_lowercase_prefix():
    registry = build_default_registry()

    assert registry.complete("ab") == ["about"]
    assert registry.complete("E") == ["experience", "education"]
    assert registry.complete("w") == ["whoami", "waifu"]
    assert registry.complete("zzz") == []
    assert registry.complete("") == registry.names()


def test_help_lists_every_command_with_description():
    registry = build_default_registry()
    result = registry.lookup("help").handler()

    assert isinstance(result, TextResult)
    assert "Available commands:" in result.text
    for summary in registry.list_commands():
        assert summary.name in result.text
        assert summary.description in result.text


def test_static_command_variants():
    registry = build_default_registry(clock=lambda: datetime(2024, 3, 5, 7, 8, 9))

    assert registry.lookup("whoami").handler() == TextResult("siddharth@portfolio")
    assert registry.lookup("date").handler() == TextResult("05/03/2024, 07:08:09")
    about = registry.lookup("about").handler()
    assert isinstance(about, RichResult)
    assert about.block.title == "ABOUT ME"
    assert about.tag == "rich"


def test_network_commands_return_async_cells_with_configured_urls():
    registry = build_default_registry(joke_url="http://jokes.test/any", waifu_url="http://waifu.test/sfw")

    joke = registry.lookup("joke").handler()
    waifu = registry.lookup("waifu").handler()

    assert isinstance(joke, AsyncCellResult)
    assert joke.tag == "async_cell"
    assert joke.spec.url == "http://jokes.test/any"
    assert joke.spec.loading_text == "Fetching a joke for you..."
    assert joke.spec.failure_text == "Failed to fetch joke"
    assert waifu.spec.url == "http://waifu.test/sfw"
    assert waifu.spec.failure_text == "Failed to fetch waifu image"


def test_joke_payload_parsing():
    single = parse_joke_payload({"type": "single", "joke": "A joke."})
    twopart = parse_joke_payload({"type": "twopart", "setup": "Why?", "delivery": "Because."})

    assert single == RichBlock(title="JOKE", paragraphs=("A joke.",))
    assert twopart.paragraphs == ('"Why?"', "Because.")
    with pytest.raises(ValueError):
        parse_joke_payload({"error": True})
    with pytest.raises(KeyError):
        parse_joke_payload({"type": "twopart"})


def test_waifu_payload_requires_url():
    block = parse_waifu_payload({"url": "https://i.waifu.pics/x.png"})

    assert block.paragraphs == ("https://i.waifu.pics/x.png",)
    with pytest.raises(ValueError):
        parse_waifu_payload({})
