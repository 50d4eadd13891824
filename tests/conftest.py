"""Shared fixtures: an in-memory page that answers the DOM probe protocol."""

import pytest

from pricewatch_core.dom_survey.strategies.behavior import SUGGESTION_SELECTOR


def make_element(tag, selector, visible=True, box=None, text="", **attributes):
    """Element description in the shape the DOM probe returns."""
    return {
        "tag": tag,
        "selector": selector,
        "attributes": attributes,
        "text": text,
        "visible": visible,
        "box": box,
    }


class FakePage:
    """
    Answers ``PROBE_JS`` requests from a selector -> elements table.

    Unknown selectors match nothing. Selectors listed in ``failing`` raise,
    like an invalid selector would in a real browser. Focusing an element
    whose selector is in ``suggesting`` makes the suggestion list appear.
    """

    def __init__(self, elements=None, title="", description="", url="https://example.test/",
                 failing=(), suggesting=()):
        self.elements = elements or {}
        self.title = title
        self.description = description
        self.url = url
        self.failing = set(failing)
        self.suggesting = set(suggesting)
        self.focused = None
        self.requests = []
        self.visited = []

    async def evaluate(self, script, arg=None):
        arg = arg or {}
        self.requests.append(arg)
        op = arg.get("op")
        selector = arg.get("selector")

        if selector in self.failing:
            raise RuntimeError(f"Failed to execute 'querySelectorAll': {selector}")

        if op == "describe":
            return [dict(e) for e in self.elements.get(selector, [])][: arg.get("limit", 200)]
        if op == "focus":
            matches = self.elements.get(selector, [])
            if arg["index"] >= len(matches):
                return False
            self.focused = matches[arg["index"]]
            return True
        if op == "blur":
            self.focused = None
            return True
        if op == "exists":
            if selector == SUGGESTION_SELECTOR:
                return self.focused is not None and self.focused["selector"] in self.suggesting
            return bool(self.elements.get(selector))
        if op == "meta":
            return {"title": self.title, "description": self.description}
        return None

    async def goto(self, url, **kwargs):
        self.visited.append(url)
        self.url = url

    async def screenshot(self, **kwargs):
        return b"\x89PNG"


@pytest.fixture
def element():
    return make_element


@pytest.fixture
def fake_page():
    return FakePage
