"""Tests for candidate merging and ranking."""

from pricewatch_core.dom_survey import (
    BoundingBox,
    ClassifiedElement,
    ElementRole,
    combine,
    deduplicate,
    rank,
    recommend,
)


def candidate(tag="div", id="", cls="", confidence=0.5, role=ElementRole.UNKNOWN, visible=True, selector=None):
    attributes = {}
    if id:
        attributes["id"] = id
    if cls:
        attributes["class"] = cls
    return ClassifiedElement(
        selector=selector or f"{tag}.{cls or id or 'x'}",
        tag_name=tag,
        attributes=attributes,
        is_visible=visible,
        bounding_box=BoundingBox(0, 0, 100, 40),
        confidence=confidence,
        role=role,
    )


class TestCombine:

    def test_combine_is_product(self):
        assert combine(0.9, 0.4) == 0.9 * 0.4

    def test_weighted_applies_combine_once(self):
        element = candidate(confidence=0.8)
        weighted = element.weighted(0.3)
        assert weighted.confidence == combine(0.8, 0.3)
        assert element.confidence == 0.8


class TestDeduplicate:

    def test_keeps_highest_confidence(self):
        low = candidate(tag="input", id="q", cls="search", confidence=0.3, role=ElementRole.SEARCH_INPUT)
        high = candidate(tag="input", id="q", cls="search", confidence=0.7, role=ElementRole.LOCATION_INPUT)
        merged = deduplicate([low, high])
        assert len(merged) == 1
        assert merged[0].confidence == 0.7
        assert merged[0].role == ElementRole.LOCATION_INPUT

    def test_first_seen_wins_ties(self):
        first = candidate(tag="input", cls="a", confidence=0.5, role=ElementRole.SEARCH_INPUT, selector="first")
        second = candidate(tag="input", cls="a", confidence=0.5, role=ElementRole.LOCATION_INPUT, selector="second")
        merged = deduplicate([first, second])
        assert [e.selector for e in merged] == ["first"]

    def test_distinct_keys_survive(self):
        merged = deduplicate([candidate(cls="a"), candidate(cls="b"), candidate(tag="span", cls="a")])
        assert len(merged) == 3


class TestRank:

    def test_confidence_descending(self):
        ranked = rank([candidate(cls="a", confidence=0.1), candidate(cls="b", confidence=0.9)])
        assert [e.confidence for e in ranked] == [0.9, 0.1]

    def test_visible_before_hidden_on_equal_confidence(self):
        hidden = candidate(cls="h", confidence=0.5, visible=False)
        shown = candidate(cls="s", confidence=0.5, visible=True)
        assert rank([hidden, shown])[0] is shown

    def test_search_input_outranks_result_card_on_tie(self):
        card = candidate(cls="card", confidence=0.5, role=ElementRole.RESULT_CARD)
        search = candidate(tag="input", cls="q", confidence=0.5, role=ElementRole.SEARCH_INPUT)
        assert rank([card, search])[0] is search

    def test_role_priority_order(self):
        roles = [
            ElementRole.UNKNOWN,
            ElementRole.RESULT_CARD,
            ElementRole.SEARCH_BUTTON,
            ElementRole.LOCATION_INPUT,
            ElementRole.SEARCH_INPUT,
        ]
        ranked = rank([candidate(cls=r.value, confidence=0.4, role=r) for r in roles])
        assert [e.role for e in ranked] == list(reversed(roles))


class TestRecommend:

    def test_best_per_role_and_none_for_missing(self):
        ranked = rank([
            candidate(tag="input", cls="q1", confidence=0.3, role=ElementRole.SEARCH_INPUT),
            candidate(tag="input", cls="q2", confidence=0.2, role=ElementRole.SEARCH_INPUT),
        ])
        rec = recommend(ranked)
        assert rec.search_input.attributes["class"] == "q1"
        assert rec.location_input is None
        assert rec.search_button is None
        assert rec.result_cards == ()

    def test_at_most_ten_cards_in_rank_order(self):
        cards = [
            candidate(cls=f"card-{i}", confidence=i / 100, role=ElementRole.RESULT_CARD)
            for i in range(15)
        ]
        rec = recommend(rank(cards))
        assert len(rec.result_cards) == 10
        confidences = [c.confidence for c in rec.result_cards]
        assert confidences == sorted(confidences, reverse=True)
        assert confidences[0] == 0.14
