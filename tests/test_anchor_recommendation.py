from anchordiff.anchor_recommendation import (
    MAX_ALTERNATIVES,
    build_class_selector,
    build_data_selector,
    build_id_selector,
    build_recommendation,
    build_role_selector,
    collect_candidates,
    recommend_anchors,
    term_match_score,
)
from anchordiff.catalog import DEFAULT_FEATURES, FeatureDescriptor
from anchordiff.models import CandidateSelector
from anchordiff.tree import parse

MESSAGE_TERMS = ("message", "inbox", "mail")


def _first(markup: str):
    return parse(markup).find_first("body > *")


def test_term_match_score_weights_text_and_attributes() -> None:
    assert term_match_score(_first("<div>Inbox mail</div>"), MESSAGE_TERMS) == 2
    # message: attribute (+2); inbox: text (+1) and attribute (+2)
    assert term_match_score(_first('<div aria-label="Inbox messages">Inbox</div>'), MESSAGE_TERMS) == 5
    assert term_match_score(_first('<div title="MAIL">x</div>'), MESSAGE_TERMS) == 2
    assert term_match_score(_first("<div>Calendar</div>"), MESSAGE_TERMS) == 0


def test_term_match_score_is_capped_at_five() -> None:
    element = _first('<div aria-label="message inbox mail">message inbox mail</div>')
    assert term_match_score(element, MESSAGE_TERMS) == 5


def test_role_selector_puts_type_first_and_adds_qualifiers() -> None:
    tree = parse(
        '<ul><li role="option" class="item first">a</li><li role="option" class="item">b</li></ul>'
    )
    second = tree.find_all("li")[1]

    selector = build_role_selector("option")(second)

    assert selector == 'li[role="option"].item:nth-child(2)'
    assert tree.find_all(selector) == [second]


def test_role_selector_without_class_or_siblings() -> None:
    element = _first('<div role="list">Inbox</div>')
    assert build_role_selector("list")(element) == 'div[role="list"]'


def test_attribute_selector_builders() -> None:
    assert build_id_selector(_first('<div id="messageList"></div>')) == "#messageList"
    assert build_id_selector(_first('<div id="123-start"></div>')) == '[id="123-start"]'
    assert build_class_selector(_first('<div class="ms-List listView"></div>')) == ".listView"
    assert build_class_selector(_first('<div class="abc xyz"></div>')) == ".abc"
    assert build_data_selector(_first('<div data-list-type="mail" data-testid="x"></div>')) == (
        '[data-list-type="mail"]'
    )
    assert build_data_selector(_first("<div></div>")) is None


def test_single_element_scenario_prefers_id_strategy() -> None:
    before = parse('<div id="list" role="list">Inbox</div>')
    after = parse('<div id="list" role="list" data-testid="list">Inbox</div>')

    anchors = recommend_anchors(before, after, DEFAULT_FEATURES)

    message_list = anchors["MessageList"]
    assert message_list.primary_selector == "#list"
    assert message_list.strategy_used == "id-based"
    assert message_list.stability_score == 93
    assert message_list.alternative_selectors == ('div[role="list"]',)
    assert message_list.is_reliable


def test_feature_without_candidates_is_empty_and_unreliable() -> None:
    before = parse('<div id="list" role="list">Inbox</div>')
    anchors = recommend_anchors(before, before, DEFAULT_FEATURES)

    compose = anchors["ComposeButton"]
    assert compose.primary_selector is None
    assert compose.alternative_selectors == ()
    assert compose.stability_score == 0
    assert compose.strategy_used is None
    assert not compose.is_reliable


def test_candidates_require_counterpart_in_after_tree() -> None:
    feature = FeatureDescriptor("MessageList", "list", MESSAGE_TERMS)
    before = parse('<div id="inbox" role="list">Inbox</div>')
    assert collect_candidates(before, parse(""), feature) == []


def test_role_based_score_uses_weight_five_and_caps_at_hundred() -> None:
    feature = FeatureDescriptor("MessageList", "list", MESSAGE_TERMS)
    tree = parse('<div role="list" aria-label="Inbox messages">Inbox</div>')

    candidates = collect_candidates(tree, tree, feature)

    role_based = [item for item in candidates if item.strategy == "role-based"]
    assert [item.stability_score for item in role_based] == [100]


def test_alternatives_are_distinct_and_limited() -> None:
    feature = FeatureDescriptor("MessageList", None, MESSAGE_TERMS)
    markup = "".join(f'<div class="mail-row-{index}">mail</div>' for index in range(6))
    markup += '<div class="mail-row-0">mail</div>'
    tree = parse(markup)

    recommendation = build_recommendation("MessageList", collect_candidates(tree, tree, feature))

    assert recommendation.primary_selector == ".mail-row-0"
    assert len(recommendation.alternative_selectors) == MAX_ALTERNATIVES
    assert recommendation.primary_selector not in recommendation.alternative_selectors
    assert len(set(recommendation.alternative_selectors)) == MAX_ALTERNATIVES


def test_reliability_threshold_is_strictly_exceeded() -> None:
    candidates = [CandidateSelector(".mail", 78, "class-based")]

    assert build_recommendation("X", candidates, reliability_threshold=60).is_reliable
    assert not build_recommendation("X", candidates, reliability_threshold=78).is_reliable
    assert not build_recommendation("X", candidates, reliability_threshold=85).is_reliable


def test_ranking_is_stable_for_equal_scores() -> None:
    candidates = [
        CandidateSelector('div[role="list"]', 90, "role-based"),
        CandidateSelector("#list", 90, "id-based"),
        CandidateSelector(".list", 78, "class-based"),
    ]

    recommendation = build_recommendation("MessageList", candidates)

    assert recommendation.primary_selector == 'div[role="list"]'
    assert recommendation.alternative_selectors == ("#list", ".list")
    assert recommendation.strategy_used == "role-based"
