from anchordiff.matching import correspondence_score, find_matching_element
from anchordiff.tree import attributes_of, parse, sibling_index, tag_name


def _score(before_markup: str, after_markup: str) -> int:
    before_el = parse(before_markup).find_first("body > *")
    candidate = parse(after_markup).find_first("body > *")
    return correspondence_score(
        attributes_of(before_el),
        tag_name(before_el),
        sibling_index(before_el),
        candidate,
    )


def test_score_components() -> None:
    # id exact (+2), class substring (+1), tag (+1), same sibling index (+2)
    assert _score('<div id="list" class="pane"></div>', '<div id="list" class="pane wide"></div>') == 6


def test_attribute_missing_on_candidate_scores_nothing() -> None:
    assert _score('<div id="list"></div>', "<span></span>") == 2


def test_empty_before_value_is_not_a_substring_match() -> None:
    assert _score('<div title=""></div>', '<div title="Inbox"></div>') == 3
    assert _score('<div title=""></div>', '<div title=""></div>') == 5


def test_exact_attribute_beats_substring_at_other_position() -> None:
    before = parse('<ul><li data-id="msg-1" class="row">A</li></ul>')
    after = parse(
        '<ul><li data-id="msg-1-v2" class="row">A</li><li data-id="msg-1" class="row">B</li></ul>'
    )
    before_el = before.find_first("li")
    assert before_el is not None
    pool = after.find_all("li")

    # first: substring(1) + class(2) + tag(1) + position(2) = 6; second: 2 + 2 + 1 = 5
    assert find_matching_element(before_el, pool) is pool[0]


def test_ties_resolve_to_first_candidate_in_document_order() -> None:
    before = parse('<div class="cell">x</div>')
    after = parse('<section><div class="cell">x</div></section><section><div class="cell">y</div></section>')
    before_el = before.find_first("div")
    assert before_el is not None
    pool = after.find_all("div")

    match = find_matching_element(before_el, pool)

    assert match is pool[0]
    assert match is not pool[1]


def test_empty_or_zero_scoring_pool_yields_no_match() -> None:
    before_el = parse("<span></span>").find_first("span")
    assert find_matching_element(before_el, []) is None

    pool = parse("<b></b><p></p>").find_all("p")
    assert find_matching_element(before_el, pool) is None


def test_matching_is_deterministic() -> None:
    before_el = parse('<li class="row">a</li>').find_first("li")
    pool = parse('<ul><li class="row">a</li><li class="row">a</li><li class="row">a</li></ul>').find_all("li")

    results = {id(find_matching_element(before_el, pool)) for _ in range(5)}

    assert results == {id(pool[0])}
