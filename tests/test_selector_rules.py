from anchordiff.selector_rules import (
    attribute_selector,
    class_selector,
    class_tokens,
    escape_css_attribute_value,
    first_data_attribute,
    id_selector,
    is_css_identifier,
    is_dynamic_token,
    longest_class_token,
    looks_generated_selector,
)


def test_css_identifier_detection() -> None:
    assert is_css_identifier("messageList")
    assert is_css_identifier("-ms-Button")
    assert is_css_identifier("_private")
    assert not is_css_identifier("123-start")
    assert not is_css_identifier("has space")
    assert not is_css_identifier("a:b")


def test_attribute_values_are_quoted_and_escaped() -> None:
    assert escape_css_attribute_value('say "hi"\\') == 'say \\"hi\\"\\\\'
    assert attribute_selector("role", "list") == '[role="list"]'
    assert attribute_selector("aria-label", "New mail", "*=") == '[aria-label*="New mail"]'


def test_id_and_class_selectors_fall_back_to_attribute_form() -> None:
    assert id_selector("inbox") == "#inbox"
    assert id_selector("9lives") == '[id="9lives"]'
    assert class_selector("ms-List") == ".ms-List"
    assert class_selector("w-1/2") == '[class~="w-1/2"]'


def test_class_token_helpers() -> None:
    assert class_tokens(None) == []
    assert class_tokens("  a   bb  ") == ["a", "bb"]
    assert longest_class_token("") is None
    assert longest_class_token("ab cd ef") == "ab"
    assert longest_class_token("x readingPane pane") == "readingPane"


def test_first_data_attribute_keeps_declaration_order() -> None:
    assert first_data_attribute({"id": "a", "data-b": "1", "data-a": "2"}) == ("data-b", "1")
    assert first_data_attribute({"id": "a"}) is None


def test_dynamic_token_detection() -> None:
    assert is_dynamic_token("css-1x2y3z")
    assert is_dynamic_token("jss42")
    assert is_dynamic_token("123456")
    assert is_dynamic_token("550e8400-e29b-41d4-a716-446655440000")
    assert not is_dynamic_token("readingPane")
    assert not is_dynamic_token("ms-Button")
    assert not is_dynamic_token("")


def test_generated_selectors_are_flagged() -> None:
    assert looks_generated_selector(".css-1abcd")
    assert looks_generated_selector('[data-convid="1234567"]')
    assert not looks_generated_selector("#messageList")
    assert not looks_generated_selector('div[role="list"].mailList:nth-child(2)')
    assert not looks_generated_selector(None)
