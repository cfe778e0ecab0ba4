"""Tests for mention interpolation in text and rich modes."""

from formnotify.schemas.notifications import FieldValue
from formnotify.services.mention_parser import MentionMode, MentionParser, interpolate


VALUES = {
    "name": FieldValue(key="name", label="Full Name", value="Ada Lovelace"),
    "message": FieldValue(
        key="message",
        label="Message",
        type="textarea",
        value="Line one\nLine two",
        html="Line one<br>Line two",
    ),
    "resume": FieldValue(
        key="resume",
        label="Resume",
        type="file",
        value="https://example.com/f/cv.pdf",
        html='<a href="https://example.com/f/cv.pdf">cv.pdf</a>',
    ),
    "notes": FieldValue(key="notes", label="Notes", value="first\nsecond"),
}


def test_parse_as_text_substitutes_brace_tokens():
    parser = MentionParser("Hi {{name}}, thanks!", VALUES)

    assert parser.parse_as_text() == "Hi Ada Lovelace, thanks!"


def test_parse_as_text_supports_whitespace_in_tokens():
    assert MentionParser("Hi {{ name }}", VALUES).parse_as_text() == "Hi Ada Lovelace"


def test_tokens_resolve_by_label_case_insensitively():
    assert MentionParser("From {{ full name }}", VALUES).parse_as_text() == "From Ada Lovelace"


def test_unknown_token_resolves_to_empty_string():
    parser = MentionParser("Order [{{ missing }}] received", VALUES)

    assert parser.parse_as_text() == "Order [] received"


def test_missing_or_empty_template_returns_empty_string():
    assert MentionParser(None, VALUES).parse_as_text() == ""
    assert MentionParser("", VALUES).parse() == ""
    assert MentionParser("plain text", None).parse_as_text() == "plain text"


def test_literal_text_passes_through_unchanged():
    template = "<p>No mentions & {single} braces</p>"

    assert MentionParser(template, VALUES).parse_as_text() == template
    assert MentionParser(template, VALUES).parse() == template


def test_mention_span_is_replaced_with_value():
    template = (
        'New lead: <span mention="" mention-field-id="name" '
        'mention-field-name="Full Name" mention-fallback="">Full Name</span>!'
    )

    assert MentionParser(template, VALUES).parse_as_text() == "New lead: Ada Lovelace!"


def test_mention_span_attribute_order_does_not_matter():
    template = '<span mention-fallback="x" contenteditable="false" mention-field-id="name" mention>N</span>'

    assert MentionParser(template, VALUES).parse_as_text() == "Ada Lovelace"


def test_mention_span_uses_fallback_when_field_missing():
    template = 'Hello <span mention mention-field-id="nope" mention-fallback="there &amp; friends">X</span>'

    assert MentionParser(template, VALUES).parse_as_text() == "Hello there & friends"


def test_mention_span_without_fallback_resolves_to_empty_string():
    template = 'Hello <span mention mention-field-id="nope">X</span>.'

    assert MentionParser(template, VALUES).parse_as_text() == "Hello ."


def test_fallback_text_is_not_rescanned_for_tokens():
    template = '<span mention mention-field-id="nope" mention-fallback="{{name}}">X</span>'

    assert MentionParser(template, VALUES).parse_as_text() == "{{name}}"


def test_rich_mode_preserves_link_markup():
    parser = MentionParser("<p>CV: {{ resume }}</p>", VALUES)

    assert parser.parse() == '<p>CV: <a href="https://example.com/f/cv.pdf">cv.pdf</a></p>'
    assert parser.parse_as_text() == "<p>CV: https://example.com/f/cv.pdf</p>"


def test_rich_mode_renders_multiline_values_with_breaks():
    assert MentionParser("{{ message }}", VALUES).parse() == "Line one<br>Line two"
    assert MentionParser("{{ notes }}", VALUES).parse() == "first<br>second"
    assert MentionParser("{{ notes }}", VALUES).parse_as_text() == "first\nsecond"


def test_rich_mode_substitutes_plain_values_as_is():
    assert MentionParser("<b>{{ name }}</b>", VALUES).parse() == "<b>Ada Lovelace</b>"


def test_parsing_is_referentially_transparent():
    template = 'Hi {{ name }} <span mention mention-field-id="resume">R</span>'
    parser = MentionParser(template, VALUES)

    first = (parser.parse(), parser.parse_as_text())
    second = (parser.parse(), parser.parse_as_text())

    assert first == second
    assert interpolate(template, VALUES, MentionMode.RICH) == first[0]
