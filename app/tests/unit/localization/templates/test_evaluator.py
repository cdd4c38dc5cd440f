"""Tests for localization.templates.evaluator."""

from datetime import date
from types import MappingProxyType, SimpleNamespace

import pytest

from localization.exceptions import PlaceholderSyntaxError, TemplateProcessingError
from localization.models import Placeholder, TextProcessingMode
from localization.templates.evaluator import expand_template
from tests.factories.localization import make_entry

ARB = TextProcessingMode.ARB
DOTNET = TextProcessingMode.DOTNET

ITEMS = "{count, plural, =0{no items} other{# items}}"
TAGGED = (
    "{count, plural, offset:1 =0{Nobody} =1{{name}} "
    "one{{name} and one other} other{{name} and # others}} tagged you"
)


@pytest.mark.unit
class TestPlural:
    """Tests for plural placeholders."""

    def test_exact_and_other(self):
        """Exact labels win; other renders '#'."""
        assert expand_template(ITEMS, "en-US", {"count": 2}) == "2 items"
        assert expand_template(ITEMS, "en-US", {"count": 0}) == "no items"

    def test_one_category(self):
        """The value one selects the 'one' case."""
        text = "{n, plural, one{# item} other{# items}}"
        assert expand_template(text, "en-US", {"n": 1}) == "1 item"
        assert expand_template(text, "en-US", {"n": 1.5}) == "1.5 items"

    def test_offset(self):
        """Exact labels use the raw value; categories and '#' use the offset value."""
        assert expand_template(TAGGED, "en-US", {"name": "Mia", "count": 4}) == "Mia and 3 others tagged you"
        assert expand_template(TAGGED, "en-US", {"name": "Mia", "count": 2}) == "Mia and one other tagged you"
        assert expand_template(TAGGED, "en-US", {"name": "Mia", "count": 1}) == "Mia tagged you"
        assert expand_template(TAGGED, "en-US", {"name": "Mia", "count": 0}) == "Nobody tagged you"

    def test_plural_value_is_localized(self):
        """'#' is formatted with the locale's number format."""
        text = "{n, plural, other{# items}}"
        assert expand_template(text, "en-US", {"n": 1000}) == "1,000 items"
        assert expand_template(text, "de-DE", {"n": 1000}) == "1.000 items"

    def test_numeric_strings(self):
        """Numeric strings select plural cases."""
        assert expand_template(ITEMS, "en-US", {"count": "0"}) == "no items"

    def test_non_numeric_value(self):
        """Plural placeholders need numbers."""
        with pytest.raises(TemplateProcessingError) as exc_info:
            expand_template(ITEMS, "en-US", {"count": "many"})
        assert exc_info.value.placeholder == "count"

    def test_missing_other_case(self):
        """Without a matching case or 'other' the template cannot be rendered."""
        with pytest.raises(TemplateProcessingError):
            expand_template("{n, plural, one{x}}", "en-US", {"n": 5})

    def test_nested_select_sees_plural_value(self):
        """'#' inside a select nested in a plural case renders the count."""
        text = "{n, plural, other{{g, select, female{She has # cats} other{They have # cats}}}}"
        assert expand_template(text, "en-US", {"n": 3, "g": "female"}) == "She has 3 cats"


@pytest.mark.unit
class TestSelect:
    """Tests for select placeholders."""

    TEXT = "{gender, select, male{He} female{She} other{They}} liked it"

    def test_match(self):
        """The argument text selects the case."""
        assert expand_template(self.TEXT, "en-US", {"gender": "female"}) == "She liked it"

    def test_fallback_and_null(self):
        """Unknown values and None fall back to 'other'."""
        assert expand_template(self.TEXT, "en-US", {"gender": "unknown"}) == "They liked it"
        assert expand_template(self.TEXT, "en-US", {"gender": None}) == "They liked it"

    def test_null_case(self):
        """None selects an explicit 'null' case."""
        assert expand_template("{v, select, null{none} other{some}}", "en-US", {"v": None}) == "none"

    def test_missing_other(self):
        """A select without a match and without 'other' fails."""
        with pytest.raises(TemplateProcessingError):
            expand_template("{g, select, a{A}}", "en-US", {"g": "b"})


@pytest.mark.unit
class TestArguments:
    """Tests for argument resolution during expansion."""

    def test_positional_list(self):
        """Names are bound to list positions by first occurrence."""
        assert expand_template("{total}: {count}", "en-US", ["Total", 2]) == "Total: 2"

    def test_numeric_labels(self):
        """Numeric labels index the sequence directly."""
        assert expand_template("{1} before {0}", "en-US", ["a", "b"]) == "b before a"

    def test_scalar_argument(self):
        """A single scalar is the first positional value."""
        assert expand_template("{0} apples", "en-US", 3) == "3 apples"

    def test_object_attributes(self):
        """Objects are read by attribute."""
        assert expand_template("Hi {name}", "en-US", SimpleNamespace(name="Mia")) == "Hi Mia"

    def test_unordered_mapping(self):
        """Other mappings match names ignoring case and have no positions."""
        arguments = MappingProxyType({"NAME": "Mia"})
        assert expand_template("Hi {name} {other}", "en-US", arguments) == "Hi Mia {other}"

    def test_missing_argument_keeps_placeholder(self):
        """Unresolved ARB placeholders stay as written."""
        assert expand_template("Hi {name}", "en-US", {}) == "Hi {name}"
        assert expand_template("Hi {name}", "en-US") == "Hi {name}"

    def test_none_value(self):
        """A found None renders as 'null'."""
        assert expand_template("Value: {v}", "en-US", {"v": None}) == "Value: null"

    def test_decimal_symbol(self):
        """Unformatted floats use the locale's decimal symbol."""
        assert expand_template("{v}", "de-DE", {"v": 2.5}) == "2,5"


@pytest.mark.unit
class TestStyles:
    """Tests for number and date placeholders."""

    def test_number(self):
        """Numbers are grouped per locale."""
        assert expand_template("{n, number}", "en-US", {"n": 1234.5}) == "1,234.5"
        assert expand_template("{n, number}", "de-DE", {"n": 1234.5}) == "1.234,5"

    def test_number_styles(self):
        """integer, percent and currency styles are supported."""
        assert expand_template("{n, number, integer}", "en-US", {"n": 1234.56}) == "1,235"
        assert expand_template("{n, number, percent}", "en-US", {"n": 0.25}) == "25%"
        assert expand_template("{n, number, currency:EUR}", "en-US", {"n": 5}) == "€5.00"
        assert expand_template("{n, number, '#,##0.0'}", "en-US", {"n": 1234.5}) == "1,234.5"

    def test_dates(self):
        """Date styles follow the locale."""
        day = date(2024, 1, 15)
        assert expand_template("{d, date, short}", "en-US", {"d": day}) == "1/15/24"
        assert expand_template("{d, date}", "en-US", {"d": day}) == "Jan 15, 2024"
        assert expand_template("{d, date}", "de-DE", {"d": "2024-01-15"}) == "15.01.2024"

    def test_custom_date_pattern_with_apostrophe(self):
        """A doubled apostrophe in a quoted pattern renders one apostrophe."""
        text = "{d, date, 'dd. MMM ''yy'}"
        assert expand_template(text, "de-DE", {"d": "2024-03-05"}) == "05. März '24"
        assert expand_template(text, "en-US", {"d": date(2024, 3, 5)}) == "05. Mar '24"

    def test_time(self):
        """Time styles follow the locale."""
        assert expand_template("{t, time, short}", "de-DE", {"t": "2024-01-15T14:30:00"}) == "14:30"


@pytest.mark.unit
class TestEntries:
    """Tests for expanding translation entries."""

    def test_declared_placeholders_only(self):
        """Entries with declared placeholders render only those."""
        entry = make_entry("Hi {name} {other}", placeholders=[Placeholder("name")])
        assert expand_template(entry, "en-US", {"name": "Mia", "other": "x"}) == "Hi Mia {other}"

    def test_typed_number_placeholder(self):
        """Typed ARB placeholders with a format use it."""
        entry = make_entry(
            "Total: {amount}",
            placeholders=[
                Placeholder("amount", type="double", format="decimalPattern", optional_parameters={"decimalDigits": 2})
            ],
        )
        assert expand_template(entry, "en-US", {"amount": 1234.5}) == "Total: 1,234.50"

    def test_typed_datetime_placeholder(self):
        """DateTime placeholders format with skeletons."""
        entry = make_entry("On {day}", placeholders=[Placeholder("day", type="DateTime", format="yMd")])
        assert expand_template(entry, "en-US", {"day": date(2024, 1, 15)}) == "On 1/15/2024"

    def test_empty_entry(self):
        """An entry without text renders as an empty string."""
        assert expand_template(make_entry(None), "en-US") == ""

    def test_none_mode_prefers_escaped_text(self):
        """NONE returns the stored text untouched."""
        entry = make_entry("a\tb", escaped_text="a\\tb")
        assert expand_template(entry, "en-US", mode=TextProcessingMode.NONE) == "a\\tb"

    def test_backslash_mode(self):
        """Plain texts are unescaped; entries already hold decoded text."""
        assert expand_template("a\\tb", mode=TextProcessingMode.BACKSLASH_ESCAPING) == "a\tb"
        entry = make_entry("a\tb", escaped_text="a\\tb")
        assert expand_template(entry, mode=TextProcessingMode.BACKSLASH_ESCAPING) == "a\tb"


@pytest.mark.unit
class TestDotnet:
    """Tests for composite-format templates."""

    def test_positional_and_formats(self):
        """Format tails map to locale formats."""
        text = "{0:N2}|{1:D4}|{2:X}|{3,5}|{3,-5}|"
        result = expand_template(text, "en-US", [1234.5, 42, 255, "ab"], DOTNET)
        assert result == "1,234.50|0042|FF|   ab|ab   |"

    def test_missing_argument_is_empty(self):
        """Missing composite arguments render as nothing."""
        assert expand_template("[{0}]", "en-US", [], DOTNET) == "[]"

    def test_doubled_braces(self):
        """Doubled braces render as single braces."""
        assert expand_template("{{{0}}}", "en-US", ["x"], DOTNET) == "{x}"

    def test_plural(self):
        """Plural cases ending the placeholder are closed correctly."""
        text = "{count, plural, one{# item} other{# items}}"
        assert expand_template(text, "en-US", {"count": 1}, DOTNET) == "1 item"
        assert expand_template(text, "en-US", {"count": 2}, DOTNET) == "2 items"

    def test_select(self):
        """Select cases ending the placeholder are closed correctly."""
        text = "{g, select, a{x} other{y}}"
        assert expand_template(text, "en-US", {"g": "a"}, DOTNET) == "x"
        assert expand_template(text, "en-US", {"g": "b"}, DOTNET) == "y"


@pytest.mark.unit
class TestErrors:
    """Tests for invalid templates."""

    def test_syntax_error(self):
        """Malformed templates raise a syntax error."""
        with pytest.raises(PlaceholderSyntaxError):
            expand_template("Hello {name", "en-US", {"name": "Mia"})

    def test_literal_template_ignores_locale(self):
        """Templates without placeholders render their literal text."""
        assert expand_template("It''s done", "xx-Unknown", None) == "It's done"


@pytest.mark.unit
class TestDocumentedExamples:
    """Examples from the message format documentation."""

    def test_items(self):
        """Exact labels come before categories."""
        text = "{count, plural, =0{no items} =1{# item} other{# items}}"
        assert expand_template(text, "en-US", {"count": 2}) == "2 items"
        assert expand_template(text, "en-US", {"count": 0}) == "no items"
        assert expand_template(text, "en-US", {"count": 1}) == "1 item"

    def test_tagged_with_offset(self):
        """Offsets shift '#' and the category but not exact labels."""
        text = (
            "{count, plural, offset:1 =0{Nobody tagged you} =1{{first} tagged you} "
            "one{{first} and one other tagged you} other{{first} and # others tagged you}}"
        )
        assert expand_template(text, "en-US", {"count": 4, "first": "Mia"}) == "Mia and 3 others tagged you"
