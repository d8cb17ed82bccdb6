"""Unit tests for i18n_runtime.formatter module."""

from decimal import Decimal

import pytest

from i18n_runtime.exceptions import FormatErrorKind
from i18n_runtime.formatter import (
    MAX_ITERATIONS,
    MAX_NESTING_DEPTH,
    MAX_TEXT_LENGTH,
    FormatOptions,
    MessageFormatter,
    format_message,
    format_value,
    get_default_formatter,
    interpolate,
)
from i18n_runtime.plurals import PluralCategoryCache
from tests.factories.i18n import make_settings

pytestmark = pytest.mark.unit

ITEMS = "{count, plural, one {# item} other {# items}}"


@pytest.fixture
def errors():
    return []


@pytest.fixture
def options(errors):
    return FormatOptions(locale="en", on_error=errors.append)


class TestLimits:
    def test_reference_limits(self):
        assert MAX_NESTING_DEPTH == 5
        assert MAX_TEXT_LENGTH == 50_000
        assert MAX_ITERATIONS == 100


class TestInterpolation:
    """Tests for plain {name} placeholders."""

    def test_no_params_returns_pattern(self):
        assert format_message("Hello World") == "Hello World"
        assert format_message("Hello World", None) == "Hello World"

    def test_single_placeholder(self):
        assert format_message("Hello {name}", {"name": "World"}) == "Hello World"

    def test_multiple_placeholders(self):
        result = format_message("{greeting} {name}!", {"greeting": "Hello", "name": "World"})
        assert result == "Hello World!"

    def test_numbers(self):
        assert format_message("Count: {count}", {"count": 42}) == "Count: 42"
        assert format_message("Count: {n}", {"n": 0}) == "Count: 0"

    def test_missing_param_kept(self):
        assert format_message("Hello {name}", {}) == "Hello {name}"
        assert format_message("Hello {name}", {"other": 1}) == "Hello {name}"

    def test_consecutive_placeholders(self):
        assert format_message("{a}{b}{c}", {"a": "1", "b": "2", "c": "3"}) == "123"

    def test_dollar_signs_inserted_literally(self):
        assert format_message("{name}", {"name": "$100"}) == "$100"
        assert format_message("{name}", {"name": r"\1 $1 \g<0>"}) == r"\1 $1 \g<0>"

    def test_values_are_not_reinterpreted(self):
        assert format_message("{a}", {"a": "{b}", "b": "boom"}) == "{b}"

    def test_apostrophes_are_literal(self):
        assert format_message("It's {what}", {"what": "working"}) == "It's working"

    def test_empty_and_plain_text(self):
        assert format_message("", {"name": "test"}) == ""
        assert format_message("Plain text", {"name": "ignored"}) == "Plain text"

    def test_unsupported_argument_type_left_as_is(self):
        assert format_message("{n, number}", {"n": 5}) == "{n, number}"


class TestFormatValue:
    @pytest.mark.parametrize(
        "value,expected",
        [(True, "true"), (False, "false"), (3.0, "3"), (2.5, "2.5"), (7, "7"), ("x", "x")],
    )
    def test_format_value(self, value, expected):
        assert format_value(value) == expected


class TestPlural:
    """Tests for plural blocks."""

    def test_category_match(self):
        assert format_message(ITEMS, {"count": 1}, FormatOptions(locale="en")) == "1 item"
        assert format_message(ITEMS, {"count": 5}, FormatOptions(locale="en")) == "5 items"

    def test_exact_match_takes_precedence(self):
        template = "{count, plural, =0 {No items} one {# item} other {# items}}"
        assert format_message(template, {"count": 0}) == "No items"
        assert format_message(template, {"count": 1}) == "1 item"
        assert format_message(template, {"count": 2}) == "2 items"

    def test_exact_matches_only(self):
        template = "{count, plural, =0 {zero} =1 {one} =2 {two} other {many}}"
        assert format_message(template, {"count": 0}) == "zero"
        assert format_message(template, {"count": 1}) == "one"
        assert format_message(template, {"count": 2}) == "two"
        assert format_message(template, {"count": 3}) == "many"

    def test_hash_replaced_with_value(self):
        template = "{n, plural, one {# thing} other {# things}}"
        assert format_message(template, {"n": 100}) == "100 things"

    def test_surrounding_text(self):
        template = "You have {count, plural, one {# message} other {# messages}} waiting"
        assert format_message(template, {"count": 1}) == "You have 1 message waiting"
        assert format_message(template, {"count": 5}) == "You have 5 messages waiting"

    def test_whitespace_inside_branches_preserved(self):
        template = "{count, plural, one {#  item} other {#  items}}"
        assert format_message(template, {"count": 1}) == "1  item"

    def test_dollar_before_hash(self):
        template = "{count, plural, one {$# item} other {$# items}}"
        assert format_message(template, {"count": 5}) == "$5 items"

    def test_numeric_string_argument(self):
        assert format_message(ITEMS, {"count": "3"}) == "3 items"

    def test_decimal_argument(self):
        assert format_message(ITEMS, {"count": Decimal("1.5")}) == "1.5 items"

    def test_locale_rules_apply(self):
        template = "{n, plural, one {one} few {few} many {many} other {other}}"
        options = FormatOptions(locale="ru")
        assert format_message(template, {"n": 3}, options) == "few"
        assert format_message(template, {"n": 5}, options) == "many"

    def test_missing_category_uses_other(self):
        template = "{n, plural, other {# things}}"
        assert format_message(template, {"n": 1}) == "1 things"

    def test_no_matching_branch_keeps_block(self):
        template = "{n, plural, one {# thing}}"
        assert format_message(template, {"n": 2}) == template

    def test_missing_argument_keeps_block(self):
        template = "{count, plural, one {#} other {#}}"
        result = format_message(template, {"other": 1})
        assert result == template

    def test_non_numeric_argument_reported(self, options, errors):
        result = format_message(ITEMS, {"count": "many"}, options)
        assert result == ITEMS
        assert [e.kind for e in errors] == [FormatErrorKind.INVALID_ARGUMENT]

    def test_plural_cache_is_used(self):
        cache = PluralCategoryCache()
        options = FormatOptions(locale="en", plural_cache=cache)
        format_message(ITEMS, {"count": 1}, options)
        format_message(ITEMS, {"count": 2}, options)
        assert cache.size == 1


class TestUnusualPluralArguments:
    """Plural arguments that are not finite numbers never escape as exceptions."""

    TEMPLATE = "{n, plural, =1 {one} one {# item} other {# items}}"

    @pytest.mark.parametrize(
        "value",
        [
            "NaN",
            "Infinity",
            "-Infinity",
            "sNaN",
            float("nan"),
            float("inf"),
            float("-inf"),
            Decimal("NaN"),
            Decimal("sNaN"),
            Decimal("Infinity"),
        ],
    )
    def test_non_finite_values_reported(self, options, errors, value):
        result = format_message(self.TEMPLATE, {"n": value}, options)

        assert result == self.TEMPLATE
        assert [e.kind for e in errors] == [FormatErrorKind.INVALID_ARGUMENT]

    def test_huge_digit_string(self, options, errors):
        digits = "9" * 5000

        result = format_message(self.TEMPLATE, {"n": digits}, options)

        assert result == f"{digits} items"
        assert errors == []

    def test_huge_integer(self, options, errors):
        result = format_message(self.TEMPLATE, {"n": 10**5000}, options)

        assert result.startswith("1000")
        assert result.endswith(" items")
        assert len(result) == 5001 + len(" items")
        assert errors == []

    def test_huge_integer_placeholder(self):
        assert format_message("{n}", {"n": 10**5000}).startswith("1000")

    def test_category_failure_uses_other(self, monkeypatch, options, errors):
        def fail(*args, **kwargs):
            raise ArithmeticError("division impossible")

        monkeypatch.setattr("i18n_runtime.formatter.get_plural_category", fail)

        assert format_message(self.TEMPLATE, {"n": 2}, options) == "2 items"
        assert errors == []


class TestSelect:
    """Tests for select blocks."""

    TEMPLATE = "{gender, select, male {He} female {She} other {They}}"

    @pytest.mark.parametrize(
        "gender,expected", [("male", "He"), ("female", "She"), ("unknown", "They")]
    )
    def test_select(self, gender, expected):
        assert format_message(self.TEMPLATE, {"gender": gender}) == expected

    def test_other_only(self):
        template = "{status, select, other {Unknown}}"
        assert format_message(template, {"status": "pending"}) == "Unknown"

    def test_surrounding_text(self):
        template = "{role, select, admin {Administrator} other {User}} logged in"
        assert format_message(template, {"role": "admin"}) == "Administrator logged in"

    def test_hash_is_literal_outside_plural(self):
        template = "{tag, select, a {# a} other {#}}"
        assert format_message(template, {"tag": "a"}) == "# a"

    def test_untaken_branches_untouched(self):
        template = "{tag, select, a {A} other {{broken}}}"
        assert format_message(template, {"tag": "a"}) == "A"


class TestCombined:
    """Tests for patterns combining several constructs."""

    def test_placeholder_and_plural(self):
        template = "{name} has {count, plural, one {# item} other {# items}}"
        assert format_message(template, {"name": "John", "count": 3}) == "John has 3 items"

    def test_plural_and_select(self):
        template = (
            "{count, plural, one {# item} other {# items}} - "
            "{status, select, new {New} other {Old}}"
        )
        assert format_message(template, {"count": 5, "status": "new"}) == "5 items - New"

    def test_plural_nested_in_select(self):
        template = (
            "{g, select, male {{c, plural, one {He has # item} other {He has # items}}} "
            "other {...}}"
        )
        assert format_message(template, {"g": "male", "c": 1}) == "He has 1 item"

    def test_select_nested_in_plural_keeps_hash(self):
        template = "{n, plural, other {{g, select, a {# for a} other {#}}}}"
        assert format_message(template, {"n": 3, "g": "a"}) == "3 for a"

    def test_placeholder_inside_branch(self):
        template = "{count, plural, one {{name} has # item} other {{name} has # items}}"
        assert format_message(template, {"count": 2, "name": "Ana"}) == "Ana has 2 items"


class TestErrorHandling:
    """Tests for degraded output and error reporting."""

    def test_text_truncated(self, options, errors):
        long_text = "a" * (MAX_TEXT_LENGTH + 100)
        result = format_message(long_text, {"x": 1}, options)
        assert len(result) == MAX_TEXT_LENGTH
        assert errors[0].kind == FormatErrorKind.TEXT_TOO_LONG

    def test_unterminated_pattern_reported(self, options, errors):
        template = "{count, plural, one {item}"
        result = format_message(template, {"count": 1}, options)
        assert result == template
        assert errors[0].kind == FormatErrorKind.PARSE_ERROR
        assert errors[0].message

    def test_parse_error_falls_back_to_interpolation(self, options, errors):
        result = format_message("Hi {name} {broken, plural, one}", {"name": "Ana", "broken": 1}, options)
        assert result == "Hi Ana {broken, plural, one}"
        assert errors[0].kind == FormatErrorKind.PARSE_ERROR

    def test_parse_error_without_callback_returns_string(self):
        assert isinstance(format_message("{broken, plural, one}", {"broken": 1}), str)

    def test_deep_nesting_bounded(self, options, errors):
        nested = "{x, select, a {innermost}}"
        for _ in range(10):
            nested = f"{{x, select, a {{{nested}}}}}"

        result = format_message(nested, {"x": "a"}, options)

        assert isinstance(result, str)
        assert "innermost" in result
        assert [e.kind for e in errors] == [FormatErrorKind.MAX_DEPTH_EXCEEDED]

    def test_nesting_within_limit_resolves(self, options, errors):
        nested = "{x, select, a {innermost}}"
        for _ in range(MAX_NESTING_DEPTH - 1):
            nested = f"{{x, select, a {{{nested}}}}}"

        assert format_message(nested, {"x": "a"}, options) == "innermost"
        assert errors == []

    def test_iteration_limit_falls_back_to_interpolation(self, options, errors):
        template = "{a}" * (MAX_ITERATIONS + 1)
        result = format_message(template, {"a": 1}, options)
        assert result == "1" * (MAX_ITERATIONS + 1)
        assert errors[0].kind == FormatErrorKind.MAX_ITERATIONS_EXCEEDED

    def test_failing_callback_does_not_escape(self):
        def explode(error):
            raise RuntimeError("callback bug")

        options = FormatOptions(on_error=explode)
        result = format_message("{count, plural, one {item}", {"count": 1}, options)
        assert result == "{count, plural, one {item}"


class TestInterpolate:
    def test_single_pass(self):
        assert interpolate("{a} {b}", {"a": "{b}", "b": "x"}) == "{b} x"

    def test_without_params(self):
        assert interpolate("{a}", None) == "{a}"


class TestMessageFormatter:
    """Tests for the settings-bound MessageFormatter."""

    def test_uses_settings_limits(self):
        formatter = MessageFormatter(settings=make_settings())
        assert formatter.max_nesting_depth == 5
        assert formatter.max_text_length == 50_000
        assert formatter.max_iterations == 100
        assert formatter.plural_cache.max_size == 50

    def test_format_with_locale(self):
        formatter = MessageFormatter(settings=make_settings())
        template = "{n, plural, one {one} other {other}}"
        assert formatter.format(template, {"n": 1}, locale="en") == "one"
        assert formatter.format(template, {"n": 1}, locale="ja") == "other"

    def test_default_locale_from_settings(self):
        formatter = MessageFormatter(settings=make_settings(default_locale="ja"))
        assert formatter.format("{n, plural, one {one} other {other}}", {"n": 1}) == "other"

    def test_shares_plural_cache(self):
        cache = PluralCategoryCache()
        formatter = MessageFormatter(plural_cache=cache, settings=make_settings())
        formatter.format(ITEMS, {"count": 1}, locale="en")
        formatter.format(ITEMS, {"count": 1}, locale="fr")
        assert cache.size == 2

    def test_on_error_forwarded(self):
        errors = []
        formatter = MessageFormatter(settings=make_settings())
        formatter.format("{count, plural, one {item}", {"count": 1}, on_error=errors.append)
        assert len(errors) == 1

    def test_default_formatter_is_cached(self):
        assert get_default_formatter() is get_default_formatter()
