from datetime import date
from decimal import Decimal

import pytest

from quell_core import ErrorKind, TransactionType, parse_entry
from quell_core.grammar import Extraction, extract_amount, extract_date, extract_tags


@pytest.mark.parametrize(
    ("text", "description", "amount"),
    [
        ("Coffee 50", "Coffee", "50"),
        ("Lunch 125.50", "Lunch", "125.50"),
        ("Movie tickets 300", "Movie tickets", "300"),
        ("  Big   lunch   250  ", "Big lunch", "250"),
    ],
)
def test_plain_entry_defaults_to_expense_today(today, text, description, amount):
    result = parse_entry(text, today=today)

    assert result.ok
    draft = result.value.draft
    assert draft.type is TransactionType.EXPENSE
    assert draft.date == today.isoformat()
    assert draft.amount == Decimal(amount)
    assert draft.description == description
    assert draft.category_id is None
    assert draft.tag_ids == ()


def test_full_shorthand_entry(today, categories, tags):
    result = parse_entry("Coffee 50 today @Food #office", categories, tags, today=today)

    assert result.ok
    parsed = result.value
    assert parsed.draft.type is TransactionType.EXPENSE
    assert parsed.draft.amount == Decimal("50")
    assert parsed.draft.description == "Coffee"
    assert parsed.draft.date == "2026-03-15"
    assert parsed.draft.category_id == "c-food"
    assert parsed.draft.tag_ids == ("t-office",)
    assert parsed.category_name == "Food"
    assert parsed.tag_names == ("office",)


def test_income_category_sets_income_type(today, categories):
    result = parse_entry("Salary 50000 2026-02-01 @Income", categories, today=today)

    assert result.ok
    draft = result.value.draft
    assert draft.type is TransactionType.INCOME
    assert draft.amount == Decimal("50000")
    assert draft.date == "2026-02-01"
    assert draft.description == "Salary"
    assert draft.category_id == "c-income"


def test_income_name_without_matching_category_stays_expense(today):
    result = parse_entry("Salary 50000 @Income", [], today=today)

    assert result.ok
    assert result.value.draft.type is TransactionType.EXPENSE
    assert result.value.category_name == "Income"


def test_income_category_name_is_configurable(today, categories):
    result = parse_entry("Refund 200 @food", categories, today=today, income_category="FOOD")

    assert result.value.draft.type is TransactionType.INCOME


@pytest.mark.parametrize(
    ("text", "kind"),
    [
        ("", ErrorKind.MISSING_DESCRIPTION),
        ("   ", ErrorKind.MISSING_DESCRIPTION),
        ("Coffee", ErrorKind.MISSING_AMOUNT),
        ("Lunch -5", ErrorKind.NON_POSITIVE_AMOUNT),
        ("Lunch 0", ErrorKind.NON_POSITIVE_AMOUNT),
        ("50 @Food #office", ErrorKind.MISSING_DESCRIPTION),
        ("Taxi 120 2026-02-30", ErrorKind.INVALID_DATE),
    ],
)
def test_failures_are_values_with_messages(today, categories, text, kind):
    result = parse_entry(text, categories, today=today)

    assert not result.ok
    assert result.value is None
    assert result.error.kind is kind
    assert result.error.message


def test_invalid_date_message_names_the_token(today):
    result = parse_entry("Taxi 120 2026-13-01", today=today)

    assert "2026-13-01" in result.error.message


def test_rightmost_number_is_the_amount(today):
    result = parse_entry("Room 204 rent 15000", today=today)

    assert result.value.draft.amount == Decimal("15000")
    assert result.value.draft.description == "Room 204 rent"


@pytest.mark.parametrize("word", ["yesterday", "YESTERDAY", "Yesterday"])
def test_yesterday_is_case_insensitive(today, word):
    result = parse_entry(f"Taxi 120 {word}", today=today)

    assert result.value.draft.date == "2026-03-14"
    assert result.value.draft.description == "Taxi"


def test_today_keyword_is_stripped(today):
    result = parse_entry("Taxi 120 today", today=today)

    assert result.value.draft.date == "2026-03-15"
    assert result.value.draft.description == "Taxi"


def test_category_matching_is_case_insensitive(today, categories):
    result = parse_entry("Dinner 400 @fOOd", categories, today=today)

    assert result.value.draft.category_id == "c-food"
    assert result.value.category_name == "Food"


def test_unknown_category_keeps_name_but_no_id(today, categories):
    result = parse_entry("Flight 9000 @Travel", categories, today=today)

    assert result.ok
    assert result.value.draft.category_id is None
    assert result.value.category_name == "Travel"


def test_second_category_token_is_dropped(today, categories):
    result = parse_entry("Dinner 400 @Food @Rent", categories, today=today)

    assert result.value.draft.category_id == "c-food"
    assert result.value.draft.description == "Dinner"


def test_unknown_tags_kept_as_names_only(today, tags):
    result = parse_entry("Groceries 1200 #Weekly #later #office", [], tags, today=today)

    parsed = result.value
    assert parsed.tag_names == ("weekly", "later", "office")
    assert parsed.draft.tag_ids == ("t-weekly", "t-office")


def test_repeated_tag_resolves_to_one_id(today, tags):
    result = parse_entry("Lunch 250 #office #Office", [], tags, today=today)

    parsed = result.value
    assert parsed.tag_names == ("office", "office")
    assert parsed.draft.tag_ids == ("t-office",)


@pytest.mark.parametrize(
    "digits",
    ["9" * 13, "9" * 29, "-" + "9" * 40],
)
def test_oversized_amount_is_a_failure_value(today, digits):
    result = parse_entry(f"Lunch {digits}", today=today)

    assert not result.ok
    assert result.error.kind is ErrorKind.INVALID_AMOUNT
    assert "too large" in result.error.message


def test_largest_amount_is_accepted(today):
    result = parse_entry("Flat 999999999999.99", today=today)

    assert result.value.draft.amount == Decimal("999999999999.99")


def test_parse_has_no_side_effects(today, categories, tags):
    before = (list(categories), list(tags))

    first = parse_entry("Coffee 4.5 @Food #office", categories, tags, today=today)
    second = parse_entry("Coffee 4.5 @Food #office", categories, tags, today=today)

    assert first == second
    assert (categories, tags) == before
    assert first.value.draft.amount == Decimal("4.50")


# ---- Individual pipeline steps -------------------------------------------------


def test_extract_tags_strips_every_tag():
    state = extract_tags(Extraction(remaining="Lunch #Team 300 #friday"))

    assert state.tag_names == ("team", "friday")
    assert "#" not in state.remaining
    assert "Lunch" in state.remaining


def test_extract_date_defaults_to_today_without_touching_text():
    state = extract_date(Extraction(remaining="Coffee 50"), date(2026, 1, 1)).value

    assert state.date == "2026-01-01"
    assert state.remaining == "Coffee 50"


def test_extract_amount_removes_only_the_chosen_token():
    state = extract_amount(Extraction(remaining="Room 204 rent 15000")).value

    assert state.amount == Decimal("15000")
    assert "204" in state.remaining
    assert "15000" not in state.remaining
