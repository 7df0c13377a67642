import textwrap
from decimal import Decimal

from quell_core import (
    ErrorKind,
    ImportStatus,
    TransactionDraft,
    TransactionType,
    export_csv,
    generate_sample_csv,
    parse_csv,
)
from quell_core.csv_import import SAMPLE_ROW_COUNT, tokenize_line


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


def test_sample_document_imports_cleanly(today, categories):
    result = parse_csv(generate_sample_csv(today), categories)

    assert result.errors == ()
    assert result.status is ImportStatus.SUCCESS
    assert len(result.accepted) == SAMPLE_ROW_COUNT

    coffee, groceries, freelance, _gas = result.accepted
    assert coffee.date == "2026-03-15"
    assert coffee.category_id == "c-food"
    # No "Groceries" category in the lookup: imported uncategorized.
    assert groceries.category_id is None
    assert freelance.type is TransactionType.INCOME
    assert freelance.notes == "Client payment, March invoice"


def test_missing_required_header_aborts_import(categories):
    text = _dedent(
        """
        description,type,date
        Coffee,EXPENSE,2026-03-01
        """
    )

    result = parse_csv(text, categories)

    assert result.status is ImportStatus.FAILED
    assert result.accepted == ()
    assert len(result.errors) == 1
    err = result.errors[0]
    assert err.row == 0
    assert err.kind is ErrorKind.MISSING_REQUIRED_HEADERS
    assert "amount" in err.message


def test_headers_are_case_insensitive_in_any_order():
    text = _dedent(
        """
        Date,TYPE,Amount,Description
        2026-03-01,expense,12.5,Tea
        """
    )

    result = parse_csv(text)

    assert result.accepted == (
        TransactionDraft(
            type=TransactionType.EXPENSE,
            amount=Decimal("12.50"),
            description="Tea",
            date="2026-03-01",
        ),
    )


def test_row_errors_are_independent_and_numbered_from_header(categories):
    text = _dedent(
        '''
        description,amount,type,date,category,notes
        Coffee,4.50,EXPENSE,2026-03-01,Food,
        ,10,EXPENSE,2026-03-01,,
        Lunch,abc,EXPENSE,2026-03-01,,
        Lunch,-3,EXPENSE,2026-03-01,,
        Bonus,100,SALARY,2026-03-01,,
        Taxi,50,EXPENSE,2026/03/01,,
        Taxi,50,EXPENSE,2026-02-30,,
        "Rent, March",15000,expense,2026-03-01,rent,"said ""paid"""
        '''
    )

    result = parse_csv(text, categories)

    assert result.status is ImportStatus.PARTIAL
    assert [(e.row, e.kind) for e in result.errors] == [
        (3, ErrorKind.DESCRIPTION_REQUIRED),
        (4, ErrorKind.INVALID_AMOUNT),
        (5, ErrorKind.INVALID_AMOUNT),
        (6, ErrorKind.INVALID_TYPE),
        (7, ErrorKind.INVALID_DATE),
        (8, ErrorKind.INVALID_DATE),
    ]
    assert [d.description for d in result.accepted] == ["Coffee", "Rent, March"]
    rent = result.accepted[1]
    assert rent.category_id == "c-rent"
    assert rent.notes == 'said "paid"'
    assert rent.amount == Decimal("15000")


def test_blank_lines_are_skipped_but_still_counted():
    text = "description,amount,type,date\n\n,1,EXPENSE,2026-03-01\nTea,2,EXPENSE,2026-03-01\n"

    result = parse_csv(text)

    assert [e.row for e in result.errors] == [3]
    assert len(result.accepted) == 1


def test_leading_blank_lines_keep_the_header_as_row_one():
    text = "\n\n" + "description,amount,type,date\n,1,EXPENSE,2026-03-01\n"

    result = parse_csv(text)

    assert [(e.row, e.kind) for e in result.errors] == [(2, ErrorKind.DESCRIPTION_REQUIRED)]


def test_oversized_amount_fails_only_that_row():
    text = _dedent(
        """
        description,amount,type,date
        Tea,1e30,EXPENSE,2026-03-01
        Cake,99999999999999999999999999999,EXPENSE,2026-03-01
        Coffee,5,EXPENSE,2026-03-01
        """
    )

    result = parse_csv(text)

    assert result.status is ImportStatus.PARTIAL
    assert [(e.row, e.kind) for e in result.errors] == [
        (2, ErrorKind.INVALID_AMOUNT),
        (3, ErrorKind.INVALID_AMOUNT),
    ]
    assert [d.description for d in result.accepted] == ["Coffee"]


def test_unterminated_quote_fails_only_that_row():
    text = _dedent(
        """
        description,amount,type,date
        "Coffee,4,EXPENSE,2026-03-01
        Tea,2,EXPENSE,2026-03-01
        """
    )

    result = parse_csv(text)

    assert result.status is ImportStatus.PARTIAL
    assert [(e.row, e.kind) for e in result.errors] == [(2, ErrorKind.ROW_PARSE_FAILURE)]
    assert result.accepted[0].description == "Tea"


def test_every_row_failing_is_a_failed_import():
    text = _dedent(
        """
        description,amount,type,date
        Coffee,0,EXPENSE,2026-03-01
        Tea,0.001,EXPENSE,2026-03-01
        """
    )

    result = parse_csv(text)

    assert result.status is ImportStatus.FAILED
    assert not result.ok
    assert [e.kind for e in result.errors] == [ErrorKind.INVALID_AMOUNT] * 2


def test_header_without_data_rows_is_a_failed_import():
    for text in ("description,amount,type,date\n\n", "", "   \n"):
        result = parse_csv(text)

        assert result.status is ImportStatus.FAILED
        assert [(e.row, e.kind) for e in result.errors] == [(0, ErrorKind.EMPTY_DOCUMENT)]


def test_crlf_line_endings():
    text = "description,amount,type,date\r\nTea,2,INCOME,2026-03-01\r\n"

    result = parse_csv(text)

    assert result.status is ImportStatus.SUCCESS
    assert result.accepted[0].type is TransactionType.INCOME


def test_parallel_validation_preserves_row_order(categories):
    lines = ["description,amount,type,date,category"]
    for i in range(60):
        amount = "oops" if i % 3 == 0 else str(i + 1)
        lines.append(f"Item {i},{amount},EXPENSE,2026-03-01,Food")
    text = "\n".join(lines)

    serial = parse_csv(text, categories)
    parallel = parse_csv(text, categories, concurrency=4)

    assert parallel == serial
    assert [e.row for e in parallel.errors] == sorted(e.row for e in parallel.errors)
    assert len(parallel.accepted) == 40


def test_export_reimports_to_the_same_drafts(categories):
    drafts = [
        TransactionDraft(
            type=TransactionType.EXPENSE,
            amount=Decimal("4.50"),
            description="Coffee, large",
            date="2026-03-01",
            category_id="c-food",
            notes="with a \"shot\"",
        ),
        TransactionDraft(
            type=TransactionType.INCOME,
            amount=Decimal("50000.00"),
            description="Salary",
            date="2026-03-01",
        ),
    ]

    text = export_csv(drafts, categories)
    result = parse_csv(text, categories)

    assert text.splitlines()[0] == "description,amount,type,date,category,notes"
    assert result.errors == ()
    assert list(result.accepted) == drafts


def test_export_collapses_embedded_newlines():
    draft = TransactionDraft(
        type=TransactionType.EXPENSE,
        amount=Decimal("10.00"),
        description="Two\nlines",
        date="2026-03-01",
        notes="a\r\nb",
    )

    result = parse_csv(export_csv([draft]))

    assert result.accepted[0].description == "Two lines"
    assert result.accepted[0].notes == "a b"


def test_tokenize_line_handles_quotes_and_commas():
    assert tokenize_line('a,"b,c","say ""hi"""') == ["a", "b,c", 'say "hi"']
