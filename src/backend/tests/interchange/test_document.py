import pytest
from pydantic import ValidationError

from common.interchange.config import ColumnWidthConfig, ColumnWidthRule, CsvDialect, PaddingRule
from common.interchange.document import DocumentBuilder, reorder_columns
from common.interchange.exceptions import (
    DuplicateHeaderError,
    FieldTooLongError,
    MissingHeaderError,
    UnknownColumnError,
    UnsupportedLineTypeError,
)
from common.interchange.models import DataLine, Field, HeaderLine, Line, TruncationStrategy


def test_build_renders_header_then_rows(make_header, make_row):
    doc = (
        DocumentBuilder()
        .add_line(make_header("Date", "Text", "Amount"))
        .add_line(make_row("2025-03-01", "Rent, March", "-950.00"))
        .add_line(make_row("2025-03-02", 'Refund "A"', "12.50"))
        .build()
    )
    assert doc.to_string() == (
        "Date,Text,Amount\n"
        '2025-03-01,"Rent, March",-950.00\n'
        '2025-03-02,"Refund ""A""",12.50'
    )
    assert str(doc) == doc.to_string()


def test_build_without_header_renders_rows_only(make_row):
    doc = DocumentBuilder(CsvDialect(delimiter=";")).add_rows([make_row("a", "b"), make_row("c", "d")]).build()
    assert doc.to_string() == "a;b\nc;d"
    assert not doc.has_header
    assert doc.column_names() == []


def test_add_line_rejects_unknown_line_types():
    builder = DocumentBuilder()
    with pytest.raises(UnsupportedLineTypeError) as excinfo:
        builder.add_line(["a", "b"])
    assert excinfo.value.details["found"] == "list"
    with pytest.raises(UnsupportedLineTypeError):
        builder.add_line(Line.from_values(["a"]))


def test_header_overwrite_allowed_by_default(make_header):
    builder = DocumentBuilder().add_line(make_header("A")).add_line(make_header("B"))
    assert builder.header.names() == ["B"]


def test_header_overwrite_can_be_forbidden(make_header):
    builder = DocumentBuilder(allow_header_overwrite=False).add_line(make_header("A"))
    with pytest.raises(DuplicateHeaderError):
        builder.add_line(make_header("B"))
    assert builder.header.names() == ["A"]


def test_reorder_columns_moves_header_and_rows(make_header, make_row):
    doc = (
        DocumentBuilder()
        .set_header(make_header("A", "B", "C"))
        .add_row(make_row("1", "2", "3"))
        .reorder_columns(["C", "A", "B"])
        .build()
    )
    assert doc.header.names() == ["C", "A", "B"]
    assert doc.rows[0].values() == ["3", "1", "2"]
    assert [f.position for f in doc.rows[0].fields] == [0, 1, 2]


def test_reorder_unknown_column_leaves_builder_untouched(make_header, make_row):
    header = make_header("A", "B", "C")
    row = make_row("1", "2", "3")
    builder = DocumentBuilder().set_header(header).add_row(row)

    with pytest.raises(UnknownColumnError) as excinfo:
        builder.reorder_columns(["C", "X", "A"])

    assert excinfo.value.column == "X"
    assert builder.header is header
    assert builder.rows == (row,)


def test_reorder_requires_header(make_row):
    with pytest.raises(MissingHeaderError):
        DocumentBuilder().add_row(make_row("1")).reorder_columns(["A"])


def test_reorder_subset_and_short_rows(make_header, make_row):
    header, rows = reorder_columns(make_header("A", "B", "C"), [make_row("1")], ["C", "A"])
    assert header.names() == ["C", "A"]
    assert rows[0].values() == ["", "1"]


def test_reorder_keeps_quoted_flags():
    header = HeaderLine((Field(0, "A", quoted=True), Field(1, "B")))
    new_header, _ = reorder_columns(header, [], ["B", "A"])
    assert [f.quoted for f in new_header.fields] == [False, True]


def test_named_width_rule_requires_header(make_row):
    builder = DocumentBuilder().add_row(make_row("abc")).set_column_width("Name", 2)
    with pytest.raises(MissingHeaderError):
        builder.build()


def test_named_width_rule_must_exist_in_header(make_header):
    builder = DocumentBuilder().set_header(make_header("A")).set_column_width("Missing", 2)
    with pytest.raises(UnknownColumnError):
        builder.build()


def test_widths_apply_to_header_and_rows(make_header, make_row):
    doc = (
        DocumentBuilder()
        .set_header(make_header("Name", "Code"))
        .add_row(make_row("Alexander", "7"))
        .set_column_width("Name", 4)
        .set_column_width(1, 4, padding=PaddingRule(char="0", direction="left"))
        .build()
    )
    assert doc.to_string() == "Name,Code\nAlex,0007"


def test_default_width_applies_to_unlisted_columns(make_header, make_row):
    doc = (
        DocumentBuilder()
        .set_header(make_header("A", "B"))
        .add_row(make_row("xxxxx", "yyyyy"))
        .set_column_width("A", 5)
        .set_default_column_width(2)
        .build()
    )
    assert doc.to_string().splitlines()[1] == "xxxxx,yy"


def test_build_fails_fast_on_error_strategy(make_header, make_row):
    builder = (
        DocumentBuilder()
        .set_header(make_header("Kto"))
        .add_row(make_row("1200"))
        .add_row(make_row("123456"))
        .set_column_width("Kto", 4, truncation=TruncationStrategy.ERROR)
    )
    with pytest.raises(FieldTooLongError) as excinfo:
        builder.build()
    assert excinfo.value.column == "Kto"


def test_document_keeps_snapshot_of_width_config(make_header, make_row):
    widths = ColumnWidthConfig().set_width("A", 2)
    builder = DocumentBuilder(column_widths=widths).set_header(make_header("A")).add_row(make_row("abcd"))
    doc = builder.build()
    widths.set_width("A", 3)
    assert doc.to_string() == "A\nab"


def test_built_document_width_rules_are_read_only(make_header, make_row):
    doc = (
        DocumentBuilder()
        .set_header(make_header("A"))
        .add_row(make_row("abcd"))
        .set_column_width("A", 10)
        .build()
    )
    assert not hasattr(doc.column_widths, "set_width")
    with pytest.raises(ValidationError):
        doc.column_widths.default = ColumnWidthRule(max_width=2, truncation=TruncationStrategy.ERROR)
    assert doc.to_string() == "A\nabcd"

    rebuilt = DocumentBuilder.from_document(doc).build()
    assert rebuilt == doc
    assert hash(rebuilt) == hash(doc)


def test_from_document_widths_do_not_leak_back(make_header, make_row):
    doc = DocumentBuilder().set_header(make_header("A")).add_row(make_row("abcd")).set_column_width("A", 10).build()
    narrowed = DocumentBuilder.from_document(doc).set_column_width("A", 2).build()
    assert narrowed.to_string() == "A\nab"
    assert doc.to_string() == "A\nabcd"


def test_document_queries(make_header, make_row):
    doc = (
        DocumentBuilder()
        .set_header(make_header("A", "B", "A"))
        .add_rows([make_row("1", "2", "3"), make_row("4", "5")])
        .build()
    )
    assert doc.row_count == 2
    assert doc.column_index("A") == 0
    assert doc.column_index("Z") == -1
    assert doc.has_column("B")
    assert doc.column("B") == ["2", "5"]
    assert doc.column_at(2) == ["3", ""]
    assert doc.to_records()[1] == {"A": "4", "B": "5"}
    assert doc.rows[0].get("B") == "2"
    assert not doc.is_consistent()
    with pytest.raises(UnknownColumnError):
        doc.column("Z")


def test_from_document_round_trips(make_header, make_row):
    doc = DocumentBuilder(CsvDialect(delimiter="|")).set_header(make_header("A")).add_row(make_row("1")).build()
    again = DocumentBuilder.from_document(doc).add_row(make_row("2")).build()
    assert again.to_string() == "A\n1\n2"
    assert doc.row_count == 1


def test_data_line_equality_ignores_header(make_header):
    row = DataLine.from_values(["1"])
    assert row.with_header(make_header("A")) == row
