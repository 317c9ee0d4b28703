import pytest

from supalite.exceptions import UnsafeIdentifierError
from supalite.select import compile_columns, parse_select


def test_plain_columns():
    parsed = parse_select("id, total")
    assert parsed.base_columns == "id, total"
    assert parsed.relations == []


def test_relations_are_split_off():
    parsed = parse_select("id, total, customers(name, email), invoice_items!inner(*)")
    assert parsed.base_columns == "id, total"
    assert [(r.related_table, r.columns, r.inner_join) for r in parsed.relations] == [
        ("customers", "name, email", False),
        ("invoice_items", "*", True),
    ]


def test_relation_first_and_whitespace():
    parsed = parse_select("  customers ( name ,email ) ,  *  ")
    assert parsed.base_columns == "*"
    assert parsed.relations[0].related_table == "customers"
    assert parsed.relations[0].columns == "name, email"


@pytest.mark.parametrize("expr", ["customers(name)", "", "customers(name), vendors(name)"])
def test_base_defaults_to_star(expr):
    assert parse_select(expr).base_columns == "*"


def test_empty_relation_column_list_means_everything():
    assert parse_select("*, categories()").relations[0].columns == "*"


def test_compile_columns_quotes_names():
    assert compile_columns("id, name") == '"id", "name"'
    assert compile_columns("*") == "*"
    with pytest.raises(UnsafeIdentifierError):
        compile_columns("id, name; DROP TABLE invoices")
