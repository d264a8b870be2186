from __future__ import annotations

from site_attendance.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use
from site_attendance.main import SCHEMA_PATH


def test_split_ignores_semicolons_inside_literals():
    sql = "INSERT INTO t VALUES ('a;b');\nCREATE TABLE `x;y` (id INT);\nSELECT 1"

    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        "CREATE TABLE `x;y` (id INT)",
        "SELECT 1",
    ]


def test_escaped_quote_does_not_end_literal():
    sql = "INSERT INTO t VALUES ('it\\'s; fine'); SELECT 2;"

    assert list(_iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('it\\'s; fine')", "SELECT 2"]


def test_database_selection_and_comments_are_dropped():
    sql = "-- employee's schema\nCREATE DATABASE foo;\nUSE foo;\nCREATE TABLE a (id INT);"

    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE a (id INT)"]


def test_bundled_schema_parses():
    statements = list(_iter_sql_statements(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))))

    assert statements
    assert all(s.upper().startswith("CREATE TABLE") for s in statements)


def test_bundled_schema_has_waste_tables():
    statements = list(_iter_sql_statements(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))))
    created = {s.split()[5] for s in statements}

    assert {"bins", "waste_management_forms"} <= created
