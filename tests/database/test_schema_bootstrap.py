from pathlib import Path

from src.workforce_system.workforce_system.database.bootstrap import iter_sql_statements, strip_create_db_and_use

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_split_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\n-- note; with semicolon\nSELECT 1;\nSELECT 2"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1", "SELECT 2"]


def test_create_database_and_use_are_removed():
    sql = "CREATE DATABASE IF NOT EXISTS other;\nUSE other;\nCREATE TABLE t (id INT);"
    assert list(iter_sql_statements(strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_schema_defines_every_table():
    statements = list(iter_sql_statements(strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))))
    created = " ".join(statements)
    for table in (
        "organizations",
        "users",
        "attendance_records",
        "break_requests",
        "leave_requests",
        "salary_records",
        "salary_history",
        "office_wifi_networks",
        "notifications",
    ):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in created
    assert "UNIQUE KEY uq_attendance_user_date (user_id, work_date)" in created
