"""
Unit tests for schema_emitter.py
"""

import io
from unittest import mock

import pytest

from mysql_snapshot.output import OutputSink
from mysql_snapshot.schema_emitter import (
    SchemaEmitter,
    add_if_not_exists,
    extract_foreign_keys,
    rewrite_view,
)

ORDERS_DDL = (
    "CREATE TABLE `orders` (\n"
    "  `id` int(11) NOT NULL AUTO_INCREMENT,\n"
    "  `user_id` int(11) NOT NULL,\n"
    "  `product_id` int(11) NOT NULL,\n"
    "  PRIMARY KEY (`id`),\n"
    "  KEY `fk_user` (`user_id`),\n"
    "  CONSTRAINT `fk_orders_user` FOREIGN KEY (`user_id`) REFERENCES `users` (`id`),\n"
    "  CONSTRAINT `fk_orders_product` FOREIGN KEY (`product_id`) REFERENCES `products` (`id`) ON DELETE CASCADE\n"
    ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
)

USERS_DDL = (
    "CREATE TABLE `users` (\n"
    "  `id` int(11) NOT NULL AUTO_INCREMENT,\n"
    "  `name` varchar(255) DEFAULT NULL,\n"
    "  PRIMARY KEY (`id`)\n"
    ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
)


class TestAddIfNotExists:
    """Tests for add_if_not_exists function."""

    def test_inserts_qualifier(self):
        result = add_if_not_exists(USERS_DDL)
        assert result.startswith("CREATE TABLE IF NOT EXISTS `users` (\n")

    def test_rest_unchanged(self):
        result = add_if_not_exists(USERS_DDL)
        assert result.split("\n")[1:] == USERS_DDL.split("\n")[1:]


class TestExtractForeignKeys:
    """Tests for extract_foreign_keys function."""

    def test_removes_constraint_lines(self):
        body, fragments = extract_foreign_keys(ORDERS_DDL)

        assert "FOREIGN KEY" not in body
        assert len(fragments) == 2
        assert body.count("\n") == ORDERS_DDL.count("\n") - 2

    def test_fragments_are_add_clauses(self):
        _, fragments = extract_foreign_keys(ORDERS_DDL)

        assert fragments == [
            "ADD CONSTRAINT `fk_orders_user` FOREIGN KEY (`user_id`) REFERENCES `users` (`id`)",
            "ADD CONSTRAINT `fk_orders_product` FOREIGN KEY (`product_id`) "
            "REFERENCES `products` (`id`) ON DELETE CASCADE",
        ]

    def test_no_dangling_comma(self):
        body, _ = extract_foreign_keys(ORDERS_DDL)
        lines = body.split("\n")

        assert lines[-2] == "  KEY `fk_user` (`user_id`)"
        assert lines[-1] == ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"
        assert not any(line.rstrip().endswith(",") and next_line.startswith(")")
                       for line, next_line in zip(lines, lines[1:]))

    def test_without_foreign_keys_unchanged(self):
        body, fragments = extract_foreign_keys(USERS_DDL)
        assert body == USERS_DDL
        assert fragments == []


class TestRewriteView:
    """Tests for rewrite_view function."""

    def test_replaces_definer_clause(self):
        ddl = ("CREATE ALGORITHM=UNDEFINED DEFINER=`root`@`localhost` SQL SECURITY DEFINER "
               "VIEW `vi_aromas` AS select `a`.`id` AS `id` from `aromas` `a`")
        assert rewrite_view(ddl) == (
            "CREATE OR REPLACE VIEW `vi_aromas` AS select `a`.`id` AS `id` from `aromas` `a`"
        )

    def test_definer_named_like_view(self):
        ddl = "CREATE DEFINER=`VIEWER`@`%` VIEW `v` AS select 1"
        assert rewrite_view(ddl) == "CREATE OR REPLACE VIEW `v` AS select 1"

    def test_without_view_keyword(self):
        assert rewrite_view("select 1") == "select 1"


class TestSchemaEmitter:
    """Tests for SchemaEmitter class."""

    @pytest.fixture
    def stream(self):
        return io.StringIO()

    @pytest.fixture
    def mock_connection(self):
        conn = mock.MagicMock()
        conn.get_create_table.side_effect = lambda table: {
            "orders": ORDERS_DDL,
            "users": USERS_DDL,
        }[table]
        conn.get_create_view.return_value = (
            "CREATE ALGORITHM=UNDEFINED DEFINER=`root`@`localhost` SQL SECURITY DEFINER "
            "VIEW `v_orders` AS select 1"
        )
        return conn

    @pytest.fixture
    def emitter(self, mock_connection, stream):
        return SchemaEmitter(mock_connection, OutputSink(passthrough=stream))

    def test_create_database(self, emitter, stream):
        emitter.write_create_database("acme")
        output = stream.getvalue()
        assert "CREATE DATABASE IF NOT EXISTS `acme`" in output
        assert "CHARACTER SET utf8mb4" in output
        assert "USE `acme`;" in output

    def test_drop_tables(self, emitter, stream):
        emitter.write_drop_tables(["orders", "users"])
        assert stream.getvalue() == (
            "DROP TABLE IF EXISTS `orders`;\n"
            "DROP TABLE IF EXISTS `users`;\n\n"
        )

    def test_create_tables_records_foreign_keys(self, emitter, stream):
        emitter.write_create_tables(["orders", "users"])
        output = stream.getvalue()

        assert "CREATE TABLE IF NOT EXISTS `orders`" in output
        assert "CREATE TABLE IF NOT EXISTS `users`" in output
        assert "FOREIGN KEY" not in output
        assert list(emitter.foreign_keys) == ["orders"]
        assert len(emitter.foreign_keys["orders"]) == 2

    def test_foreign_keys_alter_table(self, emitter, stream):
        emitter.write_create_tables(["orders", "users"])
        stream.seek(0)
        stream.truncate()

        emitter.write_foreign_keys(["orders", "users"])

        assert stream.getvalue() == (
            "ALTER TABLE `orders`\n"
            " ADD CONSTRAINT `fk_orders_user` FOREIGN KEY (`user_id`) REFERENCES `users` (`id`),\n"
            " ADD CONSTRAINT `fk_orders_product` FOREIGN KEY (`product_id`) "
            "REFERENCES `products` (`id`) ON DELETE CASCADE;\n\n"
        )

    def test_foreign_keys_skip_tables_without_constraints(self, emitter, stream):
        emitter.write_create_tables(["users"])
        stream.seek(0)
        stream.truncate()

        emitter.write_foreign_keys(["users"])
        assert stream.getvalue() == ""

    def test_views(self, emitter, stream, mock_connection):
        emitter.write_views(["v_orders"])
        mock_connection.get_create_view.assert_called_once_with("v_orders")
        assert stream.getvalue() == "CREATE OR REPLACE VIEW `v_orders` AS select 1;\n\n"
