"""Tests for HCL emission and structure validation."""

import re

import pytest

from essence.exceptions import EmissionError
from essence.schema.emitter import BlockWriter, SchemaEmitter, check_structure, emit
from essence.schema.models import (
    DefaultValue,
    ForeignKeyRef,
    IndexSpec,
    OnDelete,
    ResolvedColumn,
    ResolvedTable,
    SchemaDocument,
)


def users_table():
    return ResolvedTable(
        name="users",
        columns=[
            ResolvedColumn("id", "integer", "integer", not_null=True, auto_increment=True, primary_key=True),
            ResolvedColumn("email", "string", "varchar(255)", size="255", not_null=True, unique=True),
            ResolvedColumn(
                "league_id",
                "integer",
                "integer",
                not_null=True,
                foreign_key=ForeignKeyRef("league_id", "leagues", "id", OnDelete.CASCADE),
            ),
            ResolvedColumn("is_active", "boolean", "boolean", default=DefaultValue("boolean", "false")),
        ],
        primary_key="id",
        indexes=[
            IndexSpec("users", ("league_id",)),
            IndexSpec("users", ("email",), unique=True),
        ],
    )


EXPECTED_USERS = """\
schema "public" {}

table "users" {
  schema = schema.public
  column "id" {
    null = false
    type = integer
    auto_increment = true
  }
  column "email" {
    null = false
    type = varchar(255)
  }
  column "league_id" {
    null = false
    type = integer
  }
  column "is_active" {
    null = true
    type = boolean
    default = false
  }
  primary_key {
    columns = [column.id]
  }
  foreign_key "fk_users_league_id" {
    columns = [column.league_id]
    ref_columns = [table.leagues.column.id]
    on_delete = CASCADE
  }
  index "index_users_on_league_id" {
    columns = [column.league_id]
  }
  index "index_users_on_email_unique" {
    columns = [column.email]
    unique = true
  }
}
"""


class TestEmit:
    def test_exact_output(self):
        text = SchemaEmitter(include_header=False).emit(SchemaDocument("public"), [users_table()])
        assert text == EXPECTED_USERS

    def test_header_names_source(self):
        text = SchemaEmitter(source_name="db/schema.yaml").emit(SchemaDocument("public"), [])

        lines = text.splitlines()
        assert lines[0] == "# Auto-generated HCL schema from db/schema.yaml"
        assert lines[1] == "# Edit the YAML file and re-run the converter to update this file"
        assert lines[2] == ""
        assert lines[3] == 'schema "public" {}'

    def test_single_blank_line_between_tables(self):
        posts = ResolvedTable("posts", [ResolvedColumn("title", "string", "varchar")])
        tags = ResolvedTable("tags", [ResolvedColumn("name", "string", "varchar")])

        text = SchemaEmitter(include_header=False).emit(SchemaDocument("main"), [posts, tags])

        assert "}\n\ntable \"tags\" {" in text
        assert "\n\n\n" not in text
        assert text.endswith("}\n")

    def test_no_primary_key_block_without_key(self):
        posts = ResolvedTable("posts", [ResolvedColumn("title", "string", "varchar")])
        text = SchemaEmitter(include_header=False).emit(SchemaDocument("public"), [posts])
        assert "primary_key" not in text

    def test_foreign_key_without_on_delete(self):
        comments = ResolvedTable(
            "comments",
            [ResolvedColumn("post_id", "bigint", "bigint", foreign_key=ForeignKeyRef("post_id", "posts"))],
        )
        text = SchemaEmitter(include_header=False).emit(SchemaDocument("public"), [comments])

        assert "ref_columns = [table.posts.column.id]" in text
        assert "on_delete" not in text

    def test_multi_column_index_name_and_columns(self):
        index = IndexSpec("posts", ("user_id", "published_at"), unique=True)
        posts = ResolvedTable(
            "posts",
            [ResolvedColumn("user_id", "integer", "integer"), ResolvedColumn("published_at", "datetime", "datetime")],
            indexes=[index],
        )
        text = SchemaEmitter(include_header=False).emit(SchemaDocument("public"), [posts])

        assert 'index "index_posts_on_user_id_and_published_at_unique" {' in text
        assert "columns = [column.user_id, column.published_at]" in text

    def test_string_default_is_quoted(self):
        posts = ResolvedTable(
            "posts", [ResolvedColumn("state", "string", "varchar(20)", default=DefaultValue("string", "draft"))]
        )
        text = SchemaEmitter(include_header=False).emit(SchemaDocument("public"), [posts])
        assert 'default = "draft"' in text

    def test_indentation_invariants(self):
        text = SchemaEmitter().emit(SchemaDocument("public"), [users_table()])

        for line in text.splitlines():
            if not line.strip():
                continue
            indent = len(line) - len(line.lstrip(" "))
            assert indent % 2 == 0
            if re.match(r"\s*(schema|table) \"", line):
                assert indent == 0
            if re.match(r"\s*(column|primary_key|foreign_key|index)\b.*\{$", line):
                assert indent == 2
            if re.match(r"\s*(null|type|auto_increment|default|columns|ref_columns|on_delete|unique) =", line):
                assert indent == 4

    def test_functional_form_accepts_options(self):
        text = emit(SchemaDocument("public"), [users_table()], include_header=False)
        assert text == EXPECTED_USERS

    def test_braces_balanced(self):
        text = SchemaEmitter().emit(SchemaDocument("public"), [users_table()])
        assert text.count("{") == text.count("}")


class TestCheckStructure:
    def test_emitted_text_is_clean(self):
        assert check_structure(SchemaEmitter().emit(SchemaDocument("public"), [users_table()])) == []

    def test_odd_indentation(self):
        errors = check_structure('table "t" {\n   schema = schema.public\n}\n')
        assert any("not a multiple of 2" in error for error in errors)

    def test_unclosed_block(self):
        errors = check_structure('table "t" {\n  column "a" {\n    type = text\n  }\n')
        assert any("never closed" in error for error in errors)

    def test_unmatched_closing_brace(self):
        assert any("unmatched" in error for error in check_structure("}\n"))

    def test_misplaced_nested_block(self):
        errors = check_structure('column "a" {\n  type = text\n}\n')
        assert any("indentation 2" in error for error in errors)

    def test_property_at_wrong_depth(self):
        errors = check_structure('table "t" {\n  column "a" {\n  type = text\n  }\n}\n')
        assert errors


class TestBlockWriter:
    def test_close_without_open(self):
        with pytest.raises(EmissionError):
            BlockWriter().close()

    def test_unclosed_block_rejected(self):
        writer = BlockWriter()
        writer.open('table "t"')
        with pytest.raises(EmissionError):
            writer.text()
