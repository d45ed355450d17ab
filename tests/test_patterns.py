"""Tests for pattern rule loading and column inference."""

from essence.schema.models import ResolutionKind
from essence.schema.patterns import PatternMatcher, build_rule, build_rules


def matcher_for(*entries):
    return PatternMatcher(build_rules(entries))


class TestRuleNormalization:
    """Both YAML shapes collapse into one tagged rule."""

    def test_shorthand_literal(self):
        rule = build_rule({"_at$": "datetime not_null"})
        assert rule.regex.pattern == "_at$"
        assert rule.resolution.kind is ResolutionKind.LITERAL
        assert rule.resolution.text == "datetime not_null"

    def test_shorthand_with_table_placeholder_is_template(self):
        rule = build_rule({"_id$": "integer -> {table}.id"})
        assert rule.resolution.kind is ResolutionKind.TEMPLATE

    def test_verbose_template(self):
        rule = build_rule(
            {
                "pattern": "_id$",
                "template": "integer -> {table}.id on_delete=cascade not_null",
                "description": "Foreign keys",
            }
        )
        assert rule.resolution.is_template
        assert rule.description == "Foreign keys"

    def test_verbose_attributes_and_legacy_properties(self):
        assert build_rule({"pattern": "^is_", "attributes": "boolean"}).resolution.text == "boolean"
        assert build_rule({"pattern": "^is_", "properties": "boolean"}).resolution.text == "boolean"

    def test_invalid_regex_is_skipped_with_warning(self, log_records):
        rules = build_rules([{"([": "string"}, {".*": "text"}])

        assert [rule.regex.pattern for rule in rules] == [".*"]
        assert any("invalid regex" in record["message"] for record in log_records)

    def test_malformed_entries_are_skipped(self, log_records):
        rules = build_rules(["_id$", {"a": "x", "b": "y"}, {"pattern": "_x$"}, {"_y$": "text"}])

        assert len(rules) == 1
        assert len(log_records) == 3


class TestResolve:
    def test_first_match_wins(self):
        matcher = matcher_for(
            {"_email$": "string(255)"},
            {"contact_": "string(100)"},
            {".*": "string"},
        )
        assert matcher.resolve("contact_email", "users") == "string(255)"
        assert matcher.resolve("contact_name", "users") == "string(100)"
        assert matcher.resolve("other_field", "users") == "string"

    def test_regex_searches_anywhere_in_name(self):
        matcher = matcher_for({"count": "integer"})
        assert matcher.resolve("view_count_total", "posts") == "integer"

    def test_template_expands_pluralized_prefix(self):
        matcher = matcher_for({"_id$": "integer -> {table}.id on_delete=cascade not_null"})
        assert matcher.resolve("league_id", "users") == "integer -> leagues.id on_delete=cascade not_null"
        assert matcher.resolve("category_id", "posts") == "integer -> categories.id on_delete=cascade not_null"

    def test_template_on_non_id_column_stays_unexpanded(self, log_records):
        matcher = matcher_for({"_ref$": "integer -> {table}.id"})

        assert matcher.resolve("owner_ref", "posts") == "integer -> {table}.id"
        assert any("no _id suffix" in record["message"] for record in log_records)

    def test_no_match_falls_back_to_string(self):
        matcher = matcher_for({"_at$": "datetime"})
        assert matcher.resolve("title", "posts") == "string"

    def test_empty_rule_list(self):
        assert PatternMatcher([]).resolve("anything", "t") == "string"

    def test_matchers_do_not_share_rules(self):
        first = matcher_for({".*": "text"})
        second = matcher_for({".*": "integer"})
        assert first.resolve("a", "t") == "text"
        assert second.resolve("a", "t") == "integer"
