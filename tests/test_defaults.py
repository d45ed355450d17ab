"""Tests for the defaults override chain."""

from types import MappingProxyType

import pytest

from essence.schema.defaults import DefaultResolver, is_inference_sentinel, merge, override_chain
from essence.schema.models import TableDefinition
from essence.schema.patterns import PatternMatcher, build_rules


def table(name, **columns):
    return TableDefinition(name=name, columns=MappingProxyType(columns))


@pytest.fixture
def matcher():
    return PatternMatcher(
        build_rules(
            [
                {"_id$": "integer -> {table}.id on_delete=cascade not_null"},
                {"_at$": "datetime not_null"},
                {".*": "string"},
            ]
        )
    )


class TestSentinel:
    @pytest.mark.parametrize("spec", [None, "~", " ~ ", "?", "-"])
    def test_inference_markers(self, spec):
        assert is_inference_sentinel(spec)

    @pytest.mark.parametrize("spec", ["string", "x", "7", "~~", "primary_key", 0, False])
    def test_explicit_values(self, spec):
        assert not is_inference_sentinel(spec)


class TestOverrideChain:
    def test_tiers_in_precedence_order(self):
        defaults = {"*": {"id": "primary_key"}, "users": {"role": "string"}}
        tiers = override_chain("users", table("users", email="text"), defaults)

        assert [tier.name for tier in tiers] == ["wildcard", "table", "explicit"]
        assert dict(tiers[0].columns) == {"id": "primary_key"}
        assert dict(tiers[1].columns) == {"role": "string"}
        assert dict(tiers[2].columns) == {"email": "text"}

    def test_missing_selectors_give_empty_tiers(self):
        tiers = override_chain("posts", table("posts"), {})
        assert all(not tier.columns for tier in tiers)


class TestMerge:
    def test_later_tier_wins_by_column_name(self, matcher):
        defaults = {
            "*": {"id": "primary_key", "status": "string(20)"},
            "users": {"status": "string(50)"},
        }
        resolver = DefaultResolver(defaults, matcher)

        merged = resolver.merge("users", table("users", status="text not_null"))

        assert merged == {"id": "primary_key", "status": "text not_null"}

    def test_default_columns_keep_leading_position(self, matcher):
        defaults = {"*": {"id": "primary_key", "created_at": "datetime not_null"}}
        resolver = DefaultResolver(defaults, matcher)

        merged = resolver.merge("users", table("users", email="string", created_at="timestamp"))

        assert list(merged) == ["id", "created_at", "email"]
        assert merged["created_at"] == "timestamp"

    def test_table_defaults_apply_only_to_their_table(self, matcher):
        defaults = {"users": {"tenant_id": "bigint not_null"}}
        resolver = DefaultResolver(defaults, matcher)

        assert "tenant_id" in resolver.merge("users", table("users"))
        assert "tenant_id" not in resolver.merge("posts", table("posts"))

    def test_sentinel_columns_resolve_through_patterns(self, matcher):
        resolver = DefaultResolver({}, matcher)

        merged = resolver.merge("users", table("users", league_id=None, last_login_at="~", bio=None))

        assert merged == {
            "league_id": "integer -> leagues.id on_delete=cascade not_null",
            "last_login_at": "datetime not_null",
            "bio": "string",
        }

    def test_sentinels_in_defaults_are_inferred(self, matcher):
        resolver = DefaultResolver({"*": {"created_at": None, "tenant_id": "~"}}, matcher)

        merged = resolver.merge("users", table("users"))

        assert merged["created_at"] == "datetime not_null"
        assert merged["tenant_id"] == "integer -> tenants.id on_delete=cascade not_null"

    def test_explicit_definition_overrides_pattern(self, matcher):
        resolver = DefaultResolver({}, matcher)

        merged = resolver.merge("posts", table("posts", user_id="bigint -> users.id on_delete=set_null"))

        assert merged["user_id"] == "bigint -> users.id on_delete=set_null"

    def test_inferred_id_becomes_primary_key(self, matcher):
        resolver = DefaultResolver({"*": {"id": None}}, matcher)
        assert resolver.merge("users", table("users"))["id"] == "primary_key"

    def test_inferred_id_left_alone_when_another_column_is_key(self, matcher):
        resolver = DefaultResolver({}, matcher)
        merged = resolver.merge("users", table("users", uuid="primary_key", id=None))
        assert merged["id"] == "string"

    def test_raw_document_is_not_modified(self, matcher):
        columns = {"league_id": None}
        definition = table("users", **columns)
        DefaultResolver({"*": {"id": "primary_key"}}, matcher).merge("users", definition)

        assert dict(definition.columns) == {"league_id": None}

    def test_repeated_merges_are_identical(self, matcher):
        resolver = DefaultResolver({"*": {"id": "primary_key"}}, matcher)
        definition = table("users", league_id=None, email="string unique")

        assert resolver.merge("users", definition) == resolver.merge("users", definition)

    def test_functional_form_matches_resolver(self, matcher):
        defaults = {"*": {"id": "primary_key"}}
        definition = table("users", league_id=None)

        assert merge("users", definition, defaults, matcher) == DefaultResolver(defaults, matcher).merge(
            "users", definition
        )
