"""Pattern-based column inference.

Column patterns map a column name to a definition string. Rules are tried in
declaration order and the first match wins. A resolution containing
``{table}`` is a template: the referenced table is derived from the
column's ``_id`` prefix and pluralized.

Two YAML shapes are accepted and normalized at load time:

    column_patterns:
      - "_at$": "datetime not_null"              # shorthand
      - pattern: "_id$"                          # verbose
        template: "integer -> {table}.id on_delete=cascade not_null"
        description: "Foreign keys reference the related table"
"""

import re
from collections.abc import Iterable
from typing import Any

from essence.schema.inflector import foreign_table_for
from essence.schema.models import TABLE_PLACEHOLDER, PatternRule, Resolution
from essence.utils.logging import logger

FALLBACK_DEFINITION = "string"

# Verbose-form keys holding literal attributes; "properties" is the older name
_ATTRIBUTE_KEYS = ("attributes", "properties")


def build_rule(entry: Any) -> PatternRule | None:
    """Normalize one ``column_patterns`` entry into a PatternRule.

    Returns None (after logging a warning) for malformed entries and regexes
    that fail to compile, so one bad rule never aborts compilation.
    """
    if not isinstance(entry, dict) or not entry:
        logger.warning("Skipping invalid pattern definition: {entry!r}", entry=entry)
        return None

    if "pattern" in entry:
        regex_source = entry["pattern"]
        description = entry.get("description")
        if entry.get("template"):
            resolution = Resolution.template(str(entry["template"]))
        else:
            attributes = next((entry[k] for k in _ATTRIBUTE_KEYS if entry.get(k)), None)
            if attributes is None:
                logger.warning(
                    "Skipping pattern '{regex}': no template or attributes given", regex=regex_source
                )
                return None
            resolution = Resolution.infer(str(attributes))
    elif len(entry) == 1:
        regex_source, attributes = next(iter(entry.items()))
        description = None
        if attributes is None:
            logger.warning("Skipping pattern '{regex}': no attributes given", regex=regex_source)
            return None
        resolution = Resolution.infer(str(attributes))
    else:
        logger.warning("Skipping invalid pattern definition: {entry!r}", entry=entry)
        return None

    try:
        regex = re.compile(str(regex_source))
    except re.error as e:
        logger.warning("Skipping invalid regex pattern '{regex}': {err}", regex=regex_source, err=e)
        return None

    return PatternRule(regex=regex, resolution=resolution, description=description)


def build_rules(entries: Iterable[Any]) -> tuple[PatternRule, ...]:
    """Normalize a whole ``column_patterns`` list, dropping invalid entries."""
    rules = tuple(rule for rule in (build_rule(entry) for entry in entries) if rule is not None)
    logger.debug("Loaded {count} column patterns", count=len(rules))
    return rules


def expand_template(template: str, column_name: str) -> str:
    """Substitute ``{table}`` with the pluralized ``_id`` prefix of the column.

    Columns without an ``_id`` suffix leave the template unexpanded.
    """
    referenced_table = foreign_table_for(column_name)
    if referenced_table is None:
        logger.warning(
            "Template '{template}' matched column '{column}' which has no _id suffix; "
            "leaving {{table}} unexpanded",
            template=template,
            column=column_name,
        )
        return template
    return template.replace(TABLE_PLACEHOLDER, referenced_table)


class PatternMatcher:
    """Resolves column names against an ordered, immutable rule list."""

    def __init__(self, rules: Iterable[PatternRule]):
        self.rules: tuple[PatternRule, ...] = tuple(rules)

    def match(self, column_name: str) -> PatternRule | None:
        """Return the first rule matching ``column_name``, if any."""
        for rule in self.rules:
            if rule.matches(column_name):
                return rule
        return None

    def resolve(self, column_name: str, table_name: str) -> str:
        """Resolve a column to its definition string.

        Args:
            column_name: Column being inferred (e.g. ``league_id``)
            table_name: Table owning the column, used for log context only

        Returns:
            The matched rule's definition, template-expanded when needed, or
            ``"string"`` when no rule matches.
        """
        rule = self.match(column_name)
        if rule is None:
            logger.debug("{table}.{column}: no pattern matched", table=table_name, column=column_name)
            return FALLBACK_DEFINITION

        definition = rule.resolution.text
        if rule.resolution.is_template or TABLE_PLACEHOLDER in definition:
            definition = expand_template(definition, column_name)

        logger.debug(
            "{table}.{column}: /{regex}/ -> {definition}",
            table=table_name,
            column=column_name,
            regex=rule.regex.pattern,
            definition=definition,
        )
        return definition
