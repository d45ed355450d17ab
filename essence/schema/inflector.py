"""English pluralization used to derive foreign-key table names."""

_SIBILANT_SUFFIXES = ("s", "sh", "ch", "x", "z")


def pluralize(word: str) -> str:
    """Pluralize ``word`` with a fixed suffix heuristic.

    Rules are checked in order: ``fe`` -> ``ves``, ``f`` -> ``ves``,
    ``y`` -> ``ies``, sibilant endings take ``es``, everything else takes
    ``s``. There is no irregular-word dictionary; foreign-key naming relies
    on exactly this behavior, so ``person`` becomes ``persons``.
    """
    if word.endswith("fe"):
        return word[:-2] + "ves"
    if word.endswith("f"):
        return word[:-1] + "ves"
    if word.endswith("y"):
        return word[:-1] + "ies"
    if word.endswith(_SIBILANT_SUFFIXES):
        return word + "es"
    return word + "s"


def foreign_table_for(column_name: str) -> str | None:
    """Return the table a ``<name>_id`` column points at, or None."""
    if not column_name.endswith("_id") or len(column_name) <= 3:
        return None
    return pluralize(column_name[:-3])
