"""Starter schema.yaml generation."""

from pathlib import Path

from essence.config import CompilerConfig
from essence.utils.logging import logger

SCHEMA_TEMPLATE = """\
# Essence Schema with Default Columns and Pattern Matching
# Compile to Atlas HCL with: essence compile

# Global settings
schema_name: {schema_name}

# Default columns applied to all tables (unless overridden)
defaults:
  "*":
    columns:
      id: primary_key
      created_at: datetime not_null
      updated_at: datetime not_null

# Pattern-based column attribute inference. First match wins.
column_patterns:
  # Foreign key columns: _id suffix gets foreign key reference
  - "_id$": "integer -> {{table}}.id on_delete=cascade not_null"

  # Timestamp columns: _at suffix gets datetime not_null
  - "_at$": "datetime not_null"

  # Date columns: _on and _date suffixes get date type
  - "_on$": "date"
  - "_date$": "date"

  # Boolean columns: various prefixes get boolean with false default
  - "^is_": "boolean default=false not_null"
  - "^has_": "boolean default=false not_null"
  - "^can_": "boolean default=false not_null"
  - "_flag$": "boolean default=false not_null"

  # Text content columns
  - "_content$": "text"
  - "_body$": "text"
  - "_text$": "text"
  - "_html$": "text"

  # Numeric columns: counters, scores, amounts, prices
  - "_count$": "integer default=0 not_null"
  - "_score$": "decimal(8,2)"
  - "_amount$": "decimal(10,2)"
  - "_price$": "decimal(10,2)"

  # String columns: emails, URLs, codes, slugs
  - "_email$": "string(255)"
  - "_url$": "string(500)"
  - "_code$": "string(50)"
  - "_slug$": "string(255) unique"
  - "_status$": "string(50)"
  - "_state$": "string(50)"

  # Default fallback: unmatched columns become strings
  - ".*": "string"

# Table definitions
tables:
  users:
    columns:
      # id, created_at, updated_at automatically added from defaults
      email: string(255) not_null unique
      first_name: string(100) not_null
      last_name: string(100) not_null
      league_id: ~            # integer -> leagues.id on_delete=cascade not_null
      last_login_at: ~        # datetime not_null
      birth_date: ~           # date
      is_active: ~            # boolean default=false not_null
      has_premium: ~          # boolean default=false not_null
      view_count: ~           # integer default=0 not_null
      backup_email: ~         # string(255)
      website_url: ~          # string(500)
      user_slug: ~            # string(255) unique
      bio: ~                  # string (fallback pattern)
    indexes:
      - email
      - league_id

  posts:
    columns:
      title: string(255) not_null
      user_id: ~              # integer -> users.id on_delete=cascade not_null
      published_at: ~         # datetime not_null
      due_on: ~               # date
      post_content: ~         # text
      view_count: ~           # integer default=0 not_null
      rating_score: ~         # decimal(8,2)
      is_published: ~         # boolean default=false not_null
      post_slug: ~            # string(255) unique
      post_status: ~          # string(50)
    indexes:
      - user_id
      - is_published
      - columns: [user_id, published_at]

  leagues:
    columns:
      name: string(255) not_null unique
      abbreviation: string(10)
      description: text
      website_url: ~          # string(500)
      contact_email: ~        # string(255)
      is_active: ~            # boolean default=false not_null
"""


def render_template(config: CompilerConfig | None = None) -> str:
    """Return the starter schema text for ``config``'s flavor."""
    config = config or CompilerConfig()
    return SCHEMA_TEMPLATE.format(schema_name=config.schema_name)


def generate_template(file_path: Path | str = "db/schema.yaml", config: CompilerConfig | None = None) -> Path:
    """Write a starter schema file, creating parent directories.

    Returns:
        The path written.
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_template(config), encoding="utf-8")
    logger.info("Schema template created at {path}", path=path)
    return path
