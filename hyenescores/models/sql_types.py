from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

# PostgreSQL stores standings snapshots as JSONB, SQLite tests fall back to JSON.
STANDINGS_SQL_TYPE = JSON().with_variant(JSONB(), "postgresql")
