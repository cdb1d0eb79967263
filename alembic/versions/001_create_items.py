"""001: create items table

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Keeps updated_at moving forward on every UPDATE, even ones that forget it
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_items_touch_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = GREATEST(NOW(), OLD.updated_at);
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE items (
            id              BIGINT          GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
            name            VARCHAR(255)    NOT NULL,
            description     TEXT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_items_name_not_empty CHECK (char_length(name) > 0)
        );
    """)
    op.execute("CREATE INDEX idx_items_created_at ON items (created_at DESC, id DESC);")
    op.execute("""
        CREATE TRIGGER trg_items_updated_at
            BEFORE UPDATE ON items
            FOR EACH ROW EXECUTE FUNCTION fn_items_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE items IS 'Catalog items — canonical records behind the Redis read-through cache';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS items CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_items_touch_updated_at();")
