"""004: create markets table

Revision ID: 004
Revises: 003
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            id              VARCHAR(64)     PRIMARY KEY,
            title           VARCHAR(500)    NOT NULL,
            description     TEXT,
            category        VARCHAR(64),
            closes_at       TIMESTAMPTZ,
            status          VARCHAR(16)     NOT NULL DEFAULT 'open',
            outcome         VARCHAR(16),
            yes_price       SMALLINT        NOT NULL,
            no_price        SMALLINT        NOT NULL,
            resolved_at     TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_status
                CHECK (status IN ('open', 'closed', 'resolved')),
            CONSTRAINT ck_markets_outcome
                CHECK (outcome IS NULL OR outcome IN ('resolved_yes', 'resolved_no')),
            CONSTRAINT ck_markets_outcome_iff_resolved
                CHECK ((outcome IS NULL) = (status <> 'resolved')),
            CONSTRAINT ck_markets_yes_price CHECK (yes_price BETWEEN 1 AND 99),
            CONSTRAINT ck_markets_no_price  CHECK (no_price BETWEEN 1 AND 99)
        );
    """)
    op.execute("CREATE INDEX idx_markets_created ON markets (created_at DESC, id DESC);")
    op.execute("CREATE INDEX idx_markets_status ON markets (status);")
    op.execute("CREATE INDEX idx_markets_category ON markets (category);")
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE markets IS 'Binary markets: prices in cents per share';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
