"""005: create trades table

Revision ID: 005
Revises: 004
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE trades (
            id                  VARCHAR(64)     PRIMARY KEY,
            user_id             VARCHAR(64)     NOT NULL,
            market_id           VARCHAR(64)     NOT NULL REFERENCES markets (id),
            side                VARCHAR(3)      NOT NULL,
            shares              INTEGER         NOT NULL,
            price_per_share     SMALLINT        NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_trades_side   CHECK (side IN ('yes', 'no')),
            CONSTRAINT ck_trades_shares CHECK (shares > 0),
            CONSTRAINT ck_trades_price  CHECK (price_per_share BETWEEN 1 AND 99)
        );
    """)
    op.execute("CREATE INDEX idx_trades_user ON trades (user_id, created_at DESC, id DESC);")
    op.execute("CREATE INDEX idx_trades_market ON trades (market_id);")
    op.execute("COMMENT ON TABLE trades IS 'Append-only buy records';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS trades CASCADE;")
