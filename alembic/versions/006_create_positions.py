"""006: create positions table

Revision ID: 006
Revises: 005
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE positions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            market_id       VARCHAR(64)     NOT NULL REFERENCES markets (id),
            yes_shares      INTEGER         NOT NULL DEFAULT 0,
            yes_cost_sum    BIGINT          NOT NULL DEFAULT 0,
            no_shares       INTEGER         NOT NULL DEFAULT 0,
            no_cost_sum     BIGINT          NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_positions_user_market UNIQUE (user_id, market_id),
            CONSTRAINT ck_positions_yes_gte_0   CHECK (yes_shares >= 0),
            CONSTRAINT ck_positions_no_gte_0    CHECK (no_shares >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_positions_market ON positions (market_id);")
    op.execute("""
        CREATE TRIGGER trg_positions_updated_at
            BEFORE UPDATE ON positions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS positions CASCADE;")
