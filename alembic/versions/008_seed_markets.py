"""008: seed sample markets

Revision ID: 008
Revises: 007
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO markets (id, title, description, category, closes_at, yes_price, no_price)
        VALUES
            ('MKT-BTC-100K-2026',
             'Will BTC exceed $100,000 by end of 2026?',
             'Resolves YES if Bitcoin trades above $100,000 on any major exchange before 2027-01-01 00:00 UTC.',
             'crypto', '2026-12-31T23:59:59Z', 55, 45),
            ('MKT-RAIN-LONDON-DEC',
             'Will it rain in London on Christmas Day?',
             'Resolves YES if the Met Office records measurable rainfall at Heathrow on 25 December.',
             'weather', '2026-12-25T00:00:00Z', 60, 40),
            ('MKT-FED-RATE-CUT-2026Q4',
             'Will the Fed cut rates in Q4 2026?',
             'Resolves YES if the FOMC announces a rate cut in October, November or December 2026.',
             'economics', '2026-12-31T23:59:59Z', 35, 65);
    """)


def downgrade() -> None:
    op.execute(
        "DELETE FROM markets WHERE id IN "
        "('MKT-BTC-100K-2026', 'MKT-RAIN-LONDON-DEC', 'MKT-FED-RATE-CUT-2026Q4');"
    )
