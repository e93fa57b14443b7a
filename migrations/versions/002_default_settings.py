"""Default restaurant settings

Revision ID: 002_default_settings
Revises: 001_initial_schema
Create Date: 2026-10-19

"""
import json
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_default_settings'
down_revision: Union[str, None] = '001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']

DEFAULTS = [
    ('restaurant_name', 'Tablebook Restaurant', 'string', 'Name of the restaurant'),
    ('default_reservation_duration', '2', 'number', 'Default reservation length in hours'),
    ('default_buffer_minutes', '15', 'number', 'Turnover buffer before and after each reservation, in minutes'),
    ('max_advance_booking_days', '30', 'number', 'How many days ahead customers may book'),
    ('min_advance_booking_hours', '2', 'number', 'Minimum notice for a customer booking, in hours'),
] + [
    (
        f'opening_hours_{day}',
        json.dumps({'open': '17:00', 'close': '23:00', 'closed': day == 'sunday'}),
        'json',
        f'Opening hours on {day.capitalize()}',
    )
    for day in WEEKDAYS
]


def upgrade() -> None:
    settings_table = sa.table(
        'restaurant_settings',
        sa.column('id', sa.Uuid()),
        sa.column('setting_key', sa.String()),
        sa.column('setting_value', sa.Text()),
        sa.column('setting_type', sa.String()),
        sa.column('description', sa.Text()),
    )
    op.bulk_insert(settings_table, [
        {
            'id': uuid.uuid4(),
            'setting_key': key,
            'setting_value': value,
            'setting_type': setting_type,
            'description': description,
        }
        for key, value, setting_type, description in DEFAULTS
    ])


def downgrade() -> None:
    keys = ', '.join(f"'{key}'" for key, _, _, _ in DEFAULTS)
    op.execute(f"DELETE FROM restaurant_settings WHERE setting_key IN ({keys})")
