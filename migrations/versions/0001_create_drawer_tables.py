"""create drawer_sessions and drawer_movements

Revision ID: 0001_drawer_tables
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


revision = '0001_drawer_tables'
down_revision = None
branch_labels = None
depends_on = None


drawer_status = sa.Enum('OPEN', 'CLOSED', name='drawer_status_enum', create_constraint=True)
movement_type = sa.Enum('INFLOW', 'OUTFLOW', 'ADJUSTMENT', name='movement_type_enum', create_constraint=True)
movement_direction = sa.Enum('IN', 'OUT', name='movement_direction_enum', create_constraint=True)


def upgrade():
    op.create_table(
        'drawer_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('external_id', sa.Uuid(), nullable=False, unique=True),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=False),
        sa.Column('opened_by_id', sa.Integer(), nullable=False),
        sa.Column('closed_by_id', sa.Integer(), nullable=True),
        sa.Column('status', drawer_status, nullable=False),
        sa.Column('opening_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('closing_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('expected_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('variance', sa.Numeric(12, 2), nullable=False),
        sa.Column('opening_notes', sa.Text(), nullable=True),
        sa.Column('closing_notes', sa.Text(), nullable=True),
        sa.Column('opened_at', sa.DateTime(), nullable=False),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_drawer_sessions_company_id', 'drawer_sessions', ['company_id'], unique=False)
    op.create_index('ix_drawer_sessions_branch_id', 'drawer_sessions', ['branch_id'], unique=False)
    op.create_index('ix_drawer_sessions_opened_at', 'drawer_sessions', ['opened_at'], unique=False)
    op.create_index(
        'ix_drawer_sessions_status', 'drawer_sessions',
        ['company_id', 'branch_id', 'status'], unique=False,
    )
    op.create_index(
        'uq_drawer_sessions_one_open_per_branch', 'drawer_sessions',
        ['company_id', 'branch_id'], unique=True,
        postgresql_where=sa.text("status = 'OPEN'"),
        sqlite_where=sa.text("status = 'OPEN'"),
    )

    op.create_table(
        'drawer_movements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('external_id', sa.Uuid(), nullable=False, unique=True),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('drawer_sessions.id'), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), nullable=False),
        sa.Column('movement_type', movement_type, nullable=False),
        sa.Column('direction', movement_direction, nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('payment_id', sa.Integer(), nullable=True),
        sa.Column('effective_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_drawer_movements_session_id', 'drawer_movements', ['session_id'], unique=False)
    op.create_index('ix_drawer_movements_company_id', 'drawer_movements', ['company_id'], unique=False)
    op.create_index('ix_drawer_movements_branch_id', 'drawer_movements', ['branch_id'], unique=False)
    op.create_index('ix_drawer_movements_movement_type', 'drawer_movements', ['movement_type'], unique=False)
    op.create_index('ix_drawer_movements_payment_id', 'drawer_movements', ['payment_id'], unique=False)
    op.create_index('ix_drawer_movements_effective_at', 'drawer_movements', ['effective_at'], unique=False)


def downgrade():
    op.drop_index('ix_drawer_movements_effective_at', table_name='drawer_movements')
    op.drop_index('ix_drawer_movements_payment_id', table_name='drawer_movements')
    op.drop_index('ix_drawer_movements_movement_type', table_name='drawer_movements')
    op.drop_index('ix_drawer_movements_branch_id', table_name='drawer_movements')
    op.drop_index('ix_drawer_movements_company_id', table_name='drawer_movements')
    op.drop_index('ix_drawer_movements_session_id', table_name='drawer_movements')
    op.drop_table('drawer_movements')

    op.drop_index('uq_drawer_sessions_one_open_per_branch', table_name='drawer_sessions')
    op.drop_index('ix_drawer_sessions_status', table_name='drawer_sessions')
    op.drop_index('ix_drawer_sessions_opened_at', table_name='drawer_sessions')
    op.drop_index('ix_drawer_sessions_branch_id', table_name='drawer_sessions')
    op.drop_index('ix_drawer_sessions_company_id', table_name='drawer_sessions')
    op.drop_table('drawer_sessions')

    bind = op.get_bind()
    movement_direction.drop(bind, checkfirst=True)
    movement_type.drop(bind, checkfirst=True)
    drawer_status.drop(bind, checkfirst=True)
