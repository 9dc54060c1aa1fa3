"""Create foodEntries, customFoods, dailySummary and userGoals tables

Revision ID: initial_tables
Revises:
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = 'initial_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'foodEntries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('userId', sa.Integer(), nullable=False),
        sa.Column('foodName', sa.String(length=255), nullable=False),
        sa.Column('mealTime', sa.Enum('morning', 'noon', 'evening', 'lateNight', name='meal_time'), nullable=False),
        sa.Column('calories', sa.Integer(), nullable=False),
        sa.Column('protein', sa.Float(), nullable=False),
        sa.Column('carbs', sa.Float(), nullable=False),
        sa.Column('fats', sa.Float(), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=True),
        sa.Column('unit', sa.String(length=50), nullable=True),
        sa.Column('imageUrl', sa.String(length=512), nullable=True),
        sa.Column('barcode', sa.String(length=100), nullable=True),
        sa.Column('source', sa.Enum('manual', 'image', 'barcode', name='entry_source'), nullable=False),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_foodEntries_id'), 'foodEntries', ['id'], unique=False)
    op.create_index(op.f('ix_foodEntries_userId'), 'foodEntries', ['userId'], unique=False)
    op.create_index(op.f('ix_foodEntries_date'), 'foodEntries', ['date'], unique=False)

    op.create_table(
        'customFoods',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('userId', sa.Integer(), nullable=False),
        sa.Column('foodName', sa.String(length=255), nullable=False),
        sa.Column('calories', sa.Integer(), nullable=False),
        sa.Column('protein', sa.Float(), nullable=False),
        sa.Column('carbs', sa.Float(), nullable=False),
        sa.Column('fats', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=50), nullable=True),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_customFoods_id'), 'customFoods', ['id'], unique=False)
    op.create_index(op.f('ix_customFoods_userId'), 'customFoods', ['userId'], unique=False)

    op.create_table(
        'dailySummary',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('userId', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('totalCalories', sa.Integer(), nullable=True),
        sa.Column('totalProtein', sa.Float(), nullable=True),
        sa.Column('totalCarbs', sa.Float(), nullable=True),
        sa.Column('totalFats', sa.Float(), nullable=True),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('userId', 'date', name='uq_dailySummary_userId_date'),
    )
    op.create_index(op.f('ix_dailySummary_id'), 'dailySummary', ['id'], unique=False)
    op.create_index(op.f('ix_dailySummary_userId'), 'dailySummary', ['userId'], unique=False)

    op.create_table(
        'userGoals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('userId', sa.Integer(), nullable=False),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', sa.Enum('male', 'female', 'other', name='gender'), nullable=True),
        sa.Column(
            'activityLevel',
            sa.Enum('sedentary', 'light', 'moderate', 'active', 'veryActive', name='activity_level'),
            nullable=True,
        ),
        sa.Column('dailyCalories', sa.Integer(), nullable=True),
        sa.Column('dailyProtein', sa.Float(), nullable=True),
        sa.Column('dailyCarbs', sa.Float(), nullable=True),
        sa.Column('dailyFats', sa.Float(), nullable=True),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('userId'),
    )
    op.create_index(op.f('ix_userGoals_id'), 'userGoals', ['id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_userGoals_id'), table_name='userGoals')
    op.drop_table('userGoals')
    op.drop_index(op.f('ix_dailySummary_userId'), table_name='dailySummary')
    op.drop_index(op.f('ix_dailySummary_id'), table_name='dailySummary')
    op.drop_table('dailySummary')
    op.drop_index(op.f('ix_customFoods_userId'), table_name='customFoods')
    op.drop_index(op.f('ix_customFoods_id'), table_name='customFoods')
    op.drop_table('customFoods')
    op.drop_index(op.f('ix_foodEntries_date'), table_name='foodEntries')
    op.drop_index(op.f('ix_foodEntries_userId'), table_name='foodEntries')
    op.drop_index(op.f('ix_foodEntries_id'), table_name='foodEntries')
    op.drop_table('foodEntries')
    sa.Enum(name='activity_level').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='gender').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='entry_source').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='meal_time').drop(op.get_bind(), checkfirst=True)
