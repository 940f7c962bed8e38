"""Initial records schema: runs, groups, sections, section_groups, students, grades

Revision ID: a1c4e9f2b7d0
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e9f2b7d0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create every table, parents first."""
    op.create_table(
        'runs',
        sa.Column('run_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_runs_name', 'runs', ['name'], unique=True)

    op.create_table(
        'groups',
        sa.Column('group_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('run_id', sa.Integer(), sa.ForeignKey('runs.run_id'), nullable=False),
        sa.Column('group_name', sa.String(length=255), nullable=False),
        sa.Column('group_gpa', sa.Float(), nullable=True),
    )
    op.create_index('ix_groups_run_id', 'groups', ['run_id'])

    op.create_table(
        'sections',
        sa.Column('section_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('run_id', sa.Integer(), sa.ForeignKey('runs.run_id'), nullable=False),
        sa.Column('section_name', sa.String(length=255), nullable=False),
        sa.Column('credit_hours', sa.Float(), nullable=False),
        sa.Column('section_gpa', sa.Float(), nullable=True),
    )
    op.create_index('ix_sections_run_id', 'sections', ['run_id'])

    op.create_table(
        'section_groups',
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.section_id'), primary_key=True),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.group_id'), primary_key=True),
        sa.Column('run_id', sa.Integer(), sa.ForeignKey('runs.run_id'), nullable=False),
    )
    op.create_index('ix_section_groups_run_id', 'section_groups', ['run_id'])

    op.create_table(
        'students',
        sa.Column('student_id', sa.String(length=64), primary_key=True),
        sa.Column('run_id', sa.Integer(), sa.ForeignKey('runs.run_id'), primary_key=True),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('cumulative_gpa', sa.Float(), nullable=True),
    )

    op.create_table(
        'grades',
        sa.Column('grade_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('student_id', sa.String(length=64), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.section_id'), nullable=False),
        sa.Column('run_id', sa.Integer(), sa.ForeignKey('runs.run_id'), nullable=False),
        sa.Column('letter_grade', sa.String(length=4), nullable=True),
        sa.Column('numeric_grade', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['student_id', 'run_id'], ['students.student_id', 'students.run_id']),
    )
    op.create_index('ix_grades_student_id', 'grades', ['student_id'])
    op.create_index('ix_grades_section_id', 'grades', ['section_id'])
    op.create_index('ix_grades_run_id', 'grades', ['run_id'])


def downgrade() -> None:
    """Drop every table, children first."""
    op.drop_table('grades')
    op.drop_table('students')
    op.drop_table('section_groups')
    op.drop_table('sections')
    op.drop_table('groups')
    op.drop_table('runs')
