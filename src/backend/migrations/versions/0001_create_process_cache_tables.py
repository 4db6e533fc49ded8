"""Create process cache tables

Revision ID: 0001_create_process_cache_tables
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_create_process_cache_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create processes, process_jobs, process_job_logs and process_cache"""
    op.create_table(
        'processes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_processes_name', 'processes', ['name'], unique=True)

    op.create_table(
        'process_jobs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('process', sa.Integer(), sa.ForeignKey('processes.id'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('process', 'name', name='uq_process_jobs_process_name'),
    )
    op.create_index('idx_process_jobs_process', 'process_jobs', ['process'])
    op.create_index('idx_process_jobs_name', 'process_jobs', ['name'])

    op.create_table(
        'process_job_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('process', sa.Integer(), sa.ForeignKey('processes.id'), nullable=False),
        sa.Column('job', sa.Integer(), sa.ForeignKey('process_jobs.id'), nullable=False),
        sa.Column('machine', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_process_job_logs_process_machine', 'process_job_logs', ['process', 'machine', 'createdAt'])
    op.create_index('idx_process_job_logs_job_machine', 'process_job_logs', ['job', 'machine', 'createdAt'])

    op.create_table(
        'process_cache',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('process', sa.Integer(), sa.ForeignKey('processes.id'), nullable=False),
        sa.Column('job', sa.Integer(), sa.ForeignKey('process_jobs.id'), nullable=False),
        sa.Column('machine', sa.String(length=255), nullable=False),
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('createdAt', sa.DateTime(), nullable=False),
        sa.Column('updatedAt', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_process_cache_scope_key', 'process_cache', ['process', 'job', 'machine', 'key'])


def downgrade():
    """Drop the process cache tables"""
    op.drop_index('idx_process_cache_scope_key', table_name='process_cache')
    op.drop_table('process_cache')
    op.drop_index('idx_process_job_logs_job_machine', table_name='process_job_logs')
    op.drop_index('idx_process_job_logs_process_machine', table_name='process_job_logs')
    op.drop_table('process_job_logs')
    op.drop_index('idx_process_jobs_name', table_name='process_jobs')
    op.drop_index('idx_process_jobs_process', table_name='process_jobs')
    op.drop_table('process_jobs')
    op.drop_index('ix_processes_name', table_name='processes')
    op.drop_table('processes')
