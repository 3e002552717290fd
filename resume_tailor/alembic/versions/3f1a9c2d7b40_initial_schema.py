"""initial_schema

Revision ID: 3f1a9c2d7b40
Revises:
Create Date: 2026-10-12 10:04:31.518220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all application tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.String(255), nullable=False, unique=True),
        sa.Column('password', sa.Text, nullable=False),
        sa.Column('is_admin', sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        'resume_sessions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=True, index=True),
        sa.Column('base_resume_file', sa.Text, nullable=True),
        sa.Column('base_resume_content', sa.JSON, nullable=True),
        sa.Column('profile_json', sa.JSON, nullable=True),
        sa.Column('job_url', sa.Text, nullable=True),
        sa.Column('job_description', sa.Text, nullable=True),
        sa.Column('job_analysis', sa.JSON, nullable=True),
        sa.Column('tailored_content', sa.JSON, nullable=True),
        sa.Column('interview_prep', sa.JSON, nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('match_score', sa.Integer, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'job_postings',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('url', sa.String(2048), nullable=False, unique=True),
        sa.Column('title', sa.Text, nullable=True),
        sa.Column('company', sa.Text, nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('requirements', sa.JSON, nullable=True),
        sa.Column('keywords', sa.JSON, nullable=True),
        sa.Column('scraped', sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        'stored_resumes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=True, index=True),
        sa.Column('name', sa.Text, nullable=False),
        sa.Column('original_filename', sa.Text, nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('contact_info', sa.JSON, nullable=True),
        sa.Column('is_default', sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        'tailored_resumes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=True, index=True),
        sa.Column('session_id', sa.String(36), nullable=False),
        sa.Column('job_title', sa.Text, nullable=False),
        sa.Column('company', sa.Text, nullable=False),
        sa.Column('job_url', sa.Text, nullable=True),
        sa.Column('original_job_description', sa.Text, nullable=True),
        sa.Column('tailored_content', sa.JSON, nullable=False),
        sa.Column('ats_score', sa.Integer, nullable=True),
        sa.Column('filename', sa.Text, nullable=False),
        sa.Column('applied_to_job', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('application_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('tags', sa.JSON, nullable=True),
        sa.Column('micro_edits', sa.JSON, nullable=True),
        sa.Column('ai_improvements', sa.JSON, nullable=True),
        sa.Column('response_received', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('response_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('source', sa.Text, nullable=True),
        sa.Column('referral', sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'job_applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=True, index=True),
        sa.Column('tailored_resume_id', sa.String(36), nullable=False),
        sa.Column('job_title', sa.Text, nullable=False),
        sa.Column('company', sa.Text, nullable=False),
        sa.Column('job_url', sa.Text, nullable=True),
        sa.Column('application_status', sa.String(20), nullable=False, server_default='applied'),
        sa.Column('applied_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('interview_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('follow_up_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('priority', sa.String(10), nullable=False, server_default='medium'),
        sa.Column('source', sa.Text, nullable=True),
        sa.Column('contact_person', sa.Text, nullable=True),
        sa.Column('salary', sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'follow_ups',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'job_application_id', sa.String(36), sa.ForeignKey('job_applications.id'), nullable=False, index=True
        ),
        sa.Column('due_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('email_subject', sa.Text, nullable=True),
        sa.Column('email_body', sa.Text, nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    """Drop all application tables."""
    op.drop_table('follow_ups')
    op.drop_table('job_applications')
    op.drop_table('tailored_resumes')
    op.drop_table('stored_resumes')
    op.drop_table('job_postings')
    op.drop_table('resume_sessions')
    op.drop_table('users')
