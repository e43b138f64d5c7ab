"""initial_schema

Revision ID: initial_schema
Revises:
Create Date: 2026-01-10 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa
from placement_portal.database_types import GUID, StringList


revision = 'initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'colleges',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_colleges_name'), 'colleges', ['name'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', sa.Enum('student', 'company', 'admin', name='user_role'), nullable=False),
        sa.Column('college_id', GUID(), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('last_login_ip', sa.String(length=45), nullable=True),
        sa.Column('failed_login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('account_locked_until', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_college_id'), 'users', ['college_id'], unique=False)

    op.create_table(
        'student_profiles',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('college_id', GUID(), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('roll_number', sa.String(length=50), nullable=True),
        sa.Column('branch', sa.String(length=100), nullable=True),
        sa.Column('cgpa', sa.Float(), nullable=True),
        sa.Column('graduation_year', sa.Integer(), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('skills', StringList(), nullable=True),
        sa.Column('resume_url', sa.String(length=500), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_student_profiles_user_id'), 'student_profiles', ['user_id'], unique=True)
    op.create_index(op.f('ix_student_profiles_college_id'), 'student_profiles', ['college_id'], unique=False)
    op.create_index(op.f('ix_student_profiles_status'), 'student_profiles', ['status'], unique=False)

    op.create_table(
        'company_profiles',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('company_name', sa.String(), nullable=True),
        sa.Column('industry', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_company_profiles_user_id'), 'company_profiles', ['user_id'], unique=True)
    op.create_index(op.f('ix_company_profiles_company_name'), 'company_profiles', ['company_name'], unique=False)

    op.create_table(
        'jobs',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('company_id', GUID(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('position', sa.String(), nullable=True),
        sa.Column('company_name', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('job_type', sa.String(), nullable=False, server_default='Full-time'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('requirements', StringList(), nullable=True),
        sa.Column('min_cgpa', sa.Float(), nullable=False, server_default='0'),
        sa.Column('eligibility_criteria', sa.Text(), nullable=True),
        sa.Column('stipend', sa.String(), nullable=True),
        sa.Column('application_deadline', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='published'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['company_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_jobs_company_id'), 'jobs', ['company_id'], unique=False)
    op.create_index('idx_jobs_status_created', 'jobs', ['status', 'created_at'], unique=False)

    op.create_table(
        'job_college_targets',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('job_id', GUID(), nullable=False),
        sa.Column('college_id', GUID(), nullable=False),
        sa.Column('approval_status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['college_id'], ['colleges.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id', 'college_id', name='uq_job_college'),
    )
    op.create_index(op.f('ix_job_college_targets_job_id'), 'job_college_targets', ['job_id'], unique=False)
    op.create_index(op.f('ix_job_college_targets_college_id'), 'job_college_targets', ['college_id'], unique=False)
    op.create_index('idx_targets_college_status', 'job_college_targets', ['college_id', 'approval_status'], unique=False)

    op.create_table(
        'applications',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('student_id', GUID(), nullable=False),
        sa.Column('job_id', GUID(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('placement_cell_notes', sa.Text(), nullable=True),
        sa.Column('company_notes', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['users.id']),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'job_id', name='uq_student_job'),
    )
    op.create_index('idx_applications_job_status', 'applications', ['job_id', 'status'], unique=False)
    op.create_index('idx_applications_student', 'applications', ['student_id', 'submitted_at'], unique=False)

    op.create_table(
        'interviews',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('application_id', GUID(), nullable=False),
        sa.Column('interview_date', sa.DateTime(), nullable=False),
        sa.Column('interview_type', sa.String(), nullable=False, server_default='technical'),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('meeting_link', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('result', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_interviews_application_id'), 'interviews', ['application_id'], unique=True)


def downgrade() -> None:
    op.drop_table('interviews')
    op.drop_table('applications')
    op.drop_table('job_college_targets')
    op.drop_table('jobs')
    op.drop_table('company_profiles')
    op.drop_table('student_profiles')
    op.drop_table('users')
    op.drop_table('colleges')
    sa.Enum(name='user_role').drop(op.get_bind(), checkfirst=True)
