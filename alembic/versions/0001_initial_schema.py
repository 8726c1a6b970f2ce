"""Initial schema: users, donations, donation requests, notifications, medications, doses, links

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-11-02 10:12:40.531208

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    'userrole': ('patient', 'caretaker', 'donor', 'admin'),
    'userstatus': ('active', 'inactive', 'suspended'),
    'bloodgroup': ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-'),
    'urgencylevel': ('Low', 'Medium', 'High', 'Critical'),
    'requeststatus': ('pending', 'active', 'approved', 'rejected'),
    'donationstatus': ('pending', 'completed', 'cancelled'),
    'notificationtype': ('donation_request', 'system'),
    'linkstatus': ('active', 'inactive'),
    'dosestatus': ('pending', 'taken', 'missed', 'skipped'),
}


def _enum(name):
    # Types are created up front in upgrade(); tables only reference them
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamp(name, nullable=True):
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable, server_default=sa.func.now())


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', _enum('userrole'), nullable=False),
        sa.Column('status', _enum('userstatus'), nullable=False, server_default='active'),
        sa.Column('phone', sa.String(32)),
        sa.Column('age', sa.Integer()),
        sa.Column('gender', sa.String(16)),
        sa.Column('blood_group', _enum('bloodgroup')),
        sa.Column('city', sa.String(128)),
        _timestamp('created_at', nullable=False),
        _timestamp('updated_at'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'donation_requests',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('patient_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.Column('hospital_name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('blood_group', _enum('bloodgroup'), nullable=False),
        sa.Column('units_needed', sa.Integer(), nullable=False),
        sa.Column('urgency_level', _enum('urgencylevel'), nullable=False, server_default='Medium'),
        sa.Column('contact_number', sa.String(32), nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('status', _enum('requeststatus'), nullable=False, server_default='active'),
        sa.Column('admin_notes', sa.Text()),
        sa.Column('rejection_reason', sa.Text()),
        sa.Column('reviewed_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL')),
        _timestamp('created_at', nullable=False),
        _timestamp('updated_at'),
        sa.Column('approved_at', sa.DateTime(timezone=True)),
        sa.Column('rejected_at', sa.DateTime(timezone=True)),
        sa.CheckConstraint('units_needed > 0', name='ck_donation_requests_units_positive'),
    )
    op.create_index('ix_donation_requests_blood_group', 'donation_requests', ['blood_group'])
    op.create_index('ix_donation_requests_status', 'donation_requests', ['status'])

    op.create_table(
        'donations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('donor_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('request_id', sa.Uuid(), sa.ForeignKey('donation_requests.id', ondelete='SET NULL')),
        sa.Column('hospital_name', sa.String(255)),
        sa.Column('location', sa.String(255)),
        sa.Column('blood_group', _enum('bloodgroup'), nullable=False),
        sa.Column('units', sa.Integer(), nullable=False, server_default='1'),
        _timestamp('date', nullable=False),
        sa.Column('status', _enum('donationstatus'), nullable=False, server_default='completed'),
        sa.Column('donation_code', sa.String(64), unique=True),
        sa.Column('notes', sa.Text()),
        _timestamp('created_at', nullable=False),
    )
    op.create_index('ix_donations_donor_id', 'donations', ['donor_id'])
    op.create_index('ix_donations_status', 'donations', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', _enum('notificationtype'), nullable=False),
        sa.Column('title', sa.String(255)),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp('created_at', nullable=False),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    op.create_table(
        'medications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('patient_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('dosage', sa.String(64)),
        sa.Column('frequency', sa.String(64)),
        _timestamp('created_at', nullable=False),
    )
    op.create_index('ix_medications_patient_id', 'medications', ['patient_id'])

    op.create_table(
        'doses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('medication_id', sa.Uuid(), sa.ForeignKey('medications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', _enum('dosestatus'), nullable=False, server_default='pending'),
        sa.Column('scheduled_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('taken_time', sa.DateTime(timezone=True)),
        _timestamp('updated_at'),
    )
    op.create_index('ix_doses_medication_id', 'doses', ['medication_id'])

    op.create_table(
        'links',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('caretaker_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('patient_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', _enum('linkstatus'), nullable=False, server_default='active'),
        _timestamp('created_at', nullable=False),
    )
    op.create_index('ix_links_caretaker_id', 'links', ['caretaker_id'])
    op.create_index('ix_links_patient_id', 'links', ['patient_id'])


def downgrade() -> None:
    for table in ('links', 'doses', 'medications', 'notifications', 'donations', 'donation_requests', 'users'):
        op.drop_table(table)
    bind = op.get_bind()
    for name in ENUMS:
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
