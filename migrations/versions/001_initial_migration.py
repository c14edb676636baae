"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create profiles table
    op.create_table('profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=True),
        sa.Column('alias', sa.String(length=50), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('position', sa.String(length=100), nullable=True),
        sa.Column('timezone', sa.String(length=50), nullable=True, default='Asia/Jakarta'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_id'), 'profiles', ['id'], unique=False)

    # Create attendance table
    op.create_table('attendance',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('clock_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('clock_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('location_name', sa.String(length=255), nullable=True),
        sa.Column('coordinates', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_attendance_user_id'), 'attendance', ['user_id'], unique=False)
    op.create_index('ix_attendance_user_date_created', 'attendance', ['user_id', 'date', 'created_at'], unique=False)
    # At most one open session per user and day
    op.create_index(
        'uix_attendance_open_session', 'attendance', ['user_id', 'date'], unique=True,
        postgresql_where=sa.text('clock_out IS NULL'),
        sqlite_where=sa.text('clock_out IS NULL')
    )

    # Create sliks_ktp table
    op.create_table('sliks_ktp',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('nik', sa.String(length=16), nullable=True),
        sa.Column('nama_lengkap', sa.String(length=100), nullable=True),
        sa.Column('tempat_lahir', sa.String(length=100), nullable=True),
        sa.Column('tanggal_lahir', sa.Date(), nullable=True),
        sa.Column('jenis_kelamin', sa.String(length=20), nullable=True),
        sa.Column('alamat', sa.Text(), nullable=True),
        sa.Column('rt_rw', sa.String(length=20), nullable=True),
        sa.Column('kel_desa', sa.String(length=100), nullable=True),
        sa.Column('kecamatan', sa.String(length=100), nullable=True),
        sa.Column('agama', sa.String(length=30), nullable=True),
        sa.Column('status_perkawinan', sa.String(length=30), nullable=True),
        sa.Column('pekerjaan', sa.String(length=100), nullable=True),
        sa.Column('kewarganegaraan', sa.String(length=30), nullable=True),
        sa.Column('berlaku_hingga', sa.String(length=30), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sliks_ktp_user_created', 'sliks_ktp', ['user_id', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_sliks_ktp_user_created', table_name='sliks_ktp')
    op.drop_table('sliks_ktp')
    op.drop_index('uix_attendance_open_session', table_name='attendance')
    op.drop_index('ix_attendance_user_date_created', table_name='attendance')
    op.drop_index(op.f('ix_attendance_user_id'), table_name='attendance')
    op.drop_table('attendance')
    op.drop_index(op.f('ix_profiles_id'), table_name='profiles')
    op.drop_table('profiles')
