from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_salon_payroll_tables'
down_revision = None
branch_labels = None
depends_on = None

appointment_status = sa.Enum(
    'pending', 'confirmed', 'completed', 'cancelled', 'no_show', name='appointmentstatus'
)
bonus_type = sa.Enum('individual', 'team', 'custom', name='bonustype')
payroll_status = sa.Enum('draft', 'calculated', 'approved', 'paid', name='payrollstatus')


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'staff_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('email', sa.String(255), unique=True),
        sa.Column('phone', sa.String(50)),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('base_commission_rate', sa.Numeric(5, 4), nullable=True),
        *timestamps()
    )
    op.create_index('ix_staff_members_id', 'staff_members', ['id'])
    op.create_index('ix_staff_members_is_active', 'staff_members', ['is_active'])

    op.create_table(
        'appointments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('appointment_date', sa.Date(), nullable=False),
        sa.Column('status', appointment_status, nullable=False),
        sa.Column('total_price', sa.Numeric(12, 2), nullable=True),
        *timestamps()
    )
    op.create_index('ix_appointments_id', 'appointments', ['id'])
    op.create_index('ix_appointments_staff_date', 'appointments', ['staff_id', 'appointment_date'])

    op.create_table(
        'performance_tiers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('min_appointments', sa.Integer(), nullable=False),
        sa.Column('max_appointments', sa.Integer(), nullable=True),
        sa.Column('commission_multiplier', sa.Numeric(6, 4), nullable=False),
        sa.Column('monthly_bonus', sa.Numeric(12, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
        sa.CheckConstraint('commission_multiplier > 0', name='ck_tier_multiplier_positive'),
        sa.CheckConstraint('monthly_bonus >= 0', name='ck_tier_bonus_non_negative')
    )
    op.create_index('ix_performance_tiers_id', 'performance_tiers', ['id'])
    op.create_index(
        'ix_performance_tiers_active_min', 'performance_tiers', ['is_active', 'min_appointments']
    )

    op.create_table(
        'staff_bonuses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('bonus_type', bonus_type, nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('awarded_date', sa.Date(), nullable=False),
        sa.Column('period_month', sa.Integer(), nullable=False),
        sa.Column('period_year', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.String(100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *timestamps()
    )
    op.create_index('ix_staff_bonuses_id', 'staff_bonuses', ['id'])
    op.create_index(
        'ix_staff_bonuses_staff_period', 'staff_bonuses', ['staff_id', 'period_year', 'period_month']
    )

    op.create_table(
        'payroll_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('setting_key', sa.String(100), nullable=False),
        sa.Column('setting_value', sa.Numeric(12, 4), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('updated_by', sa.String(100), nullable=True),
        *timestamps()
    )
    op.create_index('ix_payroll_settings_id', 'payroll_settings', ['id'])
    op.create_index('ix_payroll_settings_setting_key', 'payroll_settings', ['setting_key'], unique=True)

    op.create_table(
        'payroll_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('staff_id', sa.Integer(), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('period_month', sa.Integer(), nullable=False),
        sa.Column('period_year', sa.Integer(), nullable=False),
        sa.Column('appointment_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('gross_revenue', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('commission_rate', sa.Numeric(5, 4), nullable=False, server_default='0'),
        sa.Column(
            'performance_tier_id', sa.Integer(), sa.ForeignKey('performance_tiers.id'), nullable=True
        ),
        sa.Column('tier_multiplier', sa.Numeric(6, 4), nullable=False, server_default='1'),
        sa.Column('commission_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('tier_bonus', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('bonus_total', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('deductions', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('net_pay', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('status', payroll_status, nullable=False),
        sa.Column('calculated_at', sa.DateTime(), nullable=True),
        sa.Column('approved_by', sa.String(100), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        *timestamps(),
        sa.UniqueConstraint(
            'staff_id', 'period_month', 'period_year', name='uq_payroll_record_staff_period'
        )
    )
    op.create_index('ix_payroll_records_id', 'payroll_records', ['id'])
    op.create_index('ix_payroll_records_period', 'payroll_records', ['period_year', 'period_month'])
    op.create_index('ix_payroll_records_status', 'payroll_records', ['status'])


def downgrade():
    op.drop_table('payroll_records')
    op.drop_table('payroll_settings')
    op.drop_table('staff_bonuses')
    op.drop_table('performance_tiers')
    op.drop_table('appointments')
    op.drop_table('staff_members')

    bind = op.get_bind()
    for enum_type in (payroll_status, bonus_type, appointment_status):
        enum_type.drop(bind, checkfirst=True)
