"""create goal optimizer tables

Revision ID: e3f4a5b6c7d8
Revises:
Create Date: 2026-10-17 00:00:00.000000

Summary:
- Create financial_goals (metas que lee el optimizador)
- Create goal_gap_analysis (historial append-only de análisis de gap)
  - gap_percentage y deviation_from_plan en Numeric(20, 4): con capital
    muy superior al plan superan ±99,999%
- Create goal_optimization_strategies
- Create goal_contribution_plans
- Create goal_intermediate_milestones
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = 'e3f4a5b6c7d8'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'financial_goals',
        sa.Column('id', sa.String(36), primary_key=True, comment='UUID único de la meta'),
        sa.Column(
            'name',
            sa.String(100),
            nullable=False,
            comment='Nombre de la meta (ej: Retiro anticipado)',
        ),
        sa.Column(
            'target_amount',
            sa.Numeric(15, 2),
            nullable=True,
            comment='Capital objetivo (nulo para metas de rendimiento puro)',
        ),
        sa.Column(
            'target_date',
            sa.Date(),
            nullable=True,
            comment='Fecha objetivo para alcanzar la meta',
        ),
        sa.Column(
            'monthly_contribution',
            sa.Numeric(15, 2),
            nullable=False,
            comment='Aporte mensual actual',
        ),
        sa.Column(
            'expected_return_rate',
            sa.Numeric(6, 2),
            nullable=False,
            comment='Rendimiento anual esperado en porcentaje (10 = 10%/año)',
        ),
        sa.Column('currency', sa.String(3), nullable=False, comment='Moneda de la meta'),
        sa.Column(
            'created_date',
            sa.Date(),
            nullable=False,
            comment='Fecha de inicio del plan original',
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'goal_gap_analysis',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'goal_id',
            sa.String(36),
            sa.ForeignKey('financial_goals.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('analysis_date', sa.Date(), nullable=False, comment='Fecha de la corrida'),
        sa.Column('current_capital', sa.Numeric(15, 2), nullable=False),
        sa.Column('target_capital', sa.Numeric(15, 2), nullable=False),
        sa.Column('gap_amount', sa.Numeric(15, 2), nullable=False),
        sa.Column(
            'gap_percentage',
            sa.Numeric(20, 4),
            nullable=False,
            comment='Gap (%) sobre el objetivo; negativo si el capital ya lo supera',
        ),
        sa.Column('current_monthly_contribution', sa.Numeric(15, 2), nullable=False),
        sa.Column('required_monthly_contribution', sa.Numeric(15, 2), nullable=False),
        sa.Column('contribution_gap', sa.Numeric(15, 2), nullable=False),
        sa.Column(
            'months_remaining',
            sa.Integer(),
            nullable=True,
            comment='Nulo si la meta no tiene fecha objetivo',
        ),
        sa.Column(
            'projected_completion_date',
            sa.Date(),
            nullable=True,
            comment='Nulo si el aporte es cero o la proyección supera el horizonte',
        ),
        sa.Column(
            'deviation_from_plan',
            sa.Numeric(20, 4),
            nullable=False,
            comment='Desviación (%) respecto al capital esperado desde la creación',
        ),
        sa.Column('risk_level', sa.String(10), nullable=False),
        sa.Column('analysis_details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_goal_gap_analysis_goal_id', 'goal_gap_analysis', ['goal_id'])
    op.create_index('ix_goal_gap_analysis_analysis_date', 'goal_gap_analysis', ['analysis_date'])

    op.create_table(
        'goal_optimization_strategies',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'goal_id',
            sa.String(36),
            sa.ForeignKey('financial_goals.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'gap_analysis_id',
            sa.String(36),
            sa.ForeignKey('goal_gap_analysis.id', ondelete='SET NULL'),
            nullable=True,
            comment='Análisis del que se derivó este lote de estrategias',
        ),
        sa.Column('strategy_name', sa.String(200), nullable=False),
        sa.Column('strategy_type', sa.String(30), nullable=False),
        sa.Column('priority', sa.String(10), nullable=False),
        sa.Column('impact_score', sa.Integer(), nullable=False),
        sa.Column('effort_level', sa.String(10), nullable=False),
        sa.Column('time_to_implement_days', sa.Integer(), nullable=False),
        sa.Column('estimated_time_savings_months', sa.Integer(), nullable=True),
        sa.Column('estimated_cost_savings', sa.Numeric(15, 2), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('implementation_steps', sa.JSON(), nullable=True),
        sa.Column('requirements', sa.JSON(), nullable=True),
        sa.Column('risks', sa.JSON(), nullable=True),
        sa.Column('is_applied', sa.Boolean(), nullable=False),
        sa.Column('applied_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'ix_goal_optimization_strategies_goal_id',
        'goal_optimization_strategies',
        ['goal_id'],
    )
    op.create_index(
        'ix_goal_optimization_strategies_gap_analysis_id',
        'goal_optimization_strategies',
        ['gap_analysis_id'],
    )

    op.create_table(
        'goal_contribution_plans',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'goal_id',
            sa.String(36),
            sa.ForeignKey('financial_goals.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'gap_analysis_id',
            sa.String(36),
            sa.ForeignKey('goal_gap_analysis.id', ondelete='SET NULL'),
            nullable=True,
            comment='Análisis del que se derivó este lote de planes (nulo en planes CUSTOM)',
        ),
        sa.Column('plan_name', sa.String(100), nullable=False),
        sa.Column('plan_type', sa.String(20), nullable=False),
        sa.Column('base_monthly_contribution', sa.Numeric(15, 2), nullable=False),
        sa.Column('optimized_monthly_contribution', sa.Numeric(15, 2), nullable=False),
        sa.Column('contribution_increase', sa.Numeric(15, 2), nullable=False),
        sa.Column(
            'extra_annual_contributions',
            sa.Numeric(15, 2),
            nullable=False,
            comment='Suma anual esperada de bonos (monto × probabilidad)',
        ),
        sa.Column('bonus_contributions', sa.JSON(), nullable=True),
        sa.Column('seasonal_adjustments', sa.JSON(), nullable=True),
        sa.Column('affordability_score', sa.Integer(), nullable=True),
        sa.Column('success_probability', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('activated_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_goal_contribution_plans_goal_id', 'goal_contribution_plans', ['goal_id'])
    op.create_index(
        'ix_goal_contribution_plans_gap_analysis_id',
        'goal_contribution_plans',
        ['gap_analysis_id'],
    )
    op.create_index(
        'ix_goal_contribution_plans_is_active',
        'goal_contribution_plans',
        ['is_active'],
    )

    op.create_table(
        'goal_intermediate_milestones',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'goal_id',
            sa.String(36),
            sa.ForeignKey('financial_goals.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('milestone_name', sa.String(100), nullable=False),
        sa.Column('milestone_type', sa.String(20), nullable=False),
        sa.Column(
            'milestone_order',
            sa.Integer(),
            nullable=False,
            comment='Orden 1-based, estrictamente creciente en orden de generación',
        ),
        sa.Column('target_amount', sa.Numeric(15, 2), nullable=True),
        sa.Column('target_percentage', sa.Numeric(5, 2), nullable=True),
        sa.Column('target_date', sa.Date(), nullable=True),
        sa.Column(
            'current_progress',
            sa.Numeric(5, 2),
            nullable=False,
            comment='Progreso reportado (0-100)',
        ),
        sa.Column('progress_percentage', sa.Numeric(5, 2), nullable=False),
        sa.Column('is_achieved', sa.Boolean(), nullable=False),
        sa.Column('achieved_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('difficulty_level', sa.String(20), nullable=False),
        sa.Column('motivation_message', sa.Text(), nullable=True),
        sa.Column('auto_calculated', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'ix_goal_intermediate_milestones_goal_id',
        'goal_intermediate_milestones',
        ['goal_id'],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(
        'ix_goal_intermediate_milestones_goal_id',
        table_name='goal_intermediate_milestones',
    )
    op.drop_table('goal_intermediate_milestones')

    op.drop_index('ix_goal_contribution_plans_is_active', table_name='goal_contribution_plans')
    op.drop_index(
        'ix_goal_contribution_plans_gap_analysis_id',
        table_name='goal_contribution_plans',
    )
    op.drop_index('ix_goal_contribution_plans_goal_id', table_name='goal_contribution_plans')
    op.drop_table('goal_contribution_plans')

    op.drop_index(
        'ix_goal_optimization_strategies_gap_analysis_id',
        table_name='goal_optimization_strategies',
    )
    op.drop_index(
        'ix_goal_optimization_strategies_goal_id',
        table_name='goal_optimization_strategies',
    )
    op.drop_table('goal_optimization_strategies')

    op.drop_index('ix_goal_gap_analysis_analysis_date', table_name='goal_gap_analysis')
    op.drop_index('ix_goal_gap_analysis_goal_id', table_name='goal_gap_analysis')
    op.drop_table('goal_gap_analysis')

    op.drop_table('financial_goals')
