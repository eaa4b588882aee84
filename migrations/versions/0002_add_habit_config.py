"""add habit_config table and daily_scores.entry_values

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

habit_config holds the habit / vice definitions a day's raw entry values are
scored against. Seeded with 13 habits and 9 vices (phone_use is the single
tiered vice). daily_scores.entry_values keeps the raw values of the last save.
"""
from alembic import op
import sqlalchemy as sa

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

pool_enum = sa.Enum("good", "vice", name="habit_pool_enum")
category_enum = sa.Enum("productivity", "health", "growth", name="habit_category_enum")
input_type_enum = sa.Enum("checkbox", "dropdown", "number", name="habit_input_type_enum")
penalty_mode_enum = sa.Enum("flat", "per_instance", "tiered", name="penalty_mode_enum")

MEAL_OPTIONS = '{"Poor": 0, "Okay": 1, "Good": 2, "Great": 3}'
SOCIAL_OPTIONS = '{"None": 0, "Brief/Text": 0.5, "Casual Hangout": 1, "Meaningful Connection": 2}'

# name, display_name, category, input_type, points, options_json, sort_order
SEED_HABITS = [
    ("schoolwork", "Schoolwork", "productivity", "checkbox", 3, None, 1),
    ("personal_project", "Personal Project", "productivity", "checkbox", 3, None, 2),
    ("classes", "Classes", "productivity", "checkbox", 2, None, 3),
    ("job_search", "Job Search", "productivity", "checkbox", 2, None, 4),
    ("gym", "Gym", "health", "checkbox", 3, None, 1),
    ("sleep_7_9h", "Sleep 7-9h", "health", "checkbox", 2, None, 2),
    ("wake_8am", "Wake by 8am", "health", "checkbox", 1, None, 3),
    ("supplements", "Supplements", "health", "checkbox", 1, None, 4),
    ("meal_quality", "Meal Quality", "health", "dropdown", 3, MEAL_OPTIONS, 5),
    ("stretching", "Stretching", "health", "checkbox", 1, None, 6),
    ("meditate", "Meditate", "growth", "checkbox", 1, None, 1),
    ("read", "Read", "growth", "checkbox", 1, None, 2),
    ("social", "Social", "growth", "dropdown", 2, SOCIAL_OPTIONS, 3),
]

# name, display_name, input_type, penalty, penalty_mode, sort_order
SEED_VICES = [
    ("relapse", "Relapse", "number", 0.25, "per_instance", 1),
    ("impulse", "Impulse", "checkbox", 0.10, "flat", 2),
    ("weed", "Weed", "checkbox", 0.12, "flat", 3),
    ("skip_class", "Skip Class", "checkbox", 0.08, "flat", 4),
    ("binged_content", "Binged Content", "checkbox", 0.07, "flat", 5),
    ("gaming_1h", "Gaming >1h", "checkbox", 0.06, "flat", 6),
    ("past_12am", "Past 12am", "checkbox", 0.05, "flat", 7),
    ("late_wake", "Late Wake", "checkbox", 0.03, "flat", 8),
    ("phone_use", "Phone (min)", "number", 0.0, "tiered", 9),
]


def upgrade() -> None:
    habit_config = op.create_table(
        "habit_config",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(64), nullable=False),
        sa.Column("pool", pool_enum, nullable=False),
        sa.Column("category", category_enum, nullable=True),
        sa.Column("input_type", input_type_enum, nullable=False),
        sa.Column("points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("penalty", sa.Float(), nullable=False, server_default="0"),
        sa.Column("penalty_mode", penalty_mode_enum, nullable=False, server_default="flat"),
        sa.Column("options_json", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("retired_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("name", name="uq_habit_config_name"),
    )
    op.create_index("ix_habit_config_id", "habit_config", ["id"])
    op.create_index("ix_habit_config_name", "habit_config", ["name"])

    rows = [
        {
            "name": name, "display_name": display, "pool": "good", "category": category,
            "input_type": input_type, "points": points, "penalty": 0.0,
            "penalty_mode": "flat", "options_json": options, "sort_order": order,
            "is_active": True,
        }
        for name, display, category, input_type, points, options, order in SEED_HABITS
    ] + [
        {
            "name": name, "display_name": display, "pool": "vice", "category": None,
            "input_type": input_type, "points": 0.0, "penalty": penalty,
            "penalty_mode": mode, "options_json": None, "sort_order": order,
            "is_active": True,
        }
        for name, display, input_type, penalty, mode, order in SEED_VICES
    ]
    op.bulk_insert(habit_config, rows)

    op.add_column("daily_scores", sa.Column("entry_values", sa.Text(), nullable=True))


def downgrade() -> None:
    op.drop_column("daily_scores", "entry_values")
    op.drop_index("ix_habit_config_name", table_name="habit_config")
    op.drop_index("ix_habit_config_id", table_name="habit_config")
    op.drop_table("habit_config")
    for enum in (penalty_mode_enum, input_type_enum, category_enum, pool_enum):
        enum.drop(op.get_bind(), checkfirst=True)
