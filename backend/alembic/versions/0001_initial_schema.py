"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-16

Creates the users, alerts and diagnostic_tests tables. Alerts and tests
cascade-delete with their owning user.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ALERT_STATUS = sa.Enum("active", "acknowledged", "resolved", "dismissed", name="alertstatus")
ALERT_PRIORITY = sa.Enum("low", "medium", "high", "critical", name="alertpriority")
ALERT_TYPE = sa.Enum("general", "health", "system", "diagnostic", "reminder", name="alerttype")
TEST_TYPE = sa.Enum(
    "blood", "urine", "imaging", "cardiac", "neurological", "genetic", "general", name="testtype",
)
TEST_STATUS = sa.Enum("pending", "completed", "reviewed", "cancelled", name="teststatus")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("preferences", sa.JSON, nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- alerts ---
    op.create_table(
        "alerts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("status", ALERT_STATUS, nullable=False, server_default="active"),
        sa.Column("priority", ALERT_PRIORITY, nullable=False, server_default="medium"),
        sa.Column("type", ALERT_TYPE, nullable=False, server_default="general"),
        sa.Column("metadata", sa.JSON, nullable=False),
        sa.Column("acknowledged_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_alerts_user_id", "alerts", ["user_id"])
    op.create_index("ix_alerts_status", "alerts", ["status"])
    op.create_index("ix_alerts_priority", "alerts", ["priority"])
    op.create_index("ix_alerts_created_at", "alerts", ["created_at"])

    # --- diagnostic_tests ---
    op.create_table(
        "diagnostic_tests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("result", sa.Text, nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("test_type", TEST_TYPE, nullable=False, server_default="general"),
        sa.Column("status", TEST_STATUS, nullable=False, server_default="completed"),
        sa.Column("normal_range", sa.String(255), nullable=True),
        sa.Column("units", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("doctor_name", sa.String(255), nullable=True),
        sa.Column("lab_name", sa.String(255), nullable=True),
        sa.Column("is_abnormal", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("attachments", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_diagnostic_tests_user_id", "diagnostic_tests", ["user_id"])
    op.create_index("ix_diagnostic_tests_date", "diagnostic_tests", ["date"])
    op.create_index("ix_diagnostic_tests_test_type", "diagnostic_tests", ["test_type"])
    op.create_index("ix_diagnostic_tests_status", "diagnostic_tests", ["status"])


def downgrade() -> None:
    op.drop_table("diagnostic_tests")
    op.drop_table("alerts")
    op.drop_table("users")
    for enum_type in (TEST_STATUS, TEST_TYPE, ALERT_TYPE, ALERT_PRIORITY, ALERT_STATUS):
        enum_type.drop(op.get_bind(), checkfirst=True)
