from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "clubs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False, unique=True),
    )
    op.create_index("ix_clubs_code", "clubs", ["code"])

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
    )

    op.create_table(
        "membership_plans",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("price_cents", sa.Integer(), nullable=False),
        sa.Column("billing_period_days", sa.Integer(), nullable=False),
        sa.Column("classes_per_week", sa.Integer()),
        sa.CheckConstraint("billing_period_days > 0", name="ck_membership_plan_period_positive"),
        sa.CheckConstraint("price_cents >= 0", name="ck_membership_plan_price_non_negative"),
    )

    user_role = sa.Enum("MEMBER", "STAFF", name="userrole")
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("membership_plan_id", sa.Integer(), sa.ForeignKey("membership_plans.id")),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="MEMBER"),
        sa.Column("cents_owed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("next_billing_date", sa.Date()),
        sa.Column("date_joined", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_club_id", "users", ["club_id"])
    op.create_index("ix_users_next_billing_date", "users", ["next_billing_date"])

    op.create_table(
        "gym_classes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_capacity", sa.Integer(), nullable=False),
        sa.CheckConstraint("max_capacity > 0", name="ck_gym_class_capacity_positive"),
    )
    op.create_index("ix_gym_classes_staff_id", "gym_classes", ["staff_id"])
    op.create_index("ix_gym_classes_start_time", "gym_classes", ["start_time"])

    booking_status = sa.Enum("BOOKED", name="bookingstatus")
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("member_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE")),
        sa.Column("gym_class_id", sa.Integer(), sa.ForeignKey("gym_classes.id", ondelete="CASCADE")),
        sa.Column("status", booking_status, nullable=False, server_default="BOOKED"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("member_id", "gym_class_id", name="uq_booking_member_class"),
    )
    op.create_index("ix_bookings_member_id", "bookings", ["member_id"])
    op.create_index("ix_bookings_gym_class_id", "bookings", ["gym_class_id"])

    op.create_table(
        "visits",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("member_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE")),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id", ondelete="CASCADE")),
        sa.Column("scanned_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_visits_member_id", "visits", ["member_id"])


def downgrade() -> None:
    op.drop_table("visits")
    op.drop_table("bookings")
    op.drop_table("gym_classes")
    op.drop_table("users")
    op.drop_table("membership_plans")
    op.drop_table("locations")
    op.drop_table("clubs")
    sa.Enum(name="bookingstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
