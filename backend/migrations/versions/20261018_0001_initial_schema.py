from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

JSONB = postgresql.JSONB(astext_type=sa.Text())
EMPTY_LIST = sa.text("'[]'::jsonb")
UUID = postgresql.UUID(as_uuid=True)

def _created(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False)

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("portfolio_public", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("university", sa.String(length=200), nullable=False),
        sa.Column("degree", sa.String(length=120), nullable=False),
        sa.Column("branch", sa.String(length=120), nullable=False),
        sa.Column("graduation_year", sa.Integer(), nullable=False),
        sa.Column("skills", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("bio", sa.String(length=300), server_default="", nullable=False),
        sa.Column("role", sa.String(length=16), server_default="student", nullable=False),
        _created(),
        _created("updated_at"),
        sa.CheckConstraint("role IN ('student','admin')", name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "recruiters",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("website", sa.String(length=255), server_default="", nullable=False),
        _created(),
    )
    op.create_index("ix_recruiters_email", "recruiters", ["email"], unique=True)

    op.create_table(
        "bookmarks",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("recruiter_id", UUID, sa.ForeignKey("recruiters.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _created(),
        sa.UniqueConstraint("recruiter_id", "user_id", name="uq_bookmark_once"),
    )
    op.create_index("ix_bookmarks_recruiter_id", "bookmarks", ["recruiter_id"])
    op.create_index("ix_bookmarks_user_id", "bookmarks", ["user_id"])

    op.create_table(
        "documents",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("original_name", sa.String(length=255), nullable=False),
        sa.Column("storage_key", sa.Text(), nullable=False),
        sa.Column("mime_type", sa.String(length=128), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("tags", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("is_public", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("derived_title", sa.String(length=100), nullable=True),
        sa.Column("derived_description", sa.Text(), nullable=True),
        sa.Column("user_edited", sa.Boolean(), server_default=sa.false(), nullable=False),
        _created("uploaded_at"),
        sa.CheckConstraint(
            "category IN ('Academics','Internships','Projects','Certifications','Extracurriculars')",
            name="ck_documents_category",
        ),
    )
    op.create_index("ix_documents_user_id", "documents", ["user_id"])

    op.create_table(
        "job_applications",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company", sa.String(length=200), nullable=False),
        sa.Column("position", sa.String(length=200), nullable=False),
        sa.Column("status", sa.String(length=16), server_default="To Apply", nullable=False),
        sa.Column("salary", sa.String(length=64), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("linked_document_ids", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("applied_date", sa.Date(), nullable=True),
        _created(),
        _created("updated_at"),
    )
    op.create_index("ix_job_applications_user_id", "job_applications", ["user_id"])

    op.create_table(
        "projects",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("github_link", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("tags", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("stars", sa.Integer(), server_default="0", nullable=False),
        sa.Column("forks", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_commit_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("activity_graph", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("is_public", sa.Boolean(), server_default=sa.true(), nullable=False),
        _created(),
    )
    op.create_index("ix_projects_user_id", "projects", ["user_id"])

    op.create_table(
        "visits",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("profile_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("viewer_role", sa.String(length=16), nullable=False),
        sa.Column("viewer_id", UUID, nullable=True),
        sa.Column("recruiter_company", sa.String(length=200), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=False),
        sa.Column("location", sa.String(length=200), server_default="Unknown", nullable=False),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("country", sa.String(length=120), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=False),
        sa.Column("browser", sa.String(length=64), server_default="Unknown", nullable=False),
        sa.Column("os", sa.String(length=64), server_default="Unknown", nullable=False),
        sa.Column("timestamp", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("viewer_role IN ('recruiter','guest')", name="ck_visits_viewer_role"),
    )
    op.create_index("ix_visits_profile_id", "visits", ["profile_id"])
    op.create_index("ix_visits_timestamp", "visits", ["timestamp"])
    op.create_index("ix_visits_profile_timestamp", "visits", ["profile_id", "timestamp"])

    op.create_table(
        "challenges",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("difficulty", sa.String(length=8), server_default="Medium", nullable=False),
        sa.Column("language", sa.String(length=16), nullable=False),
        sa.Column("track", sa.String(length=64), nullable=False),
        sa.Column("starter_code", sa.Text(), nullable=False),
        sa.Column("tags", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("blurb", sa.String(length=500), nullable=True),
        sa.Column("authors", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("test_cases", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("total_attempts", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_passed", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        _created(),
        _created("updated_at"),
        sa.CheckConstraint("difficulty IN ('Easy','Medium','Hard')", name="ck_challenges_difficulty"),
        sa.CheckConstraint("total_passed >= 0 AND total_passed <= total_attempts", name="ck_challenges_counters"),
    )
    op.create_index("ix_challenges_slug", "challenges", ["slug"], unique=True)
    op.create_index("ix_challenges_language_difficulty", "challenges", ["language", "difficulty"])

    op.create_table(
        "submissions",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("challenge_id", UUID, sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("language", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), server_default="Pending", nullable=False),
        sa.Column("test_results", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.Column("execution_time_ms", sa.Integer(), server_default="0", nullable=False),
        sa.Column("memory_used", sa.Integer(), server_default="0", nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        _created("submitted_at"),
        sa.Column("badge_awarded", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("badge_awarded_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("execution_tokens", JSONB, server_default=EMPTY_LIST, nullable=False),
        sa.CheckConstraint(
            "status IN ('Pending','Running','Passed','Failed','Error')", name="ck_submissions_status"
        ),
    )
    op.create_index("ix_submissions_user_id", "submissions", ["user_id"])
    op.create_index("ix_submissions_challenge_id", "submissions", ["challenge_id"])
    op.create_index("ix_submissions_user_challenge", "submissions", ["user_id", "challenge_id"])
    op.create_index("ix_submissions_user_status", "submissions", ["user_id", "status"])

    op.create_table(
        "badges",
        sa.Column("id", UUID, primary_key=True, nullable=False),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("challenge_id", UUID, sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("submission_id", UUID, sa.ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False),
        _created("earned_at"),
        # the at-most-once guarantee for badge awards lives here
        sa.UniqueConstraint("user_id", "challenge_id", name="uq_badge_once_per_challenge"),
    )
    op.create_index("ix_badges_user_id", "badges", ["user_id"])
    op.create_index("ix_badges_challenge_id", "badges", ["challenge_id"])

def downgrade() -> None:
    for table in ("badges", "submissions", "challenges", "visits", "projects",
                  "job_applications", "documents", "bookmarks", "recruiters", "users"):
        op.drop_table(table)
