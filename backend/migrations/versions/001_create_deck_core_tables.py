"""Create deck, flashcard, quiz and activity tables.

Revision ID: 001_create_deck_core_tables
Revises:
Create Date: 2026-10-16
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql as psql


revision = "001_create_deck_core_tables"
down_revision = None
branch_labels = None
depends_on = None


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        psql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamp(name: str, *, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, sa.DateTime(timezone=True))
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        _timestamp("created_at"),
    )

    op.create_table(
        "decks",
        _uuid_pk(),
        sa.Column("owner_id", sa.String(length=128), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default=sa.text("TRUE")),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("cover_photo", sa.Text(), nullable=False),
        sa.Column("flashcard_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("embedding_field", sa.JSON()),
        sa.Column("original_deck_id", psql.UUID(as_uuid=True)),
        _timestamp("made_to_quiz_at", nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_decks_owner_title", "decks", ["owner_id", "is_deleted", "title"])
    op.create_index("ix_decks_owner_created", "decks", ["owner_id", "is_deleted", "created_at"])
    op.create_index("ix_decks_public_title", "decks", ["is_private", "is_deleted", "title"])

    op.create_table(
        "flashcards",
        _uuid_pk(),
        sa.Column(
            "deck_id",
            psql.UUID(as_uuid=True),
            sa.ForeignKey("decks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("term", sa.Text(), nullable=False),
        sa.Column("definition", sa.Text(), nullable=False),
        sa.Column("is_starred", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        _timestamp("created_at"),
    )
    op.create_index(
        "ix_flashcards_deck_created",
        "flashcards",
        ["deck_id", "is_deleted", "created_at"],
    )

    op.create_table(
        "saved_decks",
        _uuid_pk(),
        sa.Column("deck_id", psql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        _timestamp("saved_at"),
        sa.UniqueConstraint("deck_id", "user_id", name="uq_saved_decks_deck_user"),
    )
    op.create_index("ix_saved_decks_user_saved_at", "saved_decks", ["user_id", "saved_at"])

    op.create_table(
        "deck_publish_requests",
        _uuid_pk(),
        sa.Column(
            "deck_id",
            psql.UUID(as_uuid=True),
            sa.ForeignKey("decks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column(
            "status",
            sa.String(length=8),
            nullable=False,
            server_default=sa.text("'PENDING'"),
        ),
        _timestamp("requested_at"),
        _timestamp("resolved_at", nullable=True),
    )
    op.create_index(
        "ix_deck_publish_requests_deck_status",
        "deck_publish_requests",
        ["deck_id", "status"],
    )

    op.create_table(
        "quiz",
        _uuid_pk(),
        sa.Column("associated_deck_id", psql.UUID(as_uuid=True), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_quiz_associated_deck_id", "quiz", ["associated_deck_id"])

    op.create_table(
        "question_and_answers",
        _uuid_pk(),
        sa.Column(
            "quiz_id",
            psql.UUID(as_uuid=True),
            sa.ForeignKey("quiz.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("related_flashcard_id", psql.UUID(as_uuid=True), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
    )
    op.create_index("ix_question_and_answers_quiz_id", "question_and_answers", ["quiz_id"])
    op.create_index(
        "ix_question_and_answers_flashcard",
        "question_and_answers",
        ["related_flashcard_id"],
    )

    op.create_table(
        "search_deck_logs",
        _uuid_pk(),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("search_query", sa.Text(), nullable=False),
        sa.Column("embedding", sa.JSON(), nullable=False),
        _timestamp("searched_at"),
    )
    op.create_index(
        "ix_search_deck_logs_user_searched",
        "search_deck_logs",
        ["user_id", "searched_at"],
    )

    op.create_table(
        "deck_logs",
        _uuid_pk(),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("deck_id", psql.UUID(as_uuid=True), nullable=False),
        sa.Column("event_type", sa.String(length=20), nullable=False),
        _timestamp("occurred_at"),
    )
    op.create_index("ix_deck_logs_user_occurred", "deck_logs", ["user_id", "occurred_at"])

    op.create_table(
        "quiz_attempts",
        _uuid_pk(),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("deck_id", psql.UUID(as_uuid=True), nullable=False),
        sa.Column("quiz_type", sa.String(length=20), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False),
        sa.Column("correct_question_ids", sa.JSON(), nullable=False),
        sa.Column("incorrect_question_ids", sa.JSON(), nullable=False),
        sa.Column("attempted_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_quiz_attempts_user_attempted",
        "quiz_attempts",
        ["user_id", "attempted_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_quiz_attempts_user_attempted", table_name="quiz_attempts")
    op.drop_table("quiz_attempts")
    op.drop_index("ix_deck_logs_user_occurred", table_name="deck_logs")
    op.drop_table("deck_logs")
    op.drop_index("ix_search_deck_logs_user_searched", table_name="search_deck_logs")
    op.drop_table("search_deck_logs")
    op.drop_index("ix_question_and_answers_flashcard", table_name="question_and_answers")
    op.drop_index("ix_question_and_answers_quiz_id", table_name="question_and_answers")
    op.drop_table("question_and_answers")
    op.drop_index("ix_quiz_associated_deck_id", table_name="quiz")
    op.drop_table("quiz")
    op.drop_index("ix_deck_publish_requests_deck_status", table_name="deck_publish_requests")
    op.drop_table("deck_publish_requests")
    op.drop_index("ix_saved_decks_user_saved_at", table_name="saved_decks")
    op.drop_table("saved_decks")
    op.drop_index("ix_flashcards_deck_created", table_name="flashcards")
    op.drop_table("flashcards")
    op.drop_index("ix_decks_public_title", table_name="decks")
    op.drop_index("ix_decks_owner_created", table_name="decks")
    op.drop_index("ix_decks_owner_title", table_name="decks")
    op.drop_table("decks")
    op.drop_table("users")
