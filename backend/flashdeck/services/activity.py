"""Activity and quiz attempt logging with most-recent lookups."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date, datetime

from flashdeck.core.clock import timestamp_from_date
from flashdeck.core.errors import ErrorCode, NotFoundError, ValidationError
from flashdeck.models.activity import (
    DeckActivityLog,
    DeckActivityType,
    QuizAttempt,
    QuizType,
)
from flashdeck.repositories.activity import (
    DeckActivityRepository,
    QuizAttemptRepository,
    SearchLogRepository,
)
from flashdeck.repositories.deck import DeckRepository
from flashdeck.schemas.activity import (
    DeckActivityRecord,
    LatestDeckActivity,
    LatestQuizAttempt,
    QuizAttemptRecord,
    SearchLogRecord,
)
from flashdeck.services.owner_names import OwnerNameResolver
from flashdeck.utils.validation import parse_deck_id, require_user_id

logger = logging.getLogger("flashdeck.services.activity")


class ActivityService:
    """Append study events and answer "what did I do last" questions."""

    def __init__(
        self,
        search_log_repo: SearchLogRepository,
        activity_repo: DeckActivityRepository,
        quiz_attempt_repo: QuizAttemptRepository,
        deck_repo: DeckRepository,
        owner_names: OwnerNameResolver,
    ) -> None:
        self.search_log_repo = search_log_repo
        self.activity_repo = activity_repo
        self.quiz_attempt_repo = quiz_attempt_repo
        self.deck_repo = deck_repo
        self.owner_names = owner_names

    async def log_search(
        self,
        user_id: str,
        query_text: str,
        embedding: Sequence[float],
    ) -> SearchLogRecord:
        resolved_user = require_user_id(user_id)
        if not isinstance(query_text, str) or not query_text.strip():
            raise ValidationError(ErrorCode.INVALID_SEARCH_QUERY, "Search query must not be blank.")
        if not embedding:
            raise ValidationError(ErrorCode.VALIDATION_ERROR, "Search embedding must not be empty.")

        entry = await self.search_log_repo.record(resolved_user, query_text, embedding)
        await self.search_log_repo.session.commit()
        return SearchLogRecord.model_validate(entry)

    async def log_deck_activity(
        self,
        user_id: str,
        deck_id: uuid.UUID | str,
        event_type: DeckActivityType | str,
    ) -> DeckActivityRecord:
        resolved_user = require_user_id(user_id)
        parsed_deck = parse_deck_id(deck_id)
        try:
            resolved_event = DeckActivityType(event_type)
        except ValueError as exc:
            raise ValidationError(
                ErrorCode.INVALID_ACTIVITY_VALUE,
                f"Unknown activity type '{event_type}'.",
                details={"allowed": [item.value for item in DeckActivityType]},
            ) from exc

        entry = DeckActivityLog(
            user_id=resolved_user,
            deck_id=parsed_deck,
            event_type=resolved_event,
        )
        await self.activity_repo.add(entry, operation="log_deck_activity")
        await self.activity_repo.session.commit()
        return DeckActivityRecord.model_validate(entry)

    async def get_latest_deck_activity(self, user_id: str) -> LatestDeckActivity:
        resolved_user = require_user_id(user_id)
        entry = await self.activity_repo.latest_for_user(resolved_user)
        if entry is None:
            raise NotFoundError(ErrorCode.ACTIVITY_NOT_FOUND, "No deck activity recorded yet.")

        deck = await self.deck_repo.get(entry.deck_id)
        if deck is None:
            raise NotFoundError(
                ErrorCode.DECK_NOT_FOUND,
                f"Deck {entry.deck_id} from the latest activity no longer exists.",
            )
        records = await self.owner_names.to_records([deck])
        return LatestDeckActivity(
            activity=DeckActivityRecord.model_validate(entry),
            deck=records[0],
        )

    async def log_quiz_attempt(
        self,
        user_id: str,
        deck_id: uuid.UUID | str,
        *,
        attempted_at: datetime | date | str,
        quiz_type: QuizType | str,
        score: int,
        total_questions: int,
        correct_question_ids: Sequence[str],
        incorrect_question_ids: Sequence[str],
    ) -> QuizAttemptRecord:
        """Validate every field of the attempt before appending it."""
        resolved_user = require_user_id(user_id)
        parsed_deck = parse_deck_id(deck_id)

        try:
            resolved_type = QuizType(quiz_type)
        except ValueError as exc:
            raise _invalid_attempt(f"Unknown quiz type '{quiz_type}'.") from exc
        try:
            attempted = timestamp_from_date(attempted_at)
        except (TypeError, ValueError) as exc:
            raise _invalid_attempt(
                "attempted_at must be a date, datetime or ISO-8601 string."
            ) from exc

        if not _is_int(total_questions) or total_questions <= 0:
            raise _invalid_attempt("total_questions must be a positive integer.")
        if not _is_int(score) or score < 0:
            raise _invalid_attempt("score must be a non-negative integer.")
        if score > total_questions:
            raise _invalid_attempt("score cannot exceed total_questions.")
        correct = _id_list(correct_question_ids, "correct_question_ids")
        incorrect = _id_list(incorrect_question_ids, "incorrect_question_ids")

        attempt = QuizAttempt(
            user_id=resolved_user,
            deck_id=parsed_deck,
            quiz_type=resolved_type,
            score=score,
            total_questions=total_questions,
            correct_question_ids=correct,
            incorrect_question_ids=incorrect,
            attempted_at=attempted,
        )
        await self.quiz_attempt_repo.add(attempt, operation="log_quiz_attempt")
        await self.quiz_attempt_repo.session.commit()
        logger.info(
            "Quiz attempt logged",
            extra={"deck_id": str(parsed_deck), "quiz_type": resolved_type.value, "score": score},
        )
        return QuizAttemptRecord.model_validate(attempt)

    async def get_latest_quiz_attempt(self, user_id: str) -> LatestQuizAttempt:
        resolved_user = require_user_id(user_id)
        attempt = await self.quiz_attempt_repo.latest_for_user(resolved_user)
        if attempt is None:
            raise NotFoundError(ErrorCode.QUIZ_ATTEMPT_NOT_FOUND, "No quiz attempts recorded yet.")

        deck = await self.deck_repo.get(attempt.deck_id)
        deck_record = None
        if deck is not None:
            deck_record = (await self.owner_names.to_records([deck]))[0]
        return LatestQuizAttempt(
            attempt=QuizAttemptRecord.model_validate(attempt),
            deck=deck_record,
        )


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _id_list(values: object, field: str) -> list[str]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise _invalid_attempt(f"{field} must be a list of IDs.")
    if not all(isinstance(value, str) and value.strip() for value in values):
        raise _invalid_attempt(f"{field} must only contain non-empty strings.")
    return [value.strip() for value in values]


def _invalid_attempt(message: str) -> ValidationError:
    return ValidationError(ErrorCode.INVALID_QUIZ_ATTEMPT, message)


__all__ = ["ActivityService"]
