"""
Session Machine - Drives one vocabulary practice run.

Phases: selecting -> in_progress -> feedback -> (advancing -> in_progress | complete).
Scores every submission, tracks streaks, schedules the timed advance out of
feedback and hands the finished session to the result reporter.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional

try:
    from ..config import config
    from ..models.exercise_session import (
        AttemptWorkspace,
        ExerciseResult,
        ExerciseSession,
        ExerciseStartError,
        SessionPhase,
        serialize_answer,
    )
    from ..models.questions import CROSSWORD, IMAGE_MATCHING, MATCHING, Question
    from ..models.vocabulary import WordSource
    from ..utils.progress import score_percentage, session_statistics
    from ..utils.reporting import ResultReporter, build_attempt_payload, demo_message, is_demo_exercise
    from ..utils.validation import validate_attempt_payload
    from .answer_validator import validate_answer
    from .question_generator import QuestionGenerator
except ImportError:
    from src.config import config
    from src.models.exercise_session import (
        AttemptWorkspace,
        ExerciseResult,
        ExerciseSession,
        ExerciseStartError,
        SessionPhase,
        serialize_answer,
    )
    from src.models.questions import CROSSWORD, IMAGE_MATCHING, MATCHING, Question
    from src.models.vocabulary import WordSource
    from src.utils.progress import score_percentage, session_statistics
    from src.utils.reporting import ResultReporter, build_attempt_payload, demo_message, is_demo_exercise
    from src.utils.validation import validate_attempt_payload
    from src.exercises.answer_validator import validate_answer
    from src.exercises.question_generator import QuestionGenerator

logger = logging.getLogger(__name__)

ANONYMOUS_STUDENT_ID = "anonymous"


def _now_ms() -> int:
    return int(time.time() * 1000)


class ExerciseSessionMachine:
    """
    State machine for one learner's practice runs.

    Features:
    - Start from a word set and exercise type
    - Score +points_per_correct per correct answer, track streaks
    - Timed auto-advance, or a delayed manual-advance affordance
    - Completion summary with statistics and pass/fail
    - Non-fatal hand-off to a result reporter (skipped in demo mode)

    Timers are asyncio handles on the injected loop, or on the running loop.
    Without any loop, nothing is scheduled and the caller advances manually.

    Usage:
        machine = ExerciseSessionMachine(word_source, reporter=client,
                                         exercise_id="ex-1", student_id="s-1")
        machine.start_exercise("set-1", "true_false")
        machine.submit_answer(True)
        machine.advance()
    """

    def __init__(
        self,
        word_source: WordSource,
        generator: Optional[QuestionGenerator] = None,
        reporter: Optional[ResultReporter] = None,
        exercise_id: Optional[str] = None,
        student_id: Optional[str] = None,
        auto_advance: Optional[bool] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        clock: Optional[Callable[[], int]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the session machine.

        Args:
            word_source: Supplies word pools by set id
            generator: Question generator (built around ``rng`` if None)
            reporter: Receives the attempt payload on completion
            exercise_id: Exercise being practiced; None or a demo id means demo mode
            student_id: Learner identifier; reported as "anonymous" when None
            auto_advance: Advance automatically after feedback
                (default from config.session.auto_advance)
            loop: Event loop for timers (running loop if None)
            clock: Returns the current time in milliseconds
            rng: Random source for a default generator
        """
        self.word_source = word_source
        self.generator = generator or QuestionGenerator(rng=rng)
        self.reporter = reporter
        self.exercise_id = exercise_id
        self.student_id = student_id
        self.settings = config.session
        self.auto_advance = self.settings.auto_advance if auto_advance is None else auto_advance
        self._loop = loop
        self._clock = clock or _now_ms

        self.phase = SessionPhase.SELECTING
        self.session: Optional[ExerciseSession] = None
        self.questions: List[Question] = []
        self.workspace = AttemptWorkspace()
        self.manual_advance_available = False
        self.summary: Optional[Dict[str, Any]] = None
        self.demo_message: Optional[str] = None

        # Reporting outcome of the last completed session
        self.report_status: Optional[str] = None
        self.report_error: Optional[str] = None
        self.warnings: List[str] = []

        self._timer: Optional[asyncio.TimerHandle] = None
        self._generation = 0
        self._question_started_ms = 0
        self._selection: Optional[tuple] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def current_question(self) -> Optional[Question]:
        if self.session is None or self.phase == SessionPhase.COMPLETE:
            return None
        index = self.session.current_question_index
        if index >= len(self.questions):
            return None
        return self.questions[index]

    @property
    def last_result(self) -> Optional[ExerciseResult]:
        if self.session is None or not self.session.results:
            return None
        return self.session.results[-1]

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_exercise(self, set_id: str, exercise_type: str, options: Optional[dict] = None) -> ExerciseSession:
        """
        Start a practice run.

        A rejected start leaves the running session untouched.

        Args:
            set_id: Vocabulary set to practice
            exercise_type: Exercise type to generate
            options: Exercise options passed to the generator

        Returns:
            The new ExerciseSession

        Raises:
            ExerciseStartError: If the set has no words or nothing could be generated
            ValueError: If options are invalid
        """
        words = list(self.word_source.get_words(set_id))
        if not words:
            logger.info("Set %s has no words; cannot start %s", set_id, exercise_type)
            raise ExerciseStartError("no_words", f"Vocabulary set {set_id!r} has no words")

        questions = self.generator.generate(exercise_type, words, options)
        if not questions:
            logger.info("No %s questions could be generated from set %s", exercise_type, set_id)
            raise ExerciseStartError(
                "no_questions",
                f"Not enough content to generate {exercise_type} questions from set {set_id!r}",
            )

        self.reset_session()
        self._selection = (set_id, exercise_type, options)
        now = self._clock()
        self.questions = list(questions)
        self.session = ExerciseSession(
            total_questions=len(self.questions),
            started_at_ms=now,
            exercise_type=exercise_type,
            set_id=set_id,
            points_per_correct=self.settings.points_per_correct,
        )
        self._question_started_ms = now
        self._set_phase(SessionPhase.IN_PROGRESS)
        return self.session

    def submit_answer(self, answer: Any = None) -> ExerciseResult:
        """
        Grade an answer to the current question and enter feedback.

        ``time_spent_ms`` covers only the current question, from when it was
        presented until submission. It is not the cumulative time since the
        session started, and feedback time is excluded.

        Args:
            answer: Raw answer; when None, the entries recorded in the
                workspace for the current question are submitted

        Returns:
            ExerciseResult for the current question

        Raises:
            ValueError: If no question is in progress
        """
        if self.phase != SessionPhase.IN_PROGRESS:
            raise ValueError(f"Cannot submit an answer while {self.phase}")

        question = self.current_question
        if answer is None:
            recorded = self.workspace.entries(question.id)
            answer = recorded or None

        outcome = validate_answer(question, answer)
        result = ExerciseResult(
            question_id=question.id,
            question_text=question.question_text,
            user_answer=serialize_answer(answer),
            correct_answer=outcome.correct_answer,
            is_correct=outcome.is_correct,
            time_spent_ms=int(max(0, self._clock() - self._question_started_ms)),
        )
        self.session.record(result)
        logger.debug(
            "Answer to %s: correct=%s score=%d streak=%d",
            question.id, result.is_correct, self.session.score, self.session.streak,
        )

        self._set_phase(SessionPhase.FEEDBACK)
        self._schedule_feedback_exit()
        return result

    def advance(self):
        """
        Leave feedback: move to the next question, or complete the session.

        Raises:
            ValueError: If not in feedback
        """
        if self.phase != SessionPhase.FEEDBACK:
            raise ValueError(f"Cannot advance while {self.phase}")

        self._cancel_timer()
        self.manual_advance_available = False
        self._set_phase(SessionPhase.ADVANCING)

        next_index = self.session.current_question_index + 1
        if next_index < self.session.total_questions:
            self.session.current_question_index = next_index
            self._question_started_ms = self._clock()
            self._set_phase(SessionPhase.IN_PROGRESS)
        else:
            self.session.current_question_index = self.session.total_questions
            self._complete()

    def reset_session(self):
        """Drop the current run and cancel any pending timer. Allowed in every phase."""
        self._cancel_timer()
        self.phase = SessionPhase.SELECTING
        self.session = None
        self.questions = []
        self.workspace.reset()
        self.manual_advance_available = False
        self.summary = None
        self.demo_message = None
        self.report_status = None
        self.report_error = None
        self.warnings = []

    def restart(self) -> ExerciseSession:
        """
        Start again with the last selected set, type and options.

        Raises:
            ValueError: If no exercise was started before
        """
        if self._selection is None:
            raise ValueError("No exercise to restart")
        set_id, exercise_type, options = self._selection
        return self.start_exercise(set_id, exercise_type, options)

    # ------------------------------------------------------------------
    # Per-attempt input
    # ------------------------------------------------------------------

    def record_entry(self, key: Any, value: Any):
        """Record one match (item id -> value) or crossword entry (clue number -> text)."""
        question = self._require_question()
        self.workspace.set_entry(question.id, key, value)

    def clear_entry(self, key: Any):
        question = self._require_question()
        self.workspace.clear_entry(question.id, key)

    def all_pairs_matched(self) -> bool:
        """True when every pair or image of the current question is matched correctly."""
        question = self.current_question
        if question is None or question.question_type not in (MATCHING, IMAGE_MATCHING, CROSSWORD):
            return False
        return validate_answer(question, self.workspace.entries(question.id)).is_correct

    def _require_question(self) -> Question:
        if self.phase != SessionPhase.IN_PROGRESS:
            raise ValueError(f"No question in progress ({self.phase})")
        return self.current_question

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _event_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _schedule(self, delay_ms: int, callback: Callable[[], None]) -> bool:
        loop = self._event_loop()
        if loop is None:
            return False

        generation = self._generation

        def fire():
            if generation != self._generation:
                logger.debug("Ignoring stale timer callback")
                return
            self._timer = None
            callback()

        self._timer = loop.call_later(delay_ms / 1000.0, fire)
        return True

    def _cancel_timer(self):
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_feedback_exit(self):
        self._cancel_timer()
        self.manual_advance_available = False

        if self.auto_advance:
            if not self._schedule(self.settings.auto_advance_delay_ms, self.advance):
                logger.debug("No event loop; waiting for a manual advance")
                self.manual_advance_available = True
        elif not self._schedule(self.settings.manual_advance_delay_ms, self._reveal_manual_advance):
            self._reveal_manual_advance()

    def _reveal_manual_advance(self):
        self.manual_advance_available = True

    def _set_phase(self, phase: str):
        logger.debug("Session phase %s -> %s", self.phase, phase)
        self.phase = phase

    # ------------------------------------------------------------------
    # Completion and reporting
    # ------------------------------------------------------------------

    def _complete(self):
        session = self.session
        session.completed_at_ms = self._clock()
        self._set_phase(SessionPhase.COMPLETE)

        percentage = score_percentage(session.score, session.max_score)
        self.summary = {
            "exercise_id": self.exercise_id,
            "student_id": self.student_id,
            "exercise_type": session.exercise_type,
            "set_id": session.set_id,
            "score": session.score,
            "max_score": session.max_score,
            "percentage": percentage,
            "passed": percentage >= self.settings.passing_score,
            "correct_count": session.correct_count,
            "total_questions": session.total_questions,
            "max_streak": session.max_streak,
            "time_spent_ms": session.elapsed_ms,
            "statistics": session_statistics(session.results),
            "results": [result.to_dict() for result in session.results],
        }
        logger.info(
            "Exercise complete: %d/%d points, %d of %d correct",
            session.score, session.max_score, session.correct_count, session.total_questions,
        )
        self._report(session)

    def _report(self, session: ExerciseSession):
        if is_demo_exercise(self.exercise_id, self.settings.demo_exercise_ids):
            self.demo_message = demo_message(session.score, session.max_score)
            self.report_status = "skipped"
            logger.info("Demo exercise, not reported: %s", self.demo_message)
            return

        if self.reporter is None:
            self.report_status = "skipped"
            logger.debug("No reporter configured")
            return

        payload = build_attempt_payload(
            session, self.exercise_id, self.student_id or ANONYMOUS_STUDENT_ID, session.elapsed_ms or 0,
        )
        validation = validate_attempt_payload(payload)
        if not validation.valid:
            self._report_failed(session, f"Invalid attempt payload: {validation.errors}")
            return

        try:
            outcome = self.reporter.report(payload)
        except Exception as e:
            self._report_failed(session, f"{type(e).__name__}: {e}")
            return

        if not inspect.isawaitable(outcome):
            self.report_status = "sent"
            return

        loop = self._event_loop()
        if loop is None:
            if inspect.iscoroutine(outcome):
                outcome.close()
            self._report_failed(session, "No event loop to await the reporter")
            return

        self.report_status = "pending"
        future = asyncio.ensure_future(outcome, loop=loop)
        future.add_done_callback(lambda done: self._on_report_done(session, done))

    def _on_report_done(self, session: ExerciseSession, future: asyncio.Future):
        if future.cancelled():
            self._report_failed(session, "Reporting was cancelled")
            return
        error = future.exception()
        if session is not self.session:
            logger.debug("Reporter finished for a discarded session (error=%r)", error)
            return
        if error is not None:
            self._report_failed(session, f"{type(error).__name__}: {error}")
            return
        self.report_status = "sent"

    def _report_failed(self, session: ExerciseSession, message: str):
        if session is not self.session:
            return
        self.report_status = "failed"
        self.report_error = message
        self.warnings.append(f"Result could not be saved: {message}")
        logger.warning("Reporting exercise result failed: %s", message)
