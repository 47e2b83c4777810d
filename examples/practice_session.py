"""
Practice session example: Word records -> Questions -> Answers -> Summary

Demonstrates a full run of the exercise engine:
1. Load and validate word records
2. Start an exercise from a word set
3. Answer every question (auto-advance off, advancing by hand)
4. Print the completion summary and the payload sent to the reporter
"""

import json
import random
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.exercises.question_generator import QuestionGenerator
from src.exercises.session import ExerciseSessionMachine
from src.models.exercise_session import SessionPhase
from src.models.vocabulary import InMemoryWordSource, load_word_pool
from src.utils.logging_config import setup_logging


WORD_RECORDS = [
    {"id": 1, "term": "hund", "definition": "ett husdjur som skäller", "example": "Vår hund heter Max."},
    {"id": 2, "term": "katt", "definition": "ett husdjur som jamar", "example": "Katten sover i solen."},
    {"id": 3, "term": "stor", "definition": "av betydande storlek"},
    {"id": 4, "term": "glad", "definition": "känner glädje", "synonym": "lycklig"},
    {"id": 5, "term": "tak", "definition": "överst på ett hus"},
]


class PrintingReporter:
    """Stands in for the backend client that stores attempts."""

    def report(self, payload):
        print("Reporter received:")
        print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(exercise_type: str = "true_false"):
    setup_logging(log_level="INFO")

    # ==================== Step 1: Load word records ====================
    words = load_word_pool(WORD_RECORDS)
    print(f"✓ Loaded {len(words)} words")

    # ==================== Step 2: Start the exercise ====================
    machine = ExerciseSessionMachine(
        InMemoryWordSource({"animals": words}),
        generator=QuestionGenerator(rng=random.Random(42)),
        reporter=PrintingReporter(),
        exercise_id="example-exercise",
        student_id="example-student",
        auto_advance=False,
    )
    session = machine.start_exercise("animals", exercise_type)
    print(f"✓ Started {exercise_type} with {session.total_questions} question(s)")

    # ==================== Step 3: Answer the questions ====================
    while machine.phase == SessionPhase.IN_PROGRESS:
        question = machine.current_question
        print(f"\n❓ {question.question_text}")
        answer = question.is_true if exercise_type == "true_false" else None
        result = machine.submit_answer(answer)
        print(f"  Answer: {result.user_answer or '(none)'}  correct={result.is_correct}")
        print(f"  Score: {machine.session.score}  streak: {machine.session.streak}")
        machine.advance()

    # ==================== Step 4: Summary ====================
    summary = machine.summary
    print(f"\n✓ Finished: {summary['score']}/{summary['max_score']} points "
          f"({summary['percentage']}%, passed={summary['passed']})")
    print(f"  Report status: {machine.report_status}")


if __name__ == "__main__":
    main(*sys.argv[1:2])
