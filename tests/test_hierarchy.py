"""Write-side tree operations: create, replace-children update, delete."""

import itertools
import threading

import pytest

from ecat_quiz.errors import StoreError
from ecat_quiz.schemas import AnswerIn, QuestionIn, QuizSubmission
from ecat_quiz.services.hierarchy import HierarchySynchronizer


def _structure(tree):
    """Tree shape without ids, for comparisons across id regeneration."""
    return (
        tree.title,
        tree.published,
        [
            (q.text, [(a.text, a.correct) for a in q.answers])
            for q in tree.questions
        ],
    )


def _sequence_ids(*ids):
    counter = itertools.count()
    values = list(ids)
    return lambda: values[next(counter)]


def _ids_failing_after(count):
    counter = itertools.count()

    def factory():
        n = next(counter)
        if n >= count:
            raise RuntimeError("id source exhausted")
        return f"id{n}"

    return factory


class TestCreate:
    def test_create_returns_tree_with_generated_ids(self, store, algebra):
        tree = HierarchySynchronizer(store).create(algebra)

        assert tree.id
        question = tree.questions[0]
        assert question.quiz_id == tree.id
        assert all(a.question_id == question.id for a in question.answers)
        assert len({question.id, *(a.id for a in question.answers)}) == 3

    def test_create_uses_caller_supplied_quiz_id(self, store, algebra):
        algebra.id = "fixed-id"
        tree = HierarchySynchronizer(store).create(algebra)
        assert tree.id == "fixed-id"
        assert store.get_quiz("fixed-id") is not None

    def test_create_writes_rows_with_integer_booleans(self, store, algebra):
        tree = HierarchySynchronizer(store).create(algebra)
        answers = store.get_answers(tree.questions[0].id)
        assert [a.correct for a in answers] == [0, 1]
        assert store.get_quiz(tree.id).published == 0

    def test_zero_question_quiz_is_valid(self, store, teacher):
        submission = QuizSubmission(title="Empty", teacher_id=teacher.id)
        tree = HierarchySynchronizer(store).create(submission)
        assert tree.questions == []
        assert store.get_questions(tree.id) == []

    def test_zero_answer_question_is_accepted(self, store, teacher):
        submission = QuizSubmission(
            title="Open", teacher_id=teacher.id, questions=[QuestionIn(text="Why?")]
        )
        tree = HierarchySynchronizer(store).create(submission)
        assert tree.questions[0].answers == []

    def test_multiple_correct_answers_are_not_rejected(self, store, teacher):
        submission = QuizSubmission(
            title="Lenient",
            teacher_id=teacher.id,
            questions=[
                QuestionIn(
                    text="Pick",
                    answers=[AnswerIn(text="a", correct=True), AnswerIn(text="b", correct=True)],
                )
            ],
        )
        tree = HierarchySynchronizer(store).create(submission)
        assert [a.correct for a in tree.questions[0].answers] == [True, True]

    def test_failure_partway_leaves_no_partial_tree(self, store, algebra):
        # the second answer reuses the first answer's id
        writer = HierarchySynchronizer(store, id_factory=_sequence_ids("qn1", "a1", "a1"))
        algebra.id = "q1"

        with pytest.raises(StoreError):
            writer.create(algebra)

        assert store.get_quiz("q1") is None
        assert store.get_questions("q1") == []
        assert store.get_answers("qn1") == []

    def test_failed_create_stays_invisible_while_another_scope_is_open(self, store, algebra):
        # question and both answers are written before the next id fails
        algebra.id = "q-partial"
        algebra.questions.append(QuestionIn(text="second", answers=[AnswerIn(text="x")]))
        writer = HierarchySynchronizer(store, id_factory=_ids_failing_after(3))
        entered = threading.Event()
        release = threading.Event()
        errors = []

        def hold_scope():
            with store.transaction():
                store.get_quiz("q-partial")
                entered.set()
                release.wait(timeout=5)

        def create():
            try:
                writer.create(algebra)
            except RuntimeError as exc:
                errors.append(exc)

        holder = threading.Thread(target=hold_scope)
        holder.start()
        assert entered.wait(timeout=5)
        creator = threading.Thread(target=create)
        creator.start()
        creator.join(timeout=0.2)
        release.set()
        creator.join(timeout=5)
        holder.join(timeout=5)

        assert len(errors) == 1
        assert store.get_quiz("q-partial") is None
        assert store.get_questions("q-partial") == []
        assert store.get_answers("id0") == []

    def test_dangling_teacher_is_reported(self, store):
        submission = QuizSubmission(title="Orphan", teacher_id="ghost")
        with pytest.raises(StoreError):
            HierarchySynchronizer(store).create(submission)


class TestReplace:
    def test_replace_swaps_the_whole_child_set(self, store, algebra):
        writer = HierarchySynchronizer(store)
        original = writer.create(algebra)
        old_ids = {original.questions[0].id, *(a.id for a in original.questions[0].answers)}

        replacement = QuizSubmission(
            id=original.id,
            title="Algebra II",
            teacher_id=algebra.teacher_id,
            published=True,
            questions=[
                QuestionIn(text="3*3?", answers=[AnswerIn(text="9", correct=True), AnswerIn(text="6")]),
                QuestionIn(text="1-1?", answers=[AnswerIn(text="0", correct=True)]),
            ],
        )
        updated = writer.replace(replacement)

        assert _structure(updated) == (
            "Algebra II",
            True,
            [("3*3?", [("9", True), ("6", False)]), ("1-1?", [("0", True)])],
        )
        new_ids = {q.id for q in updated.questions} | {
            a.id for q in updated.questions for a in q.answers
        }
        assert not old_ids & new_ids
        for old_id in old_ids:
            assert store.get_answers(old_id) == []

    def test_replace_keeps_teacher_and_created_at(self, store, algebra):
        writer = HierarchySynchronizer(store)
        original = writer.create(algebra)

        updated = writer.replace(
            QuizSubmission(id=original.id, title="Renamed", teacher_id="someone-else")
        )

        assert updated.teacher_id == original.teacher_id
        assert updated.created_at == original.created_at
        assert store.get_quiz(original.id).teacher_id == original.teacher_id

    def test_replace_unknown_quiz_returns_none(self, store, teacher):
        result = HierarchySynchronizer(store).replace(
            QuizSubmission(id="missing", title="x", teacher_id=teacher.id, questions=[QuestionIn(text="?")])
        )
        assert result is None
        assert store.get_questions("missing") == []

    def test_replace_requires_an_id(self, store, algebra):
        with pytest.raises(ValueError):
            HierarchySynchronizer(store).replace(algebra)

    def test_failed_replace_keeps_previous_tree(self, store, algebra):
        original = HierarchySynchronizer(store).create(algebra)
        original_answer_ids = [a.id for a in original.questions[0].answers]

        # both new questions get the same id, so the second insert fails after the deletes
        writer = HierarchySynchronizer(store, id_factory=_sequence_ids("dup", "dup"))
        with pytest.raises(StoreError):
            writer.replace(
                QuizSubmission(
                    id=original.id,
                    title="Broken",
                    teacher_id=algebra.teacher_id,
                    questions=[QuestionIn(text="one"), QuestionIn(text="two")],
                )
            )

        row = store.get_quiz(original.id)
        assert row.title == "Algebra"
        questions = store.get_questions(original.id)
        assert [q.id for q in questions] == [original.questions[0].id]
        assert [a.id for a in store.get_answers(questions[0].id)] == original_answer_ids


class TestDelete:
    def test_delete_removes_tree(self, store, algebra):
        writer = HierarchySynchronizer(store)
        tree = writer.create(algebra)
        question_id = tree.questions[0].id

        assert writer.delete(tree.id) is True
        assert store.get_quiz(tree.id) is None
        assert store.get_questions(tree.id) == []
        assert store.get_answers(question_id) == []

    def test_delete_unknown_quiz_returns_false(self, store):
        assert HierarchySynchronizer(store).delete("missing") is False

    def test_delete_leaves_other_quizzes_alone(self, store, algebra, teacher):
        writer = HierarchySynchronizer(store)
        doomed = writer.create(algebra)
        kept = writer.create(
            QuizSubmission(
                title="Keep",
                teacher_id=teacher.id,
                questions=[QuestionIn(text="stay", answers=[AnswerIn(text="yes", correct=True)])],
            )
        )

        writer.delete(doomed.id)

        assert store.get_quiz(kept.id) is not None
        assert len(store.get_answers(kept.questions[0].id)) == 1
