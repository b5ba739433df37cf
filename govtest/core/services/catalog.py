"""Read-only lookup over the exam and subject catalog."""

from __future__ import annotations

from govtest.constants.catalog import EXAM_TYPES, FULL_LENGTH_SUBJECT, SUBJECTS
from govtest.core.errors import InvalidInput
from govtest.core.models import ExamType, Subject


class ExamCatalog:
    """Resolves exam and subject ids chosen on the selection screens."""

    def __init__(
        self,
        exam_types: tuple[ExamType, ...] = EXAM_TYPES,
        subjects: tuple[Subject, ...] = SUBJECTS,
        full_length_subject: Subject | None = FULL_LENGTH_SUBJECT,
    ) -> None:
        self._exam_types = {exam.id: exam for exam in exam_types}
        self._subjects = {subject.id: subject for subject in subjects}
        self._full_length_subject = full_length_subject

    def get_exam_types(self) -> list[ExamType]:
        return list(self._exam_types.values())

    def get_subjects(self) -> list[Subject]:
        """Return the selectable subjects, the full length test last."""
        subjects = list(self._subjects.values())
        if self._full_length_subject is not None:
            subjects.append(self._full_length_subject)
        return subjects

    def get_exam(self, exam_id: str) -> ExamType:
        exam = self._exam_types.get(exam_id)
        if exam is None:
            raise InvalidInput(f"Unknown exam '{exam_id}'")
        return exam

    def get_subject(self, subject_id: str) -> Subject:
        if self._full_length_subject is not None and subject_id == self._full_length_subject.id:
            return self._full_length_subject
        subject = self._subjects.get(subject_id)
        if subject is None:
            raise InvalidInput(f"Unknown subject '{subject_id}'")
        return subject
