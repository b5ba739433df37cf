"""Exam types and subjects offered on the selection screens."""

from govtest.core.models import ExamType, Subject

EXAM_TYPES: tuple[ExamType, ...] = (
    ExamType("ssc", "SSC CGL/CHSL", "General intelligence, Reasoning, Quant, English", "🏛️"),
    ExamType("banking", "IBPS/SBI Banking", "Aptitude, Reasoning, Banking Awareness", "🏦"),
    ExamType("railway", "RRB NTPC/Group D", "General Science, Math, General Awareness", "🚂"),
    ExamType("upsc", "UPSC CSE (Prelims)", "Civil Services Aptitude, GS Paper I & II", "📜"),
    ExamType("police", "Police/SI Exams", "Physical, Law, Aptitude, Regional Awareness", "👮"),
    ExamType("teacher", "TET/CTET Teaching", "Child Pedagogy, Language, Subject Proficiency", "🎓"),
)

SUBJECTS: tuple[Subject, ...] = (
    Subject("gk", "General Knowledge", "🌏"),
    Subject("reasoning", "Logical Reasoning", "🧠"),
    Subject("math", "Mathematics / Quant", "🔢"),
    Subject("english", "English Language", "📖"),
    Subject("ca", "Current Affairs", "📰"),
)

# Mixed-topic test; the subject name is passed to the generator as-is.
FULL_LENGTH_SUBJECT: Subject = Subject("full", "Full Length Test", "📝")
