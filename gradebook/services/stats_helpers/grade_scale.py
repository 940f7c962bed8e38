# /gradebook/services/stats_helpers/grade_scale.py

"""Letter grade scale shared by the distributions, the GPA maths and the import."""

from typing import Dict, Optional

# Histogram keys, in display order.
GRADE_LETTERS = (
    "A", "A-",
    "B+", "B", "B-",
    "C+", "C", "C-",
    "D+", "D", "D-",
    "F", "I", "W", "P", "NP",
)

# Letters that carry grade points. I, W, P and NP are excluded from GPAs.
GRADE_POINTS: Dict[str, float] = {
    "A": 4.0, "A-": 3.7,
    "B+": 3.3, "B": 3.0, "B-": 2.7,
    "C+": 2.3, "C": 2.0, "C-": 1.7,
    "D+": 1.3, "D": 1.0, "D-": 0.7,
    "F": 0.0,
}

GOOD_LIST_GRADES = ("A", "A-")
WORK_LIST_GRADES = ("F", "D-", "D", "D+")


def empty_distribution() -> Dict[str, int]:
    return {letter: 0 for letter in GRADE_LETTERS}


def normalize_letter_grade(grade: Optional[str]) -> Optional[str]:
    """Upper-cases and trims a grade; the scale tops out at A, so A+ becomes A."""
    if grade is None:
        return None
    grade = grade.strip().upper()
    if grade == "A+":
        return "A"
    return grade


def grade_points(grade: Optional[str]) -> Optional[float]:
    if grade is None:
        return None
    return GRADE_POINTS.get(grade)
