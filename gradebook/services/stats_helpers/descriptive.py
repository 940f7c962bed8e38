# /gradebook/services/stats_helpers/descriptive.py

"""
Descriptive statistics over the nested records produced by
`records_service`: average GPA, grade histograms and z-scores.

These are pure functions over plain dicts so they can be reused by any
endpoint and tested without a database.
"""

import logging
from typing import List, Dict, Optional, Sequence

import pandas as pd

from .grade_scale import empty_distribution

logger = logging.getLogger(__name__)


def calculate_average_gpa(students: Optional[List[Dict]]) -> float:
    """Mean cumulative GPA over students that have one, rounded to 2 places."""
    if not students:
        return 0
    gpas = pd.Series([s.get("cumulative_gpa") for s in students], dtype="float64").dropna()
    if gpas.empty:
        return 0
    return round(float(gpas.mean()), 2)


def _count_letters(letters, distribution: Dict[str, int]) -> Dict[str, int]:
    for letter in letters:
        if not letter:
            continue
        if letter in distribution:
            distribution[letter] += 1
        else:
            logger.warning("Unexpected grade encountered: %s", letter)
    return distribution


def calculate_grade_distribution(students: Optional[List[Dict]]) -> Dict[str, int]:
    """Counts every letter grade of every student."""
    distribution = empty_distribution()
    if not students:
        return distribution
    letters = (grade.get("letter_grade") for s in students for grade in (s.get("grades") or []))
    return _count_letters(letters, distribution)


def calculate_section_distribution(section: Optional[Dict]) -> Dict[str, int]:
    distribution = empty_distribution()
    if not section:
        return distribution
    letters = (student.get("letter_grade") for student in (section.get("students") or []))
    return _count_letters(letters, distribution)


def calculate_group_distribution(group: Optional[Dict], sections: List[Dict]) -> Dict[str, int]:
    """Pools the students of every section that belongs to the group."""
    distribution = empty_distribution()
    if not group or not isinstance(group.get("sections"), list):
        return distribution

    group_section_ids = {s["section_id"] for s in group["sections"]}
    letters = (
        student.get("letter_grade")
        for section in sections
        if section["section_id"] in group_section_ids
        for student in section.get("students") or []
    )
    return _count_letters(letters, distribution)


def calculate_z_scores(values: Sequence[Optional[float]]) -> Dict[str, object]:
    """
    Population z-scores: (value - mean) / std with ddof=0.

    Missing values are skipped for the mean and std and get a `None` score.
    When every value is the same the std is 0 and every score is 0.0.
    Returns {"mean", "std", "scores"} where scores align with `values`.
    """
    series = pd.Series(list(values), dtype="float64")
    present = series.dropna()
    if present.empty:
        return {"mean": None, "std": None, "scores": [None] * len(series)}

    mean = float(present.mean())
    std = float(present.std(ddof=0))
    if std == 0:
        z = series.where(series.isna(), 0.0)
    else:
        z = (series - mean) / std

    scores = [None if pd.isna(v) else round(float(v), 4) for v in z]
    return {"mean": round(mean, 4), "std": round(std, 4), "scores": scores}


def flag_z_score(z_score: Optional[float], threshold: float) -> Optional[str]:
    if z_score is None:
        return None
    if z_score <= -threshold:
        return "under"
    if z_score >= threshold:
        return "over"
    return None
