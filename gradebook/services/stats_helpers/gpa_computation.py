# /gradebook/services/stats_helpers/gpa_computation.py

"""
Recomputes the stored GPA columns of one run from its grades.

- numeric_grade: the grade points of the letter (None for I/W/P/NP).
- section_gpa: mean points of a section's graded letters.
- group_gpa: mean points pooled over every grade in the group's sections.
- cumulative_gpa: credit-hour weighted mean points per student.

All values are rounded to 2 places. Entities with nothing to average get None.
"""

from typing import List, Dict, Iterable

import pandas as pd

from .grade_scale import grade_points


def _to_optional(value) -> object:
    return None if pd.isna(value) else round(float(value), 2)


def compute_run_gpas(
    run_id: int,
    grade_rows: Iterable,
    section_group_links: Iterable,
    entity_ids: Dict[str, List],
) -> Dict[str, List[Dict]]:
    """
    Builds the update mappings for `apply_gpa_updates`.

    `grade_rows` carry grade_id, student_id, section_id, letter_grade and
    credit_hours; `section_group_links` carry section_id and group_id;
    `entity_ids` lists every student, section and group id of the run so that
    entities without grades are reset to None.
    """
    grades_df = pd.DataFrame(
        [
            {
                "grade_id": r.grade_id,
                "student_id": r.student_id,
                "section_id": r.section_id,
                "letter_grade": r.letter_grade,
                "credit_hours": r.credit_hours,
            }
            for r in grade_rows
        ],
        columns=["grade_id", "student_id", "section_id", "letter_grade", "credit_hours"],
    )
    grades_df["points"] = pd.to_numeric(grades_df["letter_grade"].map(grade_points), errors="coerce")
    grades_df["credit_hours"] = pd.to_numeric(grades_df["credit_hours"], errors="coerce").fillna(0.0)

    grade_points_updates = [
        {"grade_id": int(row.grade_id), "numeric_grade": None if pd.isna(row.points) else float(row.points)}
        for row in grades_df.itertuples(index=False)
    ]

    graded = grades_df.dropna(subset=["points"])

    section_means = graded.groupby("section_id")["points"].mean().to_dict()
    section_updates = [
        {"section_id": section_id, "section_gpa": _to_optional(section_means.get(section_id))}
        for section_id in entity_ids.get("sections", [])
    ]

    links_df = pd.DataFrame(
        [{"section_id": l.section_id, "group_id": l.group_id} for l in section_group_links],
        columns=["section_id", "group_id"],
    )
    # Empty frames carry object dtypes, which pandas refuses to merge with int64.
    if graded.empty or links_df.empty:
        group_means = {}
    else:
        group_means = graded.merge(links_df, on="section_id").groupby("group_id")["points"].mean().to_dict()
    group_updates = [
        {"group_id": group_id, "group_gpa": _to_optional(group_means.get(group_id))}
        for group_id in entity_ids.get("groups", [])
    ]

    weighted = graded.assign(quality_points=graded["points"] * graded["credit_hours"])
    per_student = weighted.groupby("student_id")[["quality_points", "credit_hours"]].sum()
    student_gpas = {}
    for student_id, totals in per_student.iterrows():
        if totals["credit_hours"] > 0:
            student_gpas[student_id] = totals["quality_points"] / totals["credit_hours"]
    student_updates = [
        {"student_id": student_id, "run_id": run_id, "cumulative_gpa": _to_optional(student_gpas.get(student_id))}
        for student_id in entity_ids.get("students", [])
    ]

    return {
        "grade_points": grade_points_updates,
        "section_gpas": section_updates,
        "group_gpas": group_updates,
        "student_gpas": student_updates,
    }
