# /gradebook/services/run_helpers/run_file_parser.py

"""
Parser and validator for the .RUN import format.

A run is described by three kinds of plain-text files living in one
directory:

    NAME.RUN   line 1: run name; following lines: .GRP file names
    NAME.GRP   line 1: group name; following lines: .SEC file names
    NAME.SEC   line 1: "<section name> ... <credits>";
               following lines: "Last, First","ID","GRADE"

GRP and SEC file names are resolved against the directory of the .RUN file.
Blank lines are ignored. Any missing or malformed file aborts the parse with
a `RunFileError` naming the offending file. A student ID appears at most once
per SEC file, and a section name belongs to a single SEC file within a run.
"""

import logging
from pathlib import Path
from typing import List, Union

from ...core.errors import RunFileError
from ...models.run_model import ParsedRun, ParsedGroup, ParsedSection, ParsedStudent, RunValidationResult

logger = logging.getLogger(__name__)

STUDENT_FIELD_SEPARATOR = '","'
VALID_MESSAGE = "All files exist and are valid."


def _read_lines(path: Path, kind: str) -> List[str]:
    """Reads a child file and returns its non-blank lines; empty files are an error."""
    if not path.exists():
        raise RunFileError(f"Missing .{kind} File: {path}")
    try:
        contents = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise RunFileError(f"Error reading {kind} file {path}: {e}")

    lines = [line.strip() for line in contents.splitlines() if line.strip()]
    if not lines:
        raise RunFileError(f"{kind} file {path} is empty")
    return lines


def _clean_field(field: str) -> str:
    return field.strip().strip('",').strip()


def parse_student_line(line: str, sec_path: Path, line_number: int) -> ParsedStudent:
    """Parses `"Last, First","ID","GRADE"`; `line_number` is 1-based within the SEC file."""
    fields = line.split(STUDENT_FIELD_SEPARATOR)
    if len(fields) != 3:
        raise RunFileError(f"Invalid student data in SEC file {sec_path} line {line_number}: {line}")
    name, student_id, grade = (_clean_field(f) for f in fields)
    return ParsedStudent(name=name, id=student_id, grade=grade)


def parse_section_header(line: str, sec_path: Path):
    """First token is the section name, last token the number of credits."""
    parts = line.split()
    if not parts:
        raise RunFileError(f"Invalid SEC file format {sec_path}: Missing section name")
    if len(parts) < 2:
        raise RunFileError(f"Invalid SEC file format {sec_path}: Missing credits")
    try:
        credits = float(parts[-1])
    except ValueError as e:
        raise RunFileError(f"Invalid number of credits in SEC file {sec_path}: {e}")
    return parts[0], credits


def parse_section_file(sec_path: Path) -> ParsedSection:
    logger.debug("Processing SEC file: %s", sec_path)
    lines = _read_lines(sec_path, "SEC")
    section_name, credits = parse_section_header(lines[0], sec_path)
    logger.info("Processing Section: %s (Credits: %s)", section_name, credits)

    students = []
    seen_ids = set()
    for line_number, line in enumerate(lines[1:], start=2):
        student = parse_student_line(line, sec_path, line_number)
        # One grade per student per section.
        if student.id in seen_ids:
            raise RunFileError(f"Duplicate student ID {student.id} in SEC file {sec_path} line {line_number}")
        seen_ids.add(student.id)
        students.append(student)

    logger.info("Added %d students to section '%s'", len(students), section_name)
    return ParsedSection(
        name=section_name,
        num_credits=credits,
        source_file=str(sec_path.resolve()),
        students=students,
    )


def check_unique_section_names(parsed: ParsedRun) -> None:
    """
    A section name identifies one SEC file within a run. The same file may be
    listed by several groups; two different files with the same section name
    are rejected.
    """
    sources = {}
    for group in parsed.groups:
        for section in group.sections:
            first = sources.setdefault(section.name, section.source_file)
            if first != section.source_file:
                raise RunFileError(
                    f"Section '{section.name}' is defined by two SEC files: {first} and {section.source_file}"
                )


def parse_group_file(grp_path: Path, run_dir: Path) -> ParsedGroup:
    logger.debug("Processing GRP file: %s", grp_path)
    lines = _read_lines(grp_path, "GRP")
    group_name = lines[0]
    logger.info("Processing Group: %s", group_name)

    sections = [parse_section_file(run_dir / sec_file) for sec_file in lines[1:]]
    logger.info("Added %d sections to group '%s'", len(sections), group_name)
    return ParsedGroup(name=group_name, sections=sections)


def parse_run_file(run_file_path: Union[str, Path]) -> ParsedRun:
    """Parses a .RUN file and every GRP / SEC file it references."""
    run_path = Path(run_file_path)
    logger.info("Validating run file: %s", run_path)

    try:
        contents = run_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise RunFileError(f"Error reading RUN file: {e}")

    lines = [line.strip() for line in contents.splitlines() if line.strip()]
    if not lines:
        raise RunFileError("RUN file is empty")

    run_name = lines[0]
    run_dir = run_path.parent
    logger.info("Run Name: %s", run_name)

    groups = [parse_group_file(run_dir / grp_file, run_dir) for grp_file in lines[1:]]
    logger.info("Found %d groups in run file", len(groups))
    parsed = ParsedRun(name=run_name, groups=groups)
    check_unique_section_names(parsed)
    return parsed


def validate_run_file(run_file_path: Union[str, Path]) -> RunValidationResult:
    """
    Non-raising wrapper around `parse_run_file` used by the validate endpoint:
    returns `valid=False` and the error message instead of raising.
    """
    try:
        parsed = parse_run_file(run_file_path)
    except RunFileError as e:
        logger.error("Run file validation failed: %s", e)
        return RunValidationResult(valid=False, message=str(e), contents=None)

    logger.info("Validation successful for run file: %s", run_file_path)
    return RunValidationResult(valid=True, message=VALID_MESSAGE, contents=parsed)
