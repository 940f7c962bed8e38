# /gradebook/db/base.py

# Central registry for all SQLAlchemy models. Importing them here ensures the
# Base metadata knows every table, both for `create_all` at startup and for
# Alembic's autogenerate scan.

from .database import Base

from .models.run_models import Run, Group, Section, SectionGroup
from .models.student_grade_models import Student, Grade
