"""Models package - exports all SQLAlchemy models."""
from careers.models.company import Company, DEFAULT_DEPARTMENTS, DEFAULT_THEME
from careers.models.content_section import ContentSection, SectionType, SECTION_TYPES, ORDER_MIN, ORDER_MAX
from careers.models.job import (
    Job, WorkPolicy, EmploymentType, ExperienceLevel, JobType, JOB_ENUMS
)

__all__ = [
    'Company', 'DEFAULT_DEPARTMENTS', 'DEFAULT_THEME',
    'ContentSection', 'SectionType', 'SECTION_TYPES', 'ORDER_MIN', 'ORDER_MAX',
    'Job', 'WorkPolicy', 'EmploymentType', 'ExperienceLevel', 'JobType', 'JOB_ENUMS',
]
