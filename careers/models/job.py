"""Job model - a posting owned by one company."""
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from careers.database import Base
from careers.models.company import new_id


class WorkPolicy(enum.Enum):
    REMOTE = 'Remote'
    ON_SITE = 'On-site'
    HYBRID = 'Hybrid'


class EmploymentType(enum.Enum):
    FULL_TIME = 'Full Time'
    PART_TIME = 'Part Time'
    CONTRACT = 'Contract'


class ExperienceLevel(enum.Enum):
    SENIOR = 'Senior'
    MID_LEVEL = 'Mid-Level'
    JUNIOR = 'Junior'


class JobType(enum.Enum):
    PERMANENT = 'Permanent'
    TEMPORARY = 'Temporary'
    INTERNSHIP = 'Internship'


# Field name -> allowed values, used by validation and the forms
JOB_ENUMS = {
    'work_policy': [e.value for e in WorkPolicy],
    'employment_type': [e.value for e in EmploymentType],
    'experience_level': [e.value for e in ExperienceLevel],
    'job_type': [e.value for e in JobType],
}


def _utcnow():
    return datetime.now(timezone.utc)


class Job(Base):
    """Job model - tenant-scoped posting with a per-company unique slug."""

    __tablename__ = 'job'
    __table_args__ = (
        UniqueConstraint('company_id', 'job_slug', name='uq_job_company_slug'),
        Index('ix_job_company_open', 'company_id', 'is_open'),
    )

    id = Column(String(24), primary_key=True, default=new_id)
    company_id = Column(String(24), ForeignKey('company.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    job_slug = Column(String(100), nullable=False)
    work_policy = Column(String(20), nullable=False, index=True)  # Remote, On-site, Hybrid
    department = Column(String(100), nullable=False, index=True)
    employment_type = Column(String(20), nullable=False, index=True)  # Full Time, Part Time, Contract
    experience_level = Column(String(20), nullable=False)  # Senior, Mid-Level, Junior
    job_type = Column(String(20), nullable=False)  # Permanent, Temporary, Internship
    location = Column(String(200), nullable=False)
    salary_range = Column(String(100), nullable=False, default='')
    description = Column(Text, nullable=False, default='')
    is_open = Column(Boolean, nullable=False, default=True)
    date_posted = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    company = relationship('Company', back_populates='jobs')

    def __repr__(self):
        return f"<Job(id={self.id}, company_id={self.company_id}, slug='{self.job_slug}')>"

    @property
    def is_remote(self):
        return self.work_policy == WorkPolicy.REMOTE.value

    def to_dict(self):
        return {
            'id': self.id,
            'company_id': self.company_id,
            'title': self.title,
            'job_slug': self.job_slug,
            'work_policy': self.work_policy,
            'department': self.department,
            'employment_type': self.employment_type,
            'experience_level': self.experience_level,
            'job_type': self.job_type,
            'location': self.location,
            'salary_range': self.salary_range or '',
            'description': self.description or '',
            'is_open': bool(self.is_open),
            'date_posted': self.date_posted.isoformat() if self.date_posted else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
