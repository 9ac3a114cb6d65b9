"""
Job repository: tenant-scoped job postings.

Every mutation checks ``job.company_id`` against the authenticated identity.
A job owned by another company is reported as not found.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from careers.exceptions import ValidationError, NotFoundError, ConflictError, AuthenticationError
from careers.models import Job, JOB_ENUMS
from careers.services.cache_service import invalidate_public_pages
from careers.utils.limits import column_length, overlong_fields
from careers.utils.slugs import job_slug, with_suffix, looks_like_object_id

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = [
    'title', 'work_policy', 'department', 'employment_type', 'experience_level',
    'job_type', 'location', 'salary_range', 'description',
]
OPTIONAL_FIELDS = ['is_open']
IGNORED_FIELDS = frozenset({'company_id', 'id', '_id', 'job_slug'})
SLUG_INSERT_ATTEMPTS = 3


def _owner_id(identity) -> str:
    company_id = (identity or {}).get('id')
    if not company_id:
        raise AuthenticationError('Authentication required')
    return company_id


def list_public(db_session, company_id: str) -> List[Job]:
    """Open jobs, newest first."""
    return (
        db_session.query(Job)
        .filter(Job.company_id == company_id, Job.is_open.is_(True))
        .order_by(Job.date_posted.desc())
        .all()
    )


def list_all(db_session, company_id: str) -> List[Job]:
    """All jobs including closed ones, newest first."""
    return (
        db_session.query(Job)
        .filter(Job.company_id == company_id)
        .order_by(Job.date_posted.desc())
        .all()
    )


def get_public(db_session, company_id: str, slug_or_id: str) -> Optional[Job]:
    """Resolve an open job by slug, falling back to its id for 24-hex values."""
    if not slug_or_id:
        return None
    job = (
        db_session.query(Job)
        .filter(Job.company_id == company_id,
                Job.job_slug == slug_or_id.lower(),
                Job.is_open.is_(True))
        .first()
    )
    if job is None and looks_like_object_id(slug_or_id):
        job = (
            db_session.query(Job)
            .filter(Job.company_id == company_id,
                    Job.id == slug_or_id.lower(),
                    Job.is_open.is_(True))
            .first()
        )
    return job


def get_job(db_session, job_id: str, identity: Optional[dict] = None) -> Job:
    """A job by id: visible when open, or to its owner when closed."""
    job = db_session.get(Job, job_id) if job_id else None
    if job is None:
        raise NotFoundError('Job not found')
    if not job.is_open and (identity or {}).get('id') != job.company_id:
        raise NotFoundError('Job not found')
    return job


def get_owned(db_session, identity: dict, job_id: str) -> Job:
    """A job owned by the identity; anything else is not found."""
    owner = _owner_id(identity)
    job = db_session.get(Job, job_id) if job_id else None
    if job is None or job.company_id != owner:
        raise NotFoundError('Job not found or you do not have permission to modify it')
    return job


def _coerce_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def _validate(data: dict, partial: bool) -> dict:
    """Check fields and enumerations; returns the cleaned values."""
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    data = {k: v for k, v in data.items() if k not in IGNORED_FIELDS}
    allowed = set(REQUIRED_FIELDS) | set(OPTIONAL_FIELDS)
    unknown = sorted(k for k in data if k not in allowed)
    if unknown:
        raise ValidationError(f'Unknown fields: {", ".join(unknown)}', payload={'unknown_fields': unknown})

    if partial:
        missing = [f for f in REQUIRED_FIELDS if f in data and not str(data[f] or '').strip()]
    else:
        missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or '').strip()]
    if missing:
        raise ValidationError('Missing required fields', payload={'missing_fields': missing})

    errors = []
    for field, values in JOB_ENUMS.items():
        if field in data and data[field] not in values:
            errors.append(f'{field} must be one of: {", ".join(values)}')
    if errors:
        raise ValidationError('Invalid field values', payload={'details': errors})

    cleaned = {}
    for field in REQUIRED_FIELDS:
        if field in data:
            cleaned[field] = str(data[field]).strip()
    too_long = overlong_fields(Job, cleaned)
    if too_long:
        details = [f'{name} must be at most {column_length(Job, name)} characters' for name in too_long]
        raise ValidationError(f'Fields too long: {", ".join(too_long)}',
                              payload={'too_long_fields': too_long, 'details': details})
    if 'is_open' in data:
        cleaned['is_open'] = _coerce_bool(data['is_open'])
    return cleaned


def _slug_taken(db_session, company_id: str, slug: str, exclude_id: Optional[str] = None) -> bool:
    query = db_session.query(Job.id).filter(Job.company_id == company_id, Job.job_slug == slug)
    if exclude_id:
        query = query.filter(Job.id != exclude_id)
    return query.first() is not None


def _unique_slug(db_session, company_id: str, title: str, exclude_id: Optional[str] = None) -> str:
    slug = job_slug(title)
    if _slug_taken(db_session, company_id, slug, exclude_id):
        slug = with_suffix(slug)
    return slug


def _save_with_slug_retry(db_session, job: Job, changes: dict, needs_slug: bool) -> None:
    """
    Apply ``changes`` and commit, relying on the (company_id, job_slug)
    unique constraint.

    A rollback discards pending edits, so every attempt re-applies them.
    A slug lost to a concurrent insert is retried with a fresh suffix.
    """
    for attempt in range(1, SLUG_INSERT_ATTEMPTS + 1):
        for key, value in changes.items():
            setattr(job, key, value)
        if needs_slug:
            if attempt == 1:
                job.job_slug = _unique_slug(db_session, job.company_id, job.title, exclude_id=job.id)
            else:
                job.job_slug = with_suffix(job_slug(job.title))
        try:
            db_session.add(job)
            db_session.commit()
            return
        except IntegrityError:
            db_session.rollback()
            if not needs_slug:
                raise
            logger.warning(f"Slug collision on '{job.job_slug}' (attempt {attempt})")
    raise ConflictError('Could not allocate a unique job slug, please retry', field='job_slug')


def create(db_session, identity: dict, data: dict) -> Job:
    """Create a job for the authenticated company."""
    owner = _owner_id(identity)
    cleaned = _validate(data, partial=False)

    changes = dict(cleaned, company_id=owner, date_posted=datetime.now(timezone.utc))
    changes.setdefault('is_open', True)
    job = Job()
    _save_with_slug_retry(db_session, job, changes, needs_slug=True)

    invalidate_public_pages()
    logger.info(f"Job created: {job.job_slug} ({job.id}) for company {owner}")
    return job


def update(db_session, identity: dict, job_id: str, patch: dict) -> Job:
    """Update an owned job; a new title regenerates the slug."""
    job = get_owned(db_session, identity, job_id)
    cleaned = _validate(patch, partial=True)

    title_changed = 'title' in cleaned and cleaned['title'] != job.title
    _save_with_slug_retry(db_session, job, cleaned, needs_slug=title_changed)

    invalidate_public_pages()
    logger.info(f"Job updated: {job.job_slug} ({job.id})")
    return job


def set_open(db_session, identity: dict, job_id: str, is_open: bool) -> Job:
    """Open or close an owned job."""
    return update(db_session, identity, job_id, {'is_open': is_open})


def delete(db_session, identity: dict, job_id: str) -> dict:
    """Hard-delete an owned job; returns its id and title."""
    job = get_owned(db_session, identity, job_id)
    deleted = {'id': job.id, 'title': job.title}
    db_session.delete(job)
    try:
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    invalidate_public_pages()
    logger.info(f"Job deleted: {deleted['id']} ({deleted['title']})")
    return deleted
