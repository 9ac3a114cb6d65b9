"""
Tenant repository: company signup, login, public profile and page settings.
"""
import re
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from careers.exceptions import ValidationError, AuthenticationError, NotFoundError, ConflictError
from careers.models import (
    Company, ContentSection, Job, DEFAULT_DEPARTMENTS, DEFAULT_THEME, SECTION_TYPES, ORDER_MIN, ORDER_MAX
)
from careers.services import auth_service
from careers.services.cache_service import invalidate_public_pages
from careers.utils.limits import column_length, overlong_fields
from careers.utils.slugs import company_slug, is_valid_slug, is_reserved_slug

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
# bcrypt only reads the first 72 bytes
MAX_PASSWORD_BYTES = 72
INVALID_CREDENTIALS = 'Invalid email or password'

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
COLOR_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')
FONT_PATTERN = re.compile(r'^[A-Za-z0-9 -]{1,100}$')
# Page URLs must be http(s) or site-relative
URL_PATTERN = re.compile(r'^(?:https?://|/(?!/))', re.IGNORECASE)

# Keys a client may never write, silently dropped from update payloads
PROTECTED_FIELDS = frozenset({'password', 'password_hash', 'email', 'slug', 'id', '_id'})
UPDATABLE_FIELDS = frozenset({'name', 'logo_url', 'theme', 'departments', 'content_sections'})
SECTION_FIELDS = frozenset({'type', 'title', 'content', 'image_url', 'video_url', 'gallery_images', 'order'})
THEME_COLOR_FIELDS = ('primary_color', 'background_color', 'title_color', 'body_color', 'button_text_color')


def is_valid_email(email: str) -> bool:
    """Validate email format."""
    return EMAIL_PATTERN.match(email or '') is not None


def _url_ok(url: str) -> bool:
    return not url or URL_PATTERN.match(url) is not None


def _missing(data: dict, fields: List[str]) -> List[str]:
    return [f for f in fields if not str(data.get(f) or '').strip()]


def _require_text(data: dict) -> None:
    """Reject values that are present but not strings."""
    invalid = [k for k, v in data.items() if v is not None and not isinstance(v, str)]
    if invalid:
        raise ValidationError(f'Fields must be text: {", ".join(invalid)}', payload={'invalid_fields': invalid})


def _require_fits(model, values: dict) -> None:
    too_long = overlong_fields(model, values)
    if too_long:
        details = [f'{name} must be at most {column_length(model, name)} characters' for name in too_long]
        raise ValidationError(f'Fields too long: {", ".join(too_long)}',
                              payload={'too_long_fields': too_long, 'details': details})


def _default_sections(name: str) -> List[ContentSection]:
    return [ContentSection(
        type='hero',
        title=f'Welcome to {name}',
        content='Join our team and make a difference',
        gallery_images=[],
        order=0,
        position=0,
    )]


def signup(db_session, name: str, email: str, password: str, slug: Optional[str] = None) -> Tuple[Company, str]:
    """
    Register a company and issue its first token.

    Raises:
        ValidationError: missing fields, short password, bad email or slug
        ConflictError: email or slug already registered (email checked first)
    """
    data = {'name': name, 'email': email, 'password': password}
    _require_text(dict(data, slug=slug))
    missing = _missing(data, ['name', 'email', 'password'])
    if missing:
        raise ValidationError('Name, email, and password are required', payload={'missing_fields': missing})

    name = name.strip()
    email = email.strip().lower()
    slug = (slug or '').strip().lower()
    _require_fits(Company, {'name': name, 'email': email, 'slug': slug})

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValidationError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes long')
    if not is_valid_email(email):
        raise ValidationError('Please enter a valid email address')

    if slug:
        if not is_valid_slug(slug):
            raise ValidationError('Slug may only contain lowercase letters, numbers and hyphens')
    else:
        slug = company_slug(name)
        if not slug:
            raise ValidationError('Company name must contain letters or numbers')
    if is_reserved_slug(slug):
        raise ValidationError(f'The slug "{slug}" is reserved', payload={'field': 'slug'})

    if db_session.query(Company).filter(func.lower(Company.email) == email).first():
        raise ConflictError('Email already registered', field='email')
    if db_session.query(Company).filter(Company.slug == slug).first():
        raise ConflictError('Company slug already taken', field='slug')

    company = Company(
        name=name,
        email=email,
        slug=slug,
        password_hash=auth_service.hash_password(password),
        departments=list(DEFAULT_DEPARTMENTS),
        content_sections=_default_sections(name),
    )
    db_session.add(company)
    try:
        db_session.commit()
    except IntegrityError as e:
        db_session.rollback()
        # Lost a race against a concurrent signup
        if db_session.query(Company).filter(func.lower(Company.email) == email).first():
            raise ConflictError('Email already registered', field='email') from e
        raise ConflictError('Company slug already taken', field='slug') from e

    invalidate_public_pages()
    logger.info(f"Company signed up: {company.slug} ({company.id})")
    token = auth_service.issue_token({'id': company.id, 'email': company.email})
    return company, token


def login(db_session, email: str, password: str) -> Tuple[Company, str]:
    """Authenticate by email and password; failures are indistinguishable."""
    _require_text({'email': email, 'password': password})
    missing = _missing({'email': email, 'password': password}, ['email', 'password'])
    if missing:
        raise ValidationError('Email and password are required', payload={'missing_fields': missing})

    email = email.strip().lower()
    company = db_session.query(Company).filter(func.lower(Company.email) == email).first()
    if not company or not auth_service.verify_password(password, company.password_hash):
        logger.info(f"Failed login for {email}")
        raise AuthenticationError(INVALID_CREDENTIALS)

    token = auth_service.issue_token({'id': company.id, 'email': company.email})
    return company, token


def get_by_slug(db_session, slug: str) -> Company:
    company = db_session.query(Company).filter(Company.slug == (slug or '').lower()).first()
    if not company:
        raise NotFoundError('Company not found')
    return company


def get_by_id(db_session, company_id: str) -> Company:
    company = db_session.get(Company, company_id) if company_id else None
    if not company:
        raise NotFoundError('Company not found')
    return company


def get_public(db_session, slug: str) -> dict:
    """Public profile by slug (case-insensitive)."""
    return get_by_slug(db_session, slug).to_public_dict()


def _clean_theme(theme) -> dict:
    if not isinstance(theme, dict):
        raise ValidationError('Theme must be an object', payload={'details': ['theme must be an object']})
    unknown = sorted(k for k in theme if k not in DEFAULT_THEME)
    if unknown:
        raise ValidationError('Unknown theme fields', payload={'unknown_fields': unknown})

    errors = []
    for key in THEME_COLOR_FIELDS:
        if key in theme and not COLOR_PATTERN.match(str(theme[key] or '')):
            errors.append(f'{key} must be a hex colour like #1a2b3c')
    if 'font' in theme and not FONT_PATTERN.match(str(theme['font'] or '').strip()):
        errors.append('font must be a font family name (letters, digits, spaces, hyphens)')
    if errors:
        raise ValidationError('Invalid theme', payload={'details': errors})
    return {k: str(v).strip() for k, v in theme.items()}


def valid_theme_values(theme: dict) -> dict:
    """The subset of ``theme`` that would pass validation; used for unsaved previews."""
    valid = {}
    for key, value in (theme or {}).items():
        value = str(value or '').strip()
        if key in THEME_COLOR_FIELDS and COLOR_PATTERN.match(value):
            valid[key] = value
        elif key == 'font' and FONT_PATTERN.match(value):
            valid[key] = value
    return valid


def _clean_departments(departments) -> List[str]:
    if not isinstance(departments, list) or not all(isinstance(d, str) for d in departments):
        raise ValidationError('Departments must be a list of names',
                              payload={'details': ['departments must be a list of strings']})
    limit = column_length(Job, 'department')
    cleaned = []
    for name in departments:
        name = name.strip()
        if len(name) > limit:
            raise ValidationError('Department name too long',
                                  payload={'details': [f'department names must be at most {limit} characters']})
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


def _clean_sections(sections) -> List[dict]:
    if not isinstance(sections, list):
        raise ValidationError('content_sections must be a list',
                              payload={'details': ['content_sections must be a list']})
    cleaned = []
    errors = []
    for index, raw in enumerate(sections):
        if not isinstance(raw, dict):
            errors.append(f'content_sections[{index}] must be an object')
            continue
        unknown = sorted(k for k in raw if k not in SECTION_FIELDS and k not in ('id', '_id'))
        if unknown:
            errors.append(f'content_sections[{index}] has unknown fields: {", ".join(unknown)}')
        if raw.get('type') not in SECTION_TYPES:
            errors.append(f'content_sections[{index}].type must be one of: {", ".join(SECTION_TYPES)}')

        order = raw.get('order')
        if order is None or order == '':
            order = index
        try:
            order = int(order)
        except (TypeError, ValueError, OverflowError):
            errors.append(f'content_sections[{index}].order must be a number')
            order = index
        if not ORDER_MIN <= order <= ORDER_MAX:
            errors.append(f'content_sections[{index}].order must be between {ORDER_MIN} and {ORDER_MAX}')
            order = index

        gallery = raw.get('gallery_images') or []
        if not isinstance(gallery, list):
            errors.append(f'content_sections[{index}].gallery_images must be a list')
            gallery = []

        image_url = str(raw.get('image_url') or '').strip()
        video_url = str(raw.get('video_url') or '').strip()
        gallery = [str(u).strip() for u in gallery if str(u or '').strip()]
        for url in [image_url, video_url] + gallery:
            if not _url_ok(url):
                errors.append(f'content_sections[{index}] has an invalid URL: {url}')

        title = str(raw.get('title') or '')
        for name in overlong_fields(ContentSection, {'title': title, 'image_url': image_url, 'video_url': video_url}):
            errors.append(f'content_sections[{index}].{name} must be at most '
                          f'{column_length(ContentSection, name)} characters')

        cleaned.append({
            'type': raw.get('type'),
            'title': title,
            'content': str(raw.get('content') or ''),
            'image_url': image_url or None,
            'video_url': video_url or None,
            'gallery_images': gallery,
            'order': order,
            'position': index,
        })
    if errors:
        raise ValidationError('Invalid content sections', payload={'details': errors})
    return cleaned


def validate_patch(patch) -> dict:
    """
    Reduce an update payload to allowed, validated values.

    Protected keys are dropped; any other key outside the allow-list is
    rejected so typos never pass silently.
    """
    if not isinstance(patch, dict):
        raise ValidationError('Request body must be a JSON object')

    patch = {k: v for k, v in patch.items() if k not in PROTECTED_FIELDS}
    unknown = sorted(k for k in patch if k not in UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f'Unknown fields: {", ".join(unknown)}', payload={'unknown_fields': unknown})

    cleaned = {}
    if 'name' in patch:
        name = str(patch['name'] or '').strip()
        if not name:
            raise ValidationError('Name cannot be empty', payload={'details': ['name must not be empty']})
        cleaned['name'] = name
    if 'logo_url' in patch:
        logo_url = str(patch['logo_url'] or '').strip()
        if not _url_ok(logo_url):
            raise ValidationError('Invalid logo URL', payload={'details': ['logo_url must be an http(s) URL']})
        cleaned['logo_url'] = logo_url
    _require_fits(Company, {k: cleaned[k] for k in ('name', 'logo_url') if k in cleaned})
    if 'theme' in patch:
        cleaned['theme'] = _clean_theme(patch['theme'])
    if 'departments' in patch:
        cleaned['departments'] = _clean_departments(patch['departments'])
    if 'content_sections' in patch:
        cleaned['content_sections'] = _clean_sections(patch['content_sections'])
    return cleaned


def update(db_session, identity: dict, patch: dict) -> dict:
    """Apply an allow-listed patch to the authenticated company."""
    cleaned = validate_patch(patch)
    company = get_by_id(db_session, (identity or {}).get('id'))

    if 'name' in cleaned:
        company.name = cleaned['name']
    if 'logo_url' in cleaned:
        company.logo_url = cleaned['logo_url']
    for key, value in cleaned.get('theme', {}).items():
        setattr(company, key, value)
    if 'departments' in cleaned:
        company.departments = cleaned['departments']
    if 'content_sections' in cleaned:
        company.content_sections = [ContentSection(**s) for s in cleaned['content_sections']]
    company.updated_at = datetime.now(timezone.utc)

    try:
        db_session.commit()
    except Exception:
        db_session.rollback()
        raise

    invalidate_public_pages()
    logger.info(f"Company {company.slug} updated fields: {', '.join(sorted(cleaned)) or '-'}")
    return company.to_public_dict()


def reorder_sections(sections: List[dict], from_index: int, to_index: int) -> List[dict]:
    """Move one section and renumber ``order`` sequentially."""
    items = list(sections)
    if not 0 <= from_index < len(items):
        raise ValidationError('Section index out of range')
    to_index = max(0, min(to_index, len(items) - 1))
    items.insert(to_index, items.pop(from_index))
    return [dict(s, order=i) for i, s in enumerate(items)]
