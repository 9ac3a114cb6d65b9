"""
Slug helpers for company and job URLs.

Both kinds of slug are derived the same way from a display name:
lowercase, keep only ``[a-z0-9]``, whitespace and hyphens, turn whitespace
into hyphens, collapse repeated hyphens and truncate.
"""
import re
import random
import string
from typing import Optional

COMPANY_SLUG_MAX_LENGTH = 50
JOB_SLUG_MAX_LENGTH = 100
SUFFIX_LENGTH = 5

SLUG_PATTERN = re.compile(r'^[a-z0-9-]+$')
OBJECT_ID_PATTERN = re.compile(r'^[0-9a-fA-F]{24}$')

# Slugs that would shadow application routes
RESERVED_SLUGS = frozenset({
    'api', 'dashboard', 'login', 'signup', 'logout', 'static',
    'health', 'metrics', 'sitemap.xml', 'robots.txt',
})


def slugify(text: Optional[str], max_length: int) -> str:
    """
    Derive a URL slug from free text.

    Examples:
        slugify("Senior Frontend Engineer", 100) -> "senior-frontend-engineer"
        slugify("Product Manager (Remote) - $100k+", 100) -> "product-manager-remote-100k"
    """
    if not text:
        return ''
    slug = text.lower()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    slug = slug.strip('-')
    return slug[:max_length]


def company_slug(name: Optional[str]) -> str:
    return slugify(name, COMPANY_SLUG_MAX_LENGTH)


def job_slug(title: Optional[str]) -> str:
    """Job slug from a title; a title with no usable characters gives 'job'."""
    return slugify(title, JOB_SLUG_MAX_LENGTH) or 'job'


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    """Random lowercase alphanumeric suffix."""
    alphabet = string.ascii_lowercase + string.digits
    return ''.join(random.choice(alphabet) for _ in range(length))


def with_suffix(slug: str, max_length: int = JOB_SLUG_MAX_LENGTH) -> str:
    """Append ``-xxxxx`` keeping the result within max_length."""
    suffix = random_suffix()
    base = slug[:max_length - SUFFIX_LENGTH - 1].rstrip('-')
    return f"{base}-{suffix}"


def is_valid_slug(slug: Optional[str]) -> bool:
    return bool(slug) and bool(SLUG_PATTERN.match(slug))


def is_reserved_slug(slug: Optional[str]) -> bool:
    return (slug or '').lower() in RESERVED_SLUGS


def looks_like_object_id(value: Optional[str]) -> bool:
    """True for 24-char hex identifiers."""
    return bool(value) and bool(OBJECT_ID_PATTERN.match(value))
