"""
Sitemap and structured data for search engines.
"""
import logging
from datetime import datetime, date
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from flask import current_app, render_template

from careers.models import Company, Job
from careers.services.cache_service import get_cache, GLOBAL_SCOPE

logger = logging.getLogger(__name__)

# Job employment type -> schema.org employmentType
EMPLOYMENT_TYPE_MAP = {
    'Full Time': 'FULL_TIME',
    'Part Time': 'PART_TIME',
    'Contract': 'CONTRACTOR',
}
JOB_TYPE_MAP = {
    'Internship': 'INTERN',
    'Temporary': 'TEMPORARY',
}
VALID_THROUGH_MONTHS = 3


def _lastmod(value) -> Optional[str]:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return None


def build_sitemap_entries(db_session, base_url: str) -> List[dict]:
    """
    Sitemap entries: site root, every company careers page and every open job.

    Returns:
        List of dicts with loc, lastmod, changefreq and priority
    """
    base_url = base_url.rstrip('/')
    entries = [{
        'loc': f'{base_url}/',
        'lastmod': date.today().isoformat(),
        'changefreq': 'monthly',
        'priority': '1.0',
    }]

    for company in db_session.query(Company).order_by(Company.slug).all():
        entries.append({
            'loc': f'{base_url}/{company.slug}/careers',
            'lastmod': _lastmod(company.updated_at),
            'changefreq': 'weekly',
            'priority': '0.8',
        })

    open_jobs = (
        db_session.query(Job, Company.slug)
        .join(Company, Job.company_id == Company.id)
        .filter(Job.is_open.is_(True))
        .order_by(Company.slug, Job.date_posted.desc())
        .all()
    )
    for job, slug in open_jobs:
        entries.append({
            'loc': f'{base_url}/{slug}/careers/{job.job_slug}',
            'lastmod': _lastmod(job.updated_at),
            'changefreq': 'daily',
            'priority': '0.9',
        })
    return entries


def render_sitemap(db_session, base_url: str) -> str:
    """Sitemap XML, served from cache when Redis is available."""
    def load():
        entries = build_sitemap_entries(db_session, base_url)
        return render_template('seo/sitemap.xml', entries=entries)

    ttl = current_app.config.get('CACHE_SITEMAP_TTL', 3600)
    return get_cache().memoize(GLOBAL_SCOPE, 'sitemap', 'xml', load, ttl=ttl)


def render_robots(base_url: str) -> str:
    base_url = base_url.rstrip('/')
    return (
        "User-agent: *\n"
        "Allow: /\n"
        "Disallow: /dashboard/\n"
        "Disallow: /api/\n"
        f"Sitemap: {base_url}/sitemap.xml\n"
    )


def employment_types(job: Job) -> List[str]:
    """schema.org employmentType values for a job."""
    values = []
    mapped = EMPLOYMENT_TYPE_MAP.get(job.employment_type)
    if mapped:
        values.append(mapped)
    extra = JOB_TYPE_MAP.get(job.job_type)
    if extra and extra not in values:
        values.append(extra)
    return values or ['OTHER']


def job_posting_structured_data(job: Job, company: Company, base_url: str) -> dict:
    """schema.org JobPosting for a job detail page."""
    base_url = base_url.rstrip('/')
    posted = job.date_posted or datetime.now()
    types = employment_types(job)

    data = {
        '@context': 'https://schema.org/',
        '@type': 'JobPosting',
        'title': job.title,
        'description': job.description,
        'identifier': {
            '@type': 'PropertyValue',
            'name': company.name,
            'value': job.id,
        },
        'datePosted': posted.date().isoformat(),
        'validThrough': (posted + relativedelta(months=VALID_THROUGH_MONTHS)).date().isoformat(),
        'employmentType': types[0] if len(types) == 1 else types,
        'hiringOrganization': {
            '@type': 'Organization',
            'name': company.name,
            'sameAs': f'{base_url}/{company.slug}/careers',
        },
        'url': f'{base_url}/{company.slug}/careers/{job.job_slug}',
    }
    if company.logo_url:
        data['hiringOrganization']['logo'] = company.logo_url

    if job.is_remote:
        data['jobLocationType'] = 'TELECOMMUTE'
        if job.location:
            data['applicantLocationRequirements'] = {
                '@type': 'Country',
                'name': job.location,
            }
    else:
        data['jobLocation'] = {
            '@type': 'Place',
            'address': {
                '@type': 'PostalAddress',
                'addressLocality': job.location,
            },
        }

    if job.salary_range:
        data['baseSalary'] = {
            '@type': 'MonetaryAmount',
            'value': {
                '@type': 'QuantitativeValue',
                'value': job.salary_range,
            },
        }
    return data
