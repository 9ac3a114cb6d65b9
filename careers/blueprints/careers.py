"""Public careers pages: branded company page, filterable job list and job detail."""
import json
from typing import List

from flask import Blueprint, render_template, request, current_app, abort
from markupsafe import Markup

from careers.database import get_session
from careers.services import company_service, job_service, job_filter_service, sitemap_service
from careers.blueprints.metrics import careers_page_views_total

careers_bp = Blueprint('careers', __name__)


def section_images(section: dict) -> List[str]:
    """Gallery images plus the single image URL, without duplicates."""
    urls = [u for u in section.get('gallery_images') or [] if u]
    if section.get('image_url') and section['image_url'] not in urls:
        urls.append(section['image_url'])
    return urls


def page_profile(profile: dict) -> dict:
    """Profile dict ready for the page templates (sections sorted, images resolved)."""
    sections = sorted(
        enumerate(profile.get('content_sections') or []),
        key=lambda pair: (pair[1].get('order') or 0, pair[0])
    )
    profile = dict(profile)
    profile['content_sections'] = [dict(s, images=section_images(s)) for _, s in sections]
    return profile


def _json_ld(data: dict) -> Markup:
    """JSON for a <script> block; '</' is escaped so the tag cannot be closed early."""
    return Markup(json.dumps(data, indent=2).replace('</', '<\\/'))


@careers_bp.route('/<company_slug>/careers')
def company_page(company_slug):
    """
    Company careers page.

    Query params (all default to All): search, department, location,
    employment_type, job_type, work_policy, experience_level.
    HTMX requests get only the job list fragment.
    """
    db_session = get_session()
    company = company_service.get_by_slug(db_session, company_slug)
    jobs = job_service.list_public(db_session, company.id)

    filters = job_filter_service.parse_filters(request.args)
    filtered = job_filter_service.filter_jobs(jobs, filters)
    options = job_filter_service.filter_options(jobs)

    context = {
        'company': page_profile(company.to_public_dict()),
        'jobs': filtered,
        'total_jobs': len(jobs),
        'filters': filters,
        'filter_options': options,
        'filter_labels': job_filter_service.FILTER_LABELS,
        'is_filtered': job_filter_service.is_filtered(filters),
    }

    if request.headers.get('HX-Request') == 'true':
        return render_template('careers/_job_list.html', **context)

    careers_page_views_total.labels(page='company').inc()
    return render_template('careers/company.html', **context)


@careers_bp.route('/<company_slug>/careers/<job_slug>')
def job_detail(company_slug, job_slug):
    """Job detail page with schema.org JobPosting data."""
    db_session = get_session()
    company = company_service.get_by_slug(db_session, company_slug)
    job = job_service.get_public(db_session, company.id, job_slug)
    if job is None:
        abort(404)

    base_url = current_app.config['SITE_BASE_URL']
    structured = sitemap_service.job_posting_structured_data(job, company, base_url)

    careers_page_views_total.labels(page='job').inc()
    return render_template(
        'careers/job_detail.html',
        company=page_profile(company.to_public_dict()),
        job=job,
        structured_data=_json_ld(structured),
        canonical_url=structured['url'],
    )
