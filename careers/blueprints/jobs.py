"""Dashboard jobs manager: list, create, edit, open/close and delete postings."""
from typing import Union

from flask import Blueprint, render_template, request, redirect, url_for, flash, g
from werkzeug.wrappers import Response

from careers.database import get_session
from careers.exceptions import ValidationError
from careers.forms.job_forms import JobForm
from careers.middleware import require_login
from careers.services import job_service

jobs_bp = Blueprint('jobs', __name__, url_prefix='/dashboard/jobs')


def _is_htmx():
    return request.headers.get('HX-Request') == 'true'


def _apply_service_errors(form: JobForm, error: ValidationError):
    """Attach service validation errors to the form fields they name."""
    payload = error.payload or {}
    for field in payload.get('missing_fields', []):
        if hasattr(form, field):
            getattr(form, field).errors.append('This field is required')
    flash(error.message, 'danger')
    for detail in payload.get('details', []):
        flash(detail, 'danger')


@jobs_bp.route('')
@require_login
def list_jobs() -> str:
    """All jobs of the company, open and closed."""
    jobs = job_service.list_all(get_session(), g.company.id)
    open_count = sum(1 for job in jobs if job.is_open)
    return render_template('dashboard/jobs.html', jobs=jobs, open_count=open_count)


@jobs_bp.route('/new', methods=['GET', 'POST'])
@require_login
def new_job() -> Union[str, Response]:
    form = JobForm()
    form.set_departments(g.company.departments)

    if form.validate_on_submit():
        try:
            job = job_service.create(get_session(), g.identity, form.to_payload())
        except ValidationError as e:
            _apply_service_errors(form, e)
            return render_template('dashboard/job_form.html', form=form, job=None), 400
        flash(f'Job "{job.title}" created.', 'success')
        return redirect(url_for('jobs.list_jobs'))

    status = 400 if request.method == 'POST' else 200
    return render_template('dashboard/job_form.html', form=form, job=None), status


@jobs_bp.route('/<job_id>/edit', methods=['GET', 'POST'])
@require_login
def edit_job(job_id) -> Union[str, Response]:
    db_session = get_session()
    job = job_service.get_owned(db_session, g.identity, job_id)

    form = JobForm(obj=job) if request.method == 'GET' else JobForm()
    form.set_departments(g.company.departments, current=job.department)

    if form.validate_on_submit():
        try:
            job = job_service.update(db_session, g.identity, job.id, form.to_payload())
        except ValidationError as e:
            _apply_service_errors(form, e)
            return render_template('dashboard/job_form.html', form=form, job=job), 400
        flash(f'Job "{job.title}" updated.', 'success')
        return redirect(url_for('jobs.list_jobs'))

    status = 400 if request.method == 'POST' else 200
    return render_template('dashboard/job_form.html', form=form, job=job), status


@jobs_bp.route('/<job_id>/toggle', methods=['POST'])
@require_login
def toggle_job(job_id) -> Union[str, Response]:
    """Open or close a job; HTMX gets the refreshed table row."""
    db_session = get_session()
    job = job_service.get_owned(db_session, g.identity, job_id)
    job = job_service.set_open(db_session, g.identity, job.id, not job.is_open)

    if _is_htmx():
        return render_template('dashboard/_job_row.html', job=job)
    flash(f'Job "{job.title}" is now {"open" if job.is_open else "closed"}.', 'success')
    return redirect(url_for('jobs.list_jobs'))


@jobs_bp.route('/<job_id>/delete', methods=['POST'])
@require_login
def delete_job(job_id) -> Union[str, Response]:
    deleted = job_service.delete(get_session(), g.identity, job_id)

    if _is_htmx():
        # Empty body removes the row (hx-swap="outerHTML")
        return ''
    flash(f'Job "{deleted["title"]}" deleted.', 'success')
    return redirect(url_for('jobs.list_jobs'))
