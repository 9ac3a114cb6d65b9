"""
Dashboard page editor: branding, theme and content sections with live preview.

Add, remove and move actions work on the unsaved form and never touch the
database; only the Save action persists through company_service.update.
"""
from typing import Union

from flask import Blueprint, render_template, request, redirect, url_for, flash, g
from werkzeug.wrappers import Response

from careers.database import get_session
from careers.exceptions import CareersError
from careers.forms.page_forms import CompanyPageForm, build_page_form, editor_state, new_section
from careers.middleware import require_login
from careers.services import company_service, job_service
from careers.blueprints.careers import page_profile

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')


def _preview_profile(state: dict) -> dict:
    """Unsaved editor state shaped like a stored public profile."""
    company = g.company
    profile = company.to_public_dict()
    profile.update(
        name=state['name'] or company.name,
        logo_url=state['logo_url'],
        theme=dict(profile['theme'], **company_service.valid_theme_values(state['theme'])),
        departments=state['departments'],
        content_sections=state['content_sections'],
    )
    return page_profile(profile)


def _render_editor(form: CompanyPageForm, status: int = 200):
    state = editor_state(form)
    context = {
        'form': form,
        'preview': _preview_profile(state),
        'preview_jobs': job_service.list_public(get_session(), g.company.id),
    }
    if request.headers.get('HX-Request') == 'true':
        return render_template('dashboard/_editor.html', **context), status
    return render_template('dashboard/editor.html', **context), status


def _renumber(sections):
    return [dict(s, order=i) for i, s in enumerate(sections)]


def _apply_action(action: str, state: dict) -> dict:
    """Add/remove/move a section on the unsaved state."""
    sections = state['content_sections']
    verb, _, arg = action.partition(':')

    if verb == 'add':
        sections.append(new_section(arg, len(sections)))
    elif verb == 'remove':
        index = int(arg)
        if 0 <= index < len(sections):
            sections.pop(index)
        sections = _renumber(sections)
    elif verb == 'move':
        from_index, _, to_index = arg.partition(':')
        if not to_index:
            # "Move to position" input, 1-based
            to_index = int(request.form.get(f'move_to_{from_index}') or 0) - 1
        sections = company_service.reorder_sections(sections, int(from_index), int(to_index))

    state['content_sections'] = sections
    return state


@dashboard_bp.route('/', methods=['GET', 'POST'])
@require_login
def index() -> Union[str, Response]:
    """Careers page editor."""
    if request.method == 'GET':
        return _render_editor(build_page_form(g.company.to_public_dict()))

    form = CompanyPageForm()
    action = request.form.get('action', 'save')

    if action != 'save':
        try:
            state = _apply_action(action, editor_state(form))
        except (ValueError, CareersError):
            flash('That section action is not valid.', 'warning')
            return _render_editor(form, 400)
        return _render_editor(build_page_form(state))

    if not form.validate():
        flash('Please fix the highlighted fields before saving.', 'danger')
        return _render_editor(form, 400)

    try:
        company_service.update(get_session(), g.identity, editor_state(form))
    except CareersError as e:
        flash(e.message, 'danger')
        return _render_editor(form, e.status_code)

    flash('Careers page saved.', 'success')
    return redirect(url_for('dashboard.index'))


@dashboard_bp.route('/preview', methods=['POST'])
@require_login
def preview() -> str:
    """Render the public page from the unsaved editor state (HTMX target)."""
    form = CompanyPageForm()
    state = editor_state(form)
    return render_template(
        'dashboard/_preview.html',
        preview=_preview_profile(state),
        preview_jobs=job_service.list_public(get_session(), g.company.id),
    )
