"""Dashboard login, signup and logout pages."""
from typing import Union

from flask import Blueprint, render_template, request, redirect, url_for, flash, session, g
from werkzeug.wrappers import Response

from careers.database import get_session
from careers.exceptions import AuthenticationError, ConflictError, ValidationError
from careers.forms.auth_forms import LoginForm, SignupForm
from careers.middleware import login_session
from careers.services import company_service

auth_bp = Blueprint('auth', __name__)


def _safe_next(next_url):
    """Only allow relative redirects inside the app."""
    if next_url and next_url.startswith('/') and not next_url.startswith('//'):
        return next_url
    return None


@auth_bp.route('/signup', methods=['GET', 'POST'])
def signup() -> Union[str, Response]:
    """Registration page - creates the company and logs it in."""
    if g.get('identity'):
        return redirect(url_for('dashboard.index'))

    form = SignupForm()
    if form.validate_on_submit():
        try:
            company, token = company_service.signup(
                get_session(),
                name=form.name.data,
                email=form.email.data,
                password=form.password.data,
                slug=form.slug.data or None,
            )
        except ConflictError as e:
            field = getattr(form, e.field, None) if e.field else None
            if field is not None:
                field.errors.append(e.message)
            else:
                flash(e.message, 'danger')
            return render_template('auth/signup.html', form=form), 409
        except ValidationError as e:
            flash(e.message, 'danger')
            return render_template('auth/signup.html', form=form), 400

        login_session(token)
        flash(f'Welcome {company.name}! Your careers page is live.', 'success')
        return redirect(url_for('dashboard.index'))

    status = 400 if request.method == 'POST' else 200
    return render_template('auth/signup.html', form=form), status


@auth_bp.route('/login', methods=['GET', 'POST'])
def login() -> Union[str, Response]:
    """Login page - validates email + password."""
    if g.get('identity'):
        return redirect(url_for('dashboard.index'))

    form = LoginForm()
    next_url = _safe_next(request.args.get('next'))

    if form.validate_on_submit():
        try:
            company, token = company_service.login(get_session(), form.email.data, form.password.data)
        except (AuthenticationError, ValidationError) as e:
            flash(e.message, 'danger')
            return render_template('auth/login.html', form=form, next_url=next_url), e.status_code

        login_session(token)
        flash(f'Welcome back, {company.name}!', 'success')
        return redirect(next_url or url_for('dashboard.index'))

    status = 400 if request.method == 'POST' else 200
    return render_template('auth/login.html', form=form, next_url=next_url), status


@auth_bp.route('/logout', methods=['POST'])
def logout() -> Response:
    session.clear()
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))
