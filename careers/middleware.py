"""Middleware for authentication and tenant context."""
from functools import wraps
from flask import session, g, redirect, url_for, flash, request, current_app
from careers.database import get_session
from careers.exceptions import AuthenticationError
from careers.models import Company
from careers.services.auth_service import verify_token, extract_bearer

SESSION_TOKEN_KEY = 'token'


def _company_for(identity):
    if not identity:
        return None
    db_session = get_session()
    company = db_session.get(Company, identity.get('id'))
    if company is None or company.email != identity.get('email'):
        return None
    return company


def load_identity():
    """
    Load the dashboard identity from the signed session cookie into g.

    Sets g.identity ({id, email}) and g.company when the stored token is
    valid. A stale token is dropped from the session.
    """
    g.identity = None
    g.company = None

    token = session.get(SESSION_TOKEN_KEY)
    if not token:
        return

    try:
        identity = verify_token(token)
        company = _company_for(identity)
    except Exception as e:
        # Avoid crashing the whole app if context loading fails
        current_app.logger.error(f"Error in load_identity: {e}")
        return

    if company is None:
        session.pop(SESSION_TOKEN_KEY, None)
        return

    g.identity = {'id': identity['id'], 'email': identity['email']}
    g.company = company


def login_session(token):
    """Store a freshly issued token for the dashboard."""
    session.clear()
    session[SESSION_TOKEN_KEY] = token
    session.permanent = True


def bearer_identity():
    """Identity from the Authorization header, or None."""
    token = extract_bearer(request.headers.get('Authorization'))
    identity = verify_token(token)
    if identity and _company_for(identity):
        return {'id': identity['id'], 'email': identity['email']}
    return None


def require_token(f):
    """
    Decorator: Require a valid bearer token (JSON API).

    Sets g.api_identity; raises AuthenticationError otherwise.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not request.headers.get('Authorization'):
            raise AuthenticationError('No token provided')
        identity = bearer_identity()
        if identity is None:
            raise AuthenticationError('Invalid or expired token')
        g.api_identity = identity
        return f(*args, **kwargs)
    return decorated_function


def require_login(f):
    """
    Decorator: Require company to be logged in (dashboard).

    Redirects to login page if not authenticated.
    Sets next parameter to return to original page after login.
    HTMX requests get an HX-Redirect header to force a full page load.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('identity') is None:
            if request.headers.get('HX-Request') == 'true':
                response = redirect(url_for('auth.login', next=request.referrer or request.url))
                response.headers['HX-Redirect'] = url_for('auth.login', next=request.referrer or request.url)
                return response

            flash('Please log in to access the dashboard.', 'warning')
            return redirect(url_for('auth.login', next=request.url))
        return f(*args, **kwargs)
    return decorated_function
