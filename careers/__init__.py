"""Flask application factory."""
import logging
import os
import traceback

from flask import Flask, g, render_template, request, redirect, flash, jsonify
from flask_wtf.csrf import CSRFProtect, CSRFError
from werkzeug.exceptions import HTTPException

from careers.database import init_db
from careers.exceptions import CareersError, ConfigurationError


def _wants_json():
    """API routes and JSON clients get JSON error bodies."""
    return request.path.startswith('/api/') or request.is_json


def _is_htmx():
    return request.headers.get('HX-Request') == 'true'


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    if not app.config.get('JWT_SECRET'):
        raise ConfigurationError('JWT_SECRET must be set before starting the application')

    log_level = app.config.get('LOG_LEVEL', 'INFO')
    app.logger.setLevel(log_level)
    logging.getLogger('careers').setLevel(log_level)

    # Initialize CSRF protection
    csrf = CSRFProtect(app)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        app.logger.warning(f"CSRF Error: {e.description}")
        if _wants_json() or _is_htmx():
            return jsonify({'success': False, 'error': 'Your session has expired. Reload the page.'}), 400
        flash('Your session has expired or the form is invalid. Please try again.', 'warning')
        return redirect(request.referrer or '/')

    # Error tracking in production
    if app.config.get('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get('ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Redis cache (sitemap)
    from careers.services.cache_service import init_cache
    init_cache(app)

    # Prometheus request metrics
    from careers.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: trust X-Forwarded-* from the reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Initialize database
    init_db(app)

    # Jinja filters
    from careers.utils.formatters import date_long, date_short, year, apply_email, safe_url
    app.jinja_env.filters['date_long'] = date_long
    app.jinja_env.filters['date_short'] = date_short
    app.jinja_env.filters['year'] = year
    app.jinja_env.filters['safe_url'] = safe_url
    app.jinja_env.filters['apply_email'] = lambda name: apply_email(name, app.config.get('APPLY_EMAIL_DOMAIN', 'example.com'))

    # Dashboard identity from the session cookie
    from careers.middleware import load_identity

    @app.before_request
    def before_request_handler():
        """Load company context for each request."""
        load_identity()

    # Error Handlers
    @app.errorhandler(CareersError)
    def handle_careers_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"CareersError [{error.status_code}]: {error.message}")
        else:
            app.logger.info(f"CareersError [{error.status_code}]: {error.message}")

        if _wants_json():
            return jsonify(error.to_dict()), error.status_code

        if _is_htmx():
            return render_template('_alert.html', message=error.message, category='danger'), error.status_code

        if error.status_code == 404:
            return render_template('errors/404.html', message=error.message), 404

        # For regular requests: flash message and redirect back
        flash(error.message, 'danger')
        return redirect(request.referrer or '/')

    @app.errorhandler(404)
    def not_found_error(error):
        if _wants_json():
            return jsonify({'success': False, 'error': 'Not found'}), 404
        return render_template('errors/404.html'), 404

    @app.errorhandler(HTTPException)
    def http_error(error):
        if _wants_json():
            return jsonify({'success': False, 'error': error.description or error.name}), error.code
        return error

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception: {error}")
        app.logger.error(f"Traceback: {traceback.format_exc()}")

        if _wants_json():
            return jsonify({'success': False, 'error': 'Internal server error'}), 500

        if _is_htmx():
            return render_template('_alert.html', message='Internal server error.', category='danger'), 500

        return render_template('errors/500.html'), 500

    @app.context_processor
    def inject_company():
        """Logged-in company and site settings for templates."""
        return {
            'current_company': g.get('company'),
            'site_name': app.config.get('SITE_NAME', 'Careers Page Builder'),
        }

    # Register blueprints
    from careers.blueprints.main import main_bp
    from careers.blueprints.auth import auth_bp
    from careers.blueprints.api import api_bp
    from careers.blueprints.dashboard import dashboard_bp
    from careers.blueprints.jobs import jobs_bp
    from careers.blueprints.seo import seo_bp
    from careers.blueprints.metrics import metrics_bp
    from careers.blueprints.careers import careers_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(jobs_bp)
    app.register_blueprint(seo_bp)
    app.register_blueprint(metrics_bp)

    # Token-authenticated JSON API is exempt from CSRF
    csrf.exempt(api_bp)
    app.register_blueprint(api_bp)

    # Catch-all /<slug>/careers routes go last
    app.register_blueprint(careers_bp)

    # Register CLI commands
    from careers.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
