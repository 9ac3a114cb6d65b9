"""Main blueprint: landing page and health check endpoints."""
from flask import Blueprint, jsonify, render_template, redirect, url_for, g
from sqlalchemy import text
from careers.database import get_session

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Landing page; logged-in companies go straight to their dashboard."""
    if g.get('identity'):
        return redirect(url_for('dashboard.index'))
    return render_template('index.html')


@main_bp.route('/health')
def health():
    """
    Health check endpoint that validates database connection.

    Returns:
        200: Healthy (DB connected)
        500: Unhealthy (DB error)
    """
    try:
        session = get_session()
        row = session.execute(text("SELECT 1 as health_check")).fetchone()

        if row and row[0] == 1:
            return jsonify({
                'status': 'healthy',
                'database': 'connected',
            }), 200
        return jsonify({
            'status': 'unhealthy',
            'database': 'error',
            'message': 'Unexpected query result'
        }), 500

    except Exception as e:
        return jsonify({
            'status': 'unhealthy',
            'database': 'disconnected',
            'error': str(e),
        }), 500


@main_bp.route('/health/cache')
def health_cache():
    """
    Cache health check endpoint.

    Never returns 500: the cache is optional, so a Redis outage is
    reported as "degraded".
    """
    from careers.services.cache_service import get_cache
    cache = get_cache()

    if cache.is_available():
        return jsonify({'status': 'ok', 'cache': 'connected'}), 200
    return jsonify({
        'status': 'degraded',
        'cache': 'unavailable',
        'message': 'Cache disabled or Redis unreachable; serving uncached'
    }), 200
