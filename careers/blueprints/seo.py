"""Sitemap and robots.txt."""
from flask import Blueprint, Response, current_app
from careers.database import get_session
from careers.services import sitemap_service

seo_bp = Blueprint('seo', __name__)


@seo_bp.route('/sitemap.xml')
def sitemap():
    base_url = current_app.config['SITE_BASE_URL']
    xml = sitemap_service.render_sitemap(get_session(), base_url)
    return Response(xml, mimetype='application/xml')


@seo_bp.route('/robots.txt')
def robots():
    base_url = current_app.config['SITE_BASE_URL']
    return Response(sitemap_service.render_robots(base_url), mimetype='text/plain')
