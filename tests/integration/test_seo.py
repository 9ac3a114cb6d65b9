"""
Integration tests for sitemap.xml, robots.txt and the health endpoints.
"""

import xml.etree.ElementTree as ET

SITEMAP_NS = {'sm': 'http://www.sitemaps.org/schemas/sitemap/0.9'}


def sitemap_locs(response):
    root = ET.fromstring(response.get_data())
    return [loc.text for loc in root.findall('sm:url/sm:loc', SITEMAP_NS)]


class TestSitemap:
    """Tests for /sitemap.xml."""

    def test_sitemap_is_xml(self, client):
        response = client.get('/sitemap.xml')
        assert response.status_code == 200
        assert response.mimetype == 'application/xml'
        assert sitemap_locs(response) == ['https://careers.test/']

    def test_sitemap_lists_companies_and_open_jobs(self, client, company1, job1, closed_job1):
        locs = sitemap_locs(client.get('/sitemap.xml'))
        assert 'https://careers.test/acme-corp/careers' in locs
        assert 'https://careers.test/acme-corp/careers/senior-frontend-engineer' in locs
        assert 'https://careers.test/acme-corp/careers/sales-manager' not in locs

    def test_sitemap_priorities(self, client, company1, job1):
        root = ET.fromstring(client.get('/sitemap.xml').get_data())
        priorities = {
            url.find('sm:loc', SITEMAP_NS).text: url.find('sm:priority', SITEMAP_NS).text
            for url in root.findall('sm:url', SITEMAP_NS)
        }
        assert priorities['https://careers.test/'] == '1.0'
        assert priorities['https://careers.test/acme-corp/careers'] == '0.8'
        assert priorities['https://careers.test/acme-corp/careers/senior-frontend-engineer'] == '0.9'


class TestRobots:

    def test_robots(self, client):
        response = client.get('/robots.txt')
        assert response.status_code == 200
        assert response.mimetype == 'text/plain'
        text = response.get_data(as_text=True)
        assert 'Disallow: /dashboard/' in text
        assert 'Sitemap: https://careers.test/sitemap.xml' in text


class TestHealth:

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json()['database'] == 'connected'

    def test_cache_health_degraded_without_redis(self, client):
        response = client.get('/health/cache')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'degraded'

    def test_metrics(self, client, company1):
        client.get('/acme-corp/careers')
        response = client.get('/metrics')
        assert response.status_code == 200
        assert 'careers_page_views_total' in response.get_data(as_text=True)
