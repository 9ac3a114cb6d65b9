"""
Integration tests for the public careers pages.
"""

import json
import re

import pytest

from careers.services import company_service, job_service


def section_types(html):
    return re.findall(r'data-section-type="(\w+)"', html)


@pytest.fixture
def branded_company(session, company1):
    """Company 1 with a themed page and several sections."""
    company_service.update(session, {'id': company1.id, 'email': company1.email}, {
        'theme': {'primary_color': '#ff6600', 'font': 'Roboto'},
        'content_sections': [
            {'type': 'gallery', 'title': 'Our office', 'order': 2,
             'gallery_images': ['https://cdn.acme.test/1.jpg', 'https://cdn.acme.test/2.jpg'],
             'image_url': 'https://cdn.acme.test/3.jpg'},
            {'type': 'hero', 'title': 'Build the future', 'content': 'Join us', 'order': 0},
            {'type': 'text', 'title': 'Our values', 'content': 'Ship it', 'order': 1},
            {'type': 'video', 'title': 'Life at Acme', 'order': 1},
        ],
    })
    return company1


@pytest.fixture
def many_jobs(session, company1, make_job):
    identity = {'id': company1.id, 'email': company1.email}
    for data in (
        make_job(title='Senior Frontend Engineer', location='Berlin', work_policy='Remote'),
        make_job(title='Backend Engineer', location='Madrid', work_policy='Hybrid',
                 employment_type='Contract', experience_level='Mid-Level'),
        make_job(title='Account Executive', department='Sales', location='Berlin',
                 work_policy='On-site', experience_level='Junior'),
    ):
        job_service.create(session, identity, data)


class TestCompanyPage:
    """Tests for /<slug>/careers."""

    def test_page_renders_default_hero(self, client, company1):
        response = client.get('/acme-corp/careers')
        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert 'Welcome to Acme Corp' in html
        assert 'Join our team and make a difference' in html
        assert 'There are no open roles right now' in html

    def test_slug_is_case_insensitive(self, client, company1):
        assert client.get('/ACME-CORP/careers').status_code == 200

    def test_unknown_company_is_404(self, client):
        response = client.get('/nobody/careers')
        assert response.status_code == 404
        assert 'Company not found' in response.get_data(as_text=True)

    def test_sections_follow_order_then_position(self, client, branded_company):
        html = client.get('/acme-corp/careers').get_data(as_text=True)
        assert section_types(html) == ['hero', 'text', 'video', 'gallery']

    def test_gallery_merges_single_image(self, client, branded_company):
        html = client.get('/acme-corp/careers').get_data(as_text=True)
        for n in (1, 2, 3):
            assert f'https://cdn.acme.test/{n}.jpg' in html

    def test_video_without_url_shows_placeholder(self, client, branded_company):
        html = client.get('/acme-corp/careers').get_data(as_text=True)
        assert 'Add a video URL to display content' in html

    def test_theme_is_applied(self, client, branded_company):
        html = client.get('/acme-corp/careers').get_data(as_text=True)
        assert '#ff6600' in html
        assert 'Roboto' in html

    def test_only_open_jobs_listed(self, client, company1, job1, closed_job1):
        html = client.get('/acme-corp/careers').get_data(as_text=True)
        assert 'Senior Frontend Engineer' in html
        assert 'Sales Manager' not in html


class TestJobFilters:
    """Tests for query-string filters on the careers page."""

    def test_search(self, client, many_jobs):
        html = client.get('/acme-corp/careers?search=engineer').get_data(as_text=True)
        assert 'Senior Frontend Engineer' in html
        assert 'Backend Engineer' in html
        assert 'Account Executive' not in html
        assert 'Showing 2 of 3 open roles' in html

    def test_filters_combine(self, client, many_jobs):
        html = client.get('/acme-corp/careers?location=Berlin&work_policy=On-site').get_data(as_text=True)
        assert 'Account Executive' in html
        assert 'Senior Frontend Engineer' not in html

    def test_all_means_no_filter(self, client, many_jobs):
        html = client.get('/acme-corp/careers?department=All&location=All').get_data(as_text=True)
        assert '3 open roles' in html

    def test_no_match_message(self, client, many_jobs):
        html = client.get('/acme-corp/careers?search=astronaut').get_data(as_text=True)
        assert 'No jobs found matching your criteria.' in html

    def test_filter_options_come_from_open_jobs(self, client, many_jobs):
        html = client.get('/acme-corp/careers').get_data(as_text=True)
        assert '<option value="Madrid"' in html
        assert '<option value="Contract"' in html

    def test_htmx_request_gets_job_list_fragment(self, client, many_jobs):
        response = client.get('/acme-corp/careers?employment_type=Contract', headers={'HX-Request': 'true'})
        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert html.strip().startswith('<div id="job-list">')
        assert '<html' not in html
        assert 'Backend Engineer' in html
        assert 'Account Executive' not in html


class TestJobDetail:
    """Tests for /<slug>/careers/<job_slug>."""

    def test_detail_page(self, client, job1):
        response = client.get('/acme-corp/careers/senior-frontend-engineer')
        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert 'Senior Frontend Engineer' in html
        assert '$100k - $130k' in html
        assert 'mailto:acmecorp@example.com' in html

    def test_structured_data(self, client, job1):
        html = client.get('/acme-corp/careers/senior-frontend-engineer').get_data(as_text=True)
        match = re.search(r'<script type="application/ld\+json">(.*?)</script>', html, re.S)
        assert match
        data = json.loads(match.group(1))
        assert data['@type'] == 'JobPosting'
        assert data['hiringOrganization']['name'] == 'Acme Corp'
        assert data['jobLocationType'] == 'TELECOMMUTE'
        assert data['employmentType'] == 'FULL_TIME'
        assert data['url'] == 'https://careers.test/acme-corp/careers/senior-frontend-engineer'

    def test_script_tag_cannot_be_closed_from_description(self, client, headers1, make_job):
        client.post('/api/jobs', headers=headers1,
                    json=make_job(title='Tricky', description='</script><script>alert(1)</script>'))
        html = client.get('/acme-corp/careers/tricky').get_data(as_text=True)
        assert '</script><script>alert(1)' not in html

    def test_lookup_by_id(self, client, job1):
        assert client.get(f'/acme-corp/careers/{job1.id}').status_code == 200

    def test_closed_job_is_404(self, client, closed_job1):
        assert client.get('/acme-corp/careers/sales-manager').status_code == 404

    def test_unknown_job_is_404(self, client, company1):
        assert client.get('/acme-corp/careers/astronaut').status_code == 404
