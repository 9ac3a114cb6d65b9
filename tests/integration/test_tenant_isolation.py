"""
Critical integration tests for tenant isolation.
These tests ensure that one company can never read or change another
company's private data.
"""

import pytest

from careers.exceptions import NotFoundError
from careers.models import Job
from careers.services import job_service


class TestJobIsolation:
    """Test job isolation between companies."""

    def test_company2_cannot_update_company1_job(self, client, headers2, job1):
        """A foreign job is reported as not found, never as forbidden."""
        response = client.put(f'/api/jobs/{job1.id}', headers=headers2, json={'title': 'Hijacked'})
        assert response.status_code == 404

        job = client.get(f'/api/jobs/{job1.id}').get_json()['job']
        assert job['title'] == 'Senior Frontend Engineer'

    def test_company2_cannot_delete_company1_job(self, client, session, headers2, job1):
        response = client.delete(f'/api/jobs/{job1.id}', headers=headers2)
        assert response.status_code == 404
        assert session.get(Job, job1.id) is not None

    def test_company2_cannot_see_company1_closed_job(self, client, headers2, closed_job1):
        assert client.get(f'/api/jobs/{closed_job1.id}', headers=headers2).status_code == 404

    def test_include_all_with_foreign_token(self, client, company1, headers2, closed_job1):
        response = client.get(f'/api/jobs?companyId={company1.id}&includeAll=true', headers=headers2)
        assert response.status_code == 401

    def test_public_lists_are_scoped(self, client, company1, company2, job1, job2):
        jobs1 = client.get(f'/api/jobs?companyId={company1.id}').get_json()['jobs']
        jobs2 = client.get(f'/api/jobs?companyId={company2.id}').get_json()['jobs']
        assert [j['id'] for j in jobs1] == [job1.id]
        assert [j['id'] for j in jobs2] == [job2.id]

    def test_same_slug_in_different_companies(self, session, company1, company2, job_data):
        """Job slugs are unique per company, not globally."""
        job_a = job_service.create(session, {'id': company1.id, 'email': company1.email}, job_data)
        job_b = job_service.create(session, {'id': company2.id, 'email': company2.email}, job_data)
        assert job_a.job_slug == job_b.job_slug == 'senior-frontend-engineer'

    def test_service_refuses_foreign_identity(self, session, company2, job1):
        identity = {'id': company2.id, 'email': company2.email}
        with pytest.raises(NotFoundError):
            job_service.set_open(session, identity, job1.id, False)
        session.refresh(job1)
        assert job1.is_open is True


class TestCareersPageIsolation:
    """Careers pages only ever show their own company's jobs."""

    def test_company_page_shows_own_jobs(self, client, company1, job1, job2):
        html = client.get('/acme-corp/careers').get_data(as_text=True)
        assert 'Senior Frontend Engineer' in html
        assert 'Backend Engineer' not in html

    def test_foreign_job_slug_is_not_found(self, client, company1, company2, job2):
        response = client.get(f'/acme-corp/careers/{job2.job_slug}')
        assert response.status_code == 404

    def test_dashboard_cannot_edit_foreign_job(self, dashboard_client, job2):
        assert dashboard_client.get(f'/dashboard/jobs/{job2.id}/edit').status_code == 404
        assert dashboard_client.post(f'/dashboard/jobs/{job2.id}/toggle').status_code == 404
        assert dashboard_client.post(f'/dashboard/jobs/{job2.id}/delete').status_code == 404


class TestTokenIdentity:

    def test_token_for_deleted_company_is_rejected(self, client, session, company1, headers1):
        session.delete(company1)
        session.commit()
        response = client.put('/api/company/update', headers=headers1, json={'name': 'Ghost'})
        assert response.status_code == 401
