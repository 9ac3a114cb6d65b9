"""
Integration tests for the jobs JSON API.
"""

import re


class TestCreateJob:
    """Tests for POST /api/jobs."""

    def test_create_job(self, client, company1, headers1, job_data):
        response = client.post('/api/jobs', json=job_data, headers=headers1)
        assert response.status_code == 201

        job = response.get_json()['job']
        assert job['job_slug'] == 'senior-frontend-engineer'
        assert job['company_id'] == company1.id
        assert job['is_open'] is True
        assert job['date_posted']

    def test_company_id_comes_from_token(self, client, company1, company2, headers1, job_data):
        job_data['company_id'] = company2.id
        response = client.post('/api/jobs', json=job_data, headers=headers1)
        assert response.status_code == 201
        assert response.get_json()['job']['company_id'] == company1.id

    def test_requires_token(self, client, job_data):
        response = client.post('/api/jobs', json=job_data)
        assert response.status_code == 401

    def test_missing_fields(self, client, headers1):
        response = client.post('/api/jobs', json={'title': 'Designer'}, headers=headers1)
        assert response.status_code == 400
        missing = response.get_json()['missing_fields']
        assert 'department' in missing
        assert 'description' in missing
        assert 'title' not in missing

    def test_invalid_enum(self, client, headers1, make_job):
        response = client.post('/api/jobs', json=make_job(work_policy='Sometimes'), headers=headers1)
        assert response.status_code == 400
        assert any('work_policy' in d for d in response.get_json()['details'])

    def test_unknown_field(self, client, headers1, make_job):
        response = client.post('/api/jobs', json=make_job(bonus='lots'), headers=headers1)
        assert response.status_code == 400
        assert response.get_json()['unknown_fields'] == ['bonus']

    def test_duplicate_title_gets_suffix(self, client, headers1, job1, make_job):
        response = client.post('/api/jobs', json=make_job(), headers=headers1)
        assert response.status_code == 201
        slug = response.get_json()['job']['job_slug']
        assert slug != job1.job_slug
        assert re.fullmatch(r'senior-frontend-engineer-[a-z0-9]{5}', slug)

    def test_create_closed_job(self, client, headers1, make_job):
        response = client.post('/api/jobs', json=make_job(is_open=False), headers=headers1)
        assert response.status_code == 201
        assert response.get_json()['job']['is_open'] is False


class TestListJobs:
    """Tests for GET /api/jobs."""

    def test_company_id_required(self, client):
        response = client.get('/api/jobs')
        assert response.status_code == 400

    def test_public_list_has_open_jobs_only(self, client, company1, job1, closed_job1):
        body = client.get(f'/api/jobs?companyId={company1.id}').get_json()
        assert body['count'] == 1
        assert [j['id'] for j in body['jobs']] == [job1.id]

    def test_include_all_with_owner_token(self, client, company1, headers1, job1, closed_job1):
        response = client.get(f'/api/jobs?companyId={company1.id}&includeAll=true', headers=headers1)
        assert response.status_code == 200
        ids = {j['id'] for j in response.get_json()['jobs']}
        assert ids == {job1.id, closed_job1.id}

    def test_include_all_without_token(self, client, company1, closed_job1):
        response = client.get(f'/api/jobs?companyId={company1.id}&includeAll=true')
        assert response.status_code == 401

    def test_newest_first(self, client, company1, headers1, make_job):
        client.post('/api/jobs', json=make_job(title='First'), headers=headers1)
        client.post('/api/jobs', json=make_job(title='Second'), headers=headers1)
        jobs = client.get(f'/api/jobs?companyId={company1.id}').get_json()['jobs']
        assert [j['title'] for j in jobs] == ['Second', 'First']


class TestGetJob:
    """Tests for GET /api/jobs/<id>."""

    def test_open_job_is_public(self, client, job1):
        response = client.get(f'/api/jobs/{job1.id}')
        assert response.status_code == 200
        assert response.get_json()['job']['title'] == 'Senior Frontend Engineer'

    def test_closed_job_hidden_from_public(self, client, closed_job1):
        assert client.get(f'/api/jobs/{closed_job1.id}').status_code == 404

    def test_closed_job_visible_to_owner(self, client, headers1, closed_job1):
        assert client.get(f'/api/jobs/{closed_job1.id}', headers=headers1).status_code == 200

    def test_unknown_job(self, client):
        assert client.get('/api/jobs/' + 'f' * 24).status_code == 404


class TestUpdateJob:
    """Tests for PUT /api/jobs/<id>."""

    def test_update_fields(self, client, headers1, job1):
        response = client.put(f'/api/jobs/{job1.id}', headers=headers1,
                              json={'location': 'Remote', 'salary_range': '$120k - $150k'})
        assert response.status_code == 200
        job = response.get_json()['job']
        assert job['location'] == 'Remote'
        assert job['salary_range'] == '$120k - $150k'
        assert job['job_slug'] == 'senior-frontend-engineer'

    def test_new_title_regenerates_slug(self, client, headers1, job1):
        response = client.put(f'/api/jobs/{job1.id}', headers=headers1, json={'title': 'Staff Frontend Engineer'})
        assert response.get_json()['job']['job_slug'] == 'staff-frontend-engineer'

    def test_close_job(self, client, company1, headers1, job1):
        response = client.put(f'/api/jobs/{job1.id}', headers=headers1, json={'is_open': False})
        assert response.get_json()['job']['is_open'] is False
        assert client.get(f'/api/jobs?companyId={company1.id}').get_json()['count'] == 0

    def test_empty_required_field(self, client, headers1, job1):
        response = client.put(f'/api/jobs/{job1.id}', headers=headers1, json={'title': '  '})
        assert response.status_code == 400
        assert response.get_json()['missing_fields'] == ['title']

    def test_company_id_cannot_be_changed(self, client, company1, company2, headers1, job1):
        response = client.put(f'/api/jobs/{job1.id}', headers=headers1, json={'company_id': company2.id})
        assert response.status_code == 200
        assert response.get_json()['job']['company_id'] == company1.id


class TestDeleteJob:
    """Tests for DELETE /api/jobs/<id>."""

    def test_delete_job(self, client, headers1, job1):
        job_id = job1.id
        response = client.delete(f'/api/jobs/{job_id}', headers=headers1)
        assert response.status_code == 200
        assert response.get_json()['deleted_job'] == {'id': job_id, 'title': 'Senior Frontend Engineer'}
        assert client.get(f'/api/jobs/{job_id}').status_code == 404

    def test_delete_requires_token(self, client, job1):
        assert client.delete(f'/api/jobs/{job1.id}').status_code == 401


class TestJobFieldLengths:
    """Values longer than their columns are rejected with the field names."""

    def test_overlong_title_and_location(self, client, headers1, make_job):
        response = client.post('/api/jobs', json=make_job(title='T' * 201, location='L' * 201), headers=headers1)
        assert response.status_code == 400
        assert response.get_json()['too_long_fields'] == ['title', 'location']

    def test_overlong_salary_on_update(self, client, headers1, job1):
        response = client.put(f'/api/jobs/{job1.id}', json={'salary_range': '$' * 101}, headers=headers1)
        assert response.status_code == 400
        assert response.get_json()['too_long_fields'] == ['salary_range']

    def test_long_description_is_accepted(self, client, headers1, make_job):
        response = client.post('/api/jobs', json=make_job(description='word ' * 5000), headers=headers1)
        assert response.status_code == 201
