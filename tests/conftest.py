import pytest
import uuid

from careers import create_app
from careers.database import create_all, drop_all, get_session
from careers.services import auth_service, company_service, job_service


def make_job_data(**overrides):
    """Valid job payload; keyword arguments override fields."""
    data = {
        'title': 'Senior Frontend Engineer',
        'work_policy': 'Remote',
        'department': 'Engineering',
        'employment_type': 'Full Time',
        'experience_level': 'Senior',
        'job_type': 'Permanent',
        'location': 'Berlin, Germany',
        'salary_range': '$100k - $130k',
        'description': 'Build delightful interfaces with React and TypeScript.',
    }
    data.update(overrides)
    return data


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Cheap hashes in tests; the work factor test restores 12."""
    monkeypatch.setattr(auth_service, 'BCRYPT_ROUNDS', 4)


@pytest.fixture(scope='function')
def app():
    """Create application instance with a fresh in-memory schema."""
    app = create_app('config.TestingConfig')
    with app.app_context():
        create_all()
        yield app
        get_session().rollback()
        get_session().remove()
        drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session shared with the requests of the test."""
    return get_session()


@pytest.fixture(scope='function')
def company1_signup(session):
    """Company 1 and its token."""
    suffix = str(uuid.uuid4())[:8]
    return company_service.signup(session, 'Acme Corp', f'hr-{suffix}@acme.test', 'password123')


@pytest.fixture(scope='function')
def company1(company1_signup):
    return company1_signup[0]


@pytest.fixture(scope='function')
def token1(company1_signup):
    return company1_signup[1]


@pytest.fixture(scope='function')
def headers1(token1):
    return {'Authorization': f'Bearer {token1}'}


@pytest.fixture(scope='function')
def company2_signup(session):
    """Second company for isolation tests."""
    suffix = str(uuid.uuid4())[:8]
    return company_service.signup(session, 'Globex', f'jobs-{suffix}@globex.test', 'password456')


@pytest.fixture(scope='function')
def company2(company2_signup):
    return company2_signup[0]


@pytest.fixture(scope='function')
def headers2(company2_signup):
    return {'Authorization': f'Bearer {company2_signup[1]}'}


@pytest.fixture(scope='function')
def job_data():
    return make_job_data()


@pytest.fixture(scope='function')
def make_job():
    """Factory for job payloads."""
    return make_job_data


@pytest.fixture(scope='function')
def job1(session, company1, job_data):
    """Open job of company 1."""
    return job_service.create(session, {'id': company1.id, 'email': company1.email}, job_data)


@pytest.fixture(scope='function')
def closed_job1(session, company1):
    """Closed job of company 1."""
    identity = {'id': company1.id, 'email': company1.email}
    return job_service.create(session, identity, make_job_data(
        title='Sales Manager', department='Sales', work_policy='On-site',
        location='Madrid, Spain', is_open=False,
    ))


@pytest.fixture(scope='function')
def job2(session, company2):
    """Open job of company 2."""
    return job_service.create(session, {'id': company2.id, 'email': company2.email}, make_job_data(
        title='Backend Engineer', location='Remote',
    ))


@pytest.fixture(scope='function')
def dashboard_client(client, token1):
    """Test client logged into the dashboard as company 1."""
    with client.session_transaction() as sess:
        sess['token'] = token1
    return client
