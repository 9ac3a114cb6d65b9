"""JSON API blueprint (token authenticated, mounted under /api)."""
from flask import Blueprint, jsonify, request, g
from careers.database import get_session
from careers.exceptions import ValidationError, AuthenticationError
from careers.middleware import require_token, bearer_identity
from careers.services import company_service, job_service

api_bp = Blueprint('api', __name__, url_prefix='/api')


def _json_body() -> dict:
    """Parsed JSON object body or a 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


@api_bp.route('/auth/signup', methods=['POST'])
def signup():
    """Register a company. 201 with a token and the company identity."""
    data = _json_body()
    company, token = company_service.signup(
        get_session(),
        name=data.get('name'),
        email=data.get('email'),
        password=data.get('password'),
        slug=data.get('slug'),
    )
    return jsonify({
        'success': True,
        'message': 'Company registered successfully',
        'token': token,
        'company': company.to_identity_dict(),
    }), 201


@api_bp.route('/auth/login', methods=['POST'])
def login():
    data = _json_body()
    company, token = company_service.login(get_session(), data.get('email'), data.get('password'))
    body = company.to_identity_dict()
    body.update(theme=company.theme, logo_url=company.logo_url or '')
    return jsonify({
        'success': True,
        'message': 'Login successful',
        'token': token,
        'company': body,
    })


@api_bp.route('/company/<slug>', methods=['GET'])
def get_company(slug):
    """Public company profile."""
    return jsonify({'success': True, 'company': company_service.get_public(get_session(), slug)})


@api_bp.route('/company/update', methods=['PUT'])
@require_token
def update_company():
    company = company_service.update(get_session(), g.api_identity, _json_body())
    return jsonify({
        'success': True,
        'message': 'Company updated successfully',
        'company': company,
    })


@api_bp.route('/jobs', methods=['GET'])
def list_jobs():
    """
    Jobs of one company.

    Query params:
        companyId: required
        includeAll: 'true' to include closed jobs (owner token required)
    """
    company_id = (request.args.get('companyId') or '').strip()
    if not company_id:
        raise ValidationError('companyId is required', payload={'missing_fields': ['companyId']})

    include_all = request.args.get('includeAll', '').lower() == 'true'
    db_session = get_session()
    if include_all:
        identity = bearer_identity()
        if identity is None or identity['id'] != company_id:
            raise AuthenticationError("includeAll requires the company's own token")
        jobs = job_service.list_all(db_session, company_id)
    else:
        jobs = job_service.list_public(db_session, company_id)

    return jsonify({
        'success': True,
        'count': len(jobs),
        'jobs': [job.to_dict() for job in jobs],
    })


@api_bp.route('/jobs', methods=['POST'])
@require_token
def create_job():
    job = job_service.create(get_session(), g.api_identity, _json_body())
    return jsonify({
        'success': True,
        'message': 'Job created successfully',
        'job': job.to_dict(),
    }), 201


@api_bp.route('/jobs/<job_id>', methods=['GET'])
def get_job(job_id):
    """Open job, or a closed one when requested by its owner."""
    job = job_service.get_job(get_session(), job_id, identity=bearer_identity())
    return jsonify({'success': True, 'job': job.to_dict()})


@api_bp.route('/jobs/<job_id>', methods=['PUT'])
@require_token
def update_job(job_id):
    job = job_service.update(get_session(), g.api_identity, job_id, _json_body())
    return jsonify({
        'success': True,
        'message': 'Job updated successfully',
        'job': job.to_dict(),
    })


@api_bp.route('/jobs/<job_id>', methods=['DELETE'])
@require_token
def delete_job(job_id):
    deleted = job_service.delete(get_session(), g.api_identity, job_id)
    return jsonify({
        'success': True,
        'message': 'Job deleted successfully',
        'deleted_job': deleted,
    })
