# media_ops/production/routes.py
from flask import jsonify, request, send_file, session

from . import production_bp
from .actions import Role, available_actions
from .errors import ActionValidationError, NotAuthenticated, ProductionError
from .services.delivery_service import (
    create_delivery_settings, get_delivery_page, get_delivery_settings, update_delivery_settings
)
from .services.export_service import generate_status_report
from .services.job_card_service import (
    apply_action, create_job_card, get_history, get_job_card, list_job_cards
)
from .status import latest_milestone, resolve_status, status_color, status_label


@production_bp.errorhandler(ProductionError)
def handle_production_error(error):
    return jsonify({'message': error.message}), error.status_code


def _current_actor(required=True):
    user_id = session.get('user_id')
    role = session.get('role')
    if required and not user_id:
        raise NotAuthenticated("Sign in first")
    return user_id, role


def _serialize(job_card, user_id=None, role=None):
    data = job_card.to_dict()
    resolved = resolve_status(job_card)
    milestone = latest_milestone(job_card)
    data.update({
        'status': resolved.status.value,
        'statusSource': resolved.source.value,
        'statusLabel': status_label(resolved.status),
        'statusColor': status_color(resolved.status),
        'latestMilestone': (
            {'label': milestone[0], 'at': milestone[1].isoformat()} if milestone else None
        ),
        'availableActions': [
            {'action': option.action.value, 'label': option.label, 'variant': option.variant}
            for option in (available_actions(job_card, role, user_id) if role else [])
        ],
    })
    return data


# --- Development sign-in ---

@production_bp.route('/api/session', methods=['POST'])
def sign_in():
    data = request.get_json(silent=True) or {}
    user_id = data.get('userId')
    role = data.get('role')
    if not user_id or role not in Role.ALL:
        raise ActionValidationError(f"userId and one of {', '.join(Role.ALL)} roles are required")
    session['user_id'] = user_id
    session['role'] = role
    return jsonify({'userId': user_id, 'role': role})


@production_bp.route('/api/session', methods=['GET'])
def current_session():
    user_id, role = _current_actor(required=False)
    if not user_id:
        return jsonify(None)
    return jsonify({'userId': user_id, 'role': role})


@production_bp.route('/api/session', methods=['DELETE'])
def sign_out():
    session.pop('user_id', None)
    session.pop('role', None)
    return '', 204


# --- Job cards ---

@production_bp.route('/api/job-cards', methods=['GET'])
def job_cards_list():
    user_id, role = _current_actor()
    status = request.args.get('status')
    try:
        job_cards = list_job_cards(status)
    except ValueError:
        raise ActionValidationError(f"Unknown status: {status}")
    return jsonify([_serialize(card, user_id, role) for card in job_cards])


@production_bp.route('/api/job-cards', methods=['POST'])
def job_cards_create():
    user_id, role = _current_actor()
    data = request.get_json(silent=True) or {}
    job_card = create_job_card(
        data.get('jobId'),
        client_name=data.get('clientName'),
        photographer_id=data.get('photographerId'),
        legacy_status=data.get('status'),
    )
    return jsonify(_serialize(job_card, user_id, role)), 201


@production_bp.route('/api/job-cards/<int:job_card_id>', methods=['GET'])
def job_card_detail(job_card_id):
    user_id, role = _current_actor()
    return jsonify(_serialize(get_job_card(job_card_id), user_id, role))


@production_bp.route('/api/job-cards/<int:job_card_id>/history', methods=['GET'])
def job_card_history(job_card_id):
    _current_actor()
    return jsonify(get_history(job_card_id))


@production_bp.route('/api/job-cards/<int:job_card_id>/actions/<action>', methods=['POST'])
def job_card_action(job_card_id, action):
    user_id, role = _current_actor()
    data = request.get_json(silent=True) or {}
    job_card = apply_action(job_card_id, action, user_id, role, notes=data.get('notes'))
    return jsonify(_serialize(job_card, user_id, role))


# --- Delivery settings ---

@production_bp.route('/api/jobs/<int:job_card_id>/delivery-settings', methods=['GET'])
def delivery_settings_get(job_card_id):
    _current_actor()
    settings = get_delivery_settings(job_card_id)
    return jsonify(settings.to_dict() if settings else None)


@production_bp.route('/api/jobs/<int:job_card_id>/delivery-settings', methods=['POST'])
def delivery_settings_create(job_card_id):
    _current_actor()
    settings = create_delivery_settings(job_card_id, request.get_json(silent=True) or {})
    return jsonify(settings.to_dict()), 201


@production_bp.route('/api/jobs/<int:job_card_id>/delivery-settings', methods=['PUT'])
def delivery_settings_update(job_card_id):
    _current_actor()
    settings = update_delivery_settings(job_card_id, request.get_json(silent=True) or {})
    return jsonify(settings.to_dict())


@production_bp.route('/api/delivery/<int:job_card_id>', methods=['GET'])
def delivery_page(job_card_id):
    return jsonify(get_delivery_page(job_card_id))


# --- Reports ---

@production_bp.route('/api/reports/job-status.xlsx', methods=['GET'])
def job_status_report():
    _current_actor()
    excel_buffer = generate_status_report(list_job_cards())
    return send_file(
        excel_buffer,
        as_attachment=True,
        download_name='job_status_report.xlsx',
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
