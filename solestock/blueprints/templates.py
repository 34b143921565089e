"""Order templates API - company scoped."""
from flask import Blueprint, jsonify, g
from solestock.database import get_session
from solestock.middleware import require_company
from solestock.utils.request_data import json_payload
from solestock.services.template_service import (
    create_template, update_template, delete_template, get_template, list_templates
)
from solestock.blueprints.metrics import record_document_saved

templates_bp = Blueprint('templates', __name__, url_prefix='/api/templates')


@templates_bp.route('', methods=['GET'])
@require_company
def list_view():
    return jsonify({'templates': list_templates(g.company, get_session())})


@templates_bp.route('', methods=['POST'])
@require_company
def create_view():
    db_session = get_session()
    try:
        template_id = create_template(g.company, json_payload(), db_session)
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('template')
    return jsonify(get_template(g.company, template_id, db_session)), 201


@templates_bp.route('/<int:template_id>', methods=['GET'])
@require_company
def detail_view(template_id):
    return jsonify(get_template(g.company, template_id, get_session()))


@templates_bp.route('/<int:template_id>', methods=['PUT', 'PATCH'])
@require_company
def update_view(template_id):
    db_session = get_session()
    try:
        update_template(g.company, template_id, json_payload(), db_session)
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('template')
    return jsonify(get_template(g.company, template_id, db_session))


@templates_bp.route('/<int:template_id>', methods=['DELETE'])
@require_company
def delete_view(template_id):
    delete_template(g.company, template_id, get_session())
    return jsonify({'status': 'deleted', 'id': template_id})
