"""Catalog API: items and contacts for the size-matrix editors."""
from flask import Blueprint, request, jsonify, g
from solestock.database import get_session
from solestock.middleware import require_company
from solestock.utils.request_data import json_payload
from solestock.services.catalog_service import list_items, save_item, list_contacts, create_contact

catalog_bp = Blueprint('catalog', __name__, url_prefix='/api')


@catalog_bp.route('/items', methods=['GET'])
@require_company
def items_list():
    return jsonify({'items': list_items(g.company, get_session())})


@catalog_bp.route('/items', methods=['POST'])
@require_company
def items_create():
    try:
        item_id = save_item(g.company, json_payload(), get_session())
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400
    return jsonify({'status': 'created', 'id': item_id}), 201


@catalog_bp.route('/items/<int:item_id>', methods=['PUT', 'PATCH'])
@require_company
def items_update(item_id):
    try:
        save_item(g.company, json_payload(), get_session(), item_id=item_id)
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400
    return jsonify({'status': 'updated', 'id': item_id})


@catalog_bp.route('/contacts', methods=['GET'])
@require_company
def contacts_list():
    try:
        contacts = list_contacts(g.company, get_session(), contact_type=request.args.get('type'))
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400
    return jsonify({'contacts': contacts})


@catalog_bp.route('/contacts', methods=['POST'])
@require_company
def contacts_create():
    try:
        contact_id = create_contact(g.company, json_payload(), get_session())
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400
    return jsonify({'status': 'created', 'id': contact_id}), 201
