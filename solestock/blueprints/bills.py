"""Supplier bills API - company scoped."""
from flask import Blueprint, request, jsonify, g
from solestock.database import get_session
from solestock.middleware import require_company
from solestock.utils.request_data import json_payload
from solestock.services.bill_service import create_bill, update_bill, delete_bill, get_bill, list_bills
from solestock.blueprints.metrics import record_document_saved

bills_bp = Blueprint('bills', __name__, url_prefix='/api/bills')


@bills_bp.route('', methods=['GET'])
@require_company
def list_view():
    supplier_id = request.args.get('supplier_id', type=int)
    return jsonify({'bills': list_bills(g.company, get_session(), supplier_id=supplier_id)})


@bills_bp.route('', methods=['POST'])
@require_company
def create_view():
    db_session = get_session()
    try:
        bill_id = create_bill(g.company, json_payload(), db_session)
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('bill')
    return jsonify(get_bill(g.company, bill_id, db_session)), 201


@bills_bp.route('/<int:bill_id>', methods=['GET'])
@require_company
def detail_view(bill_id):
    return jsonify(get_bill(g.company, bill_id, get_session()))


@bills_bp.route('/<int:bill_id>', methods=['PUT', 'PATCH'])
@require_company
def update_view(bill_id):
    db_session = get_session()
    try:
        update_bill(g.company, bill_id, json_payload(), db_session)
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('bill')
    return jsonify(get_bill(g.company, bill_id, db_session))


@bills_bp.route('/<int:bill_id>', methods=['DELETE'])
@require_company
def delete_view(bill_id):
    delete_bill(g.company, bill_id, get_session())
    return jsonify({'status': 'deleted', 'id': bill_id})
