"""Sales invoices API - company scoped."""
from flask import Blueprint, request, jsonify, current_app, g
from solestock.database import get_session
from solestock.middleware import require_company
from solestock.utils.request_data import json_payload
from solestock.services.invoice_service import (
    create_invoice, update_invoice, delete_invoice, get_invoice, list_invoices, create_invoice_from_order
)
from solestock.blueprints.metrics import record_document_saved

invoices_bp = Blueprint('invoices', __name__, url_prefix='/api/invoices')


def _numbering():
    return {
        'prefix': current_app.config.get('INVOICE_NUMBER_PREFIX', 'INV'),
        'width': current_app.config.get('INVOICE_NUMBER_WIDTH', 5),
    }


@invoices_bp.route('', methods=['GET'])
@require_company
def list_view():
    customer_id = request.args.get('customer_id', type=int)
    return jsonify({'invoices': list_invoices(g.company, get_session(), customer_id=customer_id)})


@invoices_bp.route('', methods=['POST'])
@require_company
def create_view():
    db_session = get_session()
    try:
        invoice_id = create_invoice(g.company, json_payload(), db_session, **_numbering())
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('invoice')
    return jsonify(get_invoice(g.company, invoice_id, db_session)), 201


@invoices_bp.route('/from-order/<int:order_id>', methods=['POST'])
@require_company
def create_from_order_view(order_id):
    """Invoice a sales order, regrouping its flat lines by product and color."""
    db_session = get_session()
    try:
        invoice_id = create_invoice_from_order(
            g.company, order_id, json_payload(), db_session, **_numbering()
        )
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('invoice')
    return jsonify(get_invoice(g.company, invoice_id, db_session)), 201


@invoices_bp.route('/<int:invoice_id>', methods=['GET'])
@require_company
def detail_view(invoice_id):
    return jsonify(get_invoice(g.company, invoice_id, get_session()))


@invoices_bp.route('/<int:invoice_id>', methods=['PUT', 'PATCH'])
@require_company
def update_view(invoice_id):
    db_session = get_session()
    try:
        update_invoice(g.company, invoice_id, json_payload(), db_session)
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('invoice')
    return jsonify(get_invoice(g.company, invoice_id, db_session))


@invoices_bp.route('/<int:invoice_id>', methods=['DELETE'])
@require_company
def delete_view(invoice_id):
    delete_invoice(g.company, invoice_id, get_session())
    return jsonify({'status': 'deleted', 'id': invoice_id})
