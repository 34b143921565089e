"""Sales orders API - company scoped."""
from flask import Blueprint, request, jsonify, current_app, g
from solestock.database import get_session
from solestock.middleware import require_company
from solestock.utils.request_data import json_payload
from solestock.services.order_service import (
    create_order, update_order, delete_order, get_order, list_orders, create_order_from_template
)
from solestock.blueprints.metrics import record_document_saved

orders_bp = Blueprint('orders', __name__, url_prefix='/api/orders')


def _numbering():
    return {
        'prefix': current_app.config.get('ORDER_NUMBER_PREFIX', 'SO'),
        'width': current_app.config.get('ORDER_NUMBER_WIDTH', 5),
    }


def _bad_request(error):
    return jsonify({'status': 'error', 'message': str(error)}), 400


@orders_bp.route('', methods=['GET'])
@require_company
def list_view():
    try:
        orders = list_orders(g.company, get_session(), status=request.args.get('status'))
    except ValueError as e:
        return _bad_request(e)
    return jsonify({'orders': orders})


@orders_bp.route('', methods=['POST'])
@require_company
def create_view():
    db_session = get_session()
    try:
        order_id = create_order(g.company, json_payload(), db_session, **_numbering())
    except ValueError as e:
        return _bad_request(e)

    record_document_saved('order')
    return jsonify(get_order(g.company, order_id, db_session)), 201


@orders_bp.route('/from-template/<int:template_id>', methods=['POST'])
@require_company
def create_from_template_view(template_id):
    db_session = get_session()
    try:
        order_id = create_order_from_template(
            g.company, template_id, json_payload(), db_session, **_numbering()
        )
    except ValueError as e:
        return _bad_request(e)

    record_document_saved('order')
    return jsonify(get_order(g.company, order_id, db_session)), 201


@orders_bp.route('/<int:order_id>', methods=['GET'])
@require_company
def detail_view(order_id):
    return jsonify(get_order(g.company, order_id, get_session()))


@orders_bp.route('/<int:order_id>', methods=['PUT', 'PATCH'])
@require_company
def update_view(order_id):
    db_session = get_session()
    try:
        update_order(g.company, order_id, json_payload(), db_session)
    except ValueError as e:
        return _bad_request(e)

    record_document_saved('order')
    return jsonify(get_order(g.company, order_id, db_session))


@orders_bp.route('/<int:order_id>', methods=['DELETE'])
@require_company
def delete_view(order_id):
    delete_order(g.company, order_id, get_session())
    return jsonify({'status': 'deleted', 'id': order_id})
