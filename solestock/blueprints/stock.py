"""Stock by size API - company scoped."""
from flask import Blueprint, request, jsonify, g
from solestock.database import get_session
from solestock.middleware import require_company
from solestock.services.stock_service import adjust_stock, get_item_stock, list_stock
from solestock.utils.request_data import json_payload

stock_bp = Blueprint('stock', __name__, url_prefix='/api/stock')


@stock_bp.route('', methods=['GET'])
@require_company
def list_view():
    """Available pairs per size; ?code= and ?color= narrow it to one article."""
    stock = list_stock(
        g.company, get_session(),
        code=request.args.get('code') or None,
        color=request.args.get('color'),
    )
    return jsonify({'stock': stock})


@stock_bp.route('/<int:item_id>', methods=['GET'])
@require_company
def detail_view(item_id):
    return jsonify(get_item_stock(g.company, item_id, get_session()))


@stock_bp.route('/adjust', methods=['POST'])
@require_company
def adjust_view():
    try:
        stock = adjust_stock(g.company, json_payload(), get_session())
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400
    return jsonify(stock)
