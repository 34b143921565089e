"""Journal entries API - company scoped. Entries are posted or deleted, never edited."""
from flask import Blueprint, jsonify, current_app, g
from solestock.database import get_session
from solestock.middleware import require_company
from solestock.utils.request_data import json_payload
from solestock.services.journal_service import create_journal, delete_journal, get_journal, list_journals
from solestock.blueprints.metrics import record_document_saved

journals_bp = Blueprint('journals', __name__, url_prefix='/api/journals')


@journals_bp.route('', methods=['GET'])
@require_company
def list_view():
    return jsonify({'journals': list_journals(g.company, get_session())})


@journals_bp.route('', methods=['POST'])
@require_company
def create_view():
    db_session = get_session()
    try:
        journal_id = create_journal(
            g.company, json_payload(), db_session,
            prefix=current_app.config.get('JOURNAL_NUMBER_PREFIX', 'JE'),
            width=current_app.config.get('JOURNAL_NUMBER_WIDTH', 3),
        )
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('journal')
    return jsonify(get_journal(g.company, journal_id, db_session)), 201


@journals_bp.route('/<int:journal_id>', methods=['GET'])
@require_company
def detail_view(journal_id):
    return jsonify(get_journal(g.company, journal_id, get_session()))


@journals_bp.route('/<int:journal_id>', methods=['DELETE'])
@require_company
def delete_view(journal_id):
    delete_journal(g.company, journal_id, get_session())
    return jsonify({'status': 'deleted', 'id': journal_id})
