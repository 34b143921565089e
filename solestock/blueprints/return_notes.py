"""Return notes API - company scoped."""
from flask import Blueprint, jsonify, current_app, g
from solestock.database import get_session
from solestock.middleware import require_company
from solestock.utils.request_data import json_payload
from solestock.services.return_note_service import (
    create_return_note, update_return_note, delete_return_note, get_return_note, list_return_notes
)
from solestock.blueprints.metrics import record_document_saved

return_notes_bp = Blueprint('return_notes', __name__, url_prefix='/api/return-notes')


@return_notes_bp.route('', methods=['GET'])
@require_company
def list_view():
    return jsonify({'return_notes': list_return_notes(g.company, get_session())})


@return_notes_bp.route('', methods=['POST'])
@require_company
def create_view():
    db_session = get_session()
    try:
        note_id = create_return_note(
            g.company, json_payload(), db_session,
            prefix=current_app.config.get('RETURN_NOTE_NUMBER_PREFIX', 'RN'),
            width=current_app.config.get('RETURN_NOTE_NUMBER_WIDTH', 4),
        )
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('return_note')
    return jsonify(get_return_note(g.company, note_id, db_session)), 201


@return_notes_bp.route('/<int:note_id>', methods=['GET'])
@require_company
def detail_view(note_id):
    return jsonify(get_return_note(g.company, note_id, get_session()))


@return_notes_bp.route('/<int:note_id>', methods=['PUT', 'PATCH'])
@require_company
def update_view(note_id):
    db_session = get_session()
    try:
        update_return_note(g.company, note_id, json_payload(), db_session)
    except ValueError as e:
        return jsonify({'status': 'error', 'message': str(e)}), 400

    record_document_saved('return_note')
    return jsonify(get_return_note(g.company, note_id, db_session))


@return_notes_bp.route('/<int:note_id>', methods=['DELETE'])
@require_company
def delete_view(note_id):
    delete_return_note(g.company, note_id, get_session())
    return jsonify({'status': 'deleted', 'id': note_id})
