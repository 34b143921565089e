"""Return note service: customer returns, untaxed."""
import logging
from datetime import date
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.exceptions import BusinessLogicError
from solestock.models import ContactType, ReturnNote, ReturnNoteLine
from solestock.services.line_items import (
    build_size_lines, clean_text, get_scoped, parse_date, parse_id, parse_status,
    replace_lines, require_contact, require_pairs
)
from solestock.services.numbering import generate_document_number
from solestock.services.size_matrix import GroupedLine, grouped_from_row, grouped_to_dict, parse_grouped_lines
from solestock.services.stock_service import STOCK_IN, apply_document_stock
from solestock.services.totals import document_totals
from solestock.utils.formatters import iso_date, money

logger = logging.getLogger(__name__)


def _save_return_note(session: Session, ctx: CompanyContext, note: ReturnNote,
                      grouped_lines: List[GroupedLine]) -> None:
    """Returned pairs go back into stock."""
    totals = document_totals(grouped_lines)
    note.subtotal = totals.subtotal
    note.grand_total = totals.grand_total

    old_lines = [grouped_from_row(row) for row in note.lines]
    apply_document_stock(session, ctx, old_lines, grouped_lines, STOCK_IN)
    replace_lines(note, build_size_lines(ReturnNoteLine, grouped_lines, taxed=False))


def create_return_note(ctx: CompanyContext, payload: Dict[str, Any], session: Session,
                       prefix: str = 'RN', width: int = 4) -> int:
    """Create a return note; lines carry no tax so grand_total equals subtotal."""
    try:
        customer_id = parse_id(payload.get('customer_id'), 'customer_id')
        require_contact(session, ctx, customer_id, ContactType.CUSTOMER.value)

        grouped_lines = parse_grouped_lines(payload.get('lines'), taxed=False)
        require_pairs(grouped_lines)

        return_note_no = clean_text(payload.get('return_note_no')) or generate_document_number(
            session, ReturnNote, ReturnNote.return_note_no, ctx.company_id, prefix, width
        )

        note = ReturnNote(
            company_id=ctx.company_id,
            customer_id=customer_id,
            return_note_no=return_note_no,
            return_date=parse_date(payload.get('return_date'), 'return_date') or date.today(),
            reason=clean_text(payload.get('reason')),
            notes=clean_text(payload.get('notes')),
            status=parse_status(payload.get('status')),
        )
        session.add(note)
        _save_return_note(session, ctx, note, grouped_lines)

        session.commit()
        logger.info(f"Created return note {note.return_note_no} (id={note.id})")
        return note.id

    except IntegrityError as e:
        session.rollback()
        raise BusinessLogicError(f'Could not save return note: {e.orig}')
    except Exception:
        session.rollback()
        raise


def update_return_note(ctx: CompanyContext, note_id: int, payload: Dict[str, Any], session: Session) -> None:
    try:
        note = get_scoped(session, ReturnNote, ctx, note_id, 'Return note')

        if 'customer_id' in payload:
            customer_id = parse_id(payload.get('customer_id'), 'customer_id')
            require_contact(session, ctx, customer_id, ContactType.CUSTOMER.value)
            note.customer_id = customer_id
        if 'return_date' in payload:
            note.return_date = parse_date(payload.get('return_date'), 'return_date', required=True)
        if 'reason' in payload:
            note.reason = clean_text(payload.get('reason'))
        if 'notes' in payload:
            note.notes = clean_text(payload.get('notes'))
        if 'status' in payload:
            note.status = parse_status(payload.get('status'))

        if 'lines' in payload:
            grouped_lines = parse_grouped_lines(payload.get('lines'), taxed=False)
            require_pairs(grouped_lines)
            _save_return_note(session, ctx, note, grouped_lines)

        session.commit()
        logger.info(f"Updated return note {note.return_note_no} (id={note.id})")

    except IntegrityError as e:
        session.rollback()
        raise BusinessLogicError(f'Could not save return note: {e.orig}')
    except Exception:
        session.rollback()
        raise


def delete_return_note(ctx: CompanyContext, note_id: int, session: Session) -> None:
    try:
        note = get_scoped(session, ReturnNote, ctx, note_id, 'Return note')
        apply_document_stock(session, ctx, [grouped_from_row(row) for row in note.lines], [], STOCK_IN)
        session.delete(note)
        session.commit()
        logger.info(f"Deleted return note id={note_id}")
    except Exception:
        session.rollback()
        raise


def return_note_to_dict(note: ReturnNote, with_lines: bool = False) -> Dict[str, Any]:
    data = {
        'id': note.id,
        'return_note_no': note.return_note_no,
        'customer_id': note.customer_id,
        'return_date': iso_date(note.return_date),
        'reason': note.reason,
        'notes': note.notes,
        'status': note.status,
        'subtotal': str(note.subtotal),
        'grand_total': str(note.grand_total),
        'grand_total_display': money(note.grand_total),
    }
    if with_lines:
        data['lines'] = [grouped_to_dict(grouped_from_row(row)) for row in note.lines]
        data['total_pairs'] = sum(row.quantity for row in note.lines)
    return data


def get_return_note(ctx: CompanyContext, note_id: int, session: Session) -> Dict[str, Any]:
    note = get_scoped(session, ReturnNote, ctx, note_id, 'Return note')
    return return_note_to_dict(note, with_lines=True)


def list_return_notes(ctx: CompanyContext, session: Session) -> List[Dict[str, Any]]:
    notes = (
        session.query(ReturnNote)
        .filter(ReturnNote.company_id == ctx.company_id)
        .order_by(ReturnNote.created_at.desc(), ReturnNote.id.desc())
        .all()
    )
    return [return_note_to_dict(note) for note in notes]
