"""Manual journal entries."""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.exceptions import BusinessLogicError, UnbalancedJournalError
from solestock.models import Journal, JournalLine
from solestock.services.line_items import clean_text, get_scoped, parse_date
from solestock.services.numbering import generate_document_number
from solestock.services.totals import ZERO, is_balanced
from solestock.utils.formatters import iso_date, money
from solestock.utils.number_format import parse_decimal

logger = logging.getLogger(__name__)


def parse_journal_lines(payload_lines) -> List[JournalLine]:
    """
    Journal lines from a payload list of {account_code, description, debit, credit}.

    Each line must carry either a debit or a credit, not both. Rows with
    neither an account nor an amount are blank editor rows and are skipped.
    """
    if not isinstance(payload_lines, list):
        raise ValueError('lines must be a list')

    lines = []
    for index, entry in enumerate(payload_lines, start=1):
        if not isinstance(entry, dict):
            raise ValueError(f'Line {index} must be an object')

        account_code = clean_text(entry.get('account_code'))
        debit = parse_decimal(entry.get('debit'), f'line {index} debit')
        credit = parse_decimal(entry.get('credit'), f'line {index} credit')

        if not account_code and not debit and not credit:
            continue
        if not account_code:
            raise ValueError(f'Line {index}: account_code is required')
        if debit and credit:
            raise ValueError(f'Line {index}: a line cannot have both a debit and a credit')
        if not debit and not credit:
            raise ValueError(f'Line {index}: enter a debit or a credit')

        lines.append(JournalLine(
            line_no=len(lines) + 1,
            account_code=account_code,
            description=clean_text(entry.get('description')),
            debit=debit,
            credit=credit,
        ))

    if len(lines) < 2:
        raise ValueError('A journal needs at least two lines')
    return lines


def create_journal(ctx: CompanyContext, payload: Dict[str, Any], session: Session,
                   prefix: str = 'JE', width: int = 3) -> int:
    """
    Post a journal entry.

    Raises:
        ValueError: invalid lines
        UnbalancedJournalError: debits and credits differ by more than 0.01
    """
    try:
        lines = parse_journal_lines(payload.get('lines'))

        total_debit = sum((line.debit for line in lines), ZERO)
        total_credit = sum((line.credit for line in lines), ZERO)
        if not is_balanced([total_debit], [total_credit]):
            raise UnbalancedJournalError(total_debit, total_credit)

        journal_no = clean_text(payload.get('journal_no')) or generate_document_number(
            session, Journal, Journal.journal_no, ctx.company_id, prefix, width
        )

        journal = Journal(
            company_id=ctx.company_id,
            journal_no=journal_no,
            journal_date=parse_date(payload.get('journal_date'), 'journal_date') or date.today(),
            description=clean_text(payload.get('description')),
            total_debit=total_debit,
            total_credit=total_credit,
        )
        journal.lines = lines
        session.add(journal)

        session.commit()
        logger.info(f"Posted journal {journal.journal_no} (id={journal.id}) for {total_debit}")
        return journal.id

    except IntegrityError as e:
        session.rollback()
        raise BusinessLogicError(f'Could not save journal: {e.orig}')
    except Exception:
        session.rollback()
        raise


def delete_journal(ctx: CompanyContext, journal_id: int, session: Session) -> None:
    try:
        journal = get_scoped(session, Journal, ctx, journal_id, 'Journal')
        session.delete(journal)
        session.commit()
        logger.info(f"Deleted journal id={journal_id}")
    except Exception:
        session.rollback()
        raise


def journal_to_dict(journal: Journal, with_lines: bool = False) -> Dict[str, Any]:
    data = {
        'id': journal.id,
        'journal_no': journal.journal_no,
        'journal_date': iso_date(journal.journal_date),
        'description': journal.description,
        'total_debit': str(journal.total_debit),
        'total_credit': str(journal.total_credit),
        'total_display': money(journal.total_debit),
    }
    if with_lines:
        data['lines'] = [
            {
                'line_no': line.line_no,
                'account_code': line.account_code,
                'description': line.description,
                'debit': str(line.debit or Decimal('0')),
                'credit': str(line.credit or Decimal('0')),
            }
            for line in journal.lines
        ]
    return data


def get_journal(ctx: CompanyContext, journal_id: int, session: Session) -> Dict[str, Any]:
    journal = get_scoped(session, Journal, ctx, journal_id, 'Journal')
    return journal_to_dict(journal, with_lines=True)


def list_journals(ctx: CompanyContext, session: Session) -> List[Dict[str, Any]]:
    journals = (
        session.query(Journal)
        .filter(Journal.company_id == ctx.company_id)
        .order_by(Journal.journal_date.desc(), Journal.id.desc())
        .all()
    )
    return [journal_to_dict(journal) for journal in journals]
