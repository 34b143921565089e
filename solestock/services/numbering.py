"""Sequential document numbers (SO-00001, RN-0001, JE-001, ...)."""
import re
from typing import Optional

from sqlalchemy.orm import Session

TRAILING_DIGITS = re.compile(r'(\d+)$')


def next_document_number(last_number: Optional[str], prefix: str, width: int) -> str:
    """
    Number following last_number: its trailing integer plus one, or 1 when
    there is no previous number or it does not end in digits.
    """
    next_no = 1
    if last_number:
        match = TRAILING_DIGITS.search(last_number.strip())
        if match:
            next_no = int(match.group(1)) + 1
    return f'{prefix}-{str(next_no).zfill(width)}'


def generate_document_number(session: Session, model, column, company_id: int, prefix: str, width: int) -> str:
    """Read the company's newest document of a type and return the number after it."""
    last_number = (
        session.query(column)
        .filter(model.company_id == company_id)
        .order_by(model.created_at.desc(), model.id.desc())
        .limit(1)
        .scalar()
    )
    return next_document_number(last_number, prefix, width)
