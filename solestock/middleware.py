"""Middleware for company context."""
from functools import wraps
from flask import session, g, request, current_app
from solestock.context import CompanyContext
from solestock.database import get_session
from solestock.exceptions import UnauthorizedError
from solestock.models import Company


def _requested_company_id():
    """Company id from the API header, falling back to the Flask session."""
    header = current_app.config.get('COMPANY_HEADER', 'X-Company-Id')
    raw = request.headers.get(header) or session.get('company_id')
    if raw is None or raw == '':
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def load_company_context():
    """
    Load the current company into g (Flask's per-request global).

    Called before each request. Sets g.company to a CompanyContext when the
    requested company exists and is active, None otherwise. Services receive
    g.company explicitly instead of looking the company up themselves.
    """
    g.company = None

    try:
        company_id = _requested_company_id()
        if company_id is None:
            return

        db_session = get_session()
        if not db_session:
            return

        company = db_session.query(Company).filter_by(id=company_id, active=True).first()
        if company:
            g.company = CompanyContext(company_id=company.id, company_name=company.name)
        else:
            current_app.logger.warning(f"Rejected company context for id={company_id}")
    except Exception as e:
        # Avoid crashing the whole app if context loading fails
        current_app.logger.error(f"Error in load_company_context: {e}")


def require_company(f):
    """
    Decorator: Require a company context.

    Raises UnauthorizedError (rendered as a 403 JSON response) when the
    request did not resolve to an active company.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('company') is None:
            raise UnauthorizedError('A valid company is required for this request.')
        return f(*args, **kwargs)
    return decorated_function
