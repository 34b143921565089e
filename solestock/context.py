"""Explicit company scoping passed to every service call."""
from typing import NamedTuple, Optional


class CompanyContext(NamedTuple):
    """The company a request acts for, resolved once per request."""

    company_id: int
    company_name: Optional[str] = None
