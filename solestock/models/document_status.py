"""Status values shared by sales and purchasing documents."""
import enum


class DocumentStatus(enum.Enum):
    """Document status enum."""
    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"
    VOID = "void"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls):
        return [status.value for status in cls]
