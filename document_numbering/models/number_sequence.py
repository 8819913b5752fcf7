"""NumberSequence Model - Last allocated counter value per numbering scope

One row per (account, document type, period key, prefix key). Rows are
created on first allocation and only ever incremented; a new period gets a
new row instead of a reset.
"""

from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, PrimaryKeyConstraint, String, Uuid, func

from document_numbering.database import Base


class DocType(str, PyEnum):
    """Document families with independent numbering"""

    INVOICE = "invoice"
    QUOTE = "quote"


class NumberSequence(Base):
    """Sequence counter for one numbering scope

    Attributes:
        account_id: Account owning the counter (UUID)
        doc_type: DocType value ("invoice" or "quote")
        period_key: "global", "YYYY" or "YYYY-MM" depending on the pattern's tokens
        prefix_key: Series discriminator, always "" for now
        last_value: Last integer handed out (0 = never allocated)
        updated_at: Time of the last allocation
    """

    __tablename__ = "number_sequences"

    account_id = Column(Uuid(as_uuid=True), nullable=False)
    doc_type = Column(String(20), nullable=False)
    period_key = Column(String(20), nullable=False)
    prefix_key = Column(String(50), nullable=False, server_default="")

    last_value = Column(Integer, nullable=False, server_default="0")

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # The primary key is the scope: the upsert in SQLSequenceStore conflicts on it
    __table_args__ = (
        PrimaryKeyConstraint("account_id", "doc_type", "period_key", "prefix_key", name="pk_number_sequences"),
        CheckConstraint("last_value >= 0", name="ck_number_sequences_last_value_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<NumberSequence(account_id={self.account_id}, doc_type={self.doc_type}, "
            f"period_key={self.period_key}, last_value={self.last_value})>"
        )
