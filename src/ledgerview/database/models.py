"""SQLAlchemy models for ledgerview database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    bank_name = Column(String, nullable=False)
    currency = Column(String(3), default="CAD", nullable=False)
    account_type = Column(String, nullable=True)
    account_number_last4 = Column(String(4), nullable=True)
    balance_type = Column(String, default="asset", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    statements = relationship("StatementImport", back_populates="bank_account")


class StatementImport(Base):
    """Imported statement period model."""

    __tablename__ = "statement_imports"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    statement_period_start = Column(Date, nullable=False)
    statement_period_end = Column(Date, nullable=False)
    opening_balance = Column(Numeric(12, 2), nullable=False)
    closing_balance = Column(Numeric(12, 2), nullable=False)
    total_transactions = Column(Integer, default=0, nullable=False)
    total_credits = Column(Numeric(12, 2), default=0, nullable=False)
    total_debits = Column(Numeric(12, 2), default=0, nullable=False)
    file_name = Column(String, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    import_status = Column(String, default="pending_review", nullable=False)
    confirmed_at = Column(DateTime, nullable=True)
    confirmed_by = Column(String, nullable=True)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="statements")
    transactions = relationship("Transaction", back_populates="statement_import")


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    code = Column(String, nullable=True)
    name = Column(String, nullable=False)
    category_type = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    statement_import_id = Column(Integer, ForeignKey("statement_imports.id"), nullable=False)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    transaction_date = Column(Date, nullable=False)
    posting_date = Column(Date, nullable=True)
    description = Column(String, nullable=False)
    payee_name = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=True)
    transaction_type = Column(String, nullable=False)
    running_balance = Column(Numeric(12, 2), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    needs_review = Column(Boolean, default=False, nullable=False)
    is_edited = Column(Boolean, default=False, nullable=False)
    edited_at = Column(DateTime, nullable=True)
    is_locked = Column(Boolean, default=False, nullable=False)

    # Relationships
    statement_import = relationship("StatementImport", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
