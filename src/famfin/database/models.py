"""SQLAlchemy models for the famfin database."""

import uuid
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


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Category(Base):
    """Category model, optionally nested under a parent."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String(16), nullable=False)
    color = Column(String(7), nullable=False)
    icon = Column(String, nullable=True)
    parent_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")
    transactions = relationship("Transaction", back_populates="category")


class FamilyMember(Base):
    """Family member model."""

    __tablename__ = "family_members"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=True, index=True)
    name = Column(String, nullable=False)
    relationship_type = Column("relationship", String(16), nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class CreditCard(Base):
    """Credit card model."""

    __tablename__ = "credit_cards"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=True, index=True)
    name = Column(String, nullable=False)
    last_four_digits = Column(String(4), nullable=False)
    card_type = Column(String(16), nullable=False)
    holder = Column(String, nullable=False)
    purpose = Column(String, nullable=False)
    color = Column(String(7), nullable=False)
    icon = Column(String, nullable=True)
    limit = Column("credit_limit", Numeric(12, 2), nullable=True)
    closing_day = Column(Integer, nullable=True)
    due_day = Column(Integer, nullable=True)
    holder_family_member_id = Column(
        String(36), ForeignKey("family_members.id"), nullable=True
    )
    created_at = Column(DateTime, default=_now, nullable=False)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String(16), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    mode = Column(String(16), nullable=False, default="avulsa")
    installment_number = Column(Integer, nullable=True)
    installments_total = Column(Integer, nullable=True)
    card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=True)
    family_member_id = Column(String(36), ForeignKey("family_members.id"), nullable=True)
    due_date = Column(Date, nullable=True)
    is_paid = Column(Boolean, default=False, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_months = Column(Integer, nullable=True)
    source = Column(String(32), nullable=False, default="manual")
    source_bank = Column(String(50), nullable=True)
    # Insertion counter used to break ties between transactions on the same date
    sequence = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
