import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False, index=True)
    position = Column(String(200), nullable=False)
    position_type = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending", index=True)
    deadline = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    application_link = Column(String, nullable=True)
    cover_letter = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    cover_letter_sections = relationship(
        "CoverLetterSection",
        back_populates="company",
        cascade="all, delete-orphan",
        order_by="CoverLetterSection.sort_order",
    )


class CoverLetterSection(Base):
    __tablename__ = "cover_letter_sections"
    # Section ids are only unique within their company
    __table_args__ = (UniqueConstraint("company_id", "id", name="uq_section_company_id"),)

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, default=_new_id)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    max_length = Column(Integer, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    company = relationship("Company", back_populates="cover_letter_sections")
