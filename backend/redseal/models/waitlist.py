import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from redseal.db.base import Base


class UserType(str, enum.Enum):
    student = "student"
    employer = "employer"
    immigration_consultant = "immigration_consultant"
    international_worker = "international_worker"
    mentor = "mentor"


class WaitlistStatus(str, enum.Enum):
    pending = "pending"
    invited = "invited"
    converted = "converted"


class WaitlistEntry(Base):
    __tablename__ = "waitlist"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(300))
    first_name: Mapped[str | None] = mapped_column(String(150), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(150), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    country: Mapped[str | None] = mapped_column(String(200), nullable=True)
    province: Mapped[str | None] = mapped_column(String(200), nullable=True)
    city: Mapped[str | None] = mapped_column(String(200), nullable=True)

    user_type: Mapped[UserType] = mapped_column(Enum(UserType), index=True)
    status: Mapped[WaitlistStatus] = mapped_column(Enum(WaitlistStatus), default=WaitlistStatus.pending)

    # student / international_worker
    trade: Mapped[str | None] = mapped_column(String(200), nullable=True)
    apprenticeship_year: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_apprentice: Mapped[str | None] = mapped_column(String(10), nullable=True)
    is_challenging: Mapped[str | None] = mapped_column(String(10), nullable=True)
    challenge_date: Mapped[str | None] = mapped_column(String(40), nullable=True)

    # employer
    company_name: Mapped[str | None] = mapped_column(String(300), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    industry_other: Mapped[str | None] = mapped_column(String(200), nullable=True)
    hiring_needs: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    # immigration_consultant
    rcic_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # international_worker
    experience_years: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # mentor
    mentor_trade: Mapped[str | None] = mapped_column(String(200), nullable=True)
    years_experience: Mapped[str | None] = mapped_column(String(20), nullable=True)
    certification_level: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
