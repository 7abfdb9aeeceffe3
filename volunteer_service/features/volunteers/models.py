"""SQLAlchemy models for the volunteers feature."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from volunteer_service.core.database import Base, IntegerPKMixin, TimestampMixin


class VolunteerStatus(str, Enum):
    """Lifecycle status of a volunteer. Registrations always start ACTIVE."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class Volunteer(Base, IntegerPKMixin, TimestampMixin):
    """A person registered to volunteer in a ward.

    ``phone`` is the dedupe key: the ``uq_volunteers_phone`` constraint is what
    actually enforces one registration per phone number.
    """

    __tablename__ = "volunteers"
    __table_args__ = (UniqueConstraint("phone", name="uq_volunteers_phone"),)

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Full name as entered at registration",
    )
    phone: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Contact phone number (unique registration key)",
    )
    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Optional contact email",
    )
    ward: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        index=True,
        comment="Free-text locality the volunteer serves",
    )
    interest: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Optional area of interest (e.g. 'Health', 'Education')",
    )
    status: Mapped[VolunteerStatus] = mapped_column(
        SAEnum(
            VolunteerStatus,
            name="volunteer_status",
            native_enum=False,
            length=16,
            validate_strings=True,
        ),
        nullable=False,
        default=VolunteerStatus.ACTIVE,
        index=True,
        comment="ACTIVE, INACTIVE or SUSPENDED",
    )

    def __repr__(self) -> str:
        return f"Volunteer(id={self.id!r}, ward={self.ward!r}, status={self.status!r})"
