"""
Club profile with its opening hours and weekly courses.

One club per owner. Opening hours and courses are replaced as a whole on every save
(services.club_service), so neither carries a uniqueness constraint per weekday.
"""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from clubportal.db.base import Base
from clubportal.models._ids import new_id


class Club(Base):
    __tablename__ = "clubs"

    id = Column(String(32), primary_key=True, default=new_id)
    owner_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    categories = Column(Text, nullable=False, default="")  # "Yoga, Tanz, Klettern"

    contact_name = Column(String(200), nullable=False, default="")
    contact_role = Column(String(200), nullable=False, default="")
    contact_email = Column(String(320), nullable=False, default="")
    contact_phone = Column(String(64), nullable=False, default="")
    contact_website = Column(String(500), nullable=False, default="")

    address_line1 = Column(String(200), nullable=False, default="")
    address_line2 = Column(String(200), nullable=False, default="")
    address_postal = Column(String(32), nullable=False, default="")
    address_city = Column(String(200), nullable=False, default="")
    address_country = Column(String(200), nullable=False, default="")

    slug = Column(String(200), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="club")
    opening_hours = relationship(
        "OpeningHour",
        back_populates="club",
        cascade="all, delete-orphan",
        order_by="[OpeningHour.day_of_week, OpeningHour.id]",
    )
    courses = relationship(
        "Course",
        back_populates="club",
        cascade="all, delete-orphan",
        order_by="Course.id",
    )


class OpeningHour(Base):
    __tablename__ = "opening_hours"

    id = Column(Integer, primary_key=True, autoincrement=True)
    club_id = Column(String(32), ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 1 = Monday .. 7 = Sunday
    opens_at = Column(String(16), nullable=False, default="")  # "HH:MM" or empty
    closes_at = Column(String(16), nullable=False, default="")
    note = Column(String(200), nullable=False, default="")

    club = relationship("Club", back_populates="opening_hours")

    __table_args__ = (CheckConstraint("day_of_week BETWEEN 1 AND 7", name="ck_opening_hours_day"),)


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    club_id = Column(String(32), ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    start_time = Column(String(16), nullable=False, default="")
    end_time = Column(String(16), nullable=False, default="")
    location = Column(String(200), nullable=False, default="")
    instructor = Column(String(200), nullable=False, default="")
    level = Column(String(100), nullable=False, default="")
    description = Column(Text, nullable=False, default="")

    club = relationship("Club", back_populates="courses")

    __table_args__ = (CheckConstraint("day_of_week BETWEEN 1 AND 7", name="ck_courses_day"),)
