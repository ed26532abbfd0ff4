"""User domain SQLAlchemy models."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    username = Column(String(100), nullable=False)
    department = Column(String(30), nullable=False)  # ems/police/doj/fire/government
    role = Column(String(20), nullable=False, default="viewer")  # viewer/editor/admin/super_admin

    # Roster profile
    game_character_name = Column(String(100))
    rank = Column(String(100))
    job_title = Column(String(100))
    phone_number = Column(String(30))
    callsign = Column(String(30))
    assignment = Column(String(100))
    activity = Column(String(20))  # Active/Moderate/Inactive
    duty_status = Column(String(20))  # Full-Time/Part-Time/On-Call
    timezone = Column(String(50))
    discord_username = Column(String(100))

    # Certifications
    is_fto = Column(Boolean, default=False)
    is_solo_cleared = Column(Boolean, default=False)
    is_water_rescue = Column(Boolean, default=False)
    is_co_pilot_cert = Column(Boolean, default=False)
    is_aviation_cert = Column(Boolean, default=False)
    is_psych_neuro = Column(Boolean, default=False)

    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    notifications = relationship("Notification", back_populates="user")
