import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, orm

from .database import Base


def new_id():
    return uuid.uuid4().hex


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    family_members = orm.relationship("FamilyMember", back_populates="owner")


class FamilyMember(Base):
    __tablename__ = "family_members"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    relationship = Column(String, nullable=False)
    dob = Column(Date, nullable=False)
    gender = Column(String, default="Unknown")
    email = Column(String)
    phone = Column(String)
    blood_type = Column(String)
    height = Column(Float)
    weight = Column(Float)
    conditions = Column(JSON, default=list)
    allergies = Column(JSON, default=list)
    emergency_contacts = Column(JSON, default=dict)
    insurance = Column(JSON, default=dict)
    doctor = Column(JSON, default=dict)
    last_checkup = Column(Date)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = orm.relationship("User", back_populates="family_members")
    medications = orm.relationship("Medication", back_populates="member")
    appointments = orm.relationship("Appointment", back_populates="member")
    reminders = orm.relationship("Reminder", back_populates="member")
    insights = orm.relationship("AIInsight", back_populates="member")
    reports = orm.relationship("HealthReport", back_populates="member")


class Medication(Base):
    __tablename__ = "medications"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    member_id = Column(String, ForeignKey("family_members.id"), nullable=True, index=True)
    name = Column(String, nullable=False)
    dosage = Column(String, nullable=False)
    frequency = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    side_effects = Column(JSON, default=list)
    reminders = Column(JSON, default=dict)
    status = Column(String, default="active")
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    member = orm.relationship("FamilyMember", back_populates="medications")


class Appointment(Base):
    __tablename__ = "appointments"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    member_id = Column(String, ForeignKey("family_members.id"), nullable=True, index=True)
    doctor_name = Column(String, nullable=False)
    specialty = Column(String, nullable=False)
    hospital = Column(String)
    date = Column(Date, nullable=False)
    time = Column(String, nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    member = orm.relationship("FamilyMember", back_populates="appointments")


class Reminder(Base):
    __tablename__ = "reminders"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    member_id = Column(String, ForeignKey("family_members.id"), nullable=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    type = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String, nullable=False)
    frequency = Column(String, nullable=False)
    priority = Column(String, default="medium")
    notifications = Column(JSON, default=dict)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    member = orm.relationship("FamilyMember", back_populates="reminders")


class AIInsight(Base):
    __tablename__ = "ai_insights"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    member_id = Column(String, ForeignKey("family_members.id"), nullable=True, index=True)
    type = Column(String, default="recommendation")
    title = Column(String, nullable=False)
    description = Column(Text, default="")
    severity = Column(String, default="low")
    category = Column(String, default="general")
    data = Column(JSON, default=dict)
    action_items = Column(JSON, default=dict)
    created_at = Column(DateTime, default=utcnow, index=True)

    member = orm.relationship("FamilyMember", back_populates="insights")


class HealthReport(Base):
    __tablename__ = "health_reports"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    member_id = Column(String, ForeignKey("family_members.id"), nullable=True, index=True)
    file_name = Column(String, nullable=False)
    file_type = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    file_size = Column(Integer)
    created_at = Column(DateTime, default=utcnow, index=True)

    member = orm.relationship("FamilyMember", back_populates="reports")
