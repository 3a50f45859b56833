from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ----------------------------
# Users
# ----------------------------
class UserIn(CamelModel):
    id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None


class UserOut(CamelModel):
    id: str
    email: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ----------------------------
# Family members
# ----------------------------
class FamilyMemberBase(CamelModel):
    name: str
    relationship: str
    dob: Optional[date] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    blood_type: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    conditions: List[str] = []
    allergies: List[str] = []
    emergency_contacts: Dict[str, Any] = {}
    insurance: Dict[str, Any] = {}
    doctor: Dict[str, Any] = {}
    last_checkup: Optional[date] = None


class FamilyMemberCreate(FamilyMemberBase):
    user_id: str = Field(min_length=1)


class FamilyMemberUpdate(CamelModel):
    name: Optional[str] = None
    relationship: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    blood_type: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    conditions: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    emergency_contacts: Optional[Dict[str, Any]] = None
    insurance: Optional[Dict[str, Any]] = None
    doctor: Optional[Dict[str, Any]] = None
    last_checkup: Optional[date] = None


class FamilyMemberOut(FamilyMemberBase):
    id: str
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FamilyMemberSummary(FamilyMemberOut):
    medications: int = 0
    next_appointment: str = ""
    health_score: int = 0
    status: str = ""


class HealthScoreOut(CamelModel):
    member_id: str
    score: int
    status: str
    breakdown: Dict[str, Any]
    recommendations: List[str]
    explanation: str


# ----------------------------
# Medications
# ----------------------------
class MedicationIn(CamelModel):
    user_id: str = Field(min_length=1)
    member_id: Optional[str] = None
    name: str = Field(min_length=1)
    dosage: str = Field(min_length=1)
    frequency: str = Field(min_length=1)
    start_date: date
    end_date: Optional[date] = None
    side_effects: List[str] = []
    reminders: Dict[str, Any] = {}
    status: Optional[str] = None


class MedicationOut(CamelModel):
    id: str
    user_id: str
    member_id: Optional[str] = None
    name: str
    dosage: str
    frequency: str
    start_date: date
    end_date: Optional[date] = None
    side_effects: List[str] = []
    reminders: Dict[str, Any] = {}
    status: str
    created_at: Optional[datetime] = None


# ----------------------------
# Appointments
# ----------------------------
class AppointmentIn(CamelModel):
    user_id: Optional[str] = None
    member_id: Optional[str] = None
    doctor_name: str
    specialty: str
    hospital: Optional[str] = None
    date: date
    time: str
    notes: Optional[str] = None


class AppointmentOut(CamelModel):
    id: str
    user_id: str
    member_id: Optional[str] = None
    doctor_name: str
    specialty: str
    hospital: Optional[str] = None
    date: date
    time: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


# ----------------------------
# Reminders
# ----------------------------
class ReminderIn(CamelModel):
    user_id: Optional[str] = None
    member_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    type: str
    date: date
    time: str
    frequency: str
    priority: Optional[str] = None
    notifications: Dict[str, Any] = {}


class ReminderOut(CamelModel):
    id: str
    user_id: str
    member_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    type: str
    date: date
    time: str
    frequency: str
    priority: str
    notifications: Dict[str, Any] = {}
    created_at: Optional[datetime] = None


# ----------------------------
# AI insights
# ----------------------------
class InsightIn(CamelModel):
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    severity: Optional[str] = None
    category: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    action_items: Optional[Any] = None


class InsightOut(CamelModel):
    id: str
    user_id: str
    member_id: Optional[str] = None
    type: str
    title: str
    description: str
    severity: str
    category: str
    data: Any = None
    action_items: Any = None
    created_at: Optional[datetime] = None


# ----------------------------
# Health reports
# ----------------------------
class HealthReportIn(CamelModel):
    user_id: Optional[str] = None
    member_id: Optional[str] = None
    file_name: str = Field(min_length=1)
    file_type: str = Field(min_length=1)
    file_url: str = Field(min_length=1)
    file_size: Optional[int] = None


class HealthReportOut(CamelModel):
    id: str
    user_id: str
    member_id: Optional[str] = None
    file_name: str
    file_type: str
    file_url: str
    file_size: Optional[int] = None
    created_at: Optional[datetime] = None


class ReportValidation(BaseModel):
    ok: bool = True
    valid: bool
    score: float
    hits: int
    matched: List[str] = []
