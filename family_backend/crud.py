import logging
from datetime import date

from sqlalchemy.orm import Session

import health_score

from . import models, schemas

logger = logging.getLogger(__name__)


# ----------------------------
# Users
# ----------------------------
def get_user(db: Session, user_id: str):
    return db.get(models.User, user_id)


def get_or_create_user(db: Session, user_id: str):
    """Return the user, creating a lightweight record when it does not exist yet."""
    user = get_user(db, user_id)
    if user:
        return user
    user = models.User(id=user_id, email=f"{user_id}@example.com", name="Demo User")
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Provisioned user %s", user_id)
    return user


def create_user(db: Session, data: schemas.UserIn, default_id: str):
    user_id = data.id or default_id
    user = models.User(id=user_id, email=data.email or f"{user_id}@example.com", name=data.name or "Demo User")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def count_users(db: Session) -> int:
    return db.query(models.User).count()


# ----------------------------
# Family members
# ----------------------------
def list_family_members(db: Session, user_id=None):
    q = db.query(models.FamilyMember)
    if user_id:
        q = q.filter(models.FamilyMember.user_id == user_id)
    return q.order_by(models.FamilyMember.created_at.desc()).all()


def get_family_member(db: Session, member_id: str):
    member = db.get(models.FamilyMember, member_id)
    if not member:
        raise LookupError(f"Family member {member_id} not found")
    return member


def next_appointment(member: models.FamilyMember, today=None):
    today = today or date.today()
    upcoming = [a.date for a in member.appointments if a.date and a.date > today]
    return min(upcoming) if upcoming else None


def score_input(member: models.FamilyMember, today=None) -> dict:
    upcoming = next_appointment(member, today)
    return {
        "dob": member.dob,
        "conditions": member.conditions or [],
        "medications": len(member.medications),
        "lastCheckup": member.last_checkup,
        "nextAppointment": upcoming.isoformat() if upcoming else "",
    }


def member_summary(member: models.FamilyMember, today=None) -> schemas.FamilyMemberSummary:
    facts = score_input(member, today)
    breakdown = health_score.compute_score(facts, today)
    base = schemas.FamilyMemberOut.model_validate(member).model_dump()
    return schemas.FamilyMemberSummary(
        **base,
        medications=facts["medications"],
        next_appointment=facts["nextAppointment"],
        health_score=breakdown.final_score,
        status=health_score.health_status(breakdown.final_score),
    )


def member_health_score(member: models.FamilyMember, today=None) -> schemas.HealthScoreOut:
    facts = score_input(member, today)
    breakdown = health_score.compute_score(facts, today)
    return schemas.HealthScoreOut(
        member_id=member.id,
        score=breakdown.final_score,
        status=health_score.health_status(breakdown.final_score),
        breakdown=breakdown.to_dict(),
        recommendations=health_score.recommendations(breakdown),
        explanation=health_score.explain(facts, today),
    )


def create_family_member(db: Session, data: schemas.FamilyMemberCreate):
    user = get_or_create_user(db, data.user_id)
    fields = data.model_dump(exclude={"user_id"})
    fields["dob"] = data.dob or date.today()
    fields["gender"] = data.gender or "Unknown"
    member = models.FamilyMember(user_id=user.id, **fields)
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def update_family_member(db: Session, member_id: str, data: schemas.FamilyMemberUpdate):
    member = get_family_member(db, member_id)
    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(member, k, v)
    db.commit()
    db.refresh(member)
    return member


def delete_family_member(db: Session, member_id: str):
    member = get_family_member(db, member_id)
    db.delete(member)
    db.commit()


# ----------------------------
# Member-scoped resources
# ----------------------------
def _scoped(db: Session, model, user_id=None, member_id=None):
    q = db.query(model)
    if user_id:
        q = q.filter(model.user_id == user_id)
    if member_id:
        q = q.filter(model.member_id == member_id)
    return q.order_by(model.created_at.desc()).all()


def _save(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def list_medications(db: Session, user_id=None, member_id=None):
    return _scoped(db, models.Medication, user_id, member_id)


def create_medication(db: Session, data: schemas.MedicationIn):
    get_or_create_user(db, data.user_id)
    fields = data.model_dump()
    fields["status"] = data.status or "active"
    return _save(db, models.Medication(**fields))


def list_appointments(db: Session, user_id=None, member_id=None):
    return _scoped(db, models.Appointment, user_id, member_id)


def create_appointment(db: Session, user_id: str, data: schemas.AppointmentIn):
    get_or_create_user(db, user_id)
    fields = data.model_dump(exclude={"user_id"})
    return _save(db, models.Appointment(user_id=user_id, **fields))


def list_reminders(db: Session, user_id=None, member_id=None):
    return _scoped(db, models.Reminder, user_id, member_id)


def create_reminder(db: Session, user_id: str, data: schemas.ReminderIn):
    get_or_create_user(db, user_id)
    fields = data.model_dump(exclude={"user_id"})
    fields["priority"] = data.priority or "medium"
    return _save(db, models.Reminder(user_id=user_id, **fields))


def list_health_reports(db: Session, user_id=None, member_id=None):
    return _scoped(db, models.HealthReport, user_id, member_id)


def create_health_report(db: Session, user_id: str, data: schemas.HealthReportIn):
    get_or_create_user(db, user_id)
    fields = data.model_dump(exclude={"user_id"})
    return _save(db, models.HealthReport(user_id=user_id, **fields))


# ----------------------------
# AI insights
# ----------------------------
def create_insight(db: Session, user_id: str, member_id, item: schemas.InsightIn):
    insight = models.AIInsight(
        user_id=user_id,
        member_id=member_id or None,
        type=item.type or "recommendation",
        title=item.title or "AI Insight",
        description=item.description or "",
        severity=item.severity or "low",
        category=item.category or "general",
        data=item.data or {},
        action_items=item.action_items or {},
    )
    return _save(db, insight)


def create_insights(db: Session, user_id: str, member_id, items):
    """Persist insights one by one; earlier commits stay if a later one fails."""
    get_or_create_user(db, user_id)
    created = []
    for raw in items:
        item = raw if isinstance(raw, schemas.InsightIn) else schemas.InsightIn.model_validate(raw)
        created.append(create_insight(db, user_id, member_id, item))
    return created
