import logging
import os
import shutil
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, List, Optional

from fastapi import Body, Depends, FastAPI, File, Form, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import config, crud, llm, schemas
from .database import Base, engine, get_db
from .ocr import extract_text_from_file, file_extension
from .validation import score_medical_text

logger = logging.getLogger(__name__)


def error_response(message: str, e: Optional[Exception] = None, status_code: int = 500):
    content = {"error": message}
    if e is not None:
        content["details"] = str(e)
    return JSONResponse(status_code=status_code, content=content)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.configure_logging()
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Family Health Hub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------------------
# Health
# ----------------------------
@app.get("/health")
def health():
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}


@app.get("/test")
def connection_test(db: Session = Depends(get_db)):
    try:
        return {"success": True, "userCount": crud.count_users(db), "message": "Database connection working"}
    except Exception as e:
        logger.exception("Database test failed")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})


# ----------------------------
# Users
# ----------------------------
@app.get("/users", response_model=schemas.UserOut)
def get_user(user_id: Optional[str] = Query(None, alias="userId"), db: Session = Depends(get_db)):
    try:
        user = crud.get_or_create_user(db, user_id or config.DEFAULT_USER_ID)
        return schemas.UserOut.model_validate(user)
    except Exception as e:
        logger.exception("Error fetching user")
        return error_response("Failed to fetch user", e)


@app.post("/users", response_model=schemas.UserOut)
def create_user(payload: Any = Body(None), db: Session = Depends(get_db)):
    try:
        data = schemas.UserIn.model_validate(payload or {})
        user = crud.create_user(db, data, config.DEFAULT_USER_ID)
        return schemas.UserOut.model_validate(user)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating user")
        return error_response("Failed to create user", e)


# ----------------------------
# Family members
# ----------------------------
@app.get("/family-members", response_model=List[schemas.FamilyMemberSummary])
def list_family_members(user_id: Optional[str] = Query(None, alias="userId"), db: Session = Depends(get_db)):
    try:
        members = [crud.member_summary(m) for m in crud.list_family_members(db, user_id)]
        logger.info("Found %d family members for user %s", len(members), user_id)
        return members
    except Exception as e:
        logger.exception("Error fetching family members")
        return error_response("Failed to fetch family members", e)


@app.get("/family-members-simple", response_model=List[schemas.FamilyMemberOut])
def list_family_members_simple(db: Session = Depends(get_db)):
    try:
        return [schemas.FamilyMemberOut.model_validate(m) for m in crud.list_family_members(db)]
    except Exception as e:
        logger.exception("Error fetching family members")
        return error_response("Failed to fetch family members", e)


@app.post("/family-members", response_model=schemas.FamilyMemberOut, status_code=201)
def create_family_member(payload: Any = Body(None), db: Session = Depends(get_db)):
    try:
        data = schemas.FamilyMemberCreate.model_validate(payload)
        member = crud.create_family_member(db, data)
        logger.info("Family member created: %s", member.name)
        return schemas.FamilyMemberOut.model_validate(member)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating family member")
        return error_response("Failed to create family member", e)


@app.put("/family-members/{member_id}", response_model=schemas.FamilyMemberOut)
def update_family_member(member_id: str, payload: Any = Body(None), db: Session = Depends(get_db)):
    try:
        data = schemas.FamilyMemberUpdate.model_validate(payload or {})
        member = crud.update_family_member(db, member_id, data)
        return schemas.FamilyMemberOut.model_validate(member)
    except Exception as e:
        db.rollback()
        logger.exception("Error updating family member %s", member_id)
        return error_response("Failed to update family member", e)


@app.delete("/family-members/{member_id}")
def delete_family_member(member_id: str, db: Session = Depends(get_db)):
    try:
        crud.delete_family_member(db, member_id)
        return {"success": True}
    except Exception as e:
        db.rollback()
        logger.exception("Error deleting family member %s", member_id)
        return error_response("Failed to delete family member", e)


@app.get("/family-members/{member_id}/health-score", response_model=schemas.HealthScoreOut)
def family_member_health_score(member_id: str, db: Session = Depends(get_db)):
    try:
        return crud.member_health_score(crud.get_family_member(db, member_id))
    except Exception as e:
        logger.exception("Error scoring family member %s", member_id)
        return error_response("Failed to calculate health score", e)


# ----------------------------
# Medications
# ----------------------------
@app.get("/medications", response_model=List[schemas.MedicationOut])
def list_medications(
    user_id: Optional[str] = Query(None, alias="userId"),
    member_id: Optional[str] = Query(None, alias="memberId"),
    db: Session = Depends(get_db),
):
    try:
        return [schemas.MedicationOut.model_validate(m) for m in crud.list_medications(db, user_id, member_id)]
    except Exception as e:
        logger.exception("Error fetching medications")
        return error_response("Failed to fetch medications", e)


@app.post("/medications", response_model=schemas.MedicationOut, status_code=201)
def create_medication(payload: Any = Body(None), db: Session = Depends(get_db)):
    try:
        data = schemas.MedicationIn.model_validate(payload)
        return schemas.MedicationOut.model_validate(crud.create_medication(db, data))
    except Exception as e:
        db.rollback()
        logger.exception("Error creating medication")
        return error_response("Failed to create medication", e)


# ----------------------------
# Appointments
# ----------------------------
@app.get("/appointments", response_model=List[schemas.AppointmentOut])
def list_appointments(
    user_id: Optional[str] = Query(None, alias="userId"),
    member_id: Optional[str] = Query(None, alias="memberId"),
    db: Session = Depends(get_db),
):
    try:
        return [schemas.AppointmentOut.model_validate(a) for a in crud.list_appointments(db, user_id, member_id)]
    except Exception as e:
        logger.exception("Error fetching appointments")
        return error_response("Failed to fetch appointments", e)


@app.post("/appointments", response_model=schemas.AppointmentOut, status_code=201)
def create_appointment(payload: Any = Body(None), db: Session = Depends(get_db)):
    try:
        data = schemas.AppointmentIn.model_validate(payload)
        appointment = crud.create_appointment(db, data.user_id or config.DEFAULT_USER_ID, data)
        return schemas.AppointmentOut.model_validate(appointment)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating appointment")
        return error_response("Failed to create appointment", e)


# ----------------------------
# Reminders
# ----------------------------
@app.get("/reminders", response_model=List[schemas.ReminderOut])
def list_reminders(
    user_id: Optional[str] = Query(None, alias="userId"),
    member_id: Optional[str] = Query(None, alias="memberId"),
    db: Session = Depends(get_db),
):
    try:
        return [schemas.ReminderOut.model_validate(r) for r in crud.list_reminders(db, user_id, member_id)]
    except Exception as e:
        logger.exception("Error fetching reminders")
        return error_response("Failed to fetch reminders", e)


@app.post("/reminders", response_model=schemas.ReminderOut, status_code=201)
def create_reminder(payload: Any = Body(None), db: Session = Depends(get_db)):
    try:
        data = schemas.ReminderIn.model_validate(payload)
        reminder = crud.create_reminder(db, data.user_id or config.DEFAULT_USER_ID, data)
        return schemas.ReminderOut.model_validate(reminder)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating reminder")
        return error_response("Failed to create reminder", e)


# ----------------------------
# Reports
# ----------------------------
@app.get("/reports", response_model=List[schemas.HealthReportOut])
def list_reports(
    user_id: Optional[str] = Query(None, alias="userId"),
    member_id: Optional[str] = Query(None, alias="memberId"),
    db: Session = Depends(get_db),
):
    try:
        return [schemas.HealthReportOut.model_validate(r) for r in crud.list_health_reports(db, user_id, member_id)]
    except Exception as e:
        logger.exception("Error fetching health reports")
        return error_response("Failed to fetch health reports", e)


@app.post("/reports", response_model=schemas.HealthReportOut, status_code=201)
def create_report(payload: Any = Body(None), db: Session = Depends(get_db)):
    try:
        data = schemas.HealthReportIn.model_validate(payload)
        report = crud.create_health_report(db, data.user_id or config.DEFAULT_USER_ID, data)
        return schemas.HealthReportOut.model_validate(report)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating health report")
        return error_response("Failed to create health report", e)


@app.post("/reports/validate")
def validate_report(payload: Any = Body(None)):
    text = payload.get("text") if isinstance(payload, dict) else None
    if not text or not isinstance(text, str):
        return JSONResponse(status_code=400, content={"ok": False, "reason": "No text provided"})
    try:
        return schemas.ReportValidation(**score_medical_text(text))
    except Exception:
        logger.exception("Report validation failed")
        return JSONResponse(status_code=500, content={"ok": False, "reason": "Validation error"})


@app.post("/reports/upload", status_code=201)
def upload_report(
    user_id: Optional[str] = Form(None, alias="userId"),
    member_id: Optional[str] = Form(None, alias="memberId"),
    file: UploadFile = File(None),
    db: Session = Depends(get_db),
):
    if not file or not file.filename:
        return error_response("No file uploaded", status_code=400)
    ext = file_extension(file.filename)
    if ext not in config.ALLOWED_EXTENSIONS:
        return error_response(f"Unsupported file type: .{ext}", status_code=400)

    try:
        os.makedirs(config.UPLOAD_DIR, exist_ok=True)
        file_path = os.path.abspath(os.path.join(config.UPLOAD_DIR, f"{uuid.uuid4().hex}_{file.filename}"))
        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)

        text = extract_text_from_file(file_path)
        validation = score_medical_text(text) if text else {"valid": False, "score": 0.0, "hits": 0, "matched": []}

        data = schemas.HealthReportIn(
            member_id=member_id or None,
            file_name=file.filename,
            file_type=file.content_type or ext,
            file_url=file_path,
            file_size=os.path.getsize(file_path),
        )
        report = crud.create_health_report(db, user_id or config.DEFAULT_USER_ID, data)
        return {
            "report": schemas.HealthReportOut.model_validate(report).model_dump(mode="json", by_alias=True),
            "validation": validation,
        }
    except Exception as e:
        db.rollback()
        logger.exception("Error uploading health report")
        return error_response("Failed to upload health report", e)


# ----------------------------
# AI insights
# ----------------------------
def _persist_insights(db: Session, user_id: str, member_id, insights: list):
    created = crud.create_insights(db, user_id, member_id, insights)
    return {
        "ok": True,
        "created": [schemas.InsightOut.model_validate(i).model_dump(mode="json", by_alias=True) for i in created],
    }


@app.post("/ai/insights")
def create_insights(payload: Any = Body(None), db: Session = Depends(get_db)):
    body = payload if isinstance(payload, dict) else {}
    user_id = body.get("userId")
    insights = body.get("insights")
    if not user_id or not isinstance(insights, list):
        return error_response("userId and insights[] required", status_code=400)
    try:
        return _persist_insights(db, user_id, body.get("memberId"), insights)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating AI insights")
        return error_response("Failed to create insights", e)


@app.post("/ai/analyze")
def analyze_report(payload: Any = Body(None), db: Session = Depends(get_db)):
    body = payload if isinstance(payload, dict) else {}
    user_id = body.get("userId")
    text = body.get("text")
    if not user_id or not text or not isinstance(text, str):
        return error_response("userId and text required", status_code=400)
    try:
        insights = llm.generate_insights(text)
        logger.info("Model suggested %d insights for user %s", len(insights), user_id)
        return _persist_insights(db, user_id, body.get("memberId"), insights)
    except Exception as e:
        db.rollback()
        logger.exception("Error analyzing report text")
        return error_response("Failed to analyze report", e)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
