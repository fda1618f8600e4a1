"""
Admin API: login plus everything behind the admin token.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from config import Settings
from database import Database
from dependencies import get_app_settings, get_db
from resources import collection_name
from schemas import (
    About,
    ChangePasswordRequest,
    ContactMessage,
    Dashboard,
    LoginRequest,
    Notification,
    NotificationIn,
    NotificationUpdate,
    ResumeOut,
    SecuritySettings,
    SystemStatus,
    Token,
    Visitor,
)
from security import (
    ADMIN_COLLECTION,
    AuthenticationError,
    authenticate_admin,
    change_password,
    create_access_token,
    get_current_admin,
)
from uploads import directory_usage, store_resume

logger = logging.getLogger(__name__)

NOTIFICATIONS = collection_name(Notification)

auth_router = APIRouter()
router = APIRouter(dependencies=[Depends(get_current_admin)])


def public_admin(admin: dict) -> dict:
    return {
        "id": admin["id"],
        "email": admin["email"],
        "role": admin.get("role", "admin"),
        "last_login": admin.get("last_login"),
    }


def format_uptime(seconds: int) -> str:
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m {secs}s"


# Auth
@auth_router.post("/login", response_model=Token)
def login(
    data: LoginRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    try:
        admin = authenticate_admin(db, data.email, data.password)
    except AuthenticationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc))
    token = create_access_token({"sub": admin["email"], "role": "admin"}, settings)
    return Token(access_token=token)


@router.get("/me")
def me(admin: dict = Depends(get_current_admin)):
    return public_admin(admin)


@router.post("/change-password")
def update_password(
    data: ChangePasswordRequest,
    admin: dict = Depends(get_current_admin),
    db: Database = Depends(get_db),
):
    try:
        change_password(db, admin, data.current_password, data.new_password)
    except AuthenticationError:
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    return {"message": "Password updated successfully"}


@router.get("/security-settings", response_model=SecuritySettings)
def get_security_settings(admin: dict = Depends(get_current_admin)):
    return SecuritySettings(**(admin.get("security_settings") or {}))


@router.put("/security-settings", response_model=SecuritySettings)
def put_security_settings(
    data: SecuritySettings,
    admin: dict = Depends(get_current_admin),
    db: Database = Depends(get_db),
):
    db.update_document(ADMIN_COLLECTION, admin["id"], {"security_settings": data.model_dump()})
    return data


# Resume
@router.post("/resume", response_model=ResumeOut)
def upload_resume(
    resume: UploadFile = File(...),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    url = store_resume(resume, settings.upload_dir, settings.max_upload_bytes)
    db.upsert_first_document(collection_name(About), {"resume_url": url})
    return ResumeOut(resume_url=url)


# Visitors & analytics
@router.get("/visitors")
def list_visitors(db: Database = Depends(get_db)):
    return db.get_documents(collection_name(Visitor), sort=[("visit_date", -1)])


@router.get("/analytics")
def analytics(db: Database = Depends(get_db)):
    visitors = collection_name(Visitor)
    total = db.count_documents(visitors)
    unique = len(db.collection(visitors).distinct("ip", {"ip": {"$ne": None}}))
    page_views = {}
    for doc in db.get_documents(visitors):
        page = doc.get("url") or "/"
        page_views[page] = page_views.get(page, 0) + 1
    return {
        "total_views": total,
        "unique_visitors": unique,
        "page_views": page_views,
        "last_updated": datetime.now(timezone.utc),
    }


# Notifications
@router.get("/notifications")
def list_notifications(db: Database = Depends(get_db)):
    return db.get_documents(NOTIFICATIONS, sort=[("timestamp", -1)])


@router.post("/notifications", status_code=201)
def create_notification(data: NotificationIn, db: Database = Depends(get_db)):
    notification = Notification(**data.model_dump(), timestamp=datetime.now(timezone.utc))
    _id = db.create_document(NOTIFICATIONS, notification)
    return db.get_document(NOTIFICATIONS, _id)


@router.patch("/notifications/{notification_id}")
def update_notification(
    notification_id: str, data: NotificationUpdate, db: Database = Depends(get_db)
):
    notification = db.update_document(NOTIFICATIONS, notification_id, data)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


# Contact form inbox
@router.get("/messages")
def list_messages(db: Database = Depends(get_db)):
    return db.get_documents(collection_name(ContactMessage), sort=[("created_at", -1)])


# System
def build_system_status(request: Request, db: Database, settings: Settings) -> SystemStatus:
    uptime_seconds = int(time.monotonic() - request.app.state.started_at)
    conn = db.status()
    collections = {}
    if conn.ok:
        collections = {name: db.count_documents(name) for name in conn.collections}
    upload_files, upload_bytes = directory_usage(settings.upload_dir)
    return SystemStatus(
        uptime=format_uptime(uptime_seconds),
        uptime_seconds=uptime_seconds,
        requests=request.app.state.request_count,
        database="connected" if conn.ok else "not-available",
        collections=collections,
        upload_files=upload_files,
        upload_storage_bytes=upload_bytes,
    )


@router.get("/system-status", response_model=SystemStatus)
def system_status(
    request: Request,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return build_system_status(request, db, settings)


@router.get("/dashboard", response_model=Dashboard)
def dashboard(
    request: Request,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    notifications = db.get_documents(NOTIFICATIONS, sort=[("timestamp", -1)], limit=20)
    return Dashboard(
        status=build_system_status(request, db, settings),
        notifications=notifications,
        unread_notifications=db.count_documents(NOTIFICATIONS, {"read": False}),
    )
