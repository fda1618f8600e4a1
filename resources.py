"""
Public content routes plus their admin-only write operations.

Every content collection gets the same list/get/create/update/delete routes
from `build_content_router`; singleton collections (about, home, contact,
settings) additionally get a `/current` read and upsert.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from database import Database, SortSpec
from dependencies import get_db
from schemas import (
    About,
    Contact,
    ContactMessage,
    Home,
    Notification,
    Project,
    Quote,
    Setting,
    VisitIn,
    Visitor,
)
from security import get_current_admin

logger = logging.getLogger(__name__)


def collection_name(model: Type[BaseModel]) -> str:
    return model.__name__.lower()


def build_content_router(
    model: Type[BaseModel],
    *,
    singleton: bool = False,
    sort: Optional[SortSpec] = None,
) -> APIRouter:
    collection = collection_name(model)
    router = APIRouter()

    if singleton:

        @router.get("/current")
        def get_current(db: Database = Depends(get_db)):
            return db.get_first_document(collection)

        @router.put("/current", dependencies=[Depends(get_current_admin)])
        def put_current(payload: model, db: Database = Depends(get_db)):
            return db.upsert_first_document(collection, payload)

    @router.get("")
    def list_items(db: Database = Depends(get_db)):
        return db.get_documents(collection, sort=sort)

    @router.get("/{item_id}")
    def get_item(item_id: str, db: Database = Depends(get_db)):
        item = db.get_document(collection, item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Not found")
        return item

    @router.post("", status_code=201, dependencies=[Depends(get_current_admin)])
    def create_item(payload: model, db: Database = Depends(get_db)):
        _id = db.create_document(collection, payload)
        return {"id": _id}

    @router.put("/{item_id}", dependencies=[Depends(get_current_admin)])
    def update_item(item_id: str, payload: model, db: Database = Depends(get_db)):
        item = db.update_document(collection, item_id, payload)
        if not item:
            raise HTTPException(status_code=404, detail="Not found")
        return item

    @router.delete("/{item_id}", dependencies=[Depends(get_current_admin)])
    def delete_item(item_id: str, db: Database = Depends(get_db)):
        if not db.delete_document(collection, item_id):
            raise HTTPException(status_code=404, detail="Not found")
        return {"deleted": 1}

    return router


# Projects
projects_router = build_content_router(Project, sort=[("order", 1), ("created_at", -1)])


@projects_router.post("/{item_id}/view")
def add_project_view(item_id: str, db: Database = Depends(get_db)):
    if not db.increment(collection_name(Project), item_id, "views"):
        raise HTTPException(status_code=404, detail="Not found")
    return {"message": "View added"}


# Quotes: the admin editor saves the whole list at once
quotes_router = build_content_router(Quote)


@quotes_router.put("", dependencies=[Depends(get_current_admin)])
def replace_quotes(quotes: List[Quote], db: Database = Depends(get_db)):
    return db.replace_documents(collection_name(Quote), quotes)


about_router = build_content_router(About, singleton=True)
home_router = build_content_router(Home, singleton=True)
settings_router = build_content_router(Setting, singleton=True)

# Contact: page details are admin-edited, messages come from the public form
contact_router = build_content_router(Contact, singleton=True)


@contact_router.post("/messages", status_code=201)
def submit_contact_message(message: ContactMessage, db: Database = Depends(get_db)):
    db.create_document(collection_name(ContactMessage), message)
    db.create_document(
        collection_name(Notification),
        Notification(
            title=f"New contact message from {message.name}",
            message=message.message,
            timestamp=datetime.now(timezone.utc),
        ),
    )
    logger.info("Contact message received from %s", message.email)
    return {"success": True, "message": "Message sent successfully!"}


# Visitors
visitors_router = APIRouter()


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@visitors_router.post("", status_code=201)
def log_visit(visit: VisitIn, request: Request, db: Database = Depends(get_db)):
    visitor = Visitor(
        ip=client_ip(request),
        user_agent=visit.user_agent or request.headers.get("user-agent"),
        url=visit.url,
        visit_date=datetime.now(timezone.utc),
    )
    db.create_document(collection_name(Visitor), visitor)
    return {"message": "Visitor logged"}


CONTENT_ROUTERS = [
    ("/api/projects", projects_router, "projects"),
    ("/api/about", about_router, "about"),
    ("/api/home", home_router, "home"),
    ("/api/quotes", quotes_router, "quotes"),
    ("/api/contact", contact_router, "contact"),
    ("/api/settings", settings_router, "settings"),
    ("/api/visitors", visitors_router, "visitors"),
]
