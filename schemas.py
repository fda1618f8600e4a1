"""
Database Schemas for the Portfolio CMS

Each Pydantic model = one MongoDB collection (lowercased class name).
Request/response DTOs live at the bottom of the module.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

# Auth
class Admin(BaseModel):
    email: str
    password_hash: str
    role: str = Field(default="admin")
    last_login: Optional[datetime] = None
    security_settings: Dict[str, Any] = {}

# Content
class Project(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    image: Optional[str] = None  # image url
    tech: List[str] = []
    link: Optional[str] = None  # live demo
    github: Optional[str] = None
    # admin UI toggles
    show_link: bool = True
    show_github: bool = True
    category: str = Field(default="web")
    featured: bool = False
    visible: bool = True
    order: int = 0
    complexity: Literal["beginner", "intermediate", "advanced"] = "intermediate"

class TechStackItem(BaseModel):
    name: str
    icon: Optional[str] = None  # lucide icon name

class About(BaseModel):
    tagline: Optional[str] = None
    short_intro: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    tech_stack: List[TechStackItem] = []

class HeroButton(BaseModel):
    text: str
    link: str
    variant: Literal["primary", "secondary", "outline"] = "primary"

class Home(BaseModel):
    hero_tagline: Optional[str] = None
    hero_description: Optional[str] = None
    show_projects: bool = True
    show_services: bool = True
    show_testimonials: bool = True
    hero_background_style: Literal["default", "minimal", "gradient", "particles"] = "default"
    hero_buttons: List[HeroButton] = []
    featured_projects: List[str] = []  # project ids
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None

class Quote(BaseModel):
    text: str = Field(min_length=1)
    author: Optional[str] = None
    category: Optional[str] = None
    visible: bool = True

class ContactField(BaseModel):
    id: str
    label: str
    type: Literal["text", "email", "textarea", "select"] = "text"
    required: bool = False
    placeholder: Optional[str] = None
    options: List[str] = []

class Contact(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    social_links: Dict[str, str] = {}
    form_enabled: bool = True
    contact_form_fields: List[ContactField] = []
    auto_reply_message: Optional[str] = None
    notification_emails: List[str] = []

class Setting(BaseModel):
    primary_color: Optional[str] = None
    accent_color: Optional[str] = None
    enable_dark_mode: Optional[bool] = None
    site_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: List[str] = []
    enable_animations: Optional[bool] = None
    language: Optional[str] = None
    timezone: Optional[str] = None
    date_format: Optional[str] = None
    enable_maintenance: Optional[bool] = None
    maintenance_message: Optional[str] = None
    cookie_consent: Optional[bool] = None
    analytics_code: Optional[str] = None
    social_sharing: Optional[bool] = None
    enable_comments: Optional[bool] = None

class ContactMessage(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    message: str = Field(min_length=1)

class Visitor(BaseModel):
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    url: str = "/"
    visit_date: datetime

class Notification(BaseModel):
    type: Literal["info", "warning", "error"] = "info"
    title: str
    message: str
    timestamp: datetime
    read: bool = False

# ====
# DTOs
# ====
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class LoginRequest(BaseModel):
    email: str
    password: str

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)

class SecuritySettings(BaseModel):
    session_timeout: int = Field(default=30, ge=1)  # minutes
    max_login_attempts: int = Field(default=5, ge=1)
    lockout_duration: int = Field(default=15, ge=0)  # minutes

class VisitIn(BaseModel):
    url: str = "/"
    user_agent: Optional[str] = None

class NotificationIn(BaseModel):
    type: Literal["info", "warning", "error"] = "info"
    title: str = Field(min_length=1)
    message: str = ""

class NotificationUpdate(BaseModel):
    read: bool

class ResumeOut(BaseModel):
    resume_url: str

class AdminSection(str, Enum):
    dashboard = "dashboard"
    home = "home"
    about = "about"
    projects = "projects"
    contact = "contact"
    settings = "settings"
    security = "security"
    system = "system"
    logs = "logs"

class SystemStatus(BaseModel):
    uptime: str
    uptime_seconds: int
    requests: int
    database: Literal["connected", "not-available"]
    collections: Dict[str, int] = {}
    upload_files: int = 0
    upload_storage_bytes: int = 0

class Dashboard(BaseModel):
    status: SystemStatus
    notifications: List[dict]
    unread_notifications: int
    sections: List[AdminSection] = list(AdminSection)
