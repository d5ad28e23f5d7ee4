"""
Content Schemas for the Xdiner site (in-memory, via Pydantic)

Every entity lives inside a single SiteContent aggregate owned by the
content store. JSON uses camelCase field names (primaryColor, seoTitle, ...)
through the alias generator; Python code uses the snake_case attributes.

Collections:
- settings (singleton)
- hours
- menu
- reservations
- inquiries
- blog
"""
from datetime import date as CalendarDate
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Theme = Literal["modern", "warm", "dark"]
Font = Literal["sans", "serif", "mono"]
ReservationStatus = Literal["pending", "confirmed", "cancelled"]

# Open to extension: any non-empty category is accepted, these drive the filter chips
MENU_CATEGORIES = ["Mains", "Sides", "Appetizers", "Drinks"]


class ContentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Branding / SEO
class SiteSettings(ContentModel):
    name: str
    tagline: str
    primary_color: str = Field(..., description="Hex value or named color token")
    theme: Theme = "modern"
    font: Font = "sans"
    seo_title: str = ""
    seo_description: str = ""


class SettingsUpdate(ContentModel):
    """Partial settings edit; only the fields that were sent are applied."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    name: Optional[str] = None
    tagline: Optional[str] = None
    primary_color: Optional[str] = None
    theme: Optional[str] = None
    font: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


# Opening hours
class HoursEntry(ContentModel):
    day: str  # e.g. "Mon-Fri"
    time: str  # e.g. "10:00 AM - 10:00 PM"


# Menu
class MenuItem(ContentModel):
    id: int = Field(..., ge=1)
    name: str
    price: float
    category: str
    description: str = ""
    image: str  # URL or data URI


class MenuItemInput(ContentModel):
    id: Optional[int] = None
    name: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


# Reservations
class Reservation(ContentModel):
    id: int
    name: str
    email: str
    date: CalendarDate
    time: str  # HH:MM
    guests: int = Field(..., ge=1)
    status: ReservationStatus = "pending"


class ReservationInput(ContentModel):
    # kept loose so the store reports calendar/shape problems itself
    name: str = ""
    email: str = ""
    date: str = ""
    time: str = ""
    guests: int = 0


# Contact inquiries
class Inquiry(ContentModel):
    id: int
    name: str
    subject: str
    message: str
    date: CalendarDate


class InquiryInput(ContentModel):
    name: str = ""
    subject: str = ""
    message: str = ""
    date: Optional[str] = None


# Blog
class BlogPost(ContentModel):
    id: int
    title: str
    date: CalendarDate
    content: str
    image: str


class BlogPostInput(ContentModel):
    title: str = ""
    content: str = ""
    image: Optional[str] = None
    date: Optional[str] = None


# Aggregate root
class SiteContent(ContentModel):
    version: int = 1
    settings: SiteSettings
    hours: List[HoursEntry] = []
    menu: List[MenuItem] = []
    reservations: List[Reservation] = []
    inquiries: List[Inquiry] = []
    blog: List[BlogPost] = []


# View router state
class ViewState(ContentModel):
    active_view: str
    active_admin_tab: str
