"""
In-memory content store for the Xdiner site.

The whole site lives in one SiteContent aggregate. Every mutation works on a
deep copy of the current aggregate and commits it with a single reference
swap, so a rejected mutation leaves the store exactly as it was and readers
never observe a half-applied change. Readers always receive value copies.
"""
import logging
import math
import re
import threading
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union, get_args

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from config import DEFAULT_FALLBACK_IMAGE
from errors import ContentError, InvalidTransitionError, NotFoundError, ValidationError
from schemas import (
    BlogPost,
    Font,
    HoursEntry,
    Inquiry,
    MenuItem,
    Reservation,
    ReservationStatus,
    SiteContent,
    SiteSettings,
    Theme,
)

logger = logging.getLogger(__name__)

Payload = Union[BaseModel, Mapping[str, Any]]

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
NAMED_COLORS = frozenset({
    "black", "white", "gray", "red", "orange", "amber", "yellow", "lime", "green",
    "emerald", "teal", "cyan", "sky", "blue", "indigo", "violet", "purple",
    "fuchsia", "pink", "rose", "brown", "navy", "maroon", "olive", "gold",
})

THEMES = get_args(Theme)
FONTS = get_args(Font)
STATUSES = get_args(ReservationStatus)

# cancelled is terminal
STATUS_TRANSITIONS: Dict[str, frozenset] = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"cancelled"}),
    "cancelled": frozenset(),
}


def seed_content(fallback_image: str = DEFAULT_FALLBACK_IMAGE) -> SiteContent:
    return SiteContent(
        settings=SiteSettings(
            name="Xdiner",
            tagline="Modern Fast Food Reimagined",
            primary_color="#ef4444",
            theme="modern",
            font="sans",
            seo_title="Xdiner | Best Fast Food in Town",
            seo_description="High-quality ingredients, fast service, and a modern dining experience for local foodies.",
        ),
        hours=[
            HoursEntry(day="Mon-Fri", time="10:00 AM - 10:00 PM"),
            HoursEntry(day="Sat-Sun", time="09:00 AM - 11:00 PM"),
        ],
        menu=[
            MenuItem(
                id=1, name="Signature X-Burger", price=12.99, category="Mains",
                description="Wagyu beef, secret X-sauce, brioche bun.",
                image="https://images.unsplash.com/photo-1568901346375-23c9450c58cd?auto=format&fit=crop&q=80&w=400",
            ),
            MenuItem(
                id=2, name="Truffle Parm Fries", price=6.50, category="Sides",
                description="Hand-cut potatoes, white truffle oil, fresh parmesan.",
                image="https://images.unsplash.com/photo-1573080496219-bb080dd4f877?auto=format&fit=crop&q=80&w=400",
            ),
            MenuItem(
                id=3, name="Spicy Buffalo Wings", price=9.99, category="Appetizers",
                description="8 pieces, house-made buffalo glaze, celery sticks.",
                image="https://images.unsplash.com/photo-1527477396000-e27163b481c2?auto=format&fit=crop&q=80&w=400",
            ),
            MenuItem(
                id=4, name="Matcha Milkshake", price=7.00, category="Drinks",
                description="Ceremonial grade matcha, vanilla bean ice cream.",
                image="https://images.unsplash.com/photo-1572490122747-3968b75cc699?auto=format&fit=crop&q=80&w=400",
            ),
        ],
        reservations=[
            Reservation(
                id=1, name="John Doe", email="john@example.com",
                date=date(2024, 5, 20), time="19:00", guests=2, status="pending",
            ),
        ],
        inquiries=[
            Inquiry(
                id=1, name="Jane Smith", subject="Catering",
                message="Do you offer office catering?", date=date(2024, 5, 18),
            ),
        ],
        blog=[
            BlogPost(
                id=1, title="Our Local Farm Partnerships", date=date(2024, 5, 15),
                content="We believe in sourcing locally to provide the freshest fast food experience...",
                image="https://images.unsplash.com/photo-1500651230702-0e2d8a49d4ad?auto=format&fit=crop&q=80&w=400",
            ),
        ],
    )


# -----------------
# Helpers
# -----------------
def _fields(payload: Payload) -> Dict[str, Any]:
    if isinstance(payload, BaseModel):
        return payload.model_dump(exclude_unset=True)
    return dict(payload)


def _field_names(model: type) -> Dict[str, str]:
    """Map both snake_case names and camelCase aliases onto attribute names."""
    names = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


SETTINGS_FIELDS = _field_names(SiteSettings)


def _build(model: type, data: Dict[str, Any]):
    try:
        return model(**data)
    except PydanticValidationError as exc:
        problems = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
        raise ValidationError(f"invalid {model.__name__}: {'; '.join(problems)}", errors=problems) from exc


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _next_id(items: Iterable[Any]) -> int:
    return max((item.id for item in items), default=0) + 1


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _parse_time(value: Any) -> Optional[str]:
    try:
        return datetime.strptime(str(value).strip(), "%H:%M").strftime("%H:%M")
    except ValueError:
        return None


def _is_color(value: str) -> bool:
    return bool(HEX_COLOR_PATTERN.match(value)) or value.lower() in NAMED_COLORS


class ContentStore:
    """Single-writer store holding the site aggregate for the process lifetime."""

    def __init__(
        self,
        content: Optional[SiteContent] = None,
        *,
        max_party_size: int = 20,
        fallback_image: str = DEFAULT_FALLBACK_IMAGE,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._content = (content or seed_content(fallback_image)).model_copy(deep=True)
        self._lock = threading.Lock()
        self.max_party_size = max_party_size
        self.fallback_image = fallback_image
        self._today = today

    @property
    def version(self) -> int:
        return self._content.version

    def get_snapshot(self) -> SiteContent:
        with self._lock:
            return self._content.model_copy(deep=True)

    def _mutate(self, action: str, change: Callable[[SiteContent], None]) -> SiteContent:
        with self._lock:
            draft = self._content.model_copy(deep=True)
            try:
                change(draft)
            except ContentError as exc:
                logger.info("Rejected %s: %s", action, exc)
                raise
            if draft == self._content:
                logger.debug("No-op %s (version %d)", action, draft.version)
                return draft
            draft.version = self._content.version + 1
            self._content = draft
            logger.info("Committed %s (version %d)", action, draft.version)
            return draft.model_copy(deep=True)

    # -----------------
    # Settings / hours
    # -----------------
    def replace_settings(self, partial: Payload) -> SiteContent:
        changes = _fields(partial)

        def apply(draft: SiteContent) -> None:
            unknown = sorted(key for key in changes if key not in SETTINGS_FIELDS)
            if unknown:
                raise ValidationError(f"unknown settings field(s): {', '.join(unknown)}")
            merged = draft.settings.model_dump()
            for key, value in changes.items():
                merged[SETTINGS_FIELDS[key]] = value

            problems = []
            if not isinstance(merged["name"], str) or not merged["name"].strip():
                problems.append("name must not be empty")
            color = merged["primary_color"]
            if not isinstance(color, str) or not _is_color(color.strip()):
                problems.append(f"primaryColor {color!r} is not a recognized color")
            else:
                merged["primary_color"] = color.strip()
            if merged["theme"] not in THEMES:
                problems.append(f"theme must be one of {', '.join(THEMES)}")
            if merged["font"] not in FONTS:
                problems.append(f"font must be one of {', '.join(FONTS)}")
            if problems:
                raise ValidationError("; ".join(problems), errors=problems)
            draft.settings = _build(SiteSettings, merged)

        return self._mutate("settings update", apply)

    def replace_hours(self, entries: List[Payload]) -> SiteContent:
        rows = [_fields(entry) for entry in entries]

        def apply(draft: SiteContent) -> None:
            hours = []
            for position, row in enumerate(rows):
                day, span = _text(row, "day"), _text(row, "time")
                if not day or not span:
                    raise ValidationError(f"hours entry {position} needs both a day and a time")
                hours.append(HoursEntry(day=day, time=span))
            draft.hours = hours

        return self._mutate("hours update", apply)

    # -----------------
    # Menu
    # -----------------
    def upsert_menu_item(self, item: Payload) -> SiteContent:
        data = _fields(item)

        def apply(draft: SiteContent) -> None:
            item_id = data.get("id")
            index = next((i for i, existing in enumerate(draft.menu) if existing.id == item_id), None)
            if index is not None:
                merged = draft.menu[index].model_dump()
                merged.update({k: v for k, v in data.items() if v is not None})
            else:
                # an explicit unused id is kept as given, so repeating the same upsert stays a no-op
                if item_id is None:
                    item_id = _next_id(draft.menu)
                elif isinstance(item_id, bool) or not isinstance(item_id, int) or item_id < 1:
                    raise ValidationError("menu item id must be a positive integer")
                merged = {k: v for k, v in data.items() if v is not None}
                merged["id"] = item_id
                merged.setdefault("description", "")
                merged.setdefault("image", self.fallback_image)

            price = merged.get("price")
            if isinstance(price, bool) or not isinstance(price, (int, float)) or not math.isfinite(price):
                raise ValidationError("price must be a finite number")
            if price < 0:
                raise ValidationError("price must not be negative")
            # folds -0.0 into 0.0
            merged["price"] = abs(float(price))
            if not _text(merged, "name"):
                raise ValidationError("menu item name must not be empty")
            if not _text(merged, "category"):
                raise ValidationError("menu item category must not be empty")

            built = _build(MenuItem, merged)
            if index is not None:
                draft.menu[index] = built
            else:
                draft.menu.append(built)

        return self._mutate("menu upsert", apply)

    def remove_menu_item(self, item_id: int) -> SiteContent:
        def apply(draft: SiteContent) -> None:
            draft.menu = [item for item in draft.menu if item.id != item_id]

        return self._mutate(f"menu removal of {item_id}", apply)

    # -----------------
    # Reservations
    # -----------------
    def add_reservation(self, booking: Payload) -> SiteContent:
        data = _fields(booking)

        def apply(draft: SiteContent) -> None:
            problems = []
            name = _text(data, "name")
            if not name:
                problems.append("name must not be empty")
            email = _text(data, "email")
            if not EMAIL_PATTERN.match(email):
                problems.append("email must look like name@example.com")
            day = _parse_date(data.get("date"))
            if day is None:
                problems.append("date must be a valid calendar date (YYYY-MM-DD)")
            elif day < self._today():
                problems.append("date must not be in the past")
            slot = _parse_time(data.get("time"))
            if slot is None:
                problems.append("time must be a valid HH:MM time")
            guests = data.get("guests")
            if isinstance(guests, bool) or not isinstance(guests, int) or guests < 1:
                problems.append("guests must be at least 1")
            elif guests > self.max_party_size:
                problems.append(f"guests must be at most {self.max_party_size}")
            if problems:
                raise ValidationError("; ".join(problems), errors=problems)

            draft.reservations.append(Reservation(
                id=_next_id(draft.reservations),
                name=name,
                email=email,
                date=day,
                time=slot,
                guests=guests,
                status="pending",
            ))

        return self._mutate("reservation", apply)

    def update_reservation_status(self, reservation_id: int, status: str) -> SiteContent:
        def apply(draft: SiteContent) -> None:
            if status not in STATUSES:
                raise ValidationError(f"status must be one of {', '.join(STATUSES)}")
            reservation = next((r for r in draft.reservations if r.id == reservation_id), None)
            if reservation is None:
                raise NotFoundError(f"reservation {reservation_id} not found")
            if reservation.status == status:
                return
            if status not in STATUS_TRANSITIONS[reservation.status]:
                raise InvalidTransitionError(
                    f"reservation {reservation_id} cannot go from {reservation.status} to {status}",
                    current=reservation.status,
                    requested=status,
                )
            reservation.status = status

        return self._mutate(f"reservation {reservation_id} status", apply)

    # -----------------
    # Inquiries / blog
    # -----------------
    def add_inquiry(self, inquiry: Payload) -> SiteContent:
        data = _fields(inquiry)

        def apply(draft: SiteContent) -> None:
            problems = [f"{key} must not be empty" for key in ("name", "subject", "message") if not _text(data, key)]
            day = self._today() if data.get("date") is None else _parse_date(data["date"])
            if day is None:
                problems.append("date must be a valid calendar date (YYYY-MM-DD)")
            if problems:
                raise ValidationError("; ".join(problems), errors=problems)
            draft.inquiries.append(Inquiry(
                id=_next_id(draft.inquiries),
                name=_text(data, "name"),
                subject=_text(data, "subject"),
                message=_text(data, "message"),
                date=day,
            ))

        return self._mutate("inquiry", apply)

    def add_blog_post(self, post: Payload) -> SiteContent:
        data = _fields(post)

        def apply(draft: SiteContent) -> None:
            problems = [f"{key} must not be empty" for key in ("title", "content") if not _text(data, key)]
            day = self._today() if data.get("date") is None else _parse_date(data["date"])
            if day is None:
                problems.append("date must be a valid calendar date (YYYY-MM-DD)")
            if problems:
                raise ValidationError("; ".join(problems), errors=problems)
            draft.blog.append(BlogPost(
                id=_next_id(draft.blog),
                title=_text(data, "title"),
                date=day,
                content=_text(data, "content"),
                image=_text(data, "image") or self.fallback_image,
            ))

        return self._mutate("blog post", apply)
