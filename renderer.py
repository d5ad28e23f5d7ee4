"""
HTML rendering for the public site and the admin panel.

Everything here is a pure function of a SiteContent snapshot: nothing is
cached between renders and nothing writes back to the store. The menu grid
is shared by the home page and the standalone menu page.
"""
from datetime import date
from html import escape
from typing import List, Optional

from schemas import MENU_CATEGORIES, SiteContent

ADMIN_TAB_LABELS = [
    ("overview", "Overview"),
    ("menu", "Menu Manager"),
    ("bookings", "Reservations"),
    ("design", "Design Editor"),
    ("seo", "SEO Settings"),
]
NAV_LINKS = [("home", "Home"), ("menu", "Menu"), ("blog", "Blog"), ("contact", "Contact")]
PALETTE = ["#ef4444", "#f59e0b", "#10b981", "#3b82f6", "#8b5cf6", "#111827"]

HERO_IMAGE = "https://images.unsplash.com/photo-1586816001966-79b736744398?auto=format&fit=crop&q=80&w=800"
ABOUT_IMAGE = "https://images.unsplash.com/photo-1552566626-52f8b828add9?auto=format&fit=crop&q=80&w=800"

# Posts form fields as JSON to the endpoint named by data-endpoint
FORM_SCRIPT = """
<script>
document.querySelectorAll('form[data-endpoint]').forEach(function (form) {
  form.addEventListener('submit', async function (e) {
    e.preventDefault();
    var body = Object.fromEntries(new FormData(form));
    if (body.guests) body.guests = Number(body.guests);
    var res = await fetch(form.dataset.endpoint, {
      method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body)
    });
    var data = await res.json();
    form.querySelector('.form-status').textContent = res.ok ? form.dataset.success : (data.detail || 'Something went wrong');
  });
});
</script>
"""


def safe(value) -> str:
    return escape("" if value is None else str(value), quote=True)


def format_price(price: float) -> str:
    return f"${price:.2f}"


def format_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


# -----------------
# Shared sections
# -----------------
def render_navbar(content: SiteContent, view: str) -> str:
    settings = content.settings
    links = "".join(
        f'<a href="/pages/{key}" class="nav-link{" active" if key == view else ""}">{label}</a>'
        for key, label in NAV_LINKS
    )
    return (
        '<nav class="navbar">'
        f'<a href="/pages/home" class="brand" style="color: {safe(settings.primary_color)}">{safe(settings.name)}</a>'
        f'<div class="links">{links}<a href="/pages/admin" class="nav-link admin-link">Admin</a>'
        f'<a href="/pages/home#booking" class="cta" style="background-color: {safe(settings.primary_color)}">Book a Table</a>'
        "</div></nav>"
    )


def render_footer(content: SiteContent, year: int) -> str:
    hours = "".join(f"<li>{safe(h.day)}: {safe(h.time)}</li>" for h in content.hours)
    return (
        '<footer class="footer">'
        f"<h3>{safe(content.settings.name)}</h3>"
        f'<ul class="hours">{hours}</ul>'
        f"<p>&copy; {year} {safe(content.settings.name)}. All rights reserved.</p>"
        '<a href="/pages/admin">Merchant Portal</a>'
        "</footer>"
    )


def render_menu_grid(content: SiteContent, category: Optional[str] = None) -> str:
    items = [item for item in content.menu if category in (None, "All") or item.category == category]
    chips = "".join(
        f'<a href="/pages/menu?category={c}" class="chip{" active" if (category or "All") == c else ""}">{c}</a>'
        for c in ["All"] + MENU_CATEGORIES
    )
    cards = "".join(
        f'<article class="menu-item" data-id="{item.id}">'
        f'<img src="{safe(item.image)}" alt="{safe(item.name)}">'
        f"<h3>{safe(item.name)}</h3>"
        f'<span class="price">{format_price(item.price)}</span>'
        f'<span class="category">{safe(item.category)}</span>'
        f"<p>{safe(item.description)}</p>"
        "</article>"
        for item in items
    )
    if not cards:
        cards = '<p class="empty">No dishes in this category yet.</p>'
    return (
        '<section id="menu" class="menu">'
        "<h2>Our Menu</h2>"
        f'<div class="chips">{chips}</div>'
        f'<div class="menu-grid">{cards}</div>'
        "</section>"
    )


def render_hero(content: SiteContent) -> str:
    settings = content.settings
    return (
        '<section class="hero">'
        f"<h1>{safe(settings.tagline)}</h1>"
        "<p>Experience the fusion of high-end culinary arts with the speed and comfort of classic fast food.</p>"
        f'<a href="/pages/menu" class="cta" style="background-color: {safe(settings.primary_color)}">See Menu</a>'
        f'<img src="{HERO_IMAGE}" alt="Hero Dish">'
        "</section>"
    )


def render_about(content: SiteContent) -> str:
    return (
        '<section class="about">'
        f'<img src="{ABOUT_IMAGE}" alt="Inside {safe(content.settings.name)}">'
        "<h2>Born from a passion for perfection.</h2>"
        "</section>"
    )


def render_reservation_form(content: SiteContent) -> str:
    guests = "".join(f'<option value="{n}">{n} Guests</option>' for n in range(1, 9))
    return (
        '<section id="booking" class="booking">'
        "<h2>Table Booking</h2>"
        '<form data-endpoint="/api/reservations" data-success="Booking Submitted!">'
        '<input type="date" name="date" required>'
        '<input type="time" name="time" required>'
        f'<select name="guests">{guests}</select>'
        '<input type="text" name="name" placeholder="Full Name" required>'
        '<input type="email" name="email" placeholder="Email Address" required>'
        f'<button type="submit" style="background-color: {safe(content.settings.primary_color)}">Confirm Reservation</button>'
        '<p class="form-status"></p>'
        "</form></section>"
    )


# -----------------
# Public pages
# -----------------
def render_blog(content: SiteContent) -> str:
    posts = "".join(
        '<article class="post">'
        f'<img src="{safe(post.image)}" alt="{safe(post.title)}">'
        f"<time>{format_date(post.date)}</time>"
        f"<h2>{safe(post.title)}</h2>"
        f"<p>{safe(post.content)}</p>"
        "</article>"
        for post in content.blog
    )
    return f'<section class="blog"><h1>From the Kitchen</h1>{posts or "<p>No posts yet.</p>"}</section>'


def render_contact(content: SiteContent) -> str:
    hours = "".join(f"<li><strong>{safe(h.day)}</strong> {safe(h.time)}</li>" for h in content.hours)
    return (
        '<section class="contact">'
        "<h1>Get In Touch</h1>"
        "<div><h3>Call Us</h3><p>+1 (555) 123-4567</p></div>"
        "<div><h3>Email Us</h3><p>hello@xdiner.com</p></div>"
        f'<div><h3>Opening Hours</h3><ul class="hours">{hours}</ul></div>'
        '<form data-endpoint="/api/inquiries" data-success="Message sent!">'
        '<input type="text" name="name" placeholder="Your Name" required>'
        '<input type="text" name="subject" placeholder="Subject" required>'
        '<textarea name="message" placeholder="Message" required></textarea>'
        f'<button type="submit" style="background-color: {safe(content.settings.primary_color)}">Send Message</button>'
        '<p class="form-status"></p>'
        "</form></section>"
    )


# -----------------
# Admin panel
# -----------------
def _admin_overview(content: SiteContent) -> str:
    pending = sum(1 for r in content.reservations if r.status == "pending")
    stats = [
        ("Pending Bookings", pending),
        ("New Inquiries", len(content.inquiries)),
        ("Menu Items", len(content.menu)),
        ("Blog Posts", len(content.blog)),
    ]
    cards = "".join(f'<div class="stat"><span>{label}</span><strong>{value}</strong></div>' for label, value in stats)
    return f'<div class="stats">{cards}</div>'


def _admin_menu(content: SiteContent) -> str:
    rows = "".join(
        f'<li class="admin-item" data-id="{item.id}">'
        f'<img src="{safe(item.image)}" alt="">'
        f"<strong>{safe(item.name)}</strong>"
        f"<span>{format_price(item.price)} &bull; {safe(item.category)}</span>"
        "</li>"
        for item in content.menu
    )
    return f'<h3>Manage Dishes</h3><ul class="admin-list">{rows}</ul>'


def _admin_bookings(content: SiteContent) -> str:
    bookings = "".join(
        f'<tr data-id="{r.id}"><td>{safe(r.name)}</td><td>{safe(r.email)}</td>'
        f"<td>{r.date.isoformat()} {safe(r.time)}</td><td>{r.guests}</td>"
        f'<td class="status status-{r.status}">{r.status}</td></tr>'
        for r in content.reservations
    )
    inquiries = "".join(
        f'<li data-id="{i.id}"><strong>{safe(i.subject)}</strong> from {safe(i.name)} '
        f"({i.date.isoformat()}): {safe(i.message)}</li>"
        for i in content.inquiries
    )
    return (
        "<h3>Reservations</h3>"
        '<table class="bookings"><tr><th>Name</th><th>Email</th><th>When</th><th>Guests</th><th>Status</th></tr>'
        f"{bookings}</table>"
        f'<h3>Inquiries</h3><ul class="inquiries">{inquiries}</ul>'
    )


def _admin_design(content: SiteContent) -> str:
    settings = content.settings
    swatches = "".join(
        f'<span class="swatch{" selected" if c == settings.primary_color else ""}" style="background-color: {c}"></span>'
        for c in PALETTE
    )
    return (
        "<h3>Visual Branding</h3>"
        f'<label>Restaurant Name <input type="text" name="name" value="{safe(settings.name)}"></label>'
        f'<div class="palette">{swatches}</div>'
        "<h3>Style Preview</h3>"
        f'<div class="preview"><div class="swatch" style="background-color: {safe(settings.primary_color)}"></div>'
        f"<h4>{safe(settings.name)}</h4><p>Theme: {safe(settings.theme)}</p></div>"
    )


def _admin_seo(content: SiteContent) -> str:
    settings = content.settings
    return (
        "<h3>Search Appearance</h3>"
        f'<label>Title <input type="text" name="seoTitle" value="{safe(settings.seo_title)}"></label>'
        f'<label>Description <textarea name="seoDescription">{safe(settings.seo_description)}</textarea></label>'
    )


ADMIN_PANELS = {
    "overview": _admin_overview,
    "menu": _admin_menu,
    "bookings": _admin_bookings,
    "design": _admin_design,
    "seo": _admin_seo,
}


def render_admin(content: SiteContent, tab: str) -> str:
    sidebar = "".join(
        f'<a href="/pages/admin/{key}" class="tab{" active" if key == tab else ""}">{label}</a>'
        for key, label in ADMIN_TAB_LABELS
    )
    return (
        '<div class="admin">'
        f'<aside class="sidebar">{sidebar}</aside>'
        f'<main><header><h2>{safe(dict(ADMIN_TAB_LABELS).get(tab, tab))}</h2><a href="/pages/home">Live Site</a></header>'
        f"{ADMIN_PANELS[tab](content)}</main>"
        "</div>"
    )


def render_body(content: SiteContent, view: str, admin_tab: str = "overview", category: Optional[str] = None) -> str:
    if view == "home":
        parts: List[str] = [
            render_hero(content),
            render_menu_grid(content),
            render_about(content),
            render_reservation_form(content),
        ]
        return "".join(parts)
    if view == "menu":
        return render_menu_grid(content, category)
    if view == "blog":
        return render_blog(content)
    if view == "contact":
        return render_contact(content)
    if view == "admin":
        return render_admin(content, admin_tab)
    return render_hero(content)


def render_page(
    content: SiteContent,
    view: str,
    admin_tab: str = "overview",
    *,
    category: Optional[str] = None,
    year: Optional[int] = None,
) -> str:
    settings = content.settings
    footer = "" if view == "admin" else render_footer(content, year or date.today().year)
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{safe(settings.seo_title or settings.name)}</title>"
        f'<meta name="description" content="{safe(settings.seo_description)}">'
        "</head>"
        f'<body class="font-{safe(settings.font)} theme-{safe(settings.theme)}">'
        f"{render_navbar(content, view)}"
        f"{render_body(content, view, admin_tab, category)}"
        f"{footer}"
        f"{FORM_SCRIPT}"
        "</body></html>"
    )
