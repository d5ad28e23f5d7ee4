import math

import pytest

from errors import InvalidTransitionError, NotFoundError, ValidationError
from schemas import MenuItemInput, SettingsUpdate
from store import ContentStore, seed_content


def _booking(**overrides):
    booking = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "date": "2026-02-01",
        "time": "19:30",
        "guests": 4,
    }
    booking.update(overrides)
    return booking


def test_seed_snapshot(store) -> None:
    snapshot = store.get_snapshot()
    assert snapshot.version == 1
    assert snapshot.settings.name == "Xdiner"
    assert [item.id for item in snapshot.menu] == [1, 2, 3, 4]
    assert [h.day for h in snapshot.hours] == ["Mon-Fri", "Sat-Sun"]
    assert snapshot.reservations[0].status == "pending"


def test_snapshot_is_a_value_copy(store) -> None:
    snapshot = store.get_snapshot()
    snapshot.menu.clear()
    snapshot.settings.name = "Hijacked"

    fresh = store.get_snapshot()
    assert len(fresh.menu) == 4
    assert fresh.settings.name == "Xdiner"


def test_replace_settings_only_changes_given_fields(store) -> None:
    before = store.get_snapshot().settings

    after = store.replace_settings({"primaryColor": "#3b82f6"}).settings

    assert after.primary_color == "#3b82f6"
    assert after.model_dump(exclude={"primary_color"}) == before.model_dump(exclude={"primary_color"})
    assert store.version == 2


def test_replace_settings_accepts_partial_model(store) -> None:
    after = store.replace_settings(SettingsUpdate(tagline="Late Night Eats", theme="dark")).settings
    assert after.tagline == "Late Night Eats"
    assert after.theme == "dark"
    assert after.name == "Xdiner"


@pytest.mark.parametrize(
    "partial",
    [
        {"primaryColor": "not-a-color"},
        {"primaryColor": "#12345"},
        {"name": ""},
        {"name": "   "},
        {"theme": "neon"},
        {"font": "comic"},
        {"favicon": "x.ico"},
    ],
)
def test_replace_settings_rejects_bad_values(store, partial) -> None:
    before = store.get_snapshot()
    with pytest.raises(ValidationError):
        store.replace_settings(partial)
    assert store.get_snapshot() == before


def test_replace_settings_is_all_or_nothing(store) -> None:
    with pytest.raises(ValidationError):
        store.replace_settings({"tagline": "New tagline", "primaryColor": "nope"})
    assert store.get_snapshot().settings.tagline == "Modern Fast Food Reimagined"


def test_named_color_token_is_accepted(store) -> None:
    assert store.replace_settings({"primary_color": "emerald"}).settings.primary_color == "emerald"


def test_upsert_appends_with_next_id(store) -> None:
    snapshot = store.upsert_menu_item({"name": "Onion Rings", "price": 5, "category": "Sides"})
    added = snapshot.menu[-1]
    assert added.id == 5
    assert added.price == 5.0
    assert added.image == store.fallback_image


def test_upsert_replaces_existing_entry(store) -> None:
    snapshot = store.upsert_menu_item(
        MenuItemInput(id=2, name="Truffle Fries", price=7.25, category="Sides", description="Now bigger.")
    )
    matches = [item for item in snapshot.menu if item.id == 2]
    assert len(matches) == 1
    assert matches[0].name == "Truffle Fries"
    assert matches[0].price == 7.25
    assert matches[0].description == "Now bigger."
    assert [item.id for item in snapshot.menu] == [1, 2, 3, 4]


def test_repeated_upsert_is_idempotent(store) -> None:
    item = {"id": 3, "name": "Wings", "price": 10.5, "category": "Appetizers", "description": "Hot."}
    first = store.upsert_menu_item(item)
    second = store.upsert_menu_item(item)
    assert first == second
    assert store.get_snapshot() == first


def test_upsert_keeps_explicit_unused_id(store) -> None:
    item = {"id": 10, "name": "Cola", "price": 2.5, "category": "Drinks"}
    snapshot = store.upsert_menu_item(item)
    assert snapshot.menu[-1].id == 10
    assert store.upsert_menu_item(item) == snapshot
    ids = [item.id for item in snapshot.menu]
    assert ids.count(10) == 1
    assert len(ids) == len(set(ids))


@pytest.mark.parametrize("price", [-0.01, -5, -100.0])
def test_negative_price_leaves_menu_untouched(store, price) -> None:
    before = store.get_snapshot().menu
    with pytest.raises(ValidationError):
        store.upsert_menu_item({"name": "Refund Burger", "price": price, "category": "Mains"})
    with pytest.raises(ValidationError):
        store.upsert_menu_item({"id": 1, "price": price})
    assert store.get_snapshot().menu == before


@pytest.mark.parametrize("price", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_price_leaves_menu_untouched(store, price) -> None:
    before = store.get_snapshot()
    with pytest.raises(ValidationError):
        store.upsert_menu_item({"name": "Gold Burger", "price": price, "category": "Mains"})
    with pytest.raises(ValidationError):
        store.upsert_menu_item({"id": 1, "price": price})
    assert store.get_snapshot() == before


def test_negative_zero_price_is_stored_as_zero(store) -> None:
    snapshot = store.upsert_menu_item({"name": "Tap Water", "price": -0.0, "category": "Drinks"})
    price = snapshot.menu[-1].price
    assert price == 0.0
    assert math.copysign(1.0, price) == 1.0


def test_upsert_requires_name_and_category(store) -> None:
    with pytest.raises(ValidationError):
        store.upsert_menu_item({"price": 3, "category": "Sides"})
    with pytest.raises(ValidationError):
        store.upsert_menu_item({"name": "Mystery", "price": 3})
    with pytest.raises(ValidationError):
        store.upsert_menu_item({"name": "Free Lunch", "category": "Mains"})


def test_remove_menu_item_keeps_order_and_prices(store) -> None:
    prices = {item.id: item.price for item in store.get_snapshot().menu}

    store.remove_menu_item(2)
    menu = store.get_snapshot().menu

    assert [item.id for item in menu] == [1, 3, 4]
    assert all(item.price == prices[item.id] for item in menu)


def test_remove_missing_menu_item_is_noop(store) -> None:
    before = store.get_snapshot()
    after = store.remove_menu_item(99)
    assert after == before
    assert store.version == 1


def test_add_reservation_starts_pending(store) -> None:
    snapshot = store.add_reservation(_booking())
    reservation = snapshot.reservations[-1]
    assert reservation.id == 2
    assert reservation.status == "pending"
    assert reservation.date.isoformat() == "2026-02-01"
    assert reservation.time == "19:30"


def test_reservation_today_is_allowed(store) -> None:
    store.add_reservation(_booking(date="2026-01-15"))
    assert len(store.get_snapshot().reservations) == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"guests": 0},
        {"guests": -2},
        {"guests": 21},
        {"date": "2025-12-31"},
        {"date": "2026-02-30"},
        {"date": "tomorrow"},
        {"time": "25:00"},
        {"email": "not-an-email"},
        {"email": "a@b"},
        {"name": ""},
    ],
)
def test_invalid_reservation_leaves_store_unchanged(store, overrides) -> None:
    before = store.get_snapshot()
    with pytest.raises(ValidationError):
        store.add_reservation(_booking(**overrides))
    assert store.get_snapshot() == before


def test_reservation_error_lists_every_problem(store) -> None:
    with pytest.raises(ValidationError) as excinfo:
        store.add_reservation(_booking(guests=0, email="nope"))
    assert len(excinfo.value.errors) == 2


def test_reservation_status_transitions(store) -> None:
    store.update_reservation_status(1, "confirmed")
    with pytest.raises(InvalidTransitionError):
        store.update_reservation_status(1, "pending")
    assert store.get_snapshot().reservations[0].status == "confirmed"

    store.update_reservation_status(1, "cancelled")
    for status in ("pending", "confirmed"):
        with pytest.raises(InvalidTransitionError):
            store.update_reservation_status(1, status)
    assert store.get_snapshot().reservations[0].status == "cancelled"


def test_pending_can_be_cancelled_directly(store) -> None:
    assert store.update_reservation_status(1, "cancelled").reservations[0].status == "cancelled"


def test_same_status_is_noop(store) -> None:
    store.update_reservation_status(1, "pending")
    assert store.version == 1


def test_status_update_errors(store) -> None:
    with pytest.raises(NotFoundError):
        store.update_reservation_status(42, "confirmed")
    with pytest.raises(ValidationError):
        store.update_reservation_status(1, "seated")
    assert store.version == 1


def test_add_inquiry_defaults_date_to_today(store) -> None:
    snapshot = store.add_inquiry({"name": "Sam", "subject": "Allergies", "message": "Is the burger nut free?"})
    inquiry = snapshot.inquiries[-1]
    assert inquiry.id == 2
    assert inquiry.date.isoformat() == "2026-01-15"


def test_add_inquiry_requires_message(store) -> None:
    with pytest.raises(ValidationError):
        store.add_inquiry({"name": "Sam", "subject": "Hi", "message": ""})
    assert len(store.get_snapshot().inquiries) == 1


def test_add_blog_post(store) -> None:
    snapshot = store.add_blog_post({"title": "Summer Menu", "content": "Cold noodles are back.", "date": "2026-01-10"})
    post = snapshot.blog[-1]
    assert post.id == 2
    assert post.image == store.fallback_image
    with pytest.raises(ValidationError):
        store.add_blog_post({"title": "", "content": "x"})


def test_replace_hours(store) -> None:
    snapshot = store.replace_hours([
        {"day": "Tue-Sun", "time": "11:00 AM - 9:00 PM"},
        {"day": "Mon", "time": "Closed"},
    ])
    assert [h.day for h in snapshot.hours] == ["Tue-Sun", "Mon"]
    with pytest.raises(ValidationError):
        store.replace_hours([{"day": "Mon", "time": ""}])
    assert len(store.get_snapshot().hours) == 2


def test_store_can_start_from_given_content() -> None:
    content = seed_content()
    content.menu = content.menu[:1]
    store = ContentStore(content)
    content.menu.clear()
    assert len(store.get_snapshot().menu) == 1
