"""
Admin editor: the only component that writes to the content store.

Each operation is a straight pass-through to one store operation. Nothing
is validated here; store errors propagate unchanged so the operator sees
them.
"""
import logging
from typing import Any, Dict, List, Optional

from errors import ImageGenerationBusyError, NotFoundError
from images import ImageService
from schemas import SiteContent
from store import ContentStore, Payload

logger = logging.getLogger(__name__)


class AdminEditor:
    def __init__(self, store: ContentStore, images: ImageService) -> None:
        self.store = store
        self.images = images

    # Design / SEO
    def save_settings(self, edited: Payload) -> SiteContent:
        return self.store.replace_settings(edited)

    def save_hours(self, entries: List[Payload]) -> SiteContent:
        return self.store.replace_hours(entries)

    # Menu manager
    def save_menu_item(self, item: Payload) -> SiteContent:
        return self.store.upsert_menu_item(item)

    def delete_menu_item(self, item_id: int) -> SiteContent:
        return self.store.remove_menu_item(item_id)

    # Bookings
    def set_reservation_status(self, reservation_id: int, status: str) -> SiteContent:
        return self.store.update_reservation_status(reservation_id, status)

    # Blog
    def publish_blog_post(self, post: Payload) -> SiteContent:
        return self.store.add_blog_post(post)

    def overview(self) -> Dict[str, Any]:
        content = self.store.get_snapshot()
        return {
            "pendingReservations": sum(1 for r in content.reservations if r.status == "pending"),
            "reservations": len(content.reservations),
            "inquiries": len(content.inquiries),
            "menuItems": len(content.menu),
            "blogPosts": len(content.blog),
            "version": content.version,
        }

    # Artwork
    async def generate_image(self, prompt: str) -> str:
        if self.images.in_flight:
            raise ImageGenerationBusyError()
        return await self.images.acquire_image(prompt)

    async def generate_menu_image(self, item_id: int, prompt: Optional[str] = None) -> SiteContent:
        item = next((m for m in self.store.get_snapshot().menu if m.id == item_id), None)
        if item is None:
            raise NotFoundError(f"menu item {item_id} not found")
        image = await self.generate_image(prompt or f"{item.name}. {item.description}".strip())

        # the dish may have been deleted while the image was being generated
        if not any(m.id == item_id for m in self.store.get_snapshot().menu):
            logger.info("Menu item %s disappeared during image generation", item_id)
            raise NotFoundError(f"menu item {item_id} not found")
        return self.store.upsert_menu_item({"id": item_id, "image": image})
