import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from admin import AdminEditor
from config import AppConfig, get_config
from errors import ContentError
from images import ImageService
from renderer import render_page
from schemas import (
    BlogPostInput,
    HoursEntry,
    InquiryInput,
    MenuItemInput,
    ReservationInput,
    SettingsUpdate,
    SiteContent,
)
from store import ContentStore
from views import ViewRouter

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "validation": 400,
    "not_found": 404,
    "invalid_transition": 409,
    "busy": 409,
}


def _dump(content: SiteContent) -> dict:
    return content.model_dump(mode="json", by_alias=True)


def _log_level(name: str) -> Optional[int]:
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else None


# -----------------
# Dependencies (everything hangs off app.state, built once in create_app)
# -----------------
def get_store(request: Request) -> ContentStore:
    return request.app.state.store


def get_router(request: Request) -> ViewRouter:
    return request.app.state.router


def get_editor(request: Request) -> AdminEditor:
    return request.app.state.editor


# -----------------
# Request bodies
# -----------------
class ViewBody(BaseModel):
    view: str


class AdminTabBody(BaseModel):
    tab: str


class StatusBody(BaseModel):
    status: str


class PromptBody(BaseModel):
    prompt: str


class ImageBody(BaseModel):
    prompt: Optional[str] = None


def create_app(
    config: Optional[AppConfig] = None,
    *,
    store: Optional[ContentStore] = None,
    images: Optional[ImageService] = None,
) -> FastAPI:
    config = config or get_config()
    level = _log_level(config.log_level)
    logging.basicConfig(
        level=level if level is not None else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if level is None:
        logger.warning("Unknown SITE_LOG_LEVEL %r, using INFO", config.log_level)

    app = FastAPI(title="Xdiner Site")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store or ContentStore(
        max_party_size=config.max_party_size,
        fallback_image=config.fallback_image_url,
    )
    app.state.router = ViewRouter()
    app.state.editor = AdminEditor(app.state.store, images or ImageService(config))

    @app.exception_handler(ContentError)
    async def content_error_handler(request: Request, exc: ContentError):
        status = ERROR_STATUS.get(exc.error_type, 400)
        body = {"detail": exc.message, "error": exc.error_type}
        errors = getattr(exc, "errors", None)
        if errors:
            body["errors"] = errors
        return JSONResponse(status_code=status, content=body)

    # -----------------
    # Pages
    # -----------------
    @app.get("/", response_class=HTMLResponse)
    def current_page(
        category: Optional[str] = None,
        store: ContentStore = Depends(get_store),
        router: ViewRouter = Depends(get_router),
    ):
        return render_page(store.get_snapshot(), router.active_view, router.active_admin_tab, category=category)

    @app.get("/pages/admin/{tab}", response_class=HTMLResponse)
    def admin_page(tab: str, store: ContentStore = Depends(get_store), router: ViewRouter = Depends(get_router)):
        router.select_admin_tab(tab)
        return render_page(store.get_snapshot(), router.active_view, router.active_admin_tab)

    @app.get("/pages/{view}", response_class=HTMLResponse)
    def page(
        view: str,
        category: Optional[str] = None,
        store: ContentStore = Depends(get_store),
        router: ViewRouter = Depends(get_router),
    ):
        router.navigate(view)
        return render_page(store.get_snapshot(), router.active_view, router.active_admin_tab, category=category)

    # -----------------
    # View state
    # -----------------
    @app.get("/api/view")
    def view_state(router: ViewRouter = Depends(get_router)):
        return router.state().model_dump(by_alias=True)

    @app.post("/api/view")
    def navigate(body: ViewBody, router: ViewRouter = Depends(get_router)):
        return router.navigate(body.view).model_dump(by_alias=True)

    @app.post("/api/view/admin-tab")
    def select_admin_tab(body: AdminTabBody, router: ViewRouter = Depends(get_router)):
        return router.select_admin_tab(body.tab).model_dump(by_alias=True)

    # -----------------
    # Public content + forms
    # -----------------
    @app.get("/api/content")
    def content(store: ContentStore = Depends(get_store)):
        return _dump(store.get_snapshot())

    @app.post("/api/reservations")
    def create_reservation(body: ReservationInput, store: ContentStore = Depends(get_store)):
        snapshot = store.add_reservation(body)
        return {"ok": True, "reservation_id": snapshot.reservations[-1].id}

    @app.post("/api/inquiries")
    def create_inquiry(body: InquiryInput, store: ContentStore = Depends(get_store)):
        snapshot = store.add_inquiry(body)
        return {"ok": True, "inquiry_id": snapshot.inquiries[-1].id}

    # -----------------
    # Admin
    # -----------------
    @app.get("/api/admin/overview")
    def admin_overview(editor: AdminEditor = Depends(get_editor)):
        return editor.overview()

    @app.patch("/api/admin/settings")
    def save_settings(body: SettingsUpdate, editor: AdminEditor = Depends(get_editor)):
        return _dump(editor.save_settings(body))

    @app.put("/api/admin/hours")
    def save_hours(body: List[HoursEntry], editor: AdminEditor = Depends(get_editor)):
        return _dump(editor.save_hours(body))

    @app.post("/api/admin/menu/item")
    def save_menu_item(item: MenuItemInput, editor: AdminEditor = Depends(get_editor)):
        return _dump(editor.save_menu_item(item))

    @app.delete("/api/admin/menu/item/{item_id}")
    def delete_menu_item(item_id: int, editor: AdminEditor = Depends(get_editor)):
        return _dump(editor.delete_menu_item(item_id))

    @app.post("/api/admin/reservations/{reservation_id}/status")
    def set_reservation_status(reservation_id: int, body: StatusBody, editor: AdminEditor = Depends(get_editor)):
        return _dump(editor.set_reservation_status(reservation_id, body.status))

    @app.post("/api/admin/blog")
    def publish_blog_post(body: BlogPostInput, editor: AdminEditor = Depends(get_editor)):
        return _dump(editor.publish_blog_post(body))

    @app.post("/api/admin/images")
    async def generate_image(body: PromptBody, editor: AdminEditor = Depends(get_editor)):
        return {"image": await editor.generate_image(body.prompt)}

    @app.post("/api/admin/menu/item/{item_id}/image")
    async def generate_menu_image(item_id: int, body: ImageBody, editor: AdminEditor = Depends(get_editor)):
        return _dump(await editor.generate_menu_image(item_id, body.prompt))

    # -----------------
    # Schema endpoint for viewer tooling
    # -----------------
    @app.get("/schema")
    def get_schema_definitions():
        return {
            "collections": ["settings", "hours", "menu", "reservations", "inquiries", "blog"]
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_config().port)
