import logging

from errors import ValidationError
from schemas import ViewState

logger = logging.getLogger(__name__)

VIEWS = ("home", "menu", "admin", "blog", "contact")
ADMIN_TABS = ("overview", "menu", "bookings", "design", "seo")


class ViewRouter:
    """Tracks the active page and the admin tab.

    Navigation is a direct jump with no guards or history. The admin tab
    survives leaving the admin page, so re-entering admin resumes it.
    """

    def __init__(self) -> None:
        self.active_view = "home"
        self.active_admin_tab = "overview"

    def navigate(self, view: str) -> ViewState:
        if view not in VIEWS:
            raise ValidationError(f"unknown view {view!r}; expected one of {', '.join(VIEWS)}")
        self.active_view = view
        logger.debug("View -> %s", view)
        return self.state()

    def select_admin_tab(self, tab: str) -> ViewState:
        if tab not in ADMIN_TABS:
            raise ValidationError(f"unknown admin tab {tab!r}; expected one of {', '.join(ADMIN_TABS)}")
        self.active_view = "admin"
        self.active_admin_tab = tab
        logger.debug("Admin tab -> %s", tab)
        return self.state()

    def state(self) -> ViewState:
        return ViewState(active_view=self.active_view, active_admin_tab=self.active_admin_tab)
