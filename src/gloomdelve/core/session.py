from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..entities.templates import TemplateRepository, entity_repository, item_repository
from ..ui.display import Display, GridDisplay
from .input import InputType
from .settings import Settings

if TYPE_CHECKING:
    from ..screens.base import Screen

logger = logging.getLogger(__name__)


class GameSession:
    """Owns the active screen, the optional sub-screen and the display.

    Input and rendering go to the sub-screen while one is set, otherwise to
    the active screen. Every transition runs ``exit`` on what is leaving
    before ``enter`` on what arrives, then refreshes the display.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        display: Optional[Display] = None,
        *,
        entity_templates: Optional[TemplateRepository] = None,
        item_templates: Optional[TemplateRepository] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.display = display or GridDisplay(self.settings.display.columns, self.settings.display.rows)
        self._entity_templates = entity_templates
        self._item_templates = item_templates
        self.active_screen: Optional["Screen"] = None
        self.sub_screen: Optional["Screen"] = None
        self.refreshes: int = 0

    @property
    def entity_templates(self) -> TemplateRepository:
        if self._entity_templates is None:
            self._entity_templates = entity_repository()
        return self._entity_templates

    @property
    def item_templates(self) -> TemplateRepository:
        if self._item_templates is None:
            self._item_templates = item_repository(self.entity_templates.capabilities)
        return self._item_templates

    @property
    def current_screen(self) -> Optional["Screen"]:
        return self.sub_screen if self.sub_screen is not None else self.active_screen

    def switch_screen(self, screen: Optional["Screen"]) -> None:
        if self.sub_screen is not None:
            leaving_sub, self.sub_screen = self.sub_screen, None
            leaving_sub.exit()
        previous = self.active_screen
        if previous is not None:
            logger.debug("Exiting screen: %s", type(previous).__name__)
            previous.exit()
        self.active_screen = screen
        if screen is not None:
            logger.info("Entering screen: %s", type(screen).__name__)
            screen.enter()
        self.refresh()

    def set_sub_screen(self, screen: Optional["Screen"]) -> None:
        """Overlay ``screen`` on the active one, or clear the overlay with None."""
        previous = self.sub_screen
        self.sub_screen = None
        if previous is not None:
            previous.exit()
        self.sub_screen = screen
        if screen is not None:
            screen.enter()
        self.refresh()

    def handle_input(self, input_type: InputType, data: int) -> None:
        screen = self.current_screen
        if screen is not None:
            screen.handle_input(input_type, data)

    def render(self, display: Optional[Display] = None) -> None:
        display = display or self.display
        screen = self.current_screen
        if screen is not None:
            screen.render(display)

    def refresh(self) -> None:
        self.display.clear()
        self.render(self.display)
        self.refreshes += 1
