"""
Presentation surfaces for dialogue windows.

A panel is a dumb sink with up to three visual slots: a title (speaker
name in a color), a portrait image, and the body text. A panel built
without a title or portrait slot silently ignores calls for that slot.

Implementations:
- RecordingPanel: in-memory, keeps a history of body updates
- PygamePanel: draws a boxed dialogue window onto a pygame surface
"""

from __future__ import annotations

import os
from typing import Any, Optional, Tuple

import pygame

Color = Tuple[int, int, int]


class DialoguePanel:
    """
    Base presentation surface.

    Subclasses override the _draw_* hooks; slot bookkeeping and
    visibility live here so every panel honors missing slots the same way.
    """

    def __init__(self, has_title: bool = True, has_portrait: bool = True):
        self.has_title = has_title
        self.has_portrait = has_portrait

        self.visible = False
        self.title: Optional[str] = None
        self.title_color: Optional[Color] = None
        self.title_visible = False
        self.portrait: Any = None
        self.portrait_visible = False
        self.body = ""

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def set_title(self, text: str, color: Color) -> None:
        """Show the title slot with text in color."""
        if not self.has_title:
            return
        self.title = text
        self.title_color = color
        self.title_visible = True

    def hide_title(self) -> None:
        if self.has_title:
            self.title_visible = False

    def set_portrait(self, image: Any) -> None:
        """Show the portrait slot with image (surface or asset path)."""
        if not self.has_portrait:
            return
        self.portrait = image
        self.portrait_visible = True

    def hide_portrait(self) -> None:
        if self.has_portrait:
            self.portrait_visible = False

    def set_body(self, text: str) -> None:
        """Replace the body text."""
        self.body = text


class RecordingPanel(DialoguePanel):
    """Panel that keeps every body update, for headless hosts and tests."""

    def __init__(self, has_title: bool = True, has_portrait: bool = True):
        super().__init__(has_title, has_portrait)
        self.body_history: list[str] = []

    def set_body(self, text: str) -> None:
        super().set_body(text)
        self.body_history.append(text)


class PygamePanel(DialoguePanel):
    """
    Dialogue box drawn with pygame primitives.

    Portraits given as paths are loaded once and cached; already-loaded
    surfaces are drawn as is.
    """

    def __init__(
        self,
        rect: Tuple[int, int, int, int] = (20, 540, 1240, 160),
        has_title: bool = True,
        has_portrait: bool = True,
        font_size: int = 28,
        portrait_base_path: str = "assets/portraits",
    ):
        super().__init__(has_title, has_portrait)
        self.rect = pygame.Rect(rect)
        self.font_size = font_size
        self.portrait_base_path = portrait_base_path

        # Visual settings
        self.padding = 16
        self.portrait_size = rect[3] - 32
        self.box_color = (26, 26, 38)
        self.border_color = (102, 102, 128)
        self.text_color = (255, 255, 255)

        self._font: Optional[pygame.font.Font] = None
        self._portrait_cache: dict[str, Optional[pygame.Surface]] = {}

    def _get_font(self) -> pygame.font.Font:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.SysFont(None, self.font_size)
        return self._font

    def _resolve_portrait(self) -> Optional[pygame.Surface]:
        """Get a drawable surface for the current portrait."""
        if not isinstance(self.portrait, str):
            return self.portrait

        if self.portrait in self._portrait_cache:
            return self._portrait_cache[self.portrait]

        path = self.portrait
        if not os.path.exists(path):
            path = os.path.join(self.portrait_base_path, self.portrait)
        if not os.path.exists(path) and not path.endswith(".png"):
            path = f"{path}.png"

        surface = None
        if os.path.exists(path):
            try:
                surface = pygame.image.load(path)
            except pygame.error:
                surface = None

        self._portrait_cache[self.portrait] = surface
        return surface

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the panel onto surface if it is visible."""
        if not self.visible:
            return

        pygame.draw.rect(surface, self.box_color, self.rect)
        pygame.draw.rect(surface, self.border_color, self.rect, 2)

        text_x = self.rect.x + self.padding
        text_y = self.rect.y + self.padding
        font = self._get_font()

        if self.has_portrait and self.portrait_visible:
            image = self._resolve_portrait()
            if image is not None:
                image = pygame.transform.smoothscale(
                    image, (self.portrait_size, self.portrait_size)
                )
                surface.blit(image, (text_x, text_y))
            text_x += self.portrait_size + self.padding

        if self.has_title and self.title_visible and self.title:
            surface.blit(font.render(self.title, True, self.title_color), (text_x, text_y))
            text_y += font.get_linesize()

        for line in self.body.split("\n"):
            surface.blit(font.render(line, True, self.text_color), (text_x, text_y))
            text_y += font.get_linesize()
