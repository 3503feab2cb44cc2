"""PyGame panel: draws the circle and turns mouse input into hits.

World coordinates have the circle center at the origin and y pointing up.
Screen coordinates are pygame pixels with y pointing down.
"""

import logging
from typing import Optional

try:
    import pygame
    HAS_PYGAME = True
except ImportError:
    HAS_PYGAME = False
    pygame = None  # type: ignore

from . import config
from .angles import Point, from_bearing
from .layouts import LayoutStore
from .meters import MeterLevels
from .mixer import Fader, SoloBank
from .registry import InteractionState, ObjectRegistry
from .selection import Hit
from .session import SpatializerSession

logger = logging.getLogger(__name__)

# Circle center on screen (right of the label column)
CENTER_X = config.LABEL_WIDTH + (config.WINDOW_WIDTH - config.LABEL_WIDTH) // 2
CENTER_Y = config.WINDOW_HEIGHT // 2

SNAP_BUTTON = (config.WINDOW_WIDTH - 140, config.WINDOW_HEIGHT - 60, 120, 40)


def world_to_screen(point: Point, scale: float = config.PIXELS_PER_UNIT) -> tuple[int, int]:
    """Convert a world position to pixel coordinates."""
    return (int(round(CENTER_X + point[0] * scale)), int(round(CENTER_Y - point[1] * scale)))


def screen_to_world(pixel: tuple[int, int], scale: float = config.PIXELS_PER_UNIT) -> Point:
    """Convert pixel coordinates to a world position."""
    return ((pixel[0] - CENTER_X) / scale, (CENTER_Y - pixel[1]) / scale)


def label_rect(index: int) -> tuple[int, int, int, int]:
    """Screen rectangle (x, y, w, h) of the proxy label for an object."""
    y = config.LABEL_MARGIN + (index - 1) * (config.LABEL_HEIGHT + 6)
    return (config.LABEL_MARGIN, y, config.LABEL_WIDTH - 2 * config.LABEL_MARGIN, config.LABEL_HEIGHT)


def _in_rect(pixel: tuple[int, int], rect: tuple[int, int, int, int]) -> bool:
    x, y, w, h = rect
    return x <= pixel[0] < x + w and y <= pixel[1] < y + h


def hit_test(
    registry: ObjectRegistry,
    pixel: tuple[int, int],
    pick_radius: float = config.OBJECT_PICK_RADIUS,
    scale: float = config.PIXELS_PER_UNIT,
) -> list[Hit]:
    """Everything under a pixel: proxy labels and objects, in any order."""
    hits = [Hit.on_label(obj.index) for obj in registry if _in_rect(pixel, label_rect(obj.index))]

    world = screen_to_world(pixel, scale)
    for obj in registry:
        dx = world[0] - obj.position[0]
        dy = world[1] - obj.position[1]
        if dx * dx + dy * dy <= pick_radius * pick_radius:
            hits.append(Hit.on_object(obj.index))
    return hits


class Panel:
    """PyGame window for the spatializer session and mixer controls.

    Mouse: click/drag objects, click labels to select.
    Keys: S snap, 1-9 toggle solo, C clear solo, Up/Down master fader,
    Left/Right reverb fader, W save layout, L load next saved layout,
    ESC quit.
    """

    def __init__(
        self,
        session: SpatializerSession,
        solo: Optional[SoloBank] = None,
        master: Optional[Fader] = None,
        reverb: Optional[Fader] = None,
        meters: Optional[MeterLevels] = None,
        layouts: Optional[LayoutStore] = None,
        layout_name: str = config.DEFAULT_LAYOUT_NAME,
    ):
        if not HAS_PYGAME:
            raise ImportError(
                "pygame is required for the panel window. "
                "Install with: pip install pygame"
            )

        self.session = session
        self.solo = solo
        self.master = master
        self.reverb = reverb
        self.meters = meters
        self.layouts = layouts
        self.layout_name = layout_name
        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.font: Optional[pygame.font.Font] = None
        self.font_small: Optional[pygame.font.Font] = None
        self.running = False

    def start(self) -> None:
        """Initialize PyGame and create window."""
        pygame.init()
        pygame.font.init()

        self.screen = pygame.display.set_mode((config.WINDOW_WIDTH, config.WINDOW_HEIGHT))
        pygame.display.set_caption(config.WINDOW_TITLE)

        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 26)
        self.font_small = pygame.font.Font(None, 20)
        self.running = True

    def stop(self) -> None:
        """Shut down PyGame."""
        self.running = False
        pygame.quit()

    def pointer(self) -> Point:
        """Current mouse position in world coordinates."""
        return screen_to_world(pygame.mouse.get_pos())

    def handle_events(self) -> bool:
        """Process PyGame events. Returns False if should quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if _in_rect(event.pos, SNAP_BUTTON):
                    self.session.snap()
                else:
                    self.session.pointer_down(hit_test(self.session.registry, event.pos))
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.session.pointer_up()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                elif event.key == pygame.K_s:
                    self.session.snap()
                elif event.key == pygame.K_w and self.layouts:
                    self.save_layout()
                elif event.key == pygame.K_l and self.layouts:
                    self.load_next_layout()
                elif event.key == pygame.K_c and self.solo:
                    self.solo.clear()
                elif pygame.K_1 <= event.key <= pygame.K_9 and self.solo:
                    self.solo.toggle(event.key - pygame.K_0)
                elif event.key in (pygame.K_UP, pygame.K_DOWN) and self.master:
                    step = 0.05 if event.key == pygame.K_UP else -0.05
                    self.master.set_value(self.master.value + step)
                elif event.key in (pygame.K_LEFT, pygame.K_RIGHT) and self.reverb:
                    step = 0.05 if event.key == pygame.K_RIGHT else -0.05
                    self.reverb.set_value(self.reverb.value + step)
        return True

    def save_layout(self) -> None:
        """Save the current arrangement under the panel's layout name."""
        self.layouts.save(self.session.capture_layout(self.layout_name))

    def load_next_layout(self) -> Optional[str]:
        """Apply the saved layout after the current one, in name order.

        Returns:
            The name applied, or None if nothing was applied
        """
        names = self.layouts.names()
        if not names:
            logger.warning("No saved layouts in %s", self.layouts.directory)
            return None
        later = [n for n in names if n > self.layout_name]
        name = later[0] if later else names[0]
        try:
            applied = self.session.apply_layout(self.layouts.load(name))
        except ValueError as exc:
            logger.warning("%s", exc)
            return None
        self.layout_name = name
        return name if applied else None

    def render(self) -> None:
        """Render one frame."""
        if not self.screen:
            return

        self.screen.fill(config.COLOR_BACKGROUND)
        self._draw_circle()
        self._draw_objects()
        self._draw_labels()
        self._draw_status()
        pygame.display.flip()

    def _draw_circle(self) -> None:
        radius_px = int(self.session.radius * config.PIXELS_PER_UNIT)
        center = (CENTER_X, CENTER_Y)
        if self.session.zones:
            for zone in self.session.zones.zones:
                edge = world_to_screen(from_bearing(zone, self.session.radius * 1.15))
                pygame.draw.line(self.screen, config.COLOR_ZONE, center, edge, 1)
        pygame.draw.circle(self.screen, config.COLOR_CIRCLE, center, radius_px, 2)

    def _draw_objects(self) -> None:
        radius_px = int(config.OBJECT_PICK_RADIUS * config.PIXELS_PER_UNIT)
        # Lowest priority first so the focus object is drawn on top
        for obj in sorted(self.session.registry, key=lambda o: (o.priority, -o.index)):
            selected = obj.state != InteractionState.IDLE
            color = config.COLOR_OBJECT_SELECTED if selected else config.COLOR_OBJECT
            text_color = config.COLOR_TEXT_SELECTED if selected else config.COLOR_TEXT
            pos = world_to_screen(obj.position)
            pygame.draw.circle(self.screen, color, pos, radius_px)
            number = self.font.render(str(obj.index), True, text_color)
            self.screen.blit(number, number.get_rect(center=pos))

    def _draw_labels(self) -> None:
        focus = self.session.focus
        levels = self.meters.snapshot() if self.meters else []
        soloed = self.solo.soloed if self.solo else None

        for obj in self.session.registry:
            x, y, w, h = label_rect(obj.index)
            highlighted = obj.index == focus.label_index
            color = config.COLOR_OBJECT_SELECTED if highlighted else config.COLOR_TEXT
            pygame.draw.rect(self.screen, (30, 30, 42), (x, y, w, h), border_radius=4)

            if obj.index <= len(levels):
                level = max(0.0, min(1.0, levels[obj.index - 1]))
                pygame.draw.rect(self.screen, config.COLOR_METER, (x, y + h - 4, int(w * level), 4))

            solo_mark = " S" if soloed == obj.index else ""
            text = self.font_small.render(
                f"{obj.index}  {obj.label}  {obj.bearing}°{solo_mark}", True, color
            )
            self.screen.blit(text, (x + 8, y + 10))

    def _draw_status(self) -> None:
        pygame.draw.rect(self.screen, (40, 40, 56), SNAP_BUTTON, border_radius=6)
        label = self.font.render("Snap", True, config.COLOR_TEXT)
        self.screen.blit(label, label.get_rect(center=(
            SNAP_BUTTON[0] + SNAP_BUTTON[2] // 2, SNAP_BUTTON[1] + SNAP_BUTTON[3] // 2
        )))

        if self.master:
            self._draw_fader("Master", self.master, config.LABEL_WIDTH + 10)
        if self.reverb:
            self._draw_fader("Reverb", self.reverb, config.LABEL_WIDTH + 170)

    def _draw_fader(self, name: str, fader: Fader, x: int) -> None:
        y = config.WINDOW_HEIGHT - 30
        text = self.font_small.render(f"{name} {fader.display}", True, config.COLOR_TEXT)
        self.screen.blit(text, (x, y))
        # Bar length follows linear gain, not dB
        pygame.draw.rect(self.screen, config.COLOR_METER, (x, y + 16, int(140 * fader.gain), 3))
