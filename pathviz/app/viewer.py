# pathviz/app/viewer.py
#!/usr/bin/env python3
"""
Dijkstra Visualizer — grid editor + animated search + stats panel

- Mouse:
    [LEFT]       -> place / remove wall
    [RIGHT]      -> set start / end (start first, then end, then swap)
- Keyboard:
    [SPACE]      -> find path
    [C]          -> clear path
    [X]          -> clear grid
    [1]/[2]/[3]  -> speed fast / medium / slow
    [ESC]        -> cancel the running search, quit when idle
    [Q]          -> quit

Config:
- ENV: PATHVIZ_SPEED=fast|medium|slow, PATHVIZ_ROWS, PATHVIZ_COLS
- CLI: --speed=..., --rows=..., --cols=...
"""

import logging
import os
import sys
from typing import Dict, List, Optional, Tuple

import pygame

from pathviz.app.session import (
    BUTTON_PRIMARY,
    BUTTON_SECONDARY,
    DEFAULT_COLS,
    DEFAULT_ROWS,
    VisualizerSession,
)
from pathviz.core.dijkstra import DEFAULT_SPEED, SPEED_PRESETS
from pathviz.core.types import STATUS_MISSING_ENDPOINTS, STATUS_NO_PATH, STATUS_PATH_FOUND

LOGGER = logging.getLogger(__name__)


# ---------- Config resolution ----------
def resolve_options(argv: Optional[List[str]] = None) -> Dict[str, object]:
    argv = sys.argv[1:] if argv is None else argv
    opts: Dict[str, object] = {
        "speed": os.getenv("PATHVIZ_SPEED", DEFAULT_SPEED).lower(),
        "rows": os.getenv("PATHVIZ_ROWS", str(DEFAULT_ROWS)),
        "cols": os.getenv("PATHVIZ_COLS", str(DEFAULT_COLS)),
    }
    for arg in argv:
        for key in ("speed", "rows", "cols"):
            if arg.startswith(f"--{key}="):
                opts[key] = arg.split("=", 1)[1].lower()
    if opts["speed"] not in SPEED_PRESETS:
        opts["speed"] = DEFAULT_SPEED
    for key, default in (("rows", DEFAULT_ROWS), ("cols", DEFAULT_COLS)):
        try:
            opts[key] = int(opts[key])
        except ValueError:
            LOGGER.warning("ignoring non-integer %s=%r", key, opts[key])
            opts[key] = default
    return opts


# ---------- Layout ----------
PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 40
FONT_NAME = None  # default pygame font

# Colors (legend)
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
EMPTY       = (249,250,251)
START_BLUE  = ( 37, 99,235)
END_RED     = (239, 68, 68)
WALL_GRAY   = ( 75, 85, 99)
EXPLORED    = ( 59,130,246)
PATH_GREEN  = ( 34,197, 94)
BORDER      = (156,163,175)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

STATUS_COLORS = {
    STATUS_PATH_FOUND: PATH_GREEN,
    STATUS_NO_PATH: END_RED,
    STATUS_MISSING_ENDPOINTS: ACCENT_GOLD,
}


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state
        self.enabled = True

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover and self.enabled:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        hi = pygame.Surface((self.rect.width, 18), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        color = (235,238,242) if self.enabled else (120,124,130)
        text = font.render(self.label, True, color)
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.enabled and self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, session: VisualizerSession):
        pygame.init()

        self.session = session
        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 26)

        grid = session.grid
        self.cell_size = self._auto_cell_size(grid.rows)
        win_w = GRID_MARGIN*2 + grid.cols * self.cell_size + PANEL_W
        win_h = max(GRID_MARGIN*2 + grid.rows * self.cell_size, 520)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Dijkstra Pathfinding Visualizer")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)
        self.clock = pygame.time.Clock()

    # ---------- layout ----------
    def _auto_cell_size(self, rows: int) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(14, min(CELL_SIZE_DEFAULT, target_h // rows))

    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits the window and center the grid."""
        grid = self.session.grid
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // grid.cols, avail_h // grid.rows)))

        plate_w = grid.cols * self.cell_size + 2 * GRID_MARGIN
        plate_h = grid.rows * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - (plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _cell_at_pixel(self, pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        if pos[0] < ox or pos[1] < oy or not self.session.grid.in_bounds(row, col):
            return None
        return (row, col)

    # ---------- loop ----------
    def run(self):
        while True:
            self._handle_events()
            self.session.tick(pygame.time.get_ticks())
            self._refresh_active_states()
            self._draw()
            self.clock.tick(60)

    def _quit(self):
        self.session.cancel()
        pygame.quit()
        sys.exit(0)

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                self._quit()
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    if self.session.searching:
                        self.session.cancel()
                    else:
                        self._quit()
                elif e.key == pygame.K_q:
                    self._quit()
                elif e.key == pygame.K_SPACE:
                    self._find_path()
                elif e.key == pygame.K_c:
                    self.session.clear_path()
                elif e.key == pygame.K_x:
                    self.session.clear_grid()
                elif e.key == pygame.K_1:
                    self.session.set_speed("fast")
                elif e.key == pygame.K_2:
                    self.session.set_speed("medium")
                elif e.key == pygame.K_3:
                    self.session.set_speed("slow")
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                handled = False
                for b in self._buttons:
                    handled = b.handle_mouse(e) or handled
                if not handled and e.type == pygame.MOUSEBUTTONDOWN \
                        and e.button in (BUTTON_PRIMARY, BUTTON_SECONDARY):
                    cell = self._cell_at_pixel(e.pos)
                    if cell is not None:
                        self.session.click(cell[0], cell[1], e.button)

    def _find_path(self):
        self.session.find_path(pygame.time.get_ticks())

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_color(self, cell) -> Tuple[int, int, int]:
        if cell.is_start:
            return START_BLUE
        if cell.is_end:
            return END_RED
        if cell.is_wall:
            return WALL_GRAY
        if cell.coord in self.session.path:
            return PATH_GREEN
        if cell.coord in self.session.explored:
            return EXPLORED
        return EMPTY

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        for cell in self.session.grid.iter_cells():
            rect = pygame.Rect(ox + cell.col*cs, oy + cell.row*cs, cs, cs)
            pygame.draw.rect(self.screen, self._cell_color(cell), rect)
            pygame.draw.rect(self.screen, BORDER, rect, 1)
            if cell.is_start or cell.is_end:
                txt = self.font_small.render("S" if cell.is_start else "E", True, WHITE)
                self.screen.blit(txt, txt.get_rect(center=rect.center))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Find Path", self._find_path, store_as="btn_find"); y += h + gap
        add("Clear Path", self.session.clear_path, store_as="btn_clear_path"); y += h + gap
        add("Clear Grid", self.session.clear_grid, store_as="btn_clear_grid"); y += h + gap

        third = (w - 16) // 3
        for i, preset in enumerate(("fast", "medium", "slow")):
            rect = pygame.Rect(x + i * (third + 8), y, third, h)
            btn = UIButton(preset.capitalize(), rect,
                           lambda p=preset: self.session.set_speed(p), togglable=True)
            self._buttons.append(btn)
            setattr(self, f"btn_speed_{preset}", btn)

        self._refresh_active_states()

    def _refresh_active_states(self):
        busy = self.session.searching
        for name in ("btn_find", "btn_clear_path", "btn_clear_grid"):
            if hasattr(self, name):
                getattr(self, name).enabled = not busy
        for preset in SPEED_PRESETS:
            btn = getattr(self, f"btn_speed_{preset}", None)
            if btn is not None:
                btn.set_active(self.session.speed == preset)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 230
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        s = self.session
        line("Statistics", big=True, color=ACCENT_GOLD)
        line(f"Cells Explored: {s.stats.explored}")
        line(f"Path Length: {s.stats.path_length}")
        line(f"Time: {s.stats.elapsed_ms} ms")
        line("-" * 26)
        line(f"Status: {s.status.capitalize()}", color=STATUS_COLORS.get(s.status, TEXT_LIGHT))
        line(f"Speed: {s.speed} ({SPEED_PRESETS[s.speed]} ms/step)")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main():
    logging.basicConfig(level=os.getenv("PATHVIZ_LOG_LEVEL", "INFO").upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    opts = resolve_options()
    try:
        session = VisualizerSession(opts["rows"], opts["cols"], speed=opts["speed"])
    except ValueError as ex:
        LOGGER.error("Failed to build grid: %s", ex)
        sys.exit(1)
    Viewer(session).run()

if __name__ == "__main__":
    main()
