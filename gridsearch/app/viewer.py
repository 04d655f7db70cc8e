# gridsearch/app/viewer.py
#!/usr/bin/env python3
"""
Grid Search Viewer — animated breadth-first search

- Keyboard:
    [SPACE]      -> run/pause
    [N]          -> single step
    [R]          -> restart search (keep walls)
    [G]          -> regenerate grid
    [+]/[-]      -> grid size
    []]/[[]      -> wall fill
    [B]          -> algorithm: BFS
    [Q]/[ESC]    -> quit

Settings: see gridsearch/app/config.py (GRIDSEARCH_* env vars, --key=value flags)
"""

# --- bootstrap import path so `from gridsearch...` works when run as a script ---
import sys, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

import logging
from typing import Dict, List, Optional, Tuple
import pygame

from gridsearch.app.config import Settings, resolve_settings
from gridsearch.app.state import AppState
from gridsearch.core.bfs import EXHAUSTED, FOUND, IDLE, SEARCHING
from gridsearch.core.types import CellState

# ---------- Config ----------
PANEL_W = 360            # right band: metrics + buttons
GRID_MARGIN = 16
FONT_NAME = None  # default pygame font
SIZE_STEP = 5
FILL_STEP = 0.05

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
NEON_MINT   = (0,255,200)
ARROW_GRAY  = ( 60, 90, 60)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

CELL_COLORS: Dict[CellState, Tuple[int, int, int]] = {
    CellState.OPEN:     (0xFF, 0xFF, 0xFF),  # white
    CellState.WALL:     (0x00, 0x00, 0x00),  # black
    CellState.VISITED:  (0x40, 0xD8, 0x10),  # yellowish green
    CellState.FRONTIER: (0xD0, 0xA0, 0x10),  # yellow
    CellState.SOURCE:   (0x20, 0xFF, 0x20),  # bright green
    CellState.TARGET:   (0xFF, 0x20, 0x20),  # bright red
}

STATUS_LABELS = {
    IDLE: "Idle",
    SEARCHING: "Searching",
    FOUND: "Found",
    EXHAUSTED: "No path",
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
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()


# ---------- Viewer ----------
class Viewer:
    def __init__(self, app: AppState):
        pygame.init()

        self.app = app
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        win_w, win_h = 720 + PANEL_W, 720
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Grid Search Visualizer")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.clock = pygame.time.Clock()
        self._last_step_t = 0.0
        self._drawn_revision: Optional[int] = None
        self._dirty = True

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Integer cell_size that fits the window; grid plate on the left."""
        grid = self.app.grid
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = max(2, min(avail_w // grid.n_cols, avail_h // grid.n_rows))

        plate_w = grid.n_cols * self.cell_size + 2 * GRID_MARGIN
        plate_h = grid.n_rows * self.cell_size + 2 * GRID_MARGIN
        self.canvas_rect = pygame.Rect(0, max(0, (win_h - plate_h) // 2), plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()
        self._dirty = True

    def run(self):
        while True:
            self._handle_events()
            if not self.app.paused:
                self._tick_search()
            if self._dirty or self._drawn_revision != self.app.grid.revision:
                self._draw()
            self.clock.tick(60)

    def _tick_search(self):
        now = time.time()
        if now - self._last_step_t >= self.app.search_step_delay():
            self._last_step_t = now
            self._do_step()

    def _do_step(self):
        self.app.step_search()
        self._refresh_active_states()

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key == pygame.K_r:
                    self._restart()
                elif e.key == pygame.K_g:
                    self._regenerate()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_size(+SIZE_STEP)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_size(-SIZE_STEP)
                elif e.key == pygame.K_RIGHTBRACKET:
                    self._bump_fill(+FILL_STEP)
                elif e.key == pygame.K_LEFTBRACKET:
                    self._bump_fill(-FILL_STEP)
                elif e.key == pygame.K_b:
                    self._switch_algo("bfs")
                self._dirty = True
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)
                self._dirty = True

    # ---------- actions ----------
    def _toggle_run(self):
        if self.app.searcher.status in (FOUND, EXHAUSTED):
            return
        self.app.toggle_paused()
        self._refresh_active_states()

    def _restart(self):
        self.app.restart_search()
        self._refresh_active_states()

    def _regenerate(self):
        self.app.regenerate_grid()
        self._layout(*self.screen.get_size())

    def _bump_size(self, dv: int):
        self.app.resize(self.app.grid_size + dv)
        self._layout(*self.screen.get_size())

    def _bump_fill(self, dv: float):
        self.app.fill_randomly(round(self.app.fill_percent + dv, 2))
        self._layout(*self.screen.get_size())

    def _switch_algo(self, algo: str):
        try:
            self.app.select_searcher(algo)
        except ValueError as ex:
            print(f"Failed to switch algorithm: {ex}")
        self._refresh_active_states()

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()
        self._drawn_revision = self.app.grid.revision
        self._dirty = False

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

    def _cell_center(self, row: int, col: int) -> Tuple[int, int]:
        cs = self.cell_size
        ox, oy = self._grid_origin
        return ox + col*cs + cs//2, oy + row*cs + cs//2

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        grid = self.app.grid

        for row, col, state in grid.cell_states():
            rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
            pygame.draw.rect(self.screen, CELL_COLORS[state], rect)
            if cs >= 6:
                pygame.draw.rect(self.screen, BLACK, rect, 1)

        # origin arrows: short stroke toward the cell we came from
        if cs >= 12:
            for row, col, dr, dc in grid.cell_origins():
                if (dr, dc) == (0, 0) or grid.cell_state(row, col) is CellState.WALL:
                    continue
                cx, cy = self._cell_center(row, col)
                tip = (cx + dc * cs // 3, cy + dr * cs // 3)
                pygame.draw.line(self.screen, ARROW_GRAY, (cx, cy), tip, 2)

        path = self.app.found_path()
        if len(path) >= 2:
            pts = [self._cell_center(r, c) for r, c in path]
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, max(2, cs // 4))

    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            rect = pygame.Rect(x, y, w, h)
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Restart Search", self._restart); y += h + gap
        add("Regenerate", self._regenerate); y += h + gap

        half = (w-8)//2
        self._buttons.append(UIButton("Size −", pygame.Rect(x, y, half, h), lambda: self._bump_size(-SIZE_STEP)))
        self._buttons.append(UIButton("Size +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_size(+SIZE_STEP)))
        y += h + gap
        self._buttons.append(UIButton("Fill −", pygame.Rect(x, y, half, h), lambda: self._bump_fill(-FILL_STEP)))
        self._buttons.append(UIButton("Fill +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_fill(+FILL_STEP)))
        y += h + gap

        add("Algo: BFS", lambda: self._switch_algo("bfs"), togglable=True, store_as="btn_algo_bfs")

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(not self.app.paused)
        if hasattr(self, "btn_algo_bfs"):
            self.btn_algo_bfs.set_active(self.app.algo == "bfs")
        self._dirty = True

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

        m = self.app.searcher.metrics()
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"Status: {STATUS_LABELS.get(m.get('status'), m.get('status'))}")
        line(f"Steps: {m.get('steps', 0)}")
        line(f"Queue: {m.get('queue_size', 0)}")
        line(f"Visited: {m.get('visited_count', 0)}")
        path = self.app.found_path()
        line(f"Path Len: {max(0, len(path) - 1)}")
        line("-" * 26)
        line(f"Algo: {m.get('algo', self.app.algo)}")
        line(f"Grid: {self.app.grid_size}x{self.app.grid_size}  Fill: {self.app.fill_percent:.0%}")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main(argv: Optional[List[str]] = None):
    try:
        settings: Settings = resolve_settings(argv)
    except ValueError as ex:
        print(f"Bad settings: {ex}")
        sys.exit(1)
    logging.basicConfig(level=settings.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = AppState.new(settings.grid_size, settings.fill_percent,
                       algo=settings.algo, seed=settings.seed)
    Viewer(app).run()

if __name__ == "__main__":
    main()
