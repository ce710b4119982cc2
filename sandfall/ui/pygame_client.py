"""Pygame client for the sandfall simulation.

Maps materials and metadata to colours, draws the grid, and turns mouse
and keyboard input into calls on the engine's drawing API.  One frame
runs ``sim_speed`` ticks followed by one render.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pygame
from numpy.typing import NDArray

if TYPE_CHECKING:
    from sandfall.simulation.engine import SimulationEngine

from sandfall.drawing.presets import Preset
from sandfall.simulation.config import MAX_BRUSH_SIZE
from sandfall.world.materials import Material, properties_of

logger = logging.getLogger(__name__)

_MAX_GRAVITY = 5
_MAX_SIM_SPEED = 10
_PANEL_TEXT = (200, 200, 200)
_PANEL_BG = (20, 20, 20)
_PREVIEW = (255, 255, 255)

# Base palette indexed by material id
_PALETTE = np.array(
    [
        (0, 0, 0),  # EMPTY
        (230, 200, 140),  # SAND
        (75, 143, 252),  # WATER
        (136, 136, 136),  # WALL
        (255, 74, 0),  # FIRE
        (107, 89, 24),  # OIL
        (58, 158, 55),  # PLANT
        (151, 252, 92),  # ACID
        (176, 245, 252),  # ICE
        (208, 208, 208),  # STEAM
    ],
    dtype=np.float64,
)

# Per-material colour jitter amplitude
_JITTER = np.array([0, 15, 5, 5, 0, 5, 5, 5, 5, 0], dtype=np.float64)

_MATERIAL_KEYS: dict[int, Material] = {
    pygame.K_1: Material.SAND,
    pygame.K_2: Material.WATER,
    pygame.K_3: Material.WALL,
    pygame.K_4: Material.FIRE,
    pygame.K_5: Material.OIL,
    pygame.K_6: Material.PLANT,
    pygame.K_7: Material.ACID,
    pygame.K_8: Material.ICE,
    pygame.K_9: Material.STEAM,
}

_TOOL_KEYS: dict[int, str] = {
    pygame.K_b: "brush",
    pygame.K_l: "line",
    pygame.K_r: "rect",
    pygame.K_c: "circle",
}

_PRESET_KEYS: dict[int, Preset] = {
    pygame.K_F1: Preset.BARRIER,
    pygame.K_F2: Preset.FUNNEL,
    pygame.K_F3: Preset.CONTAINER,
    pygame.K_F4: Preset.HOURGLASS,
    pygame.K_F5: Preset.MAZE,
}


def material_colours(
    materials: NDArray[np.int8],
    lifespan: NDArray[np.int32],
    jitter: NDArray[np.float64],
) -> NDArray[np.uint8]:
    """Map flat material and lifespan arrays to RGB colours.

    Fire shifts from yellow to red as its lifespan runs out; steam fades
    toward the black background.  Sand, water and solids get a fixed
    per-cell brightness jitter.

    Args:
        materials: Flat material ids.
        lifespan: Flat remaining lifespans.
        jitter: Flat per-cell noise in [-0.5, 0.5].

    Returns:
        ``(n, 3)`` uint8 colour array.
    """
    ids = materials.astype(np.intp)
    colours = _PALETTE[ids] + (_JITTER[ids] * jitter)[:, None]

    fire = ids == Material.FIRE
    if fire.any():
        ratio = lifespan[fire] / properties_of(Material.FIRE).default_lifespan
        ratio = np.clip(ratio, 0.0, 1.0)
        colours[fire, 0] = 255
        colours[fire, 1] = np.minimum(255, np.floor(ratio * 200) + 50)
        colours[fire, 2] = np.floor(ratio * 50)

    steam = ids == Material.STEAM
    if steam.any():
        ratio = lifespan[steam] / properties_of(Material.STEAM).default_lifespan
        alpha = np.clip(ratio, 0.0, 1.0) * 0.8
        colours[steam] *= alpha[:, None]

    return np.clip(colours, 0, 255).astype(np.uint8)


class PygameRenderer:
    """Renders a SimulationEngine into a Pygame window and handles input.

    Attributes:
        engine: The simulation engine to visualise.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    def __init__(
        self,
        engine: SimulationEngine,
        cell_size: int = 4,
        screenshot_dir: Path | None = None,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per grid cell.
            screenshot_dir: Directory for PNG exports (default: cwd).
        """
        self.engine = engine
        self.cell_size = cell_size
        self.screenshot_dir = screenshot_dir or Path.cwd()

        self.material = Material.SAND
        self.tool = "brush"
        self._drag_start: tuple[int, int] | None = None
        self._last_cell: tuple[int, int] | None = None
        self._drawing = False
        self._erasing = False
        self._jitter = self._make_jitter()

        self._panel_width = 220
        w = engine.grid.width * cell_size
        h = engine.grid.height * cell_size

        pygame.init()
        self.screen = pygame.display.set_mode((w + self._panel_width, h))
        pygame.display.set_caption("Sandfall")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    def _make_jitter(self) -> NDArray[np.float64]:
        return self.engine.rng.random(self.engine.grid.size) - 0.5

    def run(self, fps: int = 60) -> None:
        """Main loop: handle events, step sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            self.clock.tick(fps)
            self._handle_events()
            if not self.paused:
                self.engine.frame()
            self._draw()

        pygame.quit()

    # -- Input ---------------------------------------------------------------

    def _cell_at(self, pos: tuple[int, int]) -> tuple[int, int]:
        return pos[0] // self.cell_size, pos[1] // self.cell_size

    def _brush_probability(self) -> float:
        return 1.0 if self.material == Material.WALL else 0.7

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self._handle_press(event.button, self._cell_at(event.pos))
            elif event.type == pygame.MOUSEMOTION:
                self._handle_drag(self._cell_at(event.pos))
            elif event.type == pygame.MOUSEBUTTONUP:
                self._handle_release(event.button, self._cell_at(event.pos))

    def _handle_key(self, key: int) -> None:
        engine = self.engine
        config = engine.config
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key in _MATERIAL_KEYS:
            self.material = _MATERIAL_KEYS[key]
        elif key == pygame.K_e:
            self.material = Material.EMPTY
        elif key in _TOOL_KEYS:
            self.tool = _TOOL_KEYS[key]
        elif key in _PRESET_KEYS:
            grid = engine.grid
            engine.create_preset(_PRESET_KEYS[key], grid.width // 2, grid.height // 2)
        elif key == pygame.K_LEFTBRACKET:
            engine.configure(brush_size=max(1, config.brush_size - 1))
        elif key == pygame.K_RIGHTBRACKET:
            engine.configure(brush_size=min(MAX_BRUSH_SIZE, config.brush_size + 1))
        elif key == pygame.K_g:
            gravity = min(_MAX_GRAVITY, config.gravity_strength + 1)
            engine.configure(gravity_strength=gravity)
        elif key == pygame.K_h:
            engine.configure(gravity_strength=max(1, config.gravity_strength - 1))
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            engine.configure(sim_speed=min(_MAX_SIM_SPEED, config.sim_speed + 1))
        elif key == pygame.K_MINUS:
            engine.configure(sim_speed=max(1, config.sim_speed - 1))
        elif key == pygame.K_DELETE:
            engine.clear()
        elif key == pygame.K_s:
            self.save_screenshot()

    def _handle_press(self, button: int, cell: tuple[int, int]) -> None:
        if button == 3:
            self._erasing = True
            self.engine.erase(*cell)
            self._last_cell = cell
            return
        if button != 1:
            return
        self._drawing = True
        if self.tool == "brush":
            self._paint(cell)
        else:
            self._drag_start = cell
        self._last_cell = cell

    def _handle_drag(self, cell: tuple[int, int]) -> None:
        if self._erasing:
            self.engine.erase(*cell)
        elif self._drawing and self.tool == "brush" and self._last_cell is not None:
            if self.material == Material.EMPTY:
                self.engine.erase(*cell)
            else:
                x0, y0 = self._last_cell
                self.engine.stamp_line(x0, y0, cell[0], cell[1], self.material)
        if self._drawing or self._erasing:
            self._last_cell = cell

    def _handle_release(self, button: int, cell: tuple[int, int]) -> None:
        if button == 3:
            self._erasing = False
        elif button == 1:
            if self._drag_start is not None and self.material != Material.EMPTY:
                self._finish_shape(self._drag_start, cell)
            self._drawing = False
            self._drag_start = None
        self._last_cell = None

    def _paint(self, cell: tuple[int, int]) -> None:
        if self.material == Material.EMPTY:
            self.engine.erase(*cell)
        else:
            self.engine.stamp_circle(
                cell[0],
                cell[1],
                self.material,
                probability=self._brush_probability(),
            )

    def _finish_shape(self, start: tuple[int, int], end: tuple[int, int]) -> None:
        engine = self.engine
        if self.tool == "line":
            engine.stamp_line(start[0], start[1], end[0], end[1], self.material)
        elif self.tool == "rect":
            filled = bool(pygame.key.get_mods() & pygame.KMOD_SHIFT)
            engine.stamp_rect(
                start[0], start[1], end[0], end[1], self.material, filled=filled
            )
        elif self.tool == "circle":
            dx, dy = end[0] - start[0], end[1] - start[1]
            radius = int((dx * dx + dy * dy) ** 0.5)
            engine.stamp_circle(start[0], start[1], self.material, radius, 0.9)

    def save_screenshot(self) -> Path:
        """Export the grid area of the window as a PNG.

        Returns:
            Path of the written image.
        """
        grid = self.engine.grid
        cs = self.cell_size
        area = pygame.Rect(0, 0, grid.width * cs, grid.height * cs)
        path = self.screenshot_dir / f"sandfall-{self.engine.tick:06d}.png"
        pygame.image.save(self.screen.subsurface(area), str(path))
        logger.info("Saved screenshot to %s", path)
        return path

    # -- Drawing -------------------------------------------------------------

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_PANEL_BG)
        self._draw_grid()
        self._draw_preview()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_grid(self) -> None:
        """Draw every cell as a cell_size square."""
        grid = self.engine.grid
        if self._jitter.shape[0] != grid.size:
            self._jitter = self._make_jitter()
        colours = material_colours(grid.materials, grid.lifespan, self._jitter)
        image = colours.reshape(grid.height, grid.width, 3).swapaxes(0, 1)
        surface = pygame.surfarray.make_surface(image)
        size = (grid.width * self.cell_size, grid.height * self.cell_size)
        self.screen.blit(pygame.transform.scale(surface, size), (0, 0))

    def _draw_preview(self) -> None:
        """Outline the pending shape while a shape tool is being dragged."""
        if self._drag_start is None or self._last_cell is None:
            return
        cs = self.cell_size
        sx, sy = self._drag_start[0] * cs, self._drag_start[1] * cs
        ex, ey = self._last_cell[0] * cs, self._last_cell[1] * cs
        if self.tool == "line":
            pygame.draw.line(self.screen, _PREVIEW, (sx, sy), (ex, ey))
        elif self.tool == "rect":
            rect = pygame.Rect(min(sx, ex), min(sy, ey), abs(ex - sx), abs(ey - sy))
            pygame.draw.rect(self.screen, _PREVIEW, rect, 1)
        elif self.tool == "circle":
            radius = int(((ex - sx) ** 2 + (ey - sy) ** 2) ** 0.5)
            pygame.draw.circle(self.screen, _PREVIEW, (sx, sy), radius, 1)

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        engine = self.engine
        config = engine.config
        panel_x = engine.grid.width * self.cell_size + 10
        y = 10

        lines = [
            f"Tick: {engine.tick}",
            f"FPS: {self.clock.get_fps():.0f}",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            "",
            f"Material: {self.material.name.lower()}",
            f"Tool: {self.tool}",
            f"Brush: {config.brush_size}",
            f"Gravity: {config.gravity_strength}",
            f"Speed: {config.sim_speed} t/f",
            "",
            "--- Cells ---",
        ]
        for material in Material:
            if material == Material.EMPTY:
                continue
            count = engine.grid.count(material)
            if count:
                lines.append(f"  {material.name.lower()}: {count}")

        lines += [
            "",
            "--- Controls ---",
            "1-9: material  E: eraser",
            "B/L/R/C: tool",
            "[ ]: brush  G/H: gravity",
            "+/-: speed  F1-F5: presets",
            "SPACE: pause  DEL: clear",
            "S: screenshot  ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _PANEL_TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
