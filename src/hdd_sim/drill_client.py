#!/usr/bin/env python3
"""
drill_client.py

Pygame front-end for the drilling simulator: input handling and rendering.
All gameplay lives in DrillEngine; this module only reads its state.
"""

import logging
import math
from typing import Optional, Sequence, Tuple

import numpy as np
import pygame

from .config import SimConfig, build_parser
from .constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, GROUND_LEVEL, MACHINE_WIDTH, MACHINE_HEIGHT,
    STARTING_X, STARTING_DEPTH, STARTING_ANGLE, PIPE_LENGTH, PIPE_OFFSET,
    GOAL_COLOR, SURFACE_PIPE_COLOR, RANDOMNESS_STEP, RENDER_FPS,
)
from .data_models import GameState, Vec2
from .drill_engine import DrillEngine
from .terrain import Terrain, TerrainClass

WHITE = (255, 255, 255)
GREY = (125, 125, 125)
BLACK = (0, 0, 0)
DIRT_TOP = np.array((112, 84, 58), dtype=np.float32)
DIRT_BOTTOM = np.array((58, 40, 26), dtype=np.float32)


def terrain_image(terrain: Terrain) -> np.ndarray:
    """Palette image with the ground shaded darker with depth."""
    rgb = terrain.to_rgb().astype(np.float32)
    depth = np.clip((np.arange(terrain.height) - GROUND_LEVEL) / max(terrain.height - GROUND_LEVEL, 1), 0, 1)
    shade = DIRT_TOP + (DIRT_BOTTOM - DIRT_TOP) * depth[:, np.newaxis]
    ground = terrain.mask(TerrainClass.GROUND)
    rgb[ground] = np.broadcast_to(shade[:, np.newaxis, :], rgb.shape)[ground]
    return rgb.astype(np.uint8)


def _pipe_point(lx: float, ly: float) -> Tuple[int, int]:
    """Machine-local coordinates (along the entry angle) to screen coordinates."""
    c, s = math.cos(STARTING_ANGLE), math.sin(STARTING_ANGLE)
    return (int(STARTING_X + lx * c - ly * s), int(GROUND_LEVEL + STARTING_DEPTH + lx * s + ly * c))


class DrillClient:
    def __init__(self, config: SimConfig):
        pygame.init()
        self.config = config
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Horizontal Directional Drilling")

        self.engine = DrillEngine(seed=config.seed, randomness=config.randomness)
        self.show_fog = config.fog
        self.show_limits = config.steering_limits

        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 20)
        self.large_font = pygame.font.Font(None, 28)
        self.title_font = pygame.font.Font(None, 96)

        self._terrain: Optional[Terrain] = None
        self._terrain_surface: Optional[pygame.Surface] = None

    def run(self):
        """The main client execution loop."""
        print(f"Drilling field ready (seed {self.engine.seed}). "
              "Enter = drill/pause, Space = toggle bias, Backspace = pull back.")

        running = True
        while running:
            self.clock.tick(RENDER_FPS)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self._handle_key(event.key)
                elif event.type == pygame.MOUSEBUTTONDOWN:
                    self._handle_click(event.pos)

            self.engine.step()
            self._draw_game()

        pygame.quit()

    def _handle_key(self, key) -> bool:
        if key == pygame.K_q:
            return False
        if key == pygame.K_SPACE:
            self.engine.toggle_bias()
        elif key in (pygame.K_ESCAPE, pygame.K_RETURN, pygame.K_KP_ENTER):
            self.engine.start_or_pause()
        elif key == pygame.K_BACKSPACE:
            self.engine.pull_back()
        elif key == pygame.K_UP:
            self.engine.set_randomness(self.engine.randomness + RANDOMNESS_STEP)
        elif key == pygame.K_DOWN:
            self.engine.set_randomness(self.engine.randomness - RANDOMNESS_STEP)
        elif key == pygame.K_f:
            self.show_fog = not self.show_fog
        elif key == pygame.K_l:
            self.show_limits = not self.show_limits
        return True

    def _handle_click(self, pos: Tuple[int, int]):
        x, y = pos
        on_machine = x <= MACHINE_WIDTH and GROUND_LEVEL - MACHINE_HEIGHT <= y <= GROUND_LEVEL
        if on_machine:
            self.engine.start_or_pause()
        else:
            self.engine.toggle_bias()

    # ---------- Rendering ----------

    def _scene_surface(self) -> pygame.Surface:
        terrain = self.engine.terrain
        if terrain is not self._terrain:
            self._terrain = terrain
            self._terrain_surface = pygame.surfarray.make_surface(terrain_image(terrain).swapaxes(0, 1))
        return self._terrain_surface

    def _draw_fog(self, screen):
        shade = (self.engine.fog.mask * 255).astype(np.uint8)
        rgb = np.repeat(shade.T[:, :, np.newaxis], 3, axis=2)
        screen.blit(pygame.surfarray.make_surface(rgb), (0, 0), special_flags=pygame.BLEND_MULT)

    def _draw_polyline(self, screen, points: Sequence[Tuple[float, float]], color, width: int):
        if len(points) >= 2:
            pygame.draw.lines(screen, color, False, points, width)

    def _draw_machine(self, screen):
        sim = self.engine.sim
        top = GROUND_LEVEL - MACHINE_HEIGHT + 2
        pygame.draw.rect(screen, (230, 160, 30), (0, top, MACHINE_WIDTH, MACHINE_HEIGHT), border_radius=4)
        if sim.state is GameState.CONNECTION:
            # Loading a new joint of pipe
            lift = -sim.connection_countdown
            pygame.draw.line(screen, SURFACE_PIPE_COLOR,
                             _pipe_point(-PIPE_LENGTH - PIPE_OFFSET, lift), _pipe_point(-PIPE_OFFSET, lift), 3)
            pygame.draw.line(screen, SURFACE_PIPE_COLOR, _pipe_point(-PIPE_OFFSET, 0), _pipe_point(0, 0), 3)
        else:
            visible = self.engine.surface_pipe_length(sim)
            pygame.draw.line(screen, SURFACE_PIPE_COLOR, _pipe_point(-visible, 0), _pipe_point(0, 0), 3)
            pygame.draw.line(screen, BLACK, _pipe_point(-visible - 2, -5), _pipe_point(-visible - 2, 4), 4)

    def _draw_text(self, screen, text: str, font, pos, align: str = "left", color=WHITE):
        surf = font.render(text, True, color)
        x, y = pos
        if align == "center":
            x -= surf.get_width() // 2
        elif align == "right":
            x -= surf.get_width()
        screen.blit(surf, (x, y))

    def _draw_game(self):
        """Renders the drilling state using Pygame."""
        engine = self.engine
        sim = engine.sim
        screen = self.screen
        finished = sim.state.is_terminal

        screen.blit(self._scene_surface(), (0, 0))
        if self.show_fog and not finished:
            self._draw_fog(screen)

        for x, y in engine.reflections:
            pygame.draw.circle(screen, GREY, (int(x), int(y)), 1)

        self._draw_machine(screen)

        # Abandoned paths first, then the live one
        for old_path in sim.old_paths:
            self._draw_polyline(screen, [(s.position.x, s.position.y) for s in old_path], GREY, 2)
        self._draw_polyline(screen, [(s.position.x, s.position.y) for s in sim.path], WHITE, 4)

        if self.show_limits and not finished:
            for arc in engine.steering_limits(sim):
                self._draw_polyline(screen, arc, GREY, 1)

        # Drill bit, tilted toward the bias
        tip = sim.position + Vec2.from_angle(sim.direction.heading() + STARTING_ANGLE * sim.bias, 10)
        pygame.draw.line(screen, GOAL_COLOR, (sim.position.x, sim.position.y), (tip.x, tip.y), 8)

        # HUD
        status = engine.status_message()
        if status and not finished:
            self._draw_text(screen, status, self.large_font, (SCREEN_WIDTH // 2, GROUND_LEVEL // 2), "center")
        if sim.state is not GameState.DRILLING and not finished:
            self._draw_text(screen, f"Click the machine / Enter to {engine.button_label()}", self.font, (3, 3))
            self._draw_text(screen, "Click anywhere else / Space to toggle bias", self.font, (SCREEN_WIDTH // 2, 3))
        self._draw_text(screen, f"randomness {engine.randomness:.0f}%  seed {engine.seed}",
                        self.font, (SCREEN_WIDTH - 3, SCREEN_HEIGHT - 18), "right")

        if finished:
            overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
            overlay.fill((0, 255, 0, 150) if sim.state is GameState.WIN else (255, 0, 0, 150))
            screen.blit(overlay, (0, 0))
            self._draw_text(screen, status, self.title_font, (SCREEN_WIDTH // 2, GROUND_LEVEL), "center")
            y = GROUND_LEVEL + 80
            for line in engine.score().lines():
                self._draw_text(screen, line, self.large_font, (SCREEN_WIDTH - 24, y), "right")
                y += 24
            self._draw_text(screen, "Enter for a new game", self.font, (3, 3))

        pygame.display.flip()


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = SimConfig.from_args(args)
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    client = DrillClient(config)
    client.run()


if __name__ == "__main__":
    main()
