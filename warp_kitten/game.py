import os
import random

import pygame

from .geometry import Viewport, clamp
from .kitten import KittenState, PursuitController
from .log import log
from .settings import (
    ASSETS_DIR,
    BLACK,
    BUBBLE_SMOOTH_ALPHA,
    BUBBLE_TAIL_LEN,
    BUBBLE_TAIL_W,
    FLOOR_COLOR,
    FPS,
    HEIGHT,
    MAX_FRAME_STEP,
    SKY,
    WHITE,
    WIDTH,
    SimulationConfig,
)
from .tally import TreatTally
from .timers import Scheduler
from .treats import TreatEvent, TreatPhysics

# Assets helpers
TREAT_SIZE = 20


def load_image(filename: str):
    """Load PNG from the assets directory; return None if missing or failed."""
    path = os.path.join(ASSETS_DIR, filename)
    if not os.path.exists(path):
        log(f"Asset not found: {filename}")
        return None
    try:
        return pygame.image.load(path).convert_alpha()
    except Exception as e:
        log(f"Failed to load {filename}: {e}")
        return None


def blit_centered(surf: pygame.Surface, tex: pygame.Surface, x: float, y: float):
    rect = tex.get_rect(center=(int(x), int(y)))
    surf.blit(tex, rect)


def draw_pixel_fish(size=TREAT_SIZE):
    """Draw pixel art fish treat"""
    surf = pygame.Surface((size, size), pygame.SRCALPHA)
    pixel = max(1, size // 10)  # Pixel block size

    # Fish body (relative to center), head on the left, forked tail on the right
    fish_body = [
        (-3, -2), (-3, -1), (-3, 0), (-3, 1), (-3, 2),
        (-2, -3), (-2, -2), (-2, -1), (-2, 0), (-2, 1), (-2, 2), (-2, 3),
        (-1, -3), (-1, -2), (-1, -1), (-1, 0), (-1, 1), (-1, 2), (-1, 3),
        (0, -2), (0, -1), (0, 0), (0, 1), (0, 2),
        (1, -1), (1, 0), (1, 1),
        (2, -2), (2, 0), (2, 2),
        (3, -3), (3, -1), (3, 1), (3, 3),
    ]
    fish_eye = [(-2, -1)]

    center_x, center_y = size // 2, size // 2
    for px, py in fish_body:
        rect = (center_x + px * pixel, center_y + py * pixel, pixel, pixel)
        pygame.draw.rect(surf, (255, 200, 100), rect)
        pygame.draw.rect(surf, (200, 150, 80), rect, 1)
    for px, py in fish_eye:
        pygame.draw.rect(surf, (80, 60, 40), (center_x + px * pixel, center_y + py * pixel, pixel, pixel))
    return surf


def _make_font(size: int):
    font_path = pygame.font.match_font('comicsansms') or pygame.font.match_font(pygame.font.get_default_font())
    try:
        return pygame.font.Font(font_path, size)
    except Exception:
        return pygame.font.Font(None, size)


class Game:
    """pygame shell around the treat physics and the kitten."""

    def __init__(self, config=None, width=WIDTH, height=HEIGHT):
        pygame.init()
        pygame.font.init()
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption("WARP KITTEN")
        log("Display window created successfully.")
        self.clock = pygame.time.Clock()
        self.font = _make_font(16)
        self.large_font = _make_font(32)

        self.config = config or SimulationConfig()
        self.viewport = Viewport(width, height)
        self.scheduler = Scheduler()
        self.rng = random.Random()
        self.treats = TreatPhysics(self.viewport, self.scheduler, self.config, self.rng)
        self.pursuit = PursuitController(self.treats, self.viewport, self.scheduler, self.config, self.rng)
        self.tally = TreatTally()
        self.treats.subscribe(self.tally)
        self.treats.subscribe(self._on_treat_event)

        self.running = True
        self.paused = False
        # Smoothed drawing position of the kitten (pixels)
        self._draw_pos = None
        self._bubble_pos = None
        self._load_assets()

    def _load_assets(self):
        """Load optional PNG sprites with drawn fallbacks."""
        self.kitten_image = load_image("kitten.png")
        if self.kitten_image is not None:
            size = int(self.config.kitten_radius * 2)
            try:
                self.kitten_image = pygame.transform.smoothscale(self.kitten_image, (size, size))
            except Exception as e:
                log(f"Scale kitten image failed: {e}")
                self.kitten_image = None
        treat_image = load_image("treat.png")
        if treat_image is not None:
            try:
                treat_image = pygame.transform.smoothscale(treat_image, (TREAT_SIZE, TREAT_SIZE))
            except Exception as e:
                log(f"Scale treat image failed: {e}")
                treat_image = None
        self.treat_image = treat_image or draw_pixel_fish(TREAT_SIZE)

    def _on_treat_event(self, event, treat):
        if event is TreatEvent.EXPIRED:
            log(f"Treat {treat.id} went stale at ({treat.x:.0f}, {treat.y:.0f})")

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.viewport.resize(event.w, event.h)
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_z:
                    self.paused = not self.paused
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self.paused:
                    continue
                # Clicking the kitten never throws a treat; test where it is drawn
                if self.pursuit.hit_test(*event.pos, center=self._draw_pos):
                    self.pursuit.on_kitten_click()
                else:
                    self.treats.spawn(*event.pos)

    # --- drawing ---
    def draw_background(self):
        w, h = int(self.viewport.width), int(self.viewport.height)
        self.screen.fill(SKY)
        floor_y = int(self.treats.floor) + TREAT_SIZE
        pygame.draw.rect(self.screen, FLOOR_COLOR, (0, floor_y, w, max(0, h - floor_y)))

    def draw_treats(self):
        for treat in self.treats.active_treats():
            img = self.treat_image
            if treat.is_eaten:
                # Shrinking "gulp" while the removal timer runs
                img = pygame.transform.rotozoom(img, 180, 0.5)
            self.screen.blit(img, (int(treat.x), int(treat.y)))

    def kitten_draw_position(self):
        tx, ty = self.pursuit.pixel_position()
        if self._draw_pos is None or self.pursuit.state is KittenState.CHASING:
            self._draw_pos = [tx, ty]
        else:
            # Wander jumps glide instead of teleporting
            self._draw_pos[0] += (tx - self._draw_pos[0]) * BUBBLE_SMOOTH_ALPHA
            self._draw_pos[1] += (ty - self._draw_pos[1]) * BUBBLE_SMOOTH_ALPHA
        return self._draw_pos

    def draw_kitten(self, x, y):
        if self.kitten_image is not None:
            blit_centered(self.screen, self.kitten_image, x, y)
            return
        # Fallback: draw default geometric kitten
        size = int(self.config.kitten_radius * 0.75)
        cx, cy = int(x), int(y)
        color = (255, 170, 90) if self.pursuit.state is KittenState.EATING else (169, 169, 169)
        pygame.draw.polygon(self.screen, color, [(cx - size, cy - size // 3), (cx - size // 2, cy - size - 8), (cx - 4, cy - size + 4)])
        pygame.draw.polygon(self.screen, color, [(cx + size, cy - size // 3), (cx + size // 2, cy - size - 8), (cx + 4, cy - size + 4)])
        pygame.draw.circle(self.screen, color, (cx, cy), size)
        eye_offset = size // 3
        pygame.draw.circle(self.screen, WHITE, (cx - eye_offset, cy - eye_offset // 2), size // 6)
        pygame.draw.circle(self.screen, WHITE, (cx + eye_offset, cy - eye_offset // 2), size // 6)
        pygame.draw.circle(self.screen, BLACK, (cx - eye_offset, cy - eye_offset // 2), size // 12)
        pygame.draw.circle(self.screen, BLACK, (cx + eye_offset, cy - eye_offset // 2), size // 12)
        pygame.draw.line(self.screen, BLACK, (cx, cy), (cx, cy + size // 4), 2)

    def draw_speech_bubble(self, kx, ky):
        speech = self.pursuit.speech
        if not speech.visible or not speech.text:
            self._bubble_pos = None
            return
        w, h = self.viewport.width, self.viewport.height
        pad = 8
        surf = self.font.render(speech.text, True, BLACK)
        bw, bh = surf.get_width() + pad * 2, surf.get_height() + pad * 2
        radius = self.config.kitten_radius

        # Prefer above the kitten, flip below when it would leave the window
        bx_des = clamp(kx - bw / 2, 5, max(5, w - bw - 5))
        by_des = ky - radius - bh - BUBBLE_TAIL_LEN
        if by_des < 5:
            by_des = ky + radius + BUBBLE_TAIL_LEN
        by_des = clamp(by_des, 5, max(5, h - bh - 5))
        if self._bubble_pos is None:
            self._bubble_pos = [bx_des, by_des]
        else:
            self._bubble_pos[0] += (bx_des - self._bubble_pos[0]) * BUBBLE_SMOOTH_ALPHA
            self._bubble_pos[1] += (by_des - self._bubble_pos[1]) * BUBBLE_SMOOTH_ALPHA
        bubble_rect = pygame.Rect(int(self._bubble_pos[0]), int(self._bubble_pos[1]), bw, bh)

        # Tail points from the bubble edge nearest the kitten
        base_cx = int(clamp(kx, bubble_rect.left + 10, bubble_rect.right - 10))
        if ky > bubble_rect.centery:
            base_cy, tip = bubble_rect.bottom, (base_cx, bubble_rect.bottom + BUBBLE_TAIL_LEN)
        else:
            base_cy, tip = bubble_rect.top, (base_cx, bubble_rect.top - BUBBLE_TAIL_LEN)
        base_left = (base_cx - BUBBLE_TAIL_W // 2, base_cy)
        base_right = (base_cx + BUBBLE_TAIL_W // 2, base_cy)

        # Draw tail (triangle) first, then rounded rect, so tail and text don't overlap
        pygame.draw.polygon(self.screen, WHITE, [base_left, base_right, tip])
        pygame.draw.lines(self.screen, BLACK, False, [base_left, tip, base_right], 2)
        pygame.draw.rect(self.screen, WHITE, bubble_rect, border_radius=8)
        pygame.draw.rect(self.screen, BLACK, bubble_rect, width=2, border_radius=8)
        self.screen.blit(surf, (bubble_rect.left + pad, bubble_rect.top + pad))

    def draw_ui(self):
        left_x, row_y = 12, 8
        text = f"Thrown: {self.tally.thrown}   Eaten: {self.tally.eaten}   Stale: {self.tally.expired}"
        self.screen.blit(self.font.render(text, True, BLACK), (left_x, row_y))
        state_surf = self.font.render(f"Kitten: {self.pursuit.state.value}", True, BLACK)
        self.screen.blit(state_surf, (int(self.viewport.width) - state_surf.get_width() - 12, row_y))

    def draw_pause_overlay(self):
        w, h = int(self.viewport.width), int(self.viewport.height)
        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 100))
        self.screen.blit(overlay, (0, 0))
        p_surf = self.large_font.render("Paused", True, WHITE)
        hint_surf = self.font.render("Press Z to resume", True, WHITE)
        self.screen.blit(p_surf, (w // 2 - p_surf.get_width() // 2, h // 2 - 20))
        self.screen.blit(hint_surf, (w // 2 - hint_surf.get_width() // 2, h // 2 + 24))

    def draw(self):
        self.draw_background()
        self.draw_treats()
        kx, ky = self.kitten_draw_position()
        self.draw_kitten(kx, ky)
        self.draw_speech_bubble(kx, ky)
        self.draw_ui()
        if self.paused:
            self.draw_pause_overlay()

    def step(self, elapsed_ms: float):
        """Advance timers by wall time and physics by frames."""
        self.scheduler.advance(elapsed_ms / 1000.0)
        frames = min(MAX_FRAME_STEP, elapsed_ms * FPS / 1000.0)
        self.treats.tick(frames)

    def update(self, elapsed_ms: float):
        """One frame of simulation; nothing moves while paused."""
        if not self.paused:
            self.step(elapsed_ms)

    def run(self):
        log("Game loop entering...")
        self.pursuit.start()
        ticks = 0
        elapsed_ms = 1000.0 / FPS
        try:
            while self.running:
                self.handle_events()
                self.update(elapsed_ms)
                self.draw()
                pygame.display.flip()
                elapsed_ms = self.clock.tick(FPS)
                # Print a heartbeat roughly once per second to confirm the loop is running
                ticks += 1
                if ticks % FPS == 0:
                    kx, ky = self.pursuit.kitten.x, self.pursuit.kitten.y
                    log(f"Heartbeat: {self.tally.summary()}, kitten={self.pursuit.state.value} "
                        f"at ({kx:.0f}%, {ky:.0f}%), fps={self.clock.get_fps():.0f}")
        finally:
            log("Game loop exiting. Cleaning up...")
            self.pursuit.close()
            self.treats.close()
            self.scheduler.cancel_all()
            pygame.quit()
            log("Pygame quit done.")
