import argparse
import logging
import os
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import pygame

# Simple falling-block dodger implemented with PyGame.
# The player slides a paddle left/right along the bottom of the window
# while square blocks rain down. Blocks spawn more often and fall faster
# the longer a run lasts. Comments explain the tuning constants, the
# state containers and the frame loop.

logger = logging.getLogger(__name__)

# --- Window / surface ---
WIDTH, HEIGHT = 480, 640  # default drawing surface (overridable on the CLI)
FPS = 60

# Player paddle (pixels). The paddle sits PLAYER_BOTTOM_GAP above the
# bottom edge and only ever moves horizontally.
PLAYER_W, PLAYER_H = 40, 20
PLAYER_SPEED = 6  # px/frame
PLAYER_BOTTOM_GAP = 60

# Obstacles are squares with a random side in [MIN, MIN + RANGE).
OBSTACLE_MIN_SIZE = 28
OBSTACLE_SIZE_RANGE = 20
# Extra random fall speed added on top of the current base speed, and
# the per-elapsed-tick bonus that makes late spawns fall faster.
OBSTACLE_SPEED_JITTER = 1.5
OBSTACLE_SPEED_PER_TICK = 0.002
# Blocks are dropped once they sink this far below the bottom edge.
DESPAWN_MARGIN = 50

# Difficulty: chance per frame to spawn a block and the base fall speed.
# Both step up every DIFFICULTY_INTERVAL frames and never step down
# within a run.
INITIAL_SPAWN_RATE = 0.02
INITIAL_BASE_SPEED = 2.5
DIFFICULTY_INTERVAL = 240  # frames
SPAWN_RATE_STEP = 0.005
BASE_SPEED_STEP = 0.25

# Colors
BG_TOP = (0x07, 0x17, 0x3A)
BG_BOTTOM = (0x00, 0x08, 0x14)
PLAYER_COLOR = (0x3F, 0xA7, 0xD6)
PLAYER_GLOW_ALPHA = 31  # ~0.12 opacity
PLAYER_RADIUS = 6
OBSTACLE_COLOR = (0xB5, 0xE2, 0xFA)
TEXT_COLOR = (230, 240, 250)
HINT_COLOR = (150, 170, 190)
OVERLAY_COLOR = (0, 0, 0, 150)

# Logical actions -> physical keys. Arrow keys or A/D both work.
LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)
START_KEYS = (pygame.K_SPACE, pygame.K_RETURN, pygame.K_KP_ENTER)
RESTART_KEYS = START_KEYS + (pygame.K_r,)

LOG_LEVEL_ENV = "FALLINGDODGE_LOG_LEVEL"


class RunPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass
class Player:
    x: float
    y: float
    w: int = PLAYER_W
    h: int = PLAYER_H
    speed: float = PLAYER_SPEED


@dataclass
class Obstacle:
    x: float
    y: float
    size: float
    speed: float

    @property
    def w(self):
        return self.size

    @property
    def h(self):
        return self.size


@dataclass
class GameState:
    """Everything one run needs. Owned by a single GameLoop."""

    width: int
    height: int
    player: Player
    obstacles: List[Obstacle] = field(default_factory=list)
    score: int = 0
    spawn_rate: float = INITIAL_SPAWN_RATE
    base_speed: float = INITIAL_BASE_SPEED
    elapsed: int = 0
    phase: RunPhase = RunPhase.IDLE
    final_score: Optional[int] = None


def clamp(v, lo, hi):
    """Clamp value v into the inclusive range [lo, hi].

    Used for keeping the paddle inside the playfield.
    """
    return lo if v < lo else hi if v > hi else v


def aabb(ax, ay, aw, ah, bx, by, bw, bh):
    """Axis-aligned bounding box collision test.

    Returns True when rectangle A (ax,ay,aw,ah) overlaps
    rectangle B (bx,by,bw,bh). Edges that merely touch do not count.
    """
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def new_state(width=WIDTH, height=HEIGHT, phase=RunPhase.IDLE):
    """Build a fresh GameState with the paddle centred near the bottom.

    Raises ValueError if the surface cannot hold the paddle or a block.
    """
    if width < max(PLAYER_W, OBSTACLE_MIN_SIZE + OBSTACLE_SIZE_RANGE) or height <= 0:
        raise ValueError(f"surface {width}x{height} is too small to play on")
    player = Player(x=width / 2 - PLAYER_W / 2, y=height - PLAYER_BOTTOM_GAP)
    return GameState(width=width, height=height, player=player, phase=phase)


class InputTracker:
    """Which keys are currently held down.

    Fed by key-down/key-up events and read once per tick by `tick`.
    """

    def __init__(self):
        self.keys = {}

    def key_down(self, key):
        self.keys[key] = True

    def key_up(self, key):
        self.keys[key] = False

    def is_held(self, key):
        return self.keys.get(key, False)

    @property
    def left(self):
        return any(self.is_held(k) for k in LEFT_KEYS)

    @property
    def right(self):
        return any(self.is_held(k) for k in RIGHT_KEYS)

    def clear(self):
        self.keys.clear()


def spawn_obstacle(state, rng=random):
    """Append one block just above the visible area and return it."""
    size = OBSTACLE_MIN_SIZE + rng.uniform(0, OBSTACLE_SIZE_RANGE)
    x = rng.uniform(0, state.width - size)
    # uniform() can round up to its upper bound.
    if x >= state.width - size:
        x = max(0.0, state.width - size - 1e-9)
    speed = (
        state.base_speed
        + rng.uniform(0, OBSTACLE_SPEED_JITTER)
        + state.elapsed * OBSTACLE_SPEED_PER_TICK
    )
    obstacle = Obstacle(x=x, y=-size, size=size, speed=speed)
    state.obstacles.append(obstacle)
    return obstacle


def tick(state, keys, rng=random):
    """Advance `state` by one frame. Does nothing unless RUNNING."""
    if state.phase is not RunPhase.RUNNING:
        return state

    player = state.player

    # Both directions may be held at once; they cancel out.
    if keys.left:
        player.x -= player.speed
    if keys.right:
        player.x += player.speed
    player.x = clamp(player.x, 0, state.width - player.w)

    if rng.random() < state.spawn_rate:
        spawn_obstacle(state, rng)

    for o in state.obstacles:
        o.y += o.speed
    limit = state.height + DESPAWN_MARGIN
    state.obstacles = [o for o in state.obstacles if o.y <= limit]

    # First hit ends the run; the frame that ended it does not score.
    for o in state.obstacles:
        if aabb(o.x, o.y, o.w, o.h, player.x, player.y, player.w, player.h):
            state.phase = RunPhase.GAME_OVER
            state.final_score = state.score
            logger.info("game over: score=%d elapsed=%d", state.score, state.elapsed)
            return state

    state.elapsed += 1
    if state.elapsed % DIFFICULTY_INTERVAL == 0:
        state.spawn_rate += SPAWN_RATE_STEP
        state.base_speed += BASE_SPEED_STEP
        logger.debug(
            "difficulty up at tick %d: spawn_rate=%.3f base_speed=%.2f",
            state.elapsed,
            state.spawn_rate,
            state.base_speed,
        )

    state.score += 1
    return state


def _lerp_color(a, b, t):
    return tuple(int(round(a[i] + (b[i] - a[i]) * t)) for i in range(3))


def draw_background(surface):
    """Vertical gradient, one line per row."""
    w, h = surface.get_size()
    last = max(1, h - 1)
    for row in range(h):
        color = _lerp_color(BG_TOP, BG_BOTTOM, row / last)
        pygame.draw.line(surface, color, (0, row), (w - 1, row))


def render(surface, state):
    """Paint `state` onto `surface`. Read-only with respect to state."""
    draw_background(surface)

    p = state.player
    # Soft glow behind the paddle (needs its own alpha layer).
    glow = pygame.Surface((p.w + 8, p.h + 12), pygame.SRCALPHA)
    glow.fill(PLAYER_COLOR + (PLAYER_GLOW_ALPHA,))
    surface.blit(glow, (int(p.x) - 4, int(p.y) - 6))

    pygame.draw.rect(
        surface,
        PLAYER_COLOR,
        pygame.Rect(int(p.x), int(p.y), p.w, p.h),
        border_radius=PLAYER_RADIUS,
    )

    for o in state.obstacles:
        pygame.draw.rect(
            surface, OBSTACLE_COLOR, pygame.Rect(int(o.x), int(o.y), int(o.w), int(o.h))
        )


def game_over_text(score):
    return f"Game Over\nScore: {score}"


def _blit_lines(surface, font, lines, color, top):
    w = surface.get_width()
    y = top
    for line in lines:
        img = font.render(line, True, color)
        surface.blit(img, (w // 2 - img.get_width() // 2, y))
        y += img.get_height() + 4
    return y


def draw_hud(surface, state, font):
    """Score in the corner, plus the idle / game-over overlays."""
    surface.blit(font.render(f"Score: {state.score}", True, TEXT_COLOR), (10, 8))

    if state.phase is RunPhase.RUNNING:
        return

    w, h = surface.get_size()
    shade = pygame.Surface((w, h), pygame.SRCALPHA)
    shade.fill(OVERLAY_COLOR)
    surface.blit(shade, (0, 0))

    if state.phase is RunPhase.IDLE:
        _blit_lines(surface, font, ["Press SPACE to play"], TEXT_COLOR, h // 2 - 10)
    else:
        lines = game_over_text(state.final_score).split("\n")
        bottom = _blit_lines(surface, font, lines, TEXT_COLOR, h // 2 - 30)
        _blit_lines(surface, font, ["SPACE / R to restart"], HINT_COLOR, bottom + 8)


class GameLoop:
    """Owns the run state and switches between Idle, Running and GameOver.

    `run_frame` is the single per-frame entry point; whatever drives the
    frames (pygame clock, test, ...) just calls it repeatedly.
    """

    def __init__(self, width=WIDTH, height=HEIGHT, rng=None):
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else random.Random()
        self.input = InputTracker()
        self.state = new_state(width, height)

    @property
    def phase(self):
        return self.state.phase

    def start(self):
        self.input.clear()
        self.state = new_state(self.width, self.height, phase=RunPhase.RUNNING)
        logger.info("run started (%dx%d)", self.width, self.height)

    def restart(self):
        self.start()

    def update(self):
        tick(self.state, self.input, self.rng)

    def run_frame(self, surface):
        self.update()
        render(surface, self.state)


def handle_event(event, game):
    """Translate one pygame event into input/controller calls.

    Returns False when the player asked to quit.
    """
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        game.input.key_down(event.key)
        if game.phase is RunPhase.IDLE and event.key in START_KEYS:
            game.start()
        elif game.phase is RunPhase.GAME_OVER and event.key in RESTART_KEYS:
            game.restart()
        elif game.phase is RunPhase.RUNNING and event.key == pygame.K_r:
            game.restart()
    elif event.type == pygame.KEYUP:
        game.input.key_up(event.key)
    return True


def _parse_level(s):
    if not s:
        return None
    level = logging.getLevelName(str(s).strip().upper())
    return level if isinstance(level, int) else None


def setup_logging(args=None):
    """Configure python logging once.

    Priority (highest first): env FALLINGDODGE_LOG_LEVEL, then the
    --quiet / --debug flags, then INFO.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level = logging.INFO
    if args is not None and getattr(args, "quiet", False):
        level = logging.WARNING
    if args is not None and getattr(args, "debug", False):
        level = logging.DEBUG
    env_level = _parse_level(os.environ.get(LOG_LEVEL_ENV))
    if env_level is not None:
        level = env_level

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.debug("logging initialized (level=%s)", logging.getLevelName(level))


def build_parser():
    parser = argparse.ArgumentParser(description="Dodge the falling blocks.")
    parser.add_argument("--width", type=int, default=WIDTH)
    parser.add_argument("--height", type=int, default=HEIGHT)
    parser.add_argument("--fps", type=int, default=FPS)
    parser.add_argument("--seed", type=int, default=None, help="seed for block spawns")
    parser.add_argument("--quiet", action="store_true", help="only log warnings")
    parser.add_argument("--debug", action="store_true", help="log difficulty steps")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args)

    try:
        game = GameLoop(args.width, args.height, rng=random.Random(args.seed))
    except ValueError:
        logger.exception("invalid window size")
        raise

    pygame.init()
    pygame.display.set_caption("Falling Dodge (PyGame)")
    window = pygame.display.set_mode((args.width, args.height))
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 28)

    running = True
    while running:
        # --- Events ---
        # Key state is updated here and read by the next tick.
        for event in pygame.event.get():
            if not handle_event(event, game):
                running = False

        # --- Update + render ---
        game.run_frame(window)
        draw_hud(window, game.state, font)
        pygame.display.flip()

        clock.tick(args.fps)

    pygame.quit()


if __name__ == "__main__":
    main()
