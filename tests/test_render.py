import copy

import pygame

import FallingDodge as fd


def rgb(surface, pos):
    return tuple(surface.get_at(pos))[:3]


def make_surface(state):
    return pygame.Surface((state.width, state.height))


def test_render_paints_background_player_and_obstacles():
    state = fd.new_state(phase=fd.RunPhase.RUNNING)
    state.obstacles.append(fd.Obstacle(x=20, y=100, size=30, speed=3))
    surface = make_surface(state)
    fd.render(surface, state)

    assert rgb(surface, (0, 0)) == fd.BG_TOP
    assert rgb(surface, (0, state.height - 1)) == fd.BG_BOTTOM

    p = state.player
    assert rgb(surface, (int(p.x + p.w / 2), int(p.y + p.h / 2))) == fd.PLAYER_COLOR
    assert rgb(surface, (35, 115)) == fd.OBSTACLE_COLOR

    # glow tints the pixels just around the paddle
    glow_pos = (int(p.x) - 2, int(p.y) - 4)
    assert rgb(surface, glow_pos) != rgb(surface, (0, glow_pos[1]))


def test_render_leaves_state_alone():
    state = fd.new_state(phase=fd.RunPhase.RUNNING)
    state.obstacles.append(fd.Obstacle(x=50, y=-10, size=40, speed=3))
    before = copy.deepcopy(state)
    fd.render(make_surface(state), state)
    assert state == before


def test_render_in_idle_phase():
    state = fd.new_state()
    surface = make_surface(state)
    fd.render(surface, state)
    p = state.player
    assert rgb(surface, (int(p.x + p.w / 2), int(p.y + p.h / 2))) == fd.PLAYER_COLOR


def test_game_over_text():
    assert fd.game_over_text(17) == "Game Over\nScore: 17"


def test_hud_overlays(font):
    state = fd.new_state(phase=fd.RunPhase.RUNNING)
    surface = make_surface(state)
    fd.render(surface, state)
    corner = rgb(surface, (state.width - 1, state.height // 2))
    fd.draw_hud(surface, state, font)
    # no overlay while running
    assert rgb(surface, (state.width - 1, state.height // 2)) == corner

    state.phase = fd.RunPhase.GAME_OVER
    state.final_score = 9
    fd.draw_hud(surface, state, font)
    assert rgb(surface, (state.width - 1, state.height // 2)) != corner
