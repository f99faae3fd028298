from __future__ import annotations

from esper import World

from flood.components.board import Board
from flood.components.game_session import GameSession
from flood.components.score_state import ScoreState


def get_session_entity(world: World) -> int:
    """Return the entity carrying the GameSession singleton."""
    existing = list(world.get_component(GameSession))
    if not existing:
        raise RuntimeError("World has no GameSession; build it with create_world()")
    return existing[0][0]


def get_session(world: World) -> GameSession:
    return world.component_for_entity(get_session_entity(world), GameSession)


def get_board(world: World) -> Board:
    return world.component_for_entity(get_session_entity(world), Board)


def get_or_create_score_state(world: World) -> ScoreState:
    """Return the shared ScoreState, attaching one to the session if absent."""
    entity = get_session_entity(world)
    try:
        return world.component_for_entity(entity, ScoreState)
    except KeyError:
        score = ScoreState()
        world.add_component(entity, score)
        return score
