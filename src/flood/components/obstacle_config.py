"""Declarative obstacle layouts stamped onto freshly generated boards."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from flood.components.cell import Direction, Position


@dataclass(frozen=True, slots=True)
class IcePlacement:
    position: Position
    layers: int


@dataclass(frozen=True, slots=True)
class CountdownPlacement:
    position: Position
    moves_left: int


@dataclass(frozen=True, slots=True)
class WallPlacement:
    position: Position
    direction: Direction


@dataclass(frozen=True, slots=True)
class PortalPairPlacement:
    first: Position
    second: Position
    pair_id: int


@dataclass(frozen=True, slots=True)
class BonusPlacement:
    position: Position
    multiplier: int


@dataclass(frozen=True, slots=True)
class ObstacleConfig:
    stones: Tuple[Position, ...] = ()
    ice: Tuple[IcePlacement, ...] = ()
    countdowns: Tuple[CountdownPlacement, ...] = ()
    walls: Tuple[WallPlacement, ...] = ()
    portals: Tuple[PortalPairPlacement, ...] = ()
    bonuses: Tuple[BonusPlacement, ...] = ()
    voids: Tuple[Position, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (
            self.stones or self.ice or self.countdowns or self.walls
            or self.portals or self.bonuses or self.voids
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stones": [list(p) for p in self.stones],
            "ice": [[*p.position, p.layers] for p in self.ice],
            "countdowns": [[*p.position, p.moves_left] for p in self.countdowns],
            "walls": [[*p.position, p.direction.name] for p in self.walls],
            "portals": [[*p.first, *p.second, p.pair_id] for p in self.portals],
            "bonuses": [[*p.position, p.multiplier] for p in self.bonuses],
            "voids": [list(p) for p in self.voids],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ObstacleConfig":
        return cls(
            stones=tuple(Position(r, c) for r, c in payload.get("stones", [])),
            ice=tuple(IcePlacement(Position(r, c), n) for r, c, n in payload.get("ice", [])),
            countdowns=tuple(
                CountdownPlacement(Position(r, c), n) for r, c, n in payload.get("countdowns", [])
            ),
            walls=tuple(
                WallPlacement(Position(r, c), Direction[name]) for r, c, name in payload.get("walls", [])
            ),
            portals=tuple(
                PortalPairPlacement(Position(r1, c1), Position(r2, c2), pair_id)
                for r1, c1, r2, c2, pair_id in payload.get("portals", [])
            ),
            bonuses=tuple(BonusPlacement(Position(r, c), m) for r, c, m in payload.get("bonuses", [])),
            voids=tuple(Position(r, c) for r, c in payload.get("voids", [])),
        )


@dataclass(frozen=True, slots=True)
class PlacementRequest:
    """Obstacle counts asked of the placer; voids are supplied, not sampled."""
    stone_count: int = 0
    ice_count: int = 0
    ice_layers: int = 1
    countdown_count: int = 0
    countdown_moves: int = 3
    wall_count: int = 0
    portal_pair_count: int = 0
    bonus_count: int = 0
    bonus_multiplier: int = 2
    voids: Tuple[Position, ...] = field(default=())

    def degraded(self) -> "PlacementRequest":
        """One fewer stone, ice, countdown and wall, floored at zero."""
        return replace(
            self,
            stone_count=max(0, self.stone_count - 1),
            ice_count=max(0, self.ice_count - 1),
            countdown_count=max(0, self.countdown_count - 1),
            wall_count=max(0, self.wall_count - 1),
        )
