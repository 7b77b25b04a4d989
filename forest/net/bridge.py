from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from pyglet.event import EventDispatcher

from forest.world.reconcile import ServerChunkReconciler
from forest.world.types import Direction, Position

logger = logging.getLogger(__name__)


class WireEventError(ValueError):
    """A player or chat event whose fields cannot be decoded."""


@dataclass(frozen=True)
class RemotePlayer:
    id: str
    username: str
    position: Position
    direction: Direction
    is_moving: bool
    last_update: float
    animation_frame: int = 0


@dataclass(frozen=True)
class PlayerMove:
    player_id: str
    position: Position
    direction: Direction
    is_moving: bool


@dataclass(frozen=True)
class ChatMessage:
    player_id: str
    username: str
    message: str


@dataclass(frozen=True)
class PoseSample:
    position: Position
    direction: Direction
    is_moving: bool

    def to_payload(self) -> dict[str, Any]:
        return {
            "position": self.position.to_payload(),
            "direction": self.direction.value,
            "isMoving": self.is_moving,
        }


def _position(data: Any) -> Position:
    if not isinstance(data, dict):
        raise WireEventError("position must be an object")
    try:
        return Position(float(data["x"]), float(data["y"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise WireEventError(f"bad position {data!r}") from exc


def _direction(value: Any) -> Direction:
    try:
        return Direction(value)
    except ValueError as exc:
        raise WireEventError(f"bad direction {value!r}") from exc


def _remote_player(data: dict[str, Any]) -> RemotePlayer:
    return RemotePlayer(
        id=str(data["id"]),
        username=str(data.get("username", "")),
        position=_position(data.get("position")),
        direction=_direction(data.get("direction", "down")),
        is_moving=bool(data.get("isMoving", False)),
        last_update=float(data.get("lastUpdate") or time.time() * 1000.0),
        animation_frame=int(data.get("animationFrame") or 0),
    )


class NetworkBridge(EventDispatcher):
    """Typed boundary between the simulation core and a transport.

    A transport feeds raw wire events through ``receive``; they come out as
    ``on_player_join``, ``on_player_leave``, ``on_player_move``,
    ``on_chat_message`` and ``on_chunks`` events carrying the dataclasses
    above. The session publishes ``on_pose_sample`` for the transport to send
    upstream.
    """

    def __init__(self) -> None:
        super().__init__()
        self._decoders: dict[str, Callable[[Any], list[tuple[str, Any]]]] = {
            "player:joined": self._player_joined,
            "player:left": self._player_left,
            "player:move": self._player_move,
            "chat:message": self._chat_message,
            "world:chunks": self._world_chunks,
            "world:players": self._world_players,
        }

    def receive(self, event: str, data: Any) -> None:
        decoder = self._decoders.get(event)
        if decoder is None:
            raise ValueError(f"unknown wire event {event!r}")
        try:
            messages = decoder(data)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("dropping malformed %s event: %s", event, exc)
            return
        for event_type, message in messages:
            self.dispatch_event(event_type, message)

    def publish_pose(self, sample: PoseSample) -> None:
        self.dispatch_event("on_pose_sample", sample)

    @staticmethod
    def _player_joined(data: dict[str, Any]) -> list[tuple[str, Any]]:
        return [("on_player_join", _remote_player(data["player"]))]

    @staticmethod
    def _player_left(data: dict[str, Any]) -> list[tuple[str, Any]]:
        return [("on_player_leave", str(data["playerId"]))]

    @staticmethod
    def _player_move(event: dict[str, Any]) -> list[tuple[str, Any]]:
        data = event.get("data", event)
        move = PlayerMove(
            player_id=str(data["playerId"]),
            position=_position(data["position"]),
            direction=_direction(data["direction"]),
            is_moving=bool(data.get("isMoving", False)),
        )
        return [("on_player_move", move)]

    @staticmethod
    def _chat_message(event: dict[str, Any]) -> list[tuple[str, Any]]:
        data = event.get("data", event)
        message = ChatMessage(
            player_id=str(data["playerId"]),
            username=str(data.get("username", "")),
            message=str(data["message"]),
        )
        return [("on_chat_message", message)]

    @staticmethod
    def _world_chunks(data: Any) -> list[tuple[str, Any]]:
        chunks = ServerChunkReconciler.decode(data)
        return [("on_chunks", chunks)] if chunks else []

    @staticmethod
    def _world_players(data: dict[str, Any]) -> list[tuple[str, Any]]:
        return [("on_player_join", _remote_player(player)) for player in data.get("players", [])]


NetworkBridge.register_event_type("on_player_join")
NetworkBridge.register_event_type("on_player_leave")
NetworkBridge.register_event_type("on_player_move")
NetworkBridge.register_event_type("on_chat_message")
NetworkBridge.register_event_type("on_chunks")
NetworkBridge.register_event_type("on_pose_sample")


class PoseSampler:
    """Publishes the rendered pose at most once per ``interval_ms``."""

    def __init__(self, bridge: NetworkBridge | None, interval_ms: float) -> None:
        self.bridge = bridge
        self.interval_ms = interval_ms
        self._since_last_ms: float | None = None

    def advance(self, delta_ms: float, sample: PoseSample) -> bool:
        if self.bridge is None:
            return False
        if self._since_last_ms is not None:
            self._since_last_ms += delta_ms
            if self._since_last_ms <= self.interval_ms:
                return False
        self._since_last_ms = 0.0
        self.bridge.publish_pose(sample)
        return True
