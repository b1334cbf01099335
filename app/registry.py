"""In-memory game registry."""

from threading import Lock
from typing import List

from app.errors import NotFoundError
from app.schemas import Game


class GameRegistry:
    """
    Append-only, insertion-ordered store of games.

    Thread-safe: FastAPI runs sync endpoints in a worker pool, so appends and
    reads are serialized behind one lock. Reads return snapshots.
    """

    def __init__(self):
        self._games: List[Game] = []
        self._lock = Lock()

    def list(self) -> List[Game]:
        """Return all games in the order they were created."""
        with self._lock:
            return list(self._games)

    def get(self, game_id: str) -> Game:
        """
        Get a game by ID.

        Raises NotFoundError if no game carries that ID. Duplicate IDs are
        allowed; the earliest one wins.
        """
        with self._lock:
            for game in self._games:
                if game.id == game_id:
                    return game
        raise NotFoundError("Game not found")

    def add(self, game: Game) -> Game:
        """Append a game and return it unchanged."""
        with self._lock:
            self._games.append(game)
        return game

    def clear(self) -> None:
        """Remove all games."""
        with self._lock:
            self._games.clear()

    @property
    def count(self) -> int:
        """Return the number of stored games."""
        with self._lock:
            return len(self._games)
