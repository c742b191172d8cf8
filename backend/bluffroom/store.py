"""In-memory room store.

Owns every active :class:`~bluffroom.models.Room`. Reads hand out deep
copies; writes go through the methods below so that each call is applied
atomically. Unknown rooms or players are ignored rather than raising.
"""
import threading
from typing import Dict, Iterable, List, Optional

from .models import (
    PlayerRecord,
    Question,
    Room,
    generate_room_code,
    usable_questions,
)


class RoomStore:
    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.RLock()

    # ---- rooms ----

    def create_room(self, host_id: str, questions: Iterable[Question]) -> str:
        kept = usable_questions(questions)
        if not kept:
            raise ValueError('At least one question with an answer is required')
        with self._lock:
            code = generate_room_code(self._rooms.keys())
            self._rooms[code] = Room(code=code, host_id=host_id, questions=kept)
            return code

    def get_room(self, code: str) -> Optional[Room]:
        with self._lock:
            room = self._rooms.get(code)
            return room.model_copy(deep=True) if room else None

    def update_room(self, code: str, **fields) -> None:
        with self._lock:
            room = self._rooms.get(code)
            if not room:
                return
            for key, value in fields.items():
                if key not in Room.model_fields:
                    raise KeyError(f'Unknown room field: {key}')
                setattr(room, key, value)

    def delete_room(self, code: str) -> None:
        with self._lock:
            self._rooms.pop(code, None)

    def room_codes(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    # ---- players ----

    def add_player(self, code: str, connection_id: str, name: str) -> None:
        with self._lock:
            room = self._rooms.get(code)
            if room:
                room.players[connection_id] = PlayerRecord(name=name.strip())

    def remove_player(self, code: str, connection_id: str) -> None:
        with self._lock:
            room = self._rooms.get(code)
            if room:
                room.players.pop(connection_id, None)

    def get_player_name(self, code: str, connection_id: str) -> Optional[str]:
        with self._lock:
            player = self._player(code, connection_id)
            return player.name if player else None

    def get_player_names(self, code: str) -> List[str]:
        with self._lock:
            room = self._rooms.get(code)
            return room.player_names() if room else []

    def get_player_count(self, code: str) -> int:
        with self._lock:
            room = self._rooms.get(code)
            return len(room.players) if room else 0

    # ---- answers ----

    def submit_answer(self, code: str, connection_id: str, answer: str) -> None:
        with self._lock:
            player = self._player(code, connection_id)
            if player:
                player.answer = answer.strip()

    def clear_answers(self, code: str) -> None:
        with self._lock:
            room = self._rooms.get(code)
            if room:
                for player in room.players.values():
                    player.answer = None

    def get_all_answers(self, code: str) -> List[dict]:
        with self._lock:
            room = self._rooms.get(code)
            if not room:
                return []
            return [
                {'name': p.name, 'answer': p.answer}
                for p in room.players.values()
                if p.answer is not None
            ]

    def get_answer_count(self, code: str) -> int:
        with self._lock:
            room = self._rooms.get(code)
            return len(room.answers) if room else 0

    # ---- votes and scores ----

    def record_vote(self, code: str, connection_id: str) -> bool:
        with self._lock:
            player = self._player(code, connection_id)
            if not player or player.has_voted:
                return False
            player.has_voted = True
            return True

    def reset_round(self, code: str) -> None:
        with self._lock:
            room = self._rooms.get(code)
            if room:
                for player in room.players.values():
                    player.has_voted = False
                    player.round_points = 0

    def update_score(self, code: str, connection_id: str, delta: int) -> None:
        with self._lock:
            player = self._player(code, connection_id)
            if player:
                player.score += delta
                player.round_points += delta

    def get_round_scores(self, code: str) -> List[dict]:
        with self._lock:
            room = self._rooms.get(code)
            if not room:
                return []
            return [{'name': p.name, 'gained': p.round_points} for p in room.players.values()]

    def get_leaderboard(self, code: str, size: int = 3) -> List[dict]:
        with self._lock:
            room = self._rooms.get(code)
            if not room:
                return []
            # sorted() is stable, ties keep join order
            ranked = sorted(room.players.values(), key=lambda p: -p.score)
            return [{'name': p.name, 'score': p.score} for p in ranked[:size]]

    def _player(self, code: str, connection_id: str) -> Optional[PlayerRecord]:
        room = self._rooms.get(code)
        if not room:
            return None
        return room.players.get(connection_id)
