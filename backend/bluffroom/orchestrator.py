import logging
import random
import threading
from typing import Dict, Iterable, Optional

from .errors import InvalidIntent, NotAuthorized, RoomNotFound, WrongPhase
from .models import COMPLETE, QUESTION, REVEALING, VOTING, WAITING, Question, Room, usable_questions
from .schemas import (
    GAME_COMPLETE,
    GAME_ENDED,
    GAME_QUESTION,
    GAME_RESULTS,
    GAME_VOTING,
    ROOM_CREATED,
    ROOM_JOINED,
    ROOM_PLAYERS,
)
from .services.games import build_voting_options, check_answer_text, score_vote
from .services.games.scoring import POINTS_PER_CORRECT_VOTE
from .store import RoomStore


class GameOrchestrator:
    """Phase transitions and broadcasts for every room in a store.

    Every public method handles one inbound intent from connection ``sid``
    and runs under a single lock, so an intent and its broadcasts complete
    before the next intent is looked at. Rejected intents raise a
    :class:`~bluffroom.errors.GameError` and leave the store untouched.
    """

    def __init__(
        self,
        store: RoomStore,
        broadcaster,
        points_per_vote: int = POINTS_PER_CORRECT_VOTE,
        leaderboard_size: int = 3,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.broadcaster = broadcaster
        self.points_per_vote = points_per_vote
        self.leaderboard_size = leaderboard_size
        self.rng = rng
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        # connection id -> room code, for hosts and players alike
        self._connections: Dict[str, str] = {}

    # ---- room lifecycle ----

    def create_room(self, sid: str, questions: Iterable[Question]) -> str:
        with self._lock:
            if sid in self._connections:
                raise InvalidIntent('You are already in a room')
            kept = usable_questions(questions)
            if not kept:
                raise InvalidIntent('Please provide at least one question with answer')
            code = self.store.create_room(sid, kept)
            self._connections[sid] = code
            self.broadcaster.subscribe(sid, code)
            self.broadcaster.to_connection(sid, ROOM_CREATED, {'code': code})
            self.logger.info(f"[room-created] room={code} host={sid} questions={len(kept)}")
            return code

    def join_room(self, sid: str, code: str, name: str) -> None:
        with self._lock:
            room = self._get_room(code)
            if sid == room.host_id:
                raise InvalidIntent('The host cannot join as a player')
            if sid in self._connections:
                raise InvalidIntent('You are already in a room')

            self.store.add_player(code, sid, name)
            self._connections[sid] = code
            self.broadcaster.subscribe(sid, code)

            players = self.store.get_player_names(code)
            self.broadcaster.to_connection(sid, ROOM_JOINED, {'code': code, 'players': players})
            self.broadcaster.to_room(code, ROOM_PLAYERS, players, skip_sid=sid)

            # Bring a late joiner up to the room's live phase
            if room.phase == QUESTION:
                self.broadcaster.to_connection(sid, GAME_QUESTION, self._question_payload(room))
            elif room.phase == VOTING:
                self.broadcaster.to_connection(sid, GAME_VOTING, self._voting_payload(room))
            self.logger.info(f"[player-joined] room={code} sid={sid} phase={room.phase} players={len(players)}")

    def leave(self, sid: str) -> None:
        """Handle an explicit leave or a dropped connection."""
        with self._lock:
            code = self._connections.pop(sid, None)
            if code is None:
                return
            room = self.store.get_room(code)
            if room is None:
                return
            if sid == room.host_id:
                self._end_room(room)
                return

            self.store.remove_player(code, sid)
            self.broadcaster.unsubscribe(sid, code)
            self.broadcaster.to_room(code, ROOM_PLAYERS, self.store.get_player_names(code))
            self.logger.info(f"[player-left] room={code} sid={sid}")
            if room.phase == QUESTION:
                self._maybe_open_voting(code)

    disconnect = leave

    # ---- player intents ----

    def submit_answer(self, sid: str, code: str, answer: str) -> None:
        with self._lock:
            room = self._get_room(code)
            if room.phase != QUESTION:
                raise WrongPhase('Cannot submit answer right now')
            if sid not in room.players:
                raise NotAuthorized('You are not a player in this room')
            text = check_answer_text(answer)

            self.store.submit_answer(code, sid, text)
            self.broadcaster.to_room(code, ROOM_PLAYERS, self.store.get_player_names(code))
            self.logger.info(
                f"[answer] room={code} answered={self.store.get_answer_count(code)}/{self.store.get_player_count(code)}"
            )
            self._maybe_open_voting(code)

    def cast_vote(self, sid: str, code: str, selected_answer: str) -> int:
        """Record a vote and return the points it earned."""
        with self._lock:
            room = self._get_room(code)
            if room.phase != VOTING:
                raise WrongPhase('Cannot vote right now')
            if sid not in room.players:
                raise NotAuthorized('You are not a player in this room')
            if selected_answer not in {o.answer for o in room.voting_options}:
                raise InvalidIntent('That answer is not one of the options')
            if not self.store.record_vote(code, sid):
                raise InvalidIntent('You have already voted this round')

            points = score_vote(selected_answer, room.current_question.correct_answer, self.points_per_vote)
            if points:
                self.store.update_score(code, sid, points)
            self.logger.info(f"[vote] room={code} sid={sid} correct={bool(points)}")
            return points

    # ---- host actions ----

    def host_action(self, sid: str, code: str, action: str) -> None:
        with self._lock:
            room = self.store.get_room(code)
            if room is None or room.host_id != sid:
                raise NotAuthorized('Not authorized to control this room')

            if action == 'start':
                self._start(room)
            elif action == 'show_voting':
                if room.phase != QUESTION:
                    raise WrongPhase('Voting can only open during a question')
                self._open_voting(room)
            elif action == 'reveal':
                self._reveal(room)
            elif action == 'next':
                self._next(room)
            else:
                raise InvalidIntent(f'Unknown action: {action}')
            self.logger.info(f"[host-action] room={code} action={action}")

    def _start(self, room: Room) -> None:
        if room.phase != WAITING:
            raise WrongPhase('Game has already started')
        if room.current_question_index >= len(room.questions):
            raise WrongPhase('No more questions')
        self.store.clear_answers(room.code)
        self.store.update_room(room.code, phase=QUESTION)
        self.broadcaster.to_room(room.code, GAME_QUESTION, self._question_payload(room))

    def _reveal(self, room: Room) -> None:
        if room.phase != VOTING:
            raise WrongPhase('Results can only be revealed after voting')
        question = room.current_question
        payload = {'correctAnswer': question.correct_answer}
        if question.image_url:
            payload['imageUrl'] = question.image_url
        payload['scores'] = self.store.get_round_scores(room.code)
        payload['leaderboard'] = self.store.get_leaderboard(room.code, self.leaderboard_size)
        self.store.update_room(room.code, phase=REVEALING)
        self.broadcaster.to_room(room.code, GAME_RESULTS, payload)

    def _next(self, room: Room) -> None:
        if room.phase != REVEALING:
            raise WrongPhase('Can only move on after results are revealed')
        new_index = room.current_question_index + 1
        if new_index >= len(room.questions):
            self.store.update_room(room.code, phase=COMPLETE)
            self.broadcaster.to_room(room.code, GAME_COMPLETE)
            self.logger.info(f"[complete] room={room.code} questions={len(room.questions)}")
            return
        self.store.clear_answers(room.code)
        self.store.update_room(room.code, current_question_index=new_index, phase=QUESTION, voting_options=[])
        room = self.store.get_room(room.code)
        self.broadcaster.to_room(room.code, GAME_QUESTION, self._question_payload(room))

    # ---- voting transition ----

    def _maybe_open_voting(self, code: str) -> None:
        room = self.store.get_room(code)
        if room is None or room.phase != QUESTION:
            return
        total = self.store.get_player_count(code)
        if total > 0 and self.store.get_answer_count(code) == total:
            self.logger.info(f"[auto-advance] room={code} all {total} players answered")
            self._open_voting(room)

    def _open_voting(self, room: Room) -> None:
        submitted = [a['answer'] for a in self.store.get_all_answers(room.code)]
        options = build_voting_options(submitted, room.current_question.correct_answer, self.rng)
        self.store.update_room(room.code, phase=VOTING, voting_options=options)
        self.store.clear_answers(room.code)
        self.store.reset_round(room.code)
        self.broadcaster.to_room(room.code, GAME_VOTING, {'answers': [o.to_dict() for o in options]})

    # ---- helpers ----

    def _end_room(self, room: Room) -> None:
        self.broadcaster.to_room(room.code, GAME_ENDED, skip_sid=room.host_id)
        self.broadcaster.close(room.code)
        for sid in [s for s, c in self._connections.items() if c == room.code]:
            self._connections.pop(sid, None)
        self.store.delete_room(room.code)
        self.logger.info(f"[room-ended] room={room.code} host left")

    def _get_room(self, code: str) -> Room:
        room = self.store.get_room(code)
        if room is None:
            raise RoomNotFound()
        return room

    @staticmethod
    def _question_payload(room: Room):
        return room.current_question.to_dict(room.current_question_index, len(room.questions))

    @staticmethod
    def _voting_payload(room: Room):
        return {'answers': [o.to_dict() for o in room.voting_options]}
