from datetime import datetime, timezone
from typing import Dict, Iterable, List, Literal, Optional
import random
import string

from pydantic import BaseModel, ConfigDict, Field

ROOM_CODE_LENGTH = 4
MAX_QUESTIONS = 100

WAITING = 'waiting'
QUESTION = 'question'
VOTING = 'voting'
REVEALING = 'revealing'
COMPLETE = 'complete'

Phase = Literal['waiting', 'question', 'voting', 'revealing', 'complete']


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    correct_answer: str
    image_url: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        return not self.text.strip() or not self.correct_answer.strip()

    def to_dict(self, index: int, total: int):
        """Payload of the ``game:question`` event; ``index`` is zero-based."""
        payload = {
            'question': self.text,
            'questionIndex': index + 1,
            'totalQuestions': total,
        }
        if self.image_url:
            payload['imageUrl'] = self.image_url
        return payload


class VotingOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    answer: str
    is_correct: bool = False

    def to_dict(self):
        return {'answer': self.answer, 'isCorrect': self.is_correct}


class PlayerRecord(BaseModel):
    name: str
    answer: Optional[str] = None
    score: int = 0
    round_points: int = 0
    has_voted: bool = False

    @property
    def has_answered(self) -> bool:
        return self.answer is not None

    def to_dict(self):
        return {
            'name': self.name,
            'score': self.score,
            'hasAnswered': self.has_answered,
            'hasVoted': self.has_voted,
        }


# Phases: waiting -> question -> voting -> revealing -> question ... -> complete
class Room(BaseModel):
    code: str
    host_id: str
    questions: List[Question]
    current_question_index: int = 0
    players: Dict[str, PlayerRecord] = Field(default_factory=dict)
    phase: Phase = WAITING
    voting_options: List[VotingOption] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    @property
    def answers(self) -> Dict[str, str]:
        return {sid: p.answer for sid, p in self.players.items() if p.answer is not None}

    def player_names(self) -> List[str]:
        return [p.name for p in self.players.values()]

    def to_dict(self, leaderboard=None):
        """Public view of the room; never includes answers."""
        return {
            'code': self.code,
            'phase': self.phase,
            'question_number': self.current_question_index + 1 if self.phase != WAITING else 0,
            'total_questions': len(self.questions),
            'players': [p.to_dict() for p in self.players.values()],
            'answer_count': len(self.answers),
            'leaderboard': leaderboard or [],
        }


def usable_questions(questions: Iterable[Question]) -> List[Question]:
    """Drop blank entries, trim the rest and cap the list."""
    kept = []
    for q in questions:
        if q.is_blank:
            continue
        kept.append(Question(
            text=q.text.strip(),
            correct_answer=q.correct_answer.strip(),
            image_url=(q.image_url or '').strip() or None,
        ))
    return kept[:MAX_QUESTIONS]


def generate_room_code(taken, length=ROOM_CODE_LENGTH):
    """Generate a unique, short numeric room code."""
    if len(taken) >= 10 ** length:
        raise RuntimeError('No room codes left')
    while True:
        code = ''.join(random.choices(string.digits, k=length))
        if code not in taken:
            return code
