from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, field_validator

from .models import MAX_QUESTIONS, ROOM_CODE_LENGTH, Question

# Client -> server
ROOM_CREATE = 'room:create'
ROOM_JOIN = 'room:join'
ROOM_LEAVE = 'room:leave'
ANSWER_SUBMIT = 'answer:submit'
ANSWER_VOTE = 'answer:vote'
HOST_ACTION = 'host:action'

# Server -> client
ROOM_CREATED = 'room:created'
ROOM_JOINED = 'room:joined'
ROOM_PLAYERS = 'room:players'
GAME_QUESTION = 'game:question'
GAME_VOTING = 'game:voting'
GAME_RESULTS = 'game:results'
GAME_COMPLETE = 'game:complete'
GAME_ENDED = 'game:ended'
ERROR = 'error'

HostActionName = Literal['start', 'show_voting', 'reveal', 'next']

PlayerName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]
AnswerText = Annotated[str, StringConstraints(min_length=1, max_length=500)]


class RoomCodeIn(BaseModel):
    code: str

    @field_validator('code')
    @classmethod
    def code_is_digits(cls, value: str) -> str:
        value = value.strip()
        if len(value) != ROOM_CODE_LENGTH or not value.isdigit():
            raise ValueError(f'Room code must be {ROOM_CODE_LENGTH} digits')
        return value


class QuestionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Blank entries are allowed here and filtered when the room is created
    question: str = Field(max_length=500)
    correct_answer: str = Field(alias='correctAnswer', max_length=500)
    image_url: Optional[str] = Field(default=None, alias='imageUrl')

    def to_question(self) -> Question:
        return Question(text=self.question, correct_answer=self.correct_answer, image_url=self.image_url)


class CreateRoomIn(BaseModel):
    questions: List[QuestionIn] = Field(min_length=1, max_length=MAX_QUESTIONS)


class JoinRoomIn(RoomCodeIn):
    name: PlayerName


class SubmitAnswerIn(RoomCodeIn):
    answer: AnswerText


class CastVoteIn(RoomCodeIn):
    model_config = ConfigDict(populate_by_name=True)

    selected_answer: str = Field(alias='selectedAnswer')


class HostActionIn(RoomCodeIn):
    action: HostActionName


def describe_validation_error(exc: ValidationError) -> str:
    """Turn the first pydantic error into a short message for players."""
    errors = exc.errors()
    if not errors:
        return 'Invalid request'
    err = errors[0]
    if err.get('type') == 'value_error' and 'error' in (err.get('ctx') or {}):
        return str(err['ctx']['error'])
    field = '.'.join(str(part) for part in err.get('loc', ())) or 'payload'
    return f"Invalid {field}: {err.get('msg', 'invalid value')}"
