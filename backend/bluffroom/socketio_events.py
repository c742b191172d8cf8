from functools import wraps

from flask import current_app, request
from flask_socketio import emit
from pydantic import ValidationError

from bluffroom import socketio
from bluffroom.errors import GameError
from bluffroom.schemas import (
    ANSWER_SUBMIT,
    ANSWER_VOTE,
    ERROR,
    HOST_ACTION,
    ROOM_CREATE,
    ROOM_JOIN,
    ROOM_LEAVE,
    CastVoteIn,
    CreateRoomIn,
    HostActionIn,
    JoinRoomIn,
    SubmitAnswerIn,
    describe_validation_error,
)


def _game():
    return current_app.extensions['bluffroom']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def reports_errors(handler):
    """Reply to the sender with an ``error`` event when an intent is rejected."""
    @wraps(handler)
    def wrapper(data=None):
        try:
            handler(data if data is not None else {})
        except ValidationError as exc:
            message = describe_validation_error(exc)
            current_app.logger.info(f"[rejected] sid={_get_sid()} event={handler.__name__} kind=validation reason={message}")
            emit(ERROR, message)
        except GameError as exc:
            current_app.logger.info(f"[rejected] sid={_get_sid()} event={handler.__name__} kind={exc.kind} reason={exc}")
            emit(ERROR, str(exc))
    return wrapper


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected'})


def handle_disconnect(reason=None):
    _game().disconnect(_get_sid())


@reports_errors
def handle_create_room(data):
    payload = CreateRoomIn.model_validate(data)
    _game().create_room(_get_sid(), [q.to_question() for q in payload.questions])


@reports_errors
def handle_join_room(data):
    payload = JoinRoomIn.model_validate(data)
    _game().join_room(_get_sid(), payload.code, payload.name)


@reports_errors
def handle_leave_room(data):
    _game().leave(_get_sid())


@reports_errors
def handle_submit_answer(data):
    payload = SubmitAnswerIn.model_validate(data)
    _game().submit_answer(_get_sid(), payload.code, payload.answer)


@reports_errors
def handle_cast_vote(data):
    payload = CastVoteIn.model_validate(data)
    _game().cast_vote(_get_sid(), payload.code, payload.selected_answer)


@reports_errors
def handle_host_action(data):
    payload = HostActionIn.model_validate(data)
    _game().host_action(_get_sid(), payload.code, payload.action)


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event(ROOM_CREATE, handle_create_room, namespace=namespace)
    socketio.on_event(ROOM_JOIN, handle_join_room, namespace=namespace)
    socketio.on_event(ROOM_LEAVE, handle_leave_room, namespace=namespace)
    socketio.on_event(ANSWER_SUBMIT, handle_submit_answer, namespace=namespace)
    socketio.on_event(ANSWER_VOTE, handle_cast_vote, namespace=namespace)
    socketio.on_event(HOST_ACTION, handle_host_action, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
