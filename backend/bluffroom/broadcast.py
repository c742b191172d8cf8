"""Outbound addressing for game notifications.

The orchestrator only knows two audiences: everyone subscribed to a room, and
a single connection. :class:`SocketIOBroadcaster` maps both onto Socket.IO
rooms on one namespace.
"""


def room_channel(code: str) -> str:
    return f"room:{code}"


class SocketIOBroadcaster:
    def __init__(self, socketio, namespace='/ws'):
        self.socketio = socketio
        self.namespace = namespace

    def subscribe(self, sid: str, code: str) -> None:
        self.socketio.server.enter_room(sid, room_channel(code), namespace=self.namespace)

    def unsubscribe(self, sid: str, code: str) -> None:
        self.socketio.server.leave_room(sid, room_channel(code), namespace=self.namespace)

    def close(self, code: str) -> None:
        self.socketio.close_room(room_channel(code), namespace=self.namespace)

    def to_room(self, code: str, event: str, payload=None, skip_sid=None) -> None:
        args = () if payload is None else (payload,)
        self.socketio.emit(event, *args, to=room_channel(code), skip_sid=skip_sid, namespace=self.namespace)

    def to_connection(self, sid: str, event: str, payload=None) -> None:
        args = () if payload is None else (payload,)
        self.socketio.emit(event, *args, to=sid, namespace=self.namespace)
