class GameError(Exception):
    """Base class for intents rejected by the game.

    The message is safe to show to the player who sent the intent.
    """
    kind = 'error'


class InvalidIntent(GameError):
    kind = 'validation'


class NotAuthorized(GameError):
    kind = 'authorization'


class WrongPhase(GameError):
    kind = 'phase'


class RoomNotFound(GameError):
    kind = 'not_found'

    def __init__(self, message='Room not found'):
        super().__init__(message)
