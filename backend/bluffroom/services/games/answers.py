from bluffroom.errors import InvalidIntent

MIN_ANSWER_LENGTH = 2


def check_answer_text(answer: str) -> str:
    """Return the trimmed answer, or raise if it is too weak to vote on.

    Rejects answers shorter than two characters, digits-only answers and
    answers made of one repeated character ("aaaa").
    """
    text = answer.strip()
    if len(text) < MIN_ANSWER_LENGTH:
        raise InvalidIntent(f'Answer must be at least {MIN_ANSWER_LENGTH} characters')
    if text.isdigit():
        raise InvalidIntent('Answer cannot be only numbers')
    if len(set(text)) == 1:
        raise InvalidIntent('Answer cannot be a single repeated character')
    return text
