POINTS_PER_CORRECT_VOTE = 10


def score_vote(selected_answer: str, correct_answer: str, points: int = POINTS_PER_CORRECT_VOTE) -> int:
    """Points earned by a single vote.

    Exact string match only; the voting options carry the correct answer
    verbatim, so a client picking it always sends the same text back.
    """
    return points if selected_answer == correct_answer else 0
