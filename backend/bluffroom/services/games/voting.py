import random
from typing import Iterable, List, Optional

from bluffroom.models import VotingOption


def build_voting_options(
    submitted_answers: Iterable[str],
    correct_answer: str,
    rng: Optional[random.Random] = None,
) -> List[VotingOption]:
    """Pool the round's answers with the correct one and shuffle them.

    Submissions are de-duplicated case-insensitively, keeping the first
    spelling seen. A submission matching the correct answer folds into the
    correct option so the pool never shows the true answer twice.
    """
    seen = {correct_answer.casefold()}
    options = []
    for answer in submitted_answers:
        key = answer.casefold()
        if key in seen:
            continue
        seen.add(key)
        options.append(VotingOption(answer=answer, is_correct=False))
    options.append(VotingOption(answer=correct_answer, is_correct=True))
    (rng or random).shuffle(options)
    return options
