"""Game domain services: voting options, answer rules and scoring.

This package contains pure domain logic used by the orchestrator, keeping
transport and storage concerns separated from core game mechanics.
"""

from .answers import check_answer_text
from .scoring import score_vote
from .voting import build_voting_options

__all__ = ['build_voting_options', 'check_answer_text', 'score_vote']
