"""Failure taxonomy for the rules engine.

Rule violations are ordinary, caller-recoverable outcomes: handlers raise
:class:`RuleViolation` and the processor converts it into a failed
``ActionResult``.  :class:`BoardGenerationError` is the fatal class and
aborts game creation.
"""

from __future__ import annotations

import enum


class FailureReason(enum.StrEnum):
    """Why a command was rejected (or, for BANK_EXHAUSTED, only partly paid)."""

    WRONG_PHASE = 'wrong_phase'
    NOT_CURRENT_PLAYER = 'not_current_player'
    ALREADY_ROLLED = 'already_rolled'
    CELL_OCCUPIED = 'cell_occupied'
    DISTANCE_RULE_VIOLATION = 'distance_rule_violation'
    NOT_CONNECTED = 'not_connected'
    INSUFFICIENT_RESOURCES = 'insufficient_resources'
    NO_PIECES_REMAINING = 'no_pieces_remaining'
    BANK_EXHAUSTED = 'bank_exhausted'
    INVALID_TARGET = 'invalid_target'


class RuleViolation(ValueError):
    """A command broke a game rule; state must be left untouched."""

    def __init__(self, reason: FailureReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class BoardGenerationError(RuntimeError):
    """Board construction produced an inconsistent structure."""
