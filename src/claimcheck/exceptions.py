# Copyright (c) Syntropy Systems
"""Exceptions raised by the execution engine."""


class ClaimCheckError(Exception):
    """Base class for claimcheck errors."""


class RunPreconditionError(ClaimCheckError):
    """A run was refused before any state changed."""


class InvalidTransitionError(ClaimCheckError):
    """A run item was asked to move backwards or skip a state."""
