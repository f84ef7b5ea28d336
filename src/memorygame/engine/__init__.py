"""Deterministic, headless rules engine for MemoryGame.

IMPORTANT: This package must never import pygame.
"""

from .card import Card
from .clock import Scheduler, TimerHandle, VirtualClock
from .deck import build_deck
from .round import Round, RoundObserver, efficiency_percent
from .session import RoundResult, Session
from .types import (
    CategoryCatalog,
    CategoryEntry,
    InsufficientContentError,
    InvalidConfigurationError,
    MemoryGameError,
    RoundConfig,
)

__all__ = [
    "Card",
    "CategoryCatalog",
    "CategoryEntry",
    "InsufficientContentError",
    "InvalidConfigurationError",
    "MemoryGameError",
    "Round",
    "RoundConfig",
    "RoundObserver",
    "RoundResult",
    "Scheduler",
    "Session",
    "TimerHandle",
    "VirtualClock",
    "build_deck",
    "efficiency_percent",
]
