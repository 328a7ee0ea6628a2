"""Completion sounds."""

from .sounds import SOUND_NAMES, SoundManager

__all__ = ["SOUND_NAMES", "SoundManager"]
