"""Completion sounds synthesised with numpy and played with QSoundEffect.

Each sound is rendered once as a 16-bit mono WAV file under
``<POMOFLOW_HOME>/sounds`` and reused on later launches.

Sound names
-----------
- ``pomodoro_complete``  rising two-note chime, a focus countdown ended
- ``break_complete``     soft single bell, a break ended
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QSoundEffect

from ..config import DEFAULT_HOME

logger = logging.getLogger(__name__)

SOUNDS_DIR = DEFAULT_HOME / "sounds"
SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _tone(freq: float, duration_s: float, volume: float = 0.5) -> np.ndarray:
    """Sine tone with a short linear attack and an exponential tail."""
    n = int(SAMPLE_RATE * duration_s)
    t = np.arange(n) / SAMPLE_RATE
    attack = min(n, int(SAMPLE_RATE * 0.01))
    env = np.exp(-4.0 * t / duration_s)
    env[:attack] *= np.linspace(0.0, 1.0, attack)
    return np.sin(2 * np.pi * freq * t) * env * volume


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def _generate_chime() -> bytes:
    """E5 then A5, the second note held."""
    gap = np.zeros(int(SAMPLE_RATE * 0.04))
    return _to_wav_bytes(np.concatenate([
        _tone(659.25, 0.18), gap, _tone(880.0, 0.6),
    ]))


def _generate_bell() -> bytes:
    """A4 with a quiet octave overtone."""
    return _to_wav_bytes(_tone(440.0, 0.9, 0.4) + _tone(880.0, 0.9, 0.08))


_GENERATORS = {
    "pomodoro_complete": _generate_chime,
    "break_complete": _generate_bell,
}

SOUND_NAMES = tuple(_GENERATORS)


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Caches the WAV files and plays them by name.

    Signals
    -------
    played(name: str)
        Emitted every time a sound is actually started.
    """

    played = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def play(self, name: str) -> None:
        """Play ``name``.  No-op when disabled or the name is unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is None:
            logger.debug("No sound named %s", name)
            return
        effect.play()
        self.played.emit(name)

    def path_for(self, name: str) -> Path:
        return self._sounds_dir / f"{name}.wav"

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, generate in _GENERATORS.items():
            path = self.path_for(name)
            if not path.exists():
                path.write_bytes(generate())

    def _load_effects(self) -> None:
        for name in SOUND_NAMES:
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(self.path_for(name))))
            self._effects[name] = effect
