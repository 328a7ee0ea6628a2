"""QSS stylesheet and per-mode accent colours for PomoFlow."""

from __future__ import annotations

from ..timer.engine import TimerMode

# ── mode accents (active mode button, primary button, tab underline) ────

MODE_ACCENTS: dict[TimerMode, str] = {
    TimerMode.POMODORO:    "#EF4444",   # red
    TimerMode.SHORT_BREAK: "#22C55E",   # green
    TimerMode.LONG_BREAK:  "#3B82F6",   # blue
}

BASE_PALETTE: dict[str, str] = {
    "bg":           "#F9FAFB",
    "bg_secondary": "#FFFFFF",
    "surface":      "#E5E7EB",
    "text":         "#111827",
    "text_muted":   "#4B5563",
    "danger":       "#DC2626",
    "border":       "#D1D5DB",
}


def palette_for(mode: TimerMode) -> dict[str, str]:
    """Base palette with the accent for *mode* filled in."""
    palette = dict(BASE_PALETTE)
    palette["accent"] = MODE_ACCENTS[mode]
    return palette


def build_stylesheet(palette: dict[str, str]) -> str:
    p = palette
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 14px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['surface']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 8px 16px;
        font-weight: 600;
    }}

    QPushButton:checked {{
        background-color: {p['accent']};
        color: #FFFFFF;
        border-color: {p['accent']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: #FFFFFF;
        border: none;
        font-size: 16px;
        padding: 10px 32px;
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: #FFFFFF;
        border-color: {p['danger']};
    }}

    /* ── inputs ──────────────────────────────────── */
    QLineEdit, QSpinBox, QComboBox {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 6px 10px;
    }}

    QLineEdit:focus {{
        border-color: {p['accent']};
    }}

    /* ── tabs ────────────────────────────────────── */
    QTabBar::tab {{
        background-color: transparent;
        color: {p['text_muted']};
        padding: 8px 20px;
        border-bottom: 2px solid transparent;
        font-weight: 600;
    }}

    QTabBar::tab:selected {{
        color: {p['accent']};
        border-bottom: 2px solid {p['accent']};
    }}

    /* ── card ────────────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
    }}

    /* ── history table ───────────────────────────── */
    QTableWidget {{
        background-color: {p['bg_secondary']};
        gridline-color: {p['surface']};
        border: 1px solid {p['border']};
    }}

    QTableWidget::item:selected {{
        background-color: {p['accent']};
        color: #FFFFFF;
    }}

    /* ── status bar ──────────────────────────────── */
    QStatusBar {{
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
