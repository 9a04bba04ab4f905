from __future__ import annotations

import os
from typing import Mapping


def detect_terminal(environ: Mapping[str, str] | None = None) -> str:
    """Name the terminal emulator from well-known environment variables."""

    env = os.environ if environ is None else environ
    term = env.get("TERM", "")
    term_program = env.get("TERM_PROGRAM", "")
    if term == "dumb":
        return "dumb"
    if term == "xterm-kitty" or "KITTY_WINDOW_ID" in env:
        return "kitty"
    if term_program == "WezTerm" or term == "wezterm":
        return "wezterm"
    if term_program == "iTerm.app":
        return "iTerm2"
    if term_program == "ghostty" or term == "xterm-ghostty":
        return "ghostty"
    if term_program == "vscode":
        return "vscode"
    if env.get("TERMINOLOGY") == "1":
        return "terminology"
    if "VTE_VERSION" in env:
        return "vte"
    return "ansi"


__all__ = ["detect_terminal"]
