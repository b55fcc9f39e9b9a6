"""Translate key presses into controller events.

Key names follow prompt_toolkit ("enter", "escape", "c-d", ...). What a
key means depends on the active mode: in the text-entry modes every
printable key is text, so "q" types a q instead of quitting.
"""

from __future__ import annotations

from .controller import (
    Back,
    Backspace,
    BeginAdd,
    BeginSearch,
    Backup,
    Cancel,
    Character,
    Confirm,
    Event,
    Mode,
    Move,
    Open,
    Page,
    Quit,
    Unbound,
)

BROWSE_KEYS: dict[str, Event] = {
    "q": Quit(),
    "a": BeginAdd(),
    "/": BeginSearch(),
    "B": Backup(),
    "enter": Open(),
    "c-m": Open(),
    "j": Move(1),
    "down": Move(1),
    "k": Move(-1),
    "up": Move(-1),
    "c-d": Page(1),
    "pagedown": Page(1),
    "c-u": Page(-1),
    "pageup": Page(-1),
}

VIEW_KEYS: dict[str, Event] = {
    "q": Quit(),
    "escape": Back(),
    "h": Back(),
    "left": Back(),
    "j": Move(1),
    "down": Move(1),
    "k": Move(-1),
    "up": Move(-1),
    "c-d": Page(1),
    "pagedown": Page(1),
    "c-u": Page(-1),
    "pageup": Page(-1),
}

TEXT_KEYS: dict[str, Event] = {
    "enter": Confirm(),
    "c-m": Confirm(),
    "escape": Cancel(),
    "backspace": Backspace(),
    "c-h": Backspace(),
}


def event_for_key(mode: Mode, key: str, data: str = "") -> Event:
    """Map a key press to an event for the given mode.

    Args:
        mode: Active mode
        key: prompt_toolkit key name
        data: Text the key produced, if any (pasted text arrives here)

    Returns:
        The event; Unbound(key) if the key means nothing in this mode.
    """
    if mode in (Mode.COMPOSE, Mode.SEARCH):
        if key in TEXT_KEYS:
            return TEXT_KEYS[key]
        text = data if data else key
        if len(key) == 1 or key == "<bracketed-paste>":
            text = " ".join(text.splitlines())
            if text and text.isprintable():
                return Character(text)
        return Unbound(key)

    if mode == Mode.VIEW:
        return VIEW_KEYS.get(key, Unbound(key))

    return BROWSE_KEYS.get(key, Unbound(key))
