"""Modal session controller.

The session is always in exactly one of four states (Browse, Compose,
Search, View). Input events go through transition(), a pure function
that returns the next state plus a list of effects; the controller then
carries out the effects against the store and index and folds their
results, or their errors, back into the session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Callable, ClassVar, Optional, Union

from .index import NoteIndex
from .models import LogFile
from .store import NoteStore, StoreError

logger = logging.getLogger(__name__)

# Lines taken by the title and help text around the list or document
CHROME_LINES = 4


class Mode(Enum):
    """Which UI surface is active."""
    BROWSE = "browse"
    COMPOSE = "compose"
    SEARCH = "search"
    VIEW = "view"


@dataclass(frozen=True)
class Geometry:
    """Terminal size as last reported by the presentation layer."""
    width: int = 80
    height: int = 24

    @property
    def page_size(self) -> int:
        return max(1, self.height - CHROME_LINES)


# ========== States ==========

@dataclass(frozen=True)
class BrowseState:
    """Log list, optionally filtered by a search query."""
    mode: ClassVar[Mode] = Mode.BROWSE

    items: tuple[LogFile, ...] = ()
    selected: int = 0
    query: str = ""

    @property
    def selected_item(self) -> Optional[LogFile]:
        if not self.items:
            return None
        return self.items[self.selected]

    def select(self, index: int) -> BrowseState:
        if not self.items:
            return replace(self, selected=0)
        return replace(self, selected=min(max(index, 0), len(self.items) - 1))

    def with_items(self, items: list[LogFile], query: Optional[str] = None) -> BrowseState:
        """Swap in a new item list, keeping the selection in range."""
        state = replace(self, items=tuple(items), query=self.query if query is None else query)
        return state.select(state.selected)


@dataclass(frozen=True)
class ComposeState:
    """Typing a new note."""
    mode: ClassVar[Mode] = Mode.COMPOSE

    browse: BrowseState
    buffer: str = ""


@dataclass(frozen=True)
class SearchState:
    """Typing a search query."""
    mode: ClassVar[Mode] = Mode.SEARCH

    browse: BrowseState
    query: str = ""


@dataclass(frozen=True)
class ViewState:
    """Reading one log file."""
    mode: ClassVar[Mode] = Mode.VIEW

    browse: BrowseState
    log_file: LogFile
    content: str = ""
    offset: int = 0

    @property
    def lines(self) -> list[str]:
        return self.content.splitlines()

    def scroll(self, offset: int, geometry: Geometry) -> ViewState:
        max_offset = max(0, len(self.lines) - geometry.page_size)
        return replace(self, offset=min(max(offset, 0), max_offset))


State = Union[BrowseState, ComposeState, SearchState, ViewState]


# ========== Events ==========

@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class BeginAdd:
    pass


@dataclass(frozen=True)
class BeginSearch:
    pass


@dataclass(frozen=True)
class Open:
    pass


@dataclass(frozen=True)
class Backup:
    pass


@dataclass(frozen=True)
class Confirm:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Move:
    delta: int


@dataclass(frozen=True)
class Page:
    direction: int


@dataclass(frozen=True)
class Character:
    text: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Unbound:
    """A key with no meaning in the current mode."""
    key: str


Event = Union[Quit, BeginAdd, BeginSearch, Open, Backup, Confirm, Cancel, Back,
              Move, Page, Character, Backspace, Resize, Unbound]


# ========== Effects ==========

@dataclass(frozen=True)
class Exit:
    rollback: ClassVar[bool] = False


@dataclass(frozen=True)
class AppendNote:
    rollback: ClassVar[bool] = True

    text: str


@dataclass(frozen=True)
class ReadLog:
    rollback: ClassVar[bool] = True

    log_file: LogFile


@dataclass(frozen=True)
class ExportBackup:
    rollback: ClassVar[bool] = False


@dataclass(frozen=True)
class Reload:
    rollback: ClassVar[bool] = False


@dataclass(frozen=True)
class Filter:
    rollback: ClassVar[bool] = True

    query: str


Effect = Union[Exit, AppendNote, ReadLog, ExportBackup, Reload, Filter]


# ========== Transitions ==========

def transition(state: State, event: Event, geometry: Geometry) -> tuple[State, list[Effect]]:
    """Compute the next state and the effects to run for one event.

    Events a state has no rule for leave it unchanged.
    """
    if isinstance(state, BrowseState):
        return _browse(state, event, geometry)
    if isinstance(state, ComposeState):
        return _compose(state, event)
    if isinstance(state, SearchState):
        return _search(state, event)
    if isinstance(state, ViewState):
        return _view(state, event, geometry)
    raise TypeError(f"Unknown state: {state!r}")


def _browse(state: BrowseState, event: Event, geometry: Geometry) -> tuple[State, list[Effect]]:
    if isinstance(event, Quit):
        return state, [Exit()]
    if isinstance(event, BeginAdd):
        return ComposeState(browse=state), []
    if isinstance(event, BeginSearch):
        return SearchState(browse=state, query=state.query), []
    if isinstance(event, Open):
        item = state.selected_item
        if item is None:
            return state, []
        return ViewState(browse=state, log_file=item), [ReadLog(item)]
    if isinstance(event, Backup):
        return state, [ExportBackup()]
    if isinstance(event, Move):
        return state.select(state.selected + event.delta), []
    if isinstance(event, Page):
        return state.select(state.selected + event.direction * geometry.page_size), []
    return state, []


def _compose(state: ComposeState, event: Event) -> tuple[State, list[Effect]]:
    if isinstance(event, Cancel):
        return state.browse, []
    if isinstance(event, Confirm):
        return state.browse, [AppendNote(state.buffer), Reload()]
    if isinstance(event, Character):
        return replace(state, buffer=state.buffer + event.text), []
    if isinstance(event, Backspace):
        return replace(state, buffer=state.buffer[:-1]), []
    return state, []


def _search(state: SearchState, event: Event) -> tuple[State, list[Effect]]:
    if isinstance(event, Cancel):
        return state.browse, [Filter("")]
    if isinstance(event, Confirm):
        return state.browse, [Filter(state.query)]
    if isinstance(event, Character):
        return replace(state, query=state.query + event.text), []
    if isinstance(event, Backspace):
        return replace(state, query=state.query[:-1]), []
    return state, []


def _view(state: ViewState, event: Event, geometry: Geometry) -> tuple[State, list[Effect]]:
    if isinstance(event, Quit):
        return state, [Exit()]
    if isinstance(event, Back):
        return state.browse, []
    if isinstance(event, Move):
        return state.scroll(state.offset + event.delta, geometry), []
    if isinstance(event, Page):
        return state.scroll(state.offset + event.direction * geometry.page_size, geometry), []
    return state, []


# ========== View Model ==========

@dataclass(frozen=True)
class ViewModel:
    """Read-only snapshot of the session for rendering."""
    mode: Mode
    items: list[tuple[str, str]] = field(default_factory=list)
    selected: int = 0
    query: str = ""
    buffer: str = ""
    document_title: str = ""
    document_lines: list[str] = field(default_factory=list)
    offset: int = 0
    error: Optional[str] = None
    message: Optional[str] = None
    width: int = 80
    height: int = 24


# ========== Controller ==========

class InteractionController:
    """Owns the session state and runs effects against the store and index."""

    def __init__(
        self,
        store: NoteStore,
        index: NoteIndex,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.index = index
        self._clock = clock
        self.state: State = BrowseState()
        self.geometry = Geometry()
        self.error: Optional[StoreError] = None
        self.message: Optional[str] = None
        self.running = True

    @property
    def mode(self) -> Mode:
        return self.state.mode

    def start(self) -> None:
        """Load the catalog and enter Browse mode."""
        self.state = BrowseState()
        try:
            self.state = self.state.with_items(self.index.reload())
        except StoreError as e:
            self._record(Reload(), e)

    def handle(self, event: Event) -> None:
        """Process one input event to completion.

        A pending error swallows the next event (other than a resize),
        which clears it.
        """
        if isinstance(event, Resize):
            self.geometry = Geometry(width=event.width, height=event.height)
            if isinstance(self.state, ViewState):
                self.state = self.state.scroll(self.state.offset, self.geometry)
            return

        if self.error is not None:
            self.error = None
            return

        self.message = None
        previous = self.state
        state, effects = transition(self.state, event, self.geometry)

        for effect in effects:
            try:
                state = self._perform(effect, state)
            except StoreError as e:
                self._record(effect, e)
                if effect.rollback:
                    state = previous
                break

        self.state = state

    def _record(self, effect: Effect, error: StoreError) -> None:
        logger.warning("%s failed: %s", type(effect).__name__, error)
        self.error = error

    def _perform(self, effect: Effect, state: State) -> State:
        if isinstance(effect, Exit):
            self.running = False
            return state

        if isinstance(effect, AppendNote):
            now = self._clock()
            self.store.append(now.date(), effect.text, at=now)
            return state

        if isinstance(effect, Reload):
            self.index.reload()
            if isinstance(state, BrowseState):
                return state.with_items(self.index.search(state.query))
            return state

        if isinstance(effect, ReadLog):
            content = self.store.read(effect.log_file.path)
            return replace(state, content=content.decode("utf-8", errors="replace"), offset=0)

        if isinstance(effect, ExportBackup):
            path = self.store.backup(self._clock())
            self.message = f"Backup written to {path}"
            return state

        if isinstance(effect, Filter):
            browse = state if isinstance(state, BrowseState) else BrowseState()
            return replace(browse.with_items(self.index.search(effect.query), effect.query), selected=0)

        raise TypeError(f"Unknown effect: {effect!r}")

    def view(self) -> ViewModel:
        """Snapshot the session for the presentation layer."""
        state = self.state
        common = dict(
            mode=state.mode,
            error=str(self.error) if self.error is not None else None,
            message=self.message,
            width=self.geometry.width,
            height=self.geometry.height,
        )
        browse = state if isinstance(state, BrowseState) else state.browse
        common.update(
            items=[(log.title, str(log.path)) for log in browse.items],
            selected=browse.selected,
            query=browse.query,
        )

        if isinstance(state, ComposeState):
            return ViewModel(buffer=state.buffer, **common)
        if isinstance(state, SearchState):
            common["query"] = state.query
            return ViewModel(**common)
        if isinstance(state, ViewState):
            lines = state.lines
            return ViewModel(
                document_title=state.log_file.title,
                document_lines=lines[state.offset:state.offset + self.geometry.page_size],
                offset=state.offset,
                **common,
            )
        return ViewModel(**common)
