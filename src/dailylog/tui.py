"""Full-screen terminal front end built on prompt_toolkit.

Everything here is presentation: the controller owns the session, this
module only renders its ViewModel and forwards key presses to it.
"""

from __future__ import annotations

from prompt_toolkit import Application
from prompt_toolkit.application.current import get_app
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.styles import Style

from .controller import InteractionController, Mode, Resize, ViewModel
from .keymap import event_for_key

BROWSE_HELP = (
    "vim keys (j/k) • (ctrl+u/d) page up/down • (a) add note • (/) search • "
    "(B) backup • (enter) view • (q) quit"
)

STYLE = Style.from_dict({
    "title": "bold #fafafa bg:#7d56f4",
    "info": "#666666",
    "selected": "#7d56f4",
    "item": "",
    "path": "#666666",
    "error": "bold #ff5f87",
    "message": "#5fd787",
})


def render(view: ViewModel) -> list[tuple[str, str]]:
    """Turn a ViewModel into prompt_toolkit formatted text."""
    if view.error is not None:
        return [
            ("class:error", f"Error: {view.error}\n"),
            ("class:info", "Press any key to continue"),
        ]

    if view.mode == Mode.COMPOSE:
        return [
            ("", "\n"),
            ("class:title", " Add Daily Note "),
            ("", f"\n\n> {view.buffer}"),
            ("[SetCursorPosition]", ""),
            ("", "\n\n"),
            ("class:info", "(enter to save • esc to cancel)"),
        ]

    if view.mode == Mode.SEARCH:
        return [
            ("", "\n"),
            ("class:title", " Search Notes "),
            ("", f"\n\n/ {view.query}"),
            ("[SetCursorPosition]", ""),
            ("", "\n\n"),
            ("class:info", "(enter to filter • esc to clear)"),
        ]

    if view.mode == Mode.VIEW:
        fragments = [("class:title", f" Viewing: {view.document_title} "), ("", "\n")]
        for line in view.document_lines:
            fragments.append(("", f"  {line}\n"))
        fragments.append(("", "\n"))
        fragments.append(("class:info", "(h to go back • q to quit)"))
        return fragments

    title = "Daily Notes" if not view.query else f"Daily Notes matching '{view.query}'"
    fragments = [("class:title", f" {title} "), ("", "\n\n")]
    if not view.items:
        fragments.append(("class:info", "    No notes yet.\n"))
    page = max(1, view.height - 4)
    start = max(0, view.selected - page + 1)
    for i, (name, path) in enumerate(view.items[start:start + page], start=start):
        if i == view.selected:
            fragments.append(("[SetCursorPosition]", ""))
            fragments.append(("class:selected", f"  > {name}  "))
        else:
            fragments.append(("class:item", f"    {name}  "))
        fragments.append(("class:path", f"{path}\n"))
    fragments.append(("", "\n"))
    if view.message:
        fragments.append(("class:message", f"{view.message}\n"))
    fragments.append(("class:info", BROWSE_HELP))
    return fragments


def create_application(controller: InteractionController) -> Application:
    """Build the prompt_toolkit application around a started controller."""
    kb = KeyBindings()

    @kb.add(Keys.Any)
    def _key(event):
        press = event.key_sequence[0]
        key = press.key.value if isinstance(press.key, Keys) else press.key
        controller.handle(event_for_key(controller.mode, key, press.data))
        if not controller.running:
            event.app.exit()

    @kb.add(Keys.BracketedPaste)
    def _paste(event):
        controller.handle(event_for_key(controller.mode, "<bracketed-paste>", event.data))

    @kb.add("c-c")
    def _interrupt(event):
        event.app.exit()

    def get_text():
        size = get_app().output.get_size()
        if (size.columns, size.rows) != (controller.geometry.width, controller.geometry.height):
            controller.handle(Resize(width=size.columns, height=size.rows))
        return render(controller.view())

    window = Window(content=FormattedTextControl(get_text, focusable=True, show_cursor=False), wrap_lines=True)

    return Application(
        layout=Layout(window),
        key_bindings=kb,
        style=STYLE,
        full_screen=True,
        mouse_support=False,
    )


def run(controller: InteractionController) -> None:
    """Run the interactive session until the user quits."""
    controller.start()
    create_application(controller).run()
