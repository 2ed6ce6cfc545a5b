from gloomdelve.core import keys
from gloomdelve.core.input import InputType
from gloomdelve.core.session import GameSession
from gloomdelve.screens.base import Screen
from gloomdelve.ui.display import GridDisplay


class StubScreen(Screen):
    def __init__(self, session, name, log):
        super().__init__(session)
        self.name = name
        self.log = log
        self.inputs = []

    def enter(self):
        self.log.append(("enter", self.name))

    def exit(self):
        self.log.append(("exit", self.name))

    def render(self, display):
        display.draw_text(0, 0, self.name)

    def handle_input(self, input_type, data):
        self.inputs.append((input_type, data))


def _session():
    return GameSession(display=GridDisplay(20, 5))


def test_switch_exits_old_before_entering_new_and_refreshes():
    session = _session()
    log = []
    a = StubScreen(session, "a", log)
    b = StubScreen(session, "b", log)

    session.switch_screen(a)
    session.switch_screen(b)

    assert log == [("enter", "a"), ("exit", "a"), ("enter", "b")]
    assert session.active_screen is b
    assert session.refreshes == 2
    assert session.display.row_text(0).startswith("b")


def test_switch_clears_sub_screen_first():
    session = _session()
    log = []
    play = StubScreen(session, "play", log)
    menu = StubScreen(session, "menu", log)
    lose = StubScreen(session, "lose", log)

    session.switch_screen(play)
    session.set_sub_screen(menu)
    session.switch_screen(lose)

    assert log == [
        ("enter", "play"),
        ("enter", "menu"),
        ("exit", "menu"),
        ("exit", "play"),
        ("enter", "lose"),
    ]
    assert session.sub_screen is None


def test_sub_screen_takes_input_and_rendering():
    session = _session()
    log = []
    play = StubScreen(session, "play", log)
    menu = StubScreen(session, "menu", log)
    session.switch_screen(play)

    session.set_sub_screen(menu)
    session.handle_input(InputType.KEYDOWN, keys.UP)
    assert menu.inputs == [(InputType.KEYDOWN, keys.UP)]
    assert play.inputs == []
    assert session.current_screen is menu
    assert session.display.row_text(0).startswith("menu")

    session.set_sub_screen(None)
    session.handle_input(InputType.KEYPRESS, ord("i"))
    assert play.inputs == [(InputType.KEYPRESS, ord("i"))]
    assert session.display.row_text(0).startswith("play")
    assert log[-1] == ("exit", "menu")


def test_switch_to_none_and_input_without_screen():
    session = _session()
    log = []
    a = StubScreen(session, "a", log)
    session.handle_input(InputType.KEYDOWN, keys.RETURN)  # nothing active, ignored
    session.switch_screen(a)
    session.switch_screen(None)
    assert session.current_screen is None
    assert log == [("enter", "a"), ("exit", "a")]
    assert session.display.row_text(0).strip() == ""


def test_templates_are_loaded_lazily_and_share_capabilities():
    session = _session()
    assert session._entity_templates is None
    assert "kobold" in session.entity_templates
    assert session.item_templates.capabilities is session.entity_templates.capabilities
