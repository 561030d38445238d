"""Terminal session tests"""

import pytest

from tmux_slots import session as session_module
from tmux_slots.errors import CreationError, TeardownError, TransmissionError
from tmux_slots.models import TmuxOptions
from tmux_slots.session import TerminalSession


class TestGotoTerminal:
    """goto_terminal"""

    def test_creates_and_focuses(self, tmux, make_session):
        session = make_session()
        session.goto_terminal(1)
        assert tmux.focused == "main:@1.%1"

    def test_reuses_window(self, tmux, make_session):
        session = make_session()
        session.goto_terminal(1)
        session.goto_terminal(1)
        assert tmux.count('new-window') == 1
        assert tmux.count('switch-client') == 2

    def test_creation_failure(self, tmux, make_session):
        session = make_session()
        tmux.fail('new-window', stderr=("no server running",))
        with pytest.raises(CreationError):
            session.goto_terminal(1)
        assert 1 not in session.registry
        assert tmux.count('switch-client') == 0

    def test_rename_only_with_name_function(self, tmux, make_session):
        session = make_session(options=TmuxOptions(window_name=lambda slot, pane, win: f"t{slot}"))
        session.goto_terminal(4)
        assert tmux.window_names == {"@1": "t4"}


class TestSendCommand:
    """send_command"""

    def test_literal_text(self, tmux, make_session):
        session = make_session()
        session.send_command(1, "ls -la")
        assert tmux.sent == [("%1", "ls -la")]

    def test_stored_command(self, tmux, make_session):
        session = make_session(cmds={1: "make", 2: "make test"})
        session.send_command(1, 2)
        assert tmux.sent == [("%1", "make test")]

    def test_format_args(self, tmux, make_session):
        session = make_session(cmds={1: "pytest -k %s"})
        session.send_command(3, 1, "slow")
        assert tmux.sent == [("%1", "pytest -k slow")]

    def test_enter_on_sendcmd(self, tmux, make_session):
        session = make_session(enter_on_sendcmd=True)
        session.send_command(1, "ls")
        assert tmux.sent == [("%1", "ls\n")]

    def test_missing_stored_command_is_noop(self, tmux, make_session):
        session = make_session(cmds={1: "make"}, enter_on_sendcmd=True)
        session.send_command(1, 5)
        assert tmux.sent == []
        assert tmux.count('send-keys') == 0

    def test_empty_stored_command_is_noop(self, tmux, make_session):
        session = make_session(cmds={1: ""})
        session.send_command(1, 1)
        assert tmux.sent == []

    def test_window_created_even_when_nothing_sent(self, tmux, make_session):
        session = make_session()
        session.send_command(2, 9)
        assert 2 in session.registry

    def test_literal_pane_target(self, tmux, make_session):
        session = make_session()
        handle = session.registry.get_or_create(1)
        session.send_command(handle.window_id, "echo hi")
        assert tmux.sent == [("%1", "echo hi")]
        assert tmux.count('new-window') == 1

    def test_transmission_failure(self, tmux, make_session):
        session = make_session()
        tmux.fail('send-keys', stderr=("not a terminal",))
        with pytest.raises(TransmissionError):
            session.send_command(1, "ls")


class TestClearAll:
    """clear_all"""

    def test_three_windows_one_vanished(self, tmux, make_session):
        session = make_session()
        for slot in (1, 2, 3):
            session.goto_terminal(slot)
        tmux.vanish(session.registry.lookup(2).window_id)

        session.clear_all()

        assert tmux.count('kill-pane') == 3
        assert len(session.registry) == 0

    def test_next_use_creates_new_window(self, tmux, make_session):
        session = make_session()
        session.goto_terminal(1)
        session.clear_all()
        session.goto_terminal(1)
        assert tmux.count('new-window') == 2


class TestCommandPassthrough:
    """command table operations"""

    def test_add_remove_replace(self, make_session):
        saved = []
        session = make_session(cmds={1: "", 2: "ls"}, on_change=lambda: saved.append(1))

        assert session.add_command("make") == 1
        session.remove_command(1)
        assert session.commands.cmds == {1: "ls"}
        session.replace_command_list({2: "x"})
        assert session.get_length() == 2
        assert session.is_valid_index(2)
        assert not session.is_valid_index(3)
        assert len(saved) == 3


class TestSetup:
    """module level setup / teardown"""

    @pytest.fixture(autouse=True)
    def reset(self, monkeypatch):
        monkeypatch.setattr(session_module, "_session", None)

    def test_setup_once(self, tmux):
        first = session_module.setup(TmuxOptions(window_name="a"), tmux=tmux)
        second = session_module.setup(TmuxOptions(window_name="b"), tmux=tmux)
        assert first is second
        assert second.options.window_name == "a"

    def test_get_session_creates_default(self):
        session = session_module.get_session()
        assert isinstance(session, TerminalSession)
        assert session_module.get_session() is session

    def test_autoclose_registers_exit_hook(self, tmux, monkeypatch):
        registered = []
        monkeypatch.setattr(session_module.atexit, "register", registered.append)
        from tmux_slots.config import GlobalSettings

        session_module.setup(settings=GlobalSettings(tmux_autoclose_windows=True), tmux=tmux)
        assert registered == [session_module.teardown]

    def test_no_exit_hook_by_default(self, tmux, monkeypatch):
        registered = []
        monkeypatch.setattr(session_module.atexit, "register", registered.append)
        session_module.setup(tmux=tmux)
        assert registered == []

    def test_teardown_kills_windows(self, tmux):
        session = session_module.setup(tmux=tmux)
        session.goto_terminal(1)
        session_module.teardown()
        assert tmux.panes == {}

    def test_teardown_logs_failures(self, tmux, caplog):
        session = session_module.setup(tmux=tmux)
        session.goto_terminal(1)
        tmux.fail('kill-pane', stderr=("denied",))
        session_module.teardown()
        assert "denied" in caplog.text
        assert len(session.registry) == 0

    def test_tag_namespace_reaches_registry(self, tmux):
        session = session_module.setup(tmux=tmux, tag_namespace="proj")
        session.goto_terminal(1)
        assert session.registry.tag_namespace == "proj"
        assert tmux.pane_options == {"%1": {"@tmux_slots": "proj-1"}}

    def test_teardown_without_session(self):
        session_module.teardown()

    def test_clear_all_reports_failures(self, tmux, make_session):
        session = make_session()
        session.goto_terminal(1)
        tmux.fail('kill-pane')
        with pytest.raises(TeardownError):
            session.clear_all()
