from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest
from rich.console import Console

from hsh.core.aliases import AliasTable
from hsh.core.dispatch import Dispatcher
from hsh.core.session import SessionState
from hsh.errors import ExecutionError, ExitRequested, SourceError


def test_plain_line_is_delegated_to_sh(make_dispatcher, runner) -> None:
    runner.statuses["false"] = 3
    dispatcher = make_dispatcher()
    assert dispatcher.dispatch("false") == 3
    assert runner.calls == [["sh", "-c", "false"]]


def test_line_is_trimmed_before_delegation(make_dispatcher, runner) -> None:
    make_dispatcher().dispatch("   echo hi   ")
    assert runner.lines == ["echo hi"]


def test_blank_line_runs_nothing(make_dispatcher, runner) -> None:
    assert make_dispatcher().dispatch("   ") == 0
    assert runner.calls == []


def test_signal_status_maps_to_one(make_dispatcher, runner) -> None:
    runner.statuses["sleep 100"] = -9
    assert make_dispatcher().dispatch("sleep 100") == 1


def test_spawn_failure_is_execution_error(session: SessionState, console: Console) -> None:
    def broken_runner(argv: list[str]) -> int:
        raise FileNotFoundError(2, "No such file or directory")

    dispatcher = Dispatcher(AliasTable(), session, console, runner=broken_runner)
    with pytest.raises(ExecutionError) as exc_info:
        dispatcher.dispatch("ls")
    assert exc_info.value.command == "ls"


def test_alias_is_expanded_before_delegation(make_dispatcher, runner) -> None:
    make_dispatcher({"ll": "ls -la"}).dispatch("ll /tmp")
    assert runner.lines == ["ls -la /tmp"]


def test_alias_keeps_pipes_and_redirections(make_dispatcher, runner) -> None:
    make_dispatcher({"ll": "ls -la"}).dispatch("ll | grep x > out.txt")
    make_dispatcher({"ll": "ls -la"}).dispatch("ll $HOME *.py")
    assert runner.lines == ["ls -la | grep x > out.txt", "ls -la $HOME *.py"]


def test_alias_replacement_is_not_expanded_again(make_dispatcher, runner) -> None:
    make_dispatcher({"ls": "ls --color=auto", "l": "ls"}).dispatch("l")
    assert runner.lines == ["ls"]


def test_alias_can_name_a_builtin(make_dispatcher, runner, console_output) -> None:
    make_dispatcher({"h": "hsh-help"}).dispatch("h")
    assert runner.calls == []
    assert "hsh - HackerOS Shell" in console_output()


def test_source_runs_lines_in_order_and_returns_last_status(tmp_path: Path, make_dispatcher, runner) -> None:
    script = tmp_path / "script"
    script.write_text("cmd1\n\n   \n! skipped\ncmd2\n  !also skipped\ncmd3\n", encoding="utf-8")
    runner.statuses.update({"cmd1": 1, "cmd2": 2, "cmd3": 7})

    status = make_dispatcher().dispatch(f"source {script}")

    assert runner.lines == ["cmd1", "cmd2", "cmd3"]
    assert status == 7


def test_dot_form_and_tilde_expansion(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, make_dispatcher, runner) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    (tmp_path / "rc").write_text("echo sourced\n", encoding="utf-8")
    assert make_dispatcher().dispatch(". ~/rc") == 0
    assert runner.lines == ["echo sourced"]


def test_source_of_empty_file_is_zero(tmp_path: Path, make_dispatcher, runner) -> None:
    script = tmp_path / "empty"
    script.write_text("\n! comment only\n", encoding="utf-8")
    assert make_dispatcher().dispatch(f"source {script}") == 0
    assert runner.calls == []


def test_trailing_empty_source_resets_status(tmp_path: Path, make_dispatcher, runner) -> None:
    empty = tmp_path / "empty"
    empty.write_text("", encoding="utf-8")
    outer = tmp_path / "outer"
    outer.write_text(f"fail\nsource {empty}\n", encoding="utf-8")
    runner.statuses["fail"] = 5
    assert make_dispatcher().dispatch(f"source {outer}") == 0


def test_nested_source_runs_before_remaining_lines(tmp_path: Path, make_dispatcher, runner) -> None:
    inner = tmp_path / "inner"
    inner.write_text("b\nc\n", encoding="utf-8")
    outer = tmp_path / "outer"
    outer.write_text(f"a\n. {inner}\nd\n", encoding="utf-8")
    make_dispatcher().dispatch(f"source {outer}")
    assert runner.lines == ["a", "b", "c", "d"]


def test_sourced_lines_go_through_aliases_and_builtins(tmp_path: Path, make_dispatcher, runner, session) -> None:
    target = tmp_path / "target"
    target.mkdir()
    script = tmp_path / "script"
    script.write_text(f"cd {target}\nll\n", encoding="utf-8")
    make_dispatcher({"ll": "ls -la"}).dispatch(f"source {script}")
    assert Path.cwd() == target.resolve()
    assert runner.lines == ["ls -la"]


def test_missing_source_file_raises(tmp_path: Path, make_dispatcher) -> None:
    missing = tmp_path / "missing"
    with pytest.raises(SourceError) as exc_info:
        make_dispatcher().dispatch(f"source {missing}")
    assert exc_info.value.path == missing
    assert isinstance(exc_info.value.__cause__, OSError)


def test_nested_read_failure_aborts_remaining_lines(tmp_path: Path, make_dispatcher, runner) -> None:
    outer = tmp_path / "outer"
    outer.write_text(f"first\nsource {tmp_path / 'missing'}\nnever\n", encoding="utf-8")
    with pytest.raises(SourceError):
        make_dispatcher().dispatch(f"source {outer}")
    assert runner.lines == ["first"]


def test_exit_inside_source_stops_everything(tmp_path: Path, make_dispatcher, runner) -> None:
    script = tmp_path / "script"
    script.write_text("before\nexit\nafter\n", encoding="utf-8")
    with pytest.raises(ExitRequested) as exc_info:
        make_dispatcher().dispatch(f"source {script}")
    assert exc_info.value.status == 0
    assert runner.lines == ["before"]


def test_export_sets_environment(monkeypatch: pytest.MonkeyPatch, make_dispatcher, runner) -> None:
    monkeypatch.setenv("HSH_TEST_VALUE", "previous")
    dispatcher = make_dispatcher()
    assert dispatcher.dispatch("export HSH_TEST_VALUE = a=b ") == 0
    assert os.environ["HSH_TEST_VALUE"] == "a=b"
    assert dispatcher.dispatch("export HSH_TEST_VALUE=again") == 0
    assert os.environ["HSH_TEST_VALUE"] == "again"
    assert runner.calls == []


def test_export_value_is_visible_to_child(monkeypatch: pytest.MonkeyPatch, session, console) -> None:
    monkeypatch.setenv("HSH_CHILD_VALUE", "previous")
    dispatcher = Dispatcher(AliasTable(), session, console)
    assert dispatcher.dispatch("export HSH_CHILD_VALUE=visible") == 0
    assert dispatcher.dispatch('test "$HSH_CHILD_VALUE" = visible') == 0
    assert dispatcher.dispatch('test "$HSH_CHILD_VALUE" = other') == 1


@pytest.mark.parametrize("line", ["export NOVALUE", "export =value"])
def test_malformed_export_is_delegated(line: str, make_dispatcher, runner) -> None:
    make_dispatcher().dispatch(line)
    assert runner.lines == [line]


def test_script_extension_gains_execute_permission(tmp_path: Path, monkeypatch, make_dispatcher, runner) -> None:
    script = tmp_path / "run.sh"
    script.write_text("echo hi\n", encoding="utf-8")
    script.chmod(0o644)
    monkeypatch.chdir(tmp_path)

    make_dispatcher().dispatch("./run.sh")

    assert stat.S_IMODE(script.stat().st_mode) == 0o755
    assert runner.lines == ["./run.sh"]


def test_script_with_some_execute_bit_is_left_alone(tmp_path: Path, make_dispatcher) -> None:
    script = tmp_path / "run.sh"
    script.write_text("", encoding="utf-8")
    script.chmod(0o700)
    make_dispatcher().dispatch(f"bash {script}")
    assert stat.S_IMODE(script.stat().st_mode) == 0o700


def test_missing_script_is_not_created(tmp_path: Path, make_dispatcher, runner) -> None:
    make_dispatcher().dispatch(f"{tmp_path / 'ghost.sh'}")
    assert not (tmp_path / "ghost.sh").exists()
    assert runner.lines == [f"{tmp_path / 'ghost.sh'}"]


def test_program_extension_is_prefixed_with_interpreter(make_dispatcher, runner) -> None:
    make_dispatcher().dispatch("game.hl")
    assert runner.lines == ["hl run game.hl"]


def test_protected_edit_asks_and_escalates(make_dispatcher, runner, confirm) -> None:
    confirm.answers = [True]
    make_dispatcher().dispatch("vim /etc/hosts")
    assert len(confirm.questions) == 1
    assert "root privileges" in confirm.questions[0]
    assert runner.lines == ["sudo vim /etc/hosts"]


def test_protected_edit_declined_is_unchanged(make_dispatcher, runner, confirm) -> None:
    confirm.answers = [False]
    make_dispatcher().dispatch("nano /usr/bin/tool")
    assert runner.lines == ["nano /usr/bin/tool"]


@pytest.mark.parametrize("interruption", [EOFError(), KeyboardInterrupt()])
def test_abandoned_question_counts_as_declined(interruption, make_dispatcher, runner, confirm) -> None:
    confirm.answers = [interruption]
    status = make_dispatcher().dispatch("vim /etc/hosts")
    assert status == 0
    assert runner.lines == ["vim /etc/hosts"]


@pytest.mark.parametrize("line", ["vim /home/me/notes", "vim", "less /etc/hosts", "vi '/etc/unbalanced"])
def test_unprotected_lines_never_ask(line: str, make_dispatcher, runner, confirm) -> None:
    make_dispatcher().dispatch(line)
    assert confirm.questions == []
    assert runner.lines == [line]


def test_privileged_user_is_not_asked(make_dispatcher, runner, confirm) -> None:
    make_dispatcher(privileged=True).dispatch("vi /etc/fstab")
    assert confirm.questions == []
    assert runner.lines == ["vi /etc/fstab"]


def test_custom_shell_and_elevation(session, console, runner, confirm) -> None:
    confirm.answers = [True]
    dispatcher = Dispatcher(
        AliasTable(),
        session,
        console,
        shell="bash",
        elevation_command="doas",
        confirm=confirm,
        runner=runner,
        is_privileged=lambda: False,
    )
    dispatcher.dispatch("vi /etc/hosts")
    assert runner.calls == [["bash", "-c", "doas vi /etc/hosts"]]
