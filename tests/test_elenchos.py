import re

import pytest

import elenchos
import file_operations
from elenchos import Elenchos, build_parser
from elenchos_config import DEFAULT_README_CONTENT, ElenchosConfig
from errors import NoScanError, NotAGitRepositoryError
from repo_scanner import Entry, EntryKind, ScanSession, scan_repository


def _keys(*keys):
    pending = list(keys)

    def read_key():
        return pending.pop(0)

    return read_key


def _lines(*lines):
    pending = list(lines)

    def read_line():
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read_line


def _count(text, label):
    match = re.search(rf"{re.escape(label)}\s*:\s*(\d+)", text)
    assert match, f"{label} missing from output"
    return int(match.group(1))


def _readmes(root):
    return sorted(str(p) for p in root.rglob("README.md"))


def test_scan_reports_counts_and_paths(repo, ui, output):
    app = Elenchos(ui=ui)

    session = app.process_scan(app.session, str(repo))

    text = output.getvalue()
    assert _count(text, "Total Directories") == 2
    assert _count(text, "Total Files") == 1
    assert _count(text, "Total Empty Directories") == 1
    assert _count(text, "Total Files Over 100mb") == 0
    assert str(repo / "a") in text
    assert ".git" not in text
    assert len(session.entries) == 3


def test_scan_lists_oversized_files(repo, ui, output, make_sparse_file):
    make_sparse_file(repo / "b" / "huge.bin", 150_000_000)
    app = Elenchos(ui=ui)

    app.process_scan(app.session, str(repo))

    text = output.getvalue()
    assert _count(text, "Total Files Over 100mb") == 1
    assert str(repo / "b" / "huge.bin") in text


def test_threshold_override_changes_label(repo, ui, output, make_sparse_file):
    make_sparse_file(repo / "b" / "medium.bin", 60_000_000)
    app = Elenchos(ui=ui, config=ElenchosConfig(threshold_mb=50))

    app.process_scan(app.session, str(repo))

    assert _count(output.getvalue(), "Total Files Over 50mb") == 1


def test_repeated_scans_report_the_same(repo, ui, output):
    app = Elenchos(ui=ui)

    app.handle_line(f"/scan {repo}")
    first = output.getvalue()
    output.seek(0)
    output.truncate()
    app.handle_line(f"/scan {repo}")
    second = output.getvalue()

    def summary(text):
        return text[text.index("Total Directories") : text.index("Scan of")]

    assert summary(first) == summary(second)


def test_rejected_scan_keeps_previous_session(repo, tmp_path, ui, output):
    not_a_repo = tmp_path / "notarepo"
    not_a_repo.mkdir()
    app = Elenchos(ui=ui)
    app.handle_line(f"/scan {repo}")
    previous = app.session
    output.seek(0)
    output.truncate()

    with pytest.raises(NotAGitRepositoryError):
        app.process_scan(app.session, str(not_a_repo))
    app.handle_line(f"/scan {not_a_repo}")

    assert app.session is previous
    assert 'Not a valid git repo. Please include a ".git" folder' in output.getvalue()
    assert "Total Directories" not in output.getvalue()


def test_scan_of_missing_directory(tmp_path, ui, output):
    app = Elenchos(ui=ui)
    cleared = []
    ui.clear_screen = lambda: cleared.append(True)

    app.handle_line(f"/scan {tmp_path / 'missing'}")

    assert f"{tmp_path / 'missing'} is not a valid directory!" in output.getvalue()
    assert app.session.is_empty
    assert cleared == []


@pytest.mark.parametrize("line", ["/init", "/open"])
def test_actions_require_a_scan(line, tmp_path, ui, output):
    app = Elenchos(ui=ui, read_key=_keys())

    with pytest.raises(NoScanError):
        getattr(app, f"process_{line[1:]}")(ScanSession())
    app.handle_line(line)

    assert "Scan command has not been run. Please scan a directory first" in output.getvalue()
    assert _readmes(tmp_path) == []


def test_init_writes_readme_into_empty_directories(repo, ui, output):
    (repo / "c" / "d").mkdir(parents=True)
    app = Elenchos(ui=ui, read_key=_keys("x", "y"))
    app.session = scan_repository(str(repo))

    app.handle_line("/init")

    assert _readmes(repo) == sorted([str(repo / "a" / "README.md"), str(repo / "c" / "d" / "README.md")])
    assert (repo / "a" / "README.md").read_text(encoding="utf-8") == DEFAULT_README_CONTENT
    text = output.getvalue()
    assert text.count("2 directories will be initialized") == 2
    assert f"Adding README.md to directory: {repo / 'a'}" in text


def test_init_leaves_git_metadata_alone(repo, ui):
    app = Elenchos(ui=ui, read_key=_keys("y"))
    app.session = scan_repository(str(repo))

    app.handle_line("/init")

    assert _readmes(repo) == [str(repo / "a" / "README.md")]
    assert list((repo / ".git").rglob("README.md")) == []


def test_init_declined_writes_nothing(repo, ui):
    (repo / "c").mkdir()
    app = Elenchos(ui=ui, read_key=_keys("N"))
    app.session = scan_repository(str(repo))

    app.handle_line("/init")

    assert _readmes(repo) == []


def test_init_uses_live_emptiness(repo, ui):
    app = Elenchos(ui=ui, read_key=_keys("Y"))
    app.session = scan_repository(str(repo))
    (repo / "a" / "notes.txt").write_text("now in use")
    (repo / "b" / "file.txt").unlink()

    app.handle_line("/init")

    assert _readmes(repo) == [str(repo / "b" / "README.md")]


def test_open_launches_browser_per_existing_oversized_file(repo, ui, monkeypatch, make_sparse_file):
    make_sparse_file(repo / "b" / "huge.bin", 100_000_000)
    make_sparse_file(repo / "a" / "other.bin", 200_000_000)
    launched = []
    monkeypatch.setattr(file_operations.subprocess, "Popen", lambda args: launched.append(args))
    app = Elenchos(ui=ui, read_key=_keys("y"))
    app.session = scan_repository(str(repo))
    (repo / "a" / "other.bin").unlink()

    app.handle_line("/open")

    assert launched == [file_operations.file_browser_command(repo / "b")]


def test_open_declined_launches_nothing(repo, ui, monkeypatch, make_sparse_file):
    make_sparse_file(repo / "b" / "huge.bin", 100_000_000)
    launched = []
    monkeypatch.setattr(file_operations.subprocess, "Popen", lambda args: launched.append(args))
    app = Elenchos(ui=ui, read_key=_keys("n"))
    app.session = scan_repository(str(repo))

    app.handle_line("/open")

    assert launched == []


@pytest.mark.parametrize("line", ["", "hello", "/scan", "/exit"])
def test_unrecognized_lines_print_error(line, ui, output):
    app = Elenchos(ui=ui)

    app.handle_line(line)

    assert output.getvalue() == "Error\n\n"


def test_run_loops_until_input_closes(repo, ui, output):
    app = Elenchos(ui=ui, read_line=_lines("bogus", f"/scan {repo}", "/init"), read_key=_keys("n"))

    app.run()

    text = output.getvalue()
    assert "Error" in text
    assert _count(text, "Total Empty Directories") == 1
    assert text.count("Use /scan <directory> to start a scan.") >= 4
    assert _readmes(repo) == []


def test_run_stops_on_keyboard_interrupt(ui):
    def interrupted():
        raise KeyboardInterrupt

    Elenchos(ui=ui, read_line=interrupted).run()


def test_run_scans_path_from_command_line(repo, ui, output):
    args = build_parser().parse_args([str(repo)])
    app = Elenchos(args, ui=ui, read_line=_lines())

    app.run()

    assert _count(output.getvalue(), "Total Directories") == 2
    assert not app.session.is_empty


def test_parser_threshold():
    args = build_parser().parse_args(["--threshold-mb", "25"])
    assert args.path is None
    assert args.threshold_mb == 25.0


def test_main_rejects_bad_threshold(monkeypatch):
    monkeypatch.setattr(elenchos.sys, "argv", ["elenchos", "--threshold-mb", "-1"])
    with pytest.raises(SystemExit):
        elenchos.main()


def test_report_skips_directories_the_walk_could_not_read(tmp_path, ui, output):
    locked = tmp_path / "locked"
    session = ScanSession(
        root_path=str(tmp_path),
        entries=[Entry(str(locked), EntryKind.DIRECTORY)],
        unreadable_paths={str(locked)},
    )
    app = Elenchos(ui=ui)

    app.report(session)

    text = output.getvalue()
    assert "Cannot read" not in text
    assert _count(text, "Total Directories") == 1
    assert _count(text, "Total Empty Directories") == 0


def test_batch_progress_is_reported(repo, ui):
    app = Elenchos(ui=ui, read_key=_keys("y"))
    app.session = scan_repository(str(repo))
    real_execute = app.file_ops.execute_operation
    callback_set = []

    def recording_execute(operation):
        callback_set.append(app.file_ops.progress_callback is not None)
        return real_execute(operation)

    app.file_ops.execute_operation = recording_execute

    app.handle_line("/init")

    assert callback_set == [True]
    assert app.file_ops.progress_callback is None
