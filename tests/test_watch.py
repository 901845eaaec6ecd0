import pytest

from ansioverlay.watch import FileWatcher


def test_missing_file_cannot_be_watched(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileWatcher(tmp_path / "missing.txt")


def test_unchanged_file_is_not_reported(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("one\n")
    watcher = FileWatcher(path)
    assert watcher.has_file_been_rewritten() is False
    assert watcher.has_file_been_rewritten() is False


def test_rewrite_is_reported_once(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("one\n")
    watcher = FileWatcher(str(path))
    path.write_text("one\ntwo and more\n")
    assert watcher.has_file_been_rewritten() is True
    assert watcher.has_file_been_rewritten() is False


def test_deleted_then_recreated_file(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("one\n")
    watcher = FileWatcher(path)
    path.unlink()
    assert watcher.has_file_been_rewritten() is False
    path.write_text("something else entirely\n")
    assert watcher.has_file_been_rewritten() is True
    assert watcher.has_file_been_rewritten() is False


def test_filename_is_kept_as_string(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("x")
    assert FileWatcher(path).filename == str(path)