from pathlib import Path

import pytest

from common.os_paths import PathError, ensure_parent_directory, join_output_path, modified_time


def test_join_output_path_roots_site_paths():
    assert join_output_path("/srv/out", "/images/a.png") == Path("/srv/out/images/a.png")
    assert join_output_path(Path("out"), "docs/a.png") == Path("out/docs/a.png")


def test_join_output_path_without_root():
    assert join_output_path(None, "/images/a.png") == Path("images/a.png")


def test_ensure_parent_directory(tmp_path):
    target = tmp_path / "a" / "b" / "c.png"
    assert ensure_parent_directory(target) == tmp_path / "a" / "b"
    assert (tmp_path / "a" / "b").is_dir()


def test_ensure_parent_directory_blocked_by_file(tmp_path):
    (tmp_path / "a").write_text("not a directory", encoding="utf-8")
    with pytest.raises(PathError):
        ensure_parent_directory(tmp_path / "a" / "b" / "c.png")


def test_modified_time_missing_file(tmp_path):
    with pytest.raises(PathError):
        modified_time(tmp_path / "nope")
