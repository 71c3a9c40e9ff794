from __future__ import annotations

from pathlib import Path

import pytest

from focuswrite.storage import LocalStorage, parent_directory


def test_local_storage_roundtrip(tmp_path: Path) -> None:
    storage = LocalStorage()
    path = str(tmp_path / "doc.txt")

    storage.write_text(path, "héllo\n")

    assert storage.read_text(path) == "héllo\n"
    assert storage.path_exists(path) is True


def test_missing_file_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        LocalStorage().read_text(str(tmp_path / "nope.txt"))


def test_empty_path_never_exists() -> None:
    assert LocalStorage().path_exists("") is False


def test_make_directory_recursive_and_flat(tmp_path: Path) -> None:
    storage = LocalStorage()
    storage.make_directory(str(tmp_path / "a" / "b"), recursive=True)
    storage.make_directory(str(tmp_path / "c"), recursive=False)

    assert (tmp_path / "a" / "b").is_dir()
    assert (tmp_path / "c").is_dir()
    with pytest.raises(FileNotFoundError):
        storage.make_directory(str(tmp_path / "x" / "y"), recursive=False)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/home/me/notes/a.txt", "a.txt"),
        ("C:\\Users\\me\\a.txt", "a.txt"),
        ("relative.txt", "relative.txt"),
    ],
)
def test_basename_handles_both_separators(path: str, expected: str) -> None:
    assert LocalStorage().basename(path) == expected


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/home/me/notes/a.txt", "/home/me/notes"),
        ("/a.txt", "/"),
        ("C:\\Users\\me\\a.txt", "C:\\Users\\me"),
        ("a.txt", ""),
    ],
)
def test_parent_directory(path: str, expected: str) -> None:
    assert parent_directory(path) == expected


def test_undecodable_bytes_are_replaced(tmp_path: Path) -> None:
    path = tmp_path / "latin.txt"
    path.write_bytes("café\n".encode("latin-1"))

    assert LocalStorage().read_text(str(path)) == "caf�\n"
