"""Tests for yeet.frontend.history -- remembered selections per directory."""

from __future__ import annotations

from pathlib import PurePosixPath

from yeet.frontend.history import History


class TestHistory:
    def test_add_records_every_level(self) -> None:
        history = History()
        history.add("/home/user/src")
        assert history.get_selection("/") == "home"
        assert history.get_selection("/home") == "user"
        assert history.get_selection("/home/user") == "src"
        assert history.get_selection("/home/user/src") is None
        assert len(history) == 3

    def test_later_visit_wins(self) -> None:
        history = History()
        history.add("/home/user/src")
        history.add("/home/user/docs")
        assert history.get_selection("/home/user") == "docs"
        assert history.get_selection("/home") == "user"

    def test_trailing_separator_is_ignored(self) -> None:
        history = History()
        history.add("/home/user/")
        assert history.get_selection("/home/") == "user"

    def test_accepts_path_objects(self) -> None:
        history = History()
        history.add(PurePosixPath("/srv/data"))
        assert history.get_selection(PurePosixPath("/srv")) == "data"

    def test_unknown_path(self) -> None:
        assert History().get_selection("/nowhere") is None
