"""Tests for the remote-over-local merge rule."""

from __future__ import annotations

from datetime import datetime, timedelta

from offline_sync.core.record import Record
from offline_sync.sync.merge import should_apply_remote

T0 = datetime(2024, 1, 1, 12, 0)


def _record(**overrides: object) -> Record:
    base = Record(id=1, name="A", email="a@x.com", department="Eng", position="Dev", updated_at=T0)
    return base.with_fields(**overrides)


class TestShouldApplyRemote:
    def test_remote_newer_wins(self) -> None:
        local = _record()
        remote = _record(updated_at=T0 + timedelta(minutes=1))
        assert should_apply_remote(local, remote) is True

    def test_equal_timestamps_remote_wins(self) -> None:
        assert should_apply_remote(_record(), _record()) is True

    def test_local_newer_identical_tracked_fields_kept(self) -> None:
        local = _record(updated_at=T0 + timedelta(hours=1), department="Sales")
        remote = _record()
        assert should_apply_remote(local, remote) is False

    def test_local_newer_but_name_differs_remote_wins(self) -> None:
        local = _record(updated_at=T0 + timedelta(hours=1), name="Local Name")
        remote = _record()
        assert should_apply_remote(local, remote) is True

    def test_local_newer_but_email_differs_remote_wins(self) -> None:
        local = _record(updated_at=T0 + timedelta(hours=1), email="local@x.com")
        remote = _record()
        assert should_apply_remote(local, remote) is True

    def test_untracked_difference_alone_does_not_win(self) -> None:
        local = _record(updated_at=T0 + timedelta(seconds=1), position="Lead")
        remote = _record(position="Manager")
        assert should_apply_remote(local, remote) is False
