"""Tests for lib.dialogs -- kdialog/qdbus wrappers."""

from unittest.mock import patch, MagicMock

import pytest

from lib.dialogs import MAX_DETAILS, Dialogs, ProgressDialog, truncate_details
from lib.errors import DialogError, UserCancelled


def _done(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestRadiolist:
    def test_builds_rows_and_returns_tag(self):
        dialogs = Dialogs(title="T")
        with patch("lib.dialogs.subprocess.run", return_value=_done(stdout="2\n")) as mock_run:
            choice = dialogs.radiolist("Pick:", [("1", "one"), ("2", "two")], default="1")
        assert choice == "2"
        args = mock_run.call_args[0][0]
        assert args == [
            "kdialog", "--title", "T", "--radiolist", "Pick:",
            "1", "one", "on",
            "2", "two", "off",
        ]

    def test_cancel_raises(self):
        dialogs = Dialogs()
        with patch("lib.dialogs.subprocess.run", return_value=_done(returncode=1)):
            with pytest.raises(UserCancelled):
                dialogs.radiolist("Pick:", [("1", "one")])


class TestProgressbar:
    def test_parses_reference_and_shows_cancel(self):
        dialogs = Dialogs()
        with patch("lib.dialogs.subprocess.run") as mock_run:
            mock_run.side_effect = [
                _done(stdout="org.kde.kdialog-4242 /ProgressDialog\n"),
                _done(),
            ]
            bar = dialogs.progressbar("Working", 1000)
        assert bar.ref == ("org.kde.kdialog-4242", "/ProgressDialog")
        first = mock_run.call_args_list[0][0][0]
        assert first[-3:] == ["--progressbar", "Working", "1000"]
        second = mock_run.call_args_list[1][0][0]
        assert second == ["qdbus", "org.kde.kdialog-4242", "/ProgressDialog", "showCancelButton", "true"]

    def test_zero_maximum_is_clamped(self):
        dialogs = Dialogs()
        with patch("lib.dialogs.subprocess.run") as mock_run:
            mock_run.side_effect = [_done(stdout="svc /ProgressDialog"), _done()]
            dialogs.progressbar("Working", 0)
        assert mock_run.call_args_list[0][0][0][-1] == "1"

    def test_bad_reference_raises(self):
        dialogs = Dialogs()
        with patch("lib.dialogs.subprocess.run", return_value=_done(stdout="")):
            with pytest.raises(DialogError):
                dialogs.progressbar("Working", 10)

    def test_unlaunchable_kdialog_raises_dialog_error(self):
        dialogs = Dialogs(kdialog="kdialog-missing")
        with patch("lib.dialogs.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(DialogError):
                dialogs.progressbar("Working", 10)


class TestProgressDialog:
    def test_set_value(self):
        bar = ProgressDialog(("svc", "/ProgressDialog"))
        with patch("lib.dialogs.subprocess.run", return_value=_done()) as mock_run:
            bar.set_value(500)
        assert mock_run.call_args[0][0] == ["qdbus", "svc", "/ProgressDialog", "Set", "", "value", "500"]

    def test_set_label(self):
        bar = ProgressDialog(("svc", "/ProgressDialog"), qdbus="qdbus6")
        with patch("lib.dialogs.subprocess.run", return_value=_done()) as mock_run:
            bar.set_label("hello")
        assert mock_run.call_args[0][0] == ["qdbus6", "svc", "/ProgressDialog", "setLabelText", "hello"]

    def test_was_cancelled(self):
        bar = ProgressDialog(("svc", "/ProgressDialog"))
        with patch("lib.dialogs.subprocess.run", return_value=_done(stdout="true\n")):
            assert bar.was_cancelled() is True
        with patch("lib.dialogs.subprocess.run", return_value=_done(stdout="false\n")):
            assert bar.was_cancelled() is False

    def test_vanished_dialog_is_not_cancelled(self):
        bar = ProgressDialog(("svc", "/ProgressDialog"))
        with patch("lib.dialogs.subprocess.run", return_value=_done(returncode=2, stderr="no such service")):
            assert bar.was_cancelled() is False

    def test_context_manager_closes_once(self):
        bar = ProgressDialog(("svc", "/ProgressDialog"))
        with patch("lib.dialogs.subprocess.run", return_value=_done()) as mock_run:
            with bar:
                pass
            bar.close()
        assert mock_run.call_count == 1
        assert mock_run.call_args[0][0][-1] == "close"


class TestNotices:
    def test_passive_uses_popup_seconds(self):
        dialogs = Dialogs(popup_seconds=9)
        with patch("lib.dialogs.subprocess.run", return_value=_done()) as mock_run:
            dialogs.passive("done")
        assert mock_run.call_args[0][0][-3:] == ["--passivepopup", "done", "9"]

    def test_detailed_error(self):
        dialogs = Dialogs()
        with patch("lib.dialogs.subprocess.run", return_value=_done()) as mock_run:
            dialogs.detailed_error("failed", "log text")
        assert mock_run.call_args[0][0][-3:] == ["--detailederror", "failed", "log text"]

    def test_missing_kdialog_does_not_raise(self):
        dialogs = Dialogs()
        with patch("lib.dialogs.subprocess.run", side_effect=FileNotFoundError):
            dialogs.error("boom")

    def test_oversized_argument_does_not_raise(self):
        dialogs = Dialogs()
        with patch("lib.dialogs.subprocess.run", side_effect=OSError(7, "Argument list too long")):
            dialogs.sorry("boom")

    def test_detailed_error_keeps_tail_of_long_log(self):
        log = "warning line\n" * 20000 + "Conversion failed!\n"
        dialogs = Dialogs()
        with patch("lib.dialogs.subprocess.run", return_value=_done()) as mock_run:
            dialogs.detailed_error("failed", log)
        details = mock_run.call_args[0][0][-1]
        assert len(details.encode()) < MAX_DETAILS + 100
        assert details.startswith("[... ")
        assert details.endswith("Conversion failed!\n")

    def test_from_settings(self, settings):
        settings.tools.kdialog = "/usr/bin/kdialog"
        settings.dialogs.title = "Convert"
        dialogs = Dialogs.from_settings(settings)
        assert dialogs.kdialog == "/usr/bin/kdialog"
        assert dialogs.title == "Convert"


class TestTruncateDetails:
    def test_short_text_untouched(self):
        assert truncate_details("log text") == "log text"

    def test_marker_counts_dropped_bytes(self):
        text = "x" * 150
        out = truncate_details(text, limit=100)
        assert out == "[... 50 bytes truncated ...]\n" + "x" * 100

    def test_multibyte_boundary(self):
        out = truncate_details("é" * 100, limit=51)
        assert out.endswith("é" * 25)
