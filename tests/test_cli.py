"""
Critical CLI tests: focus on data safety, correct file selection and relocation logic.
The keeper of a group must never be moved; dry runs must never touch files.
"""
import csv
import sys
from unittest import mock
import pytest
from dupetracks.cli import CLIApplication, main
from dupetracks.services.file_service import FileService


def run_cli(*argv):
    CLIApplication().run(list(argv))


class TestDuplicatesCommand:

    def test_dry_run_writes_reports_and_moves_nothing(self, music_library, fake_mutagen, tmp_path, capsys):
        output = tmp_path / "out"

        run_cli("duplicates", "-i", str(music_library["root"]), "-o", str(output), "--dry-run")

        assert music_library["hq"].exists()
        assert music_library["lq"].exists()
        assert (output / "duplicate_report.csv").exists()
        assert (output / "duplicate_matches.csv").exists()
        assert "Dry run - no files will be moved" in capsys.readouterr().out

    def test_force_moves_lower_quality_copy(self, music_library, fake_mutagen, tmp_path):
        """
        CRITICAL: the 320 kbps copy stays in place, the 128 kbps copy is moved.
        """
        output = tmp_path / "out"

        run_cli("duplicates", "-i", str(music_library["root"]), "-o", str(output), "--force")

        assert music_library["hq"].exists(), "Keeper MUST stay in place"
        assert not music_library["lq"].exists()
        assert (output / "DJ Snake - Title Track.mp3").exists()
        # distinct releases are untouched
        assert music_library["radio"].exists()
        assert music_library["club"].exists()

    def test_trash_option(self, music_library, fake_mutagen, tmp_path):
        with mock.patch.object(FileService, "move_to_trash") as mock_trash:
            run_cli("duplicates", "-i", str(music_library["root"]), "-o", str(tmp_path / "out"),
                    "--trash", "--force")

        trashed = [str(call.args[0]) for call in mock_trash.call_args_list]
        assert len(trashed) == 1
        assert trashed[0].endswith("DJ Snake - Title Track.mp3")
        assert "01. DJ Snake" not in trashed[0]

    def test_reports_content(self, music_library, fake_mutagen, tmp_path):
        output = tmp_path / "out"
        run_cli("duplicates", "-i", str(music_library["root"]), "-o", str(output), "--dry-run", "-q")

        with open(output / "duplicate_matches.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert len(rows) == 2
        assert rows[1][0].endswith("01. DJ Snake - Title Track.mp3")
        assert rows[1][2] == "Exact title match: 'dj snake - title track'"
        assert rows[1][3] == "Bitrate difference: 320 vs 128 kbps"

    def test_move_failure_is_reported_not_fatal(self, music_library, fake_mutagen, tmp_path, capsys):
        with mock.patch.object(FileService, "move_to_directory", side_effect=RuntimeError("File not found: x")):
            run_cli("duplicates", "-i", str(music_library["root"]), "-o", str(tmp_path / "out"), "--force")

        captured = capsys.readouterr()
        assert "Partial success: 0/1 files moved" in captured.out
        assert "Error moving duplicate" in captured.err

    def test_no_duplicates(self, tmp_path, fake_mutagen, capsys):
        music = tmp_path / "music"
        music.mkdir()
        (music / "A - One.mp3").write_bytes(b"x" * 1000)
        (music / "B - Two.mp3").write_bytes(b"x" * 1000)

        run_cli("duplicates", "-i", str(music), "-o", str(tmp_path / "out"), "--force")

        assert "No duplicates found." in capsys.readouterr().out
        assert (music / "A - One.mp3").exists()

    def test_force_only_moves_direct_duplicates(self, tmp_path, fake_mutagen):
        """
        Radio Mix matches both Radio Edit and Club Mix, but those two are different
        releases. Only Radio Mix is moved; Club Mix stays.
        """
        music = tmp_path / "music"
        music.mkdir()
        (music / "Artist - Track (Radio Edit).mp3").write_bytes(b"E" * 40_000)
        (music / "Artist - Track (Radio Mix).mp3").write_bytes(b"R" * 16_000)
        (music / "Artist - Track (Club Mix).mp3").write_bytes(b"C" * 32_000)
        output = tmp_path / "out"

        run_cli("duplicates", "-i", str(music), "-o", str(output), "--force")

        assert (output / "Artist - Track (Radio Mix).mp3").exists()
        assert (music / "Artist - Track (Radio Edit).mp3").exists()
        assert (music / "Artist - Track (Club Mix).mp3").exists()
        assert not (output / "Artist - Track (Club Mix).mp3").exists()

    def test_numbered_parts_are_not_duplicates(self, tmp_path, fake_mutagen, capsys):
        music = tmp_path / "music"
        music.mkdir()
        (music / "Artist - Symphony (Pt. 2).mp3").write_bytes(b"2" * 40_000)
        (music / "Artist - Symphony (Pt. 3).mp3").write_bytes(b"3" * 16_000)

        run_cli("duplicates", "-i", str(music), "-o", str(tmp_path / "out"), "--force")

        assert "No duplicates found." in capsys.readouterr().out
        assert (music / "Artist - Symphony (Pt. 3).mp3").exists()

    def test_interactive_confirmation_declined(self, music_library, fake_mutagen, tmp_path):
        with mock.patch("sys.stdin.isatty", return_value=True), \
                mock.patch("sys.stdout.isatty", return_value=True), \
                mock.patch("builtins.input", return_value="n"):
            run_cli("duplicates", "-i", str(music_library["root"]), "-o", str(tmp_path / "out"))

        assert music_library["lq"].exists()


class TestArgumentValidation:

    def test_non_interactive_session_requires_force(self, music_library, tmp_path):
        with mock.patch("sys.stdin.isatty", return_value=False):
            with pytest.raises(SystemExit) as exc:
                run_cli("duplicates", "-i", str(music_library["root"]), "-o", str(tmp_path / "out"))
        assert exc.value.code == 1

    def test_missing_input_directory(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            run_cli("duplicates", "-i", str(tmp_path / "missing"), "-o", str(tmp_path), "--dry-run")
        assert exc.value.code == 1
        assert "Directory not found" in capsys.readouterr().err

    def test_invalid_size(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            run_cli("duplicates", "-i", str(tmp_path), "-o", str(tmp_path), "--dry-run", "-m", "abc")
        assert "Invalid size format" in capsys.readouterr().err

    def test_max_below_min(self, tmp_path):
        with pytest.raises(SystemExit):
            run_cli("duplicates", "-i", str(tmp_path), "-o", str(tmp_path), "--dry-run", "-m", "2MB", "-M", "1MB")

    def test_force_with_dry_run(self, tmp_path):
        with pytest.raises(SystemExit):
            run_cli("duplicates", "-i", str(tmp_path), "-o", str(tmp_path), "--dry-run", "--force")

    def test_output_is_a_file(self, tmp_path):
        report = tmp_path / "report.csv"
        report.write_text("")
        with pytest.raises(SystemExit):
            run_cli("duplicates", "-i", str(tmp_path), "-o", str(report), "--dry-run")

    def test_subcommand_required(self):
        with pytest.raises(SystemExit) as exc:
            CLIApplication.parse_args([])
        assert exc.value.code == 2

    def test_extensions_normalized(self, tmp_path):
        app = CLIApplication()
        args = app.parse_args(["bitrate", "-i", str(tmp_path), "-o", "r.csv", "-x", "MP3", ".Flac"])
        params = app.create_params(args)
        assert params.extensions == [".mp3", ".flac"]
        assert params.output_dir is None


class TestBitrateCommand:

    def test_writes_report(self, music_library, fake_mutagen, tmp_path, capsys):
        report = tmp_path / "bitrate.csv"

        run_cli("bitrate", "-i", str(music_library["root"]), "-o", str(report))

        assert report.exists()
        assert "Bitrate Analysis Summary:" in capsys.readouterr().out
        with open(report, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[1] == ["High Bitrate (256-400 kbps)", "3", "60.0%"]

    def test_empty_directory_fails(self, tmp_path, fake_mutagen, capsys):
        with pytest.raises(SystemExit):
            run_cli("bitrate", "-i", str(tmp_path), "-o", str(tmp_path / "bitrate.csv"))
        assert "Bitrate analysis failed" in capsys.readouterr().err


class TestMain:

    def test_keyboard_interrupt_exit_code(self):
        with mock.patch.object(CLIApplication, "run", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc:
                main()
        assert exc.value.code == 130

    def test_unexpected_error_exit_code(self, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        with mock.patch.object(CLIApplication, "run", side_effect=ValueError("boom")):
            with pytest.raises(SystemExit) as exc:
                main()
        assert exc.value.code == 1

    def test_debug_reraises(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "1")
        with mock.patch.object(CLIApplication, "run", side_effect=ValueError("boom")):
            with pytest.raises(ValueError):
                main()
