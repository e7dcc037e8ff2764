"""Tests for the stripper and extractor tools and their reporters."""

import sys
import os
from unittest.mock import MagicMock

import pytest

# Ensure src is on path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from chadoclean.config import Config
from chadoclean.errors import (
    DestinationExistsError,
    EmbeddedWiggleError,
    SourceNotFoundError,
    UnterminatedElementError,
)
from chadoclean.extractor import MetadataExtractor
from chadoclean.reporter import CommandReporter, ConsoleReporter, make_reporter
from chadoclean.stripper import ChadoxmlStripper

SOURCE = (
    "<chado>\n"
    '  <feature id="gene_1">\n'
    "    <name>x</name>\n"
    "  </feature>\n"
    "  <experiment>\n"
    "    <description>ChIP-chip</description>\n"
    "  </experiment>\n"
    "</chado>\n"
)

STRIPPED = (
    "<chado>\n"
    "  <experiment>\n"
    "    <description>ChIP-chip</description>\n"
    "  </experiment>\n"
    "</chado>\n"
)

WIGGLE = (
    '  <wiggle_data id="w">\n'
    "    <name>track</name>\n"
    "    <data>1 2\n"
    "3 4\n"
    "    </data>\n"
    "  </wiggle_data>\n"
)


def make_command_object():
    cmd = MagicMock()
    cmd.stderr = None
    return cmd


# ============================================================
# Reporters
# ============================================================

class TestReporters:
    def test_console_reporter_prints_to_stdout(self, capsys):
        ConsoleReporter().report("Done! [not markup]")
        assert capsys.readouterr().out == "Done! [not markup]\n"

    def test_command_reporter_appends_and_saves(self):
        cmd = make_command_object()
        reporter = CommandReporter(cmd)
        reporter.report("first")
        reporter.report("second")
        assert cmd.stderr == "first\nsecond\n"
        assert cmd.save.call_count == 2

    def test_make_reporter(self):
        assert isinstance(make_reporter(), ConsoleReporter)
        assert isinstance(make_reporter(make_command_object()), CommandReporter)


# ============================================================
# ChadoxmlStripper
# ============================================================

class TestChadoxmlStripper:
    def test_strip_features(self, tmp_path, capsys):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_text(SOURCE)

        stripper = ChadoxmlStripper(src, dest)
        assert stripper.ready
        stats = stripper.strip_features()

        assert dest.read_text() == STRIPPED
        assert stats.elements_dropped == 1
        out = capsys.readouterr().out
        assert "Stripping features from chadoxml file..." in out
        assert "Done!" in out

    def test_messages_go_to_command_object(self, tmp_path, capsys):
        src = tmp_path / "in.chadoxml"
        src.write_text(SOURCE)
        cmd = make_command_object()

        ChadoxmlStripper(src, tmp_path / "out.chadoxml", command_object=cmd).strip_features()

        assert cmd.stderr == "Stripping features from chadoxml file...\nDone!\n"
        assert capsys.readouterr().out == ""

    def test_missing_source(self, tmp_path, capsys):
        dest = tmp_path / "out.chadoxml"
        stripper = ChadoxmlStripper(tmp_path / "nope.chadoxml", dest)
        assert not stripper.ready
        assert "Can't find source file" in capsys.readouterr().out
        with pytest.raises(SourceNotFoundError):
            stripper.strip_features()
        assert not dest.exists()

    def test_existing_destination_untouched(self, tmp_path, capsys):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_text(SOURCE)
        dest.write_text("precious\n")

        stripper = ChadoxmlStripper(src, dest)
        assert not stripper.ready
        assert "already exists" in capsys.readouterr().out
        with pytest.raises(DestinationExistsError):
            stripper.strip_features()
        assert dest.read_text() == "precious\n"

    def test_embedded_wiggles_rejected(self, tmp_path):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_text("<chado>\n" + WIGGLE + "</chado>\n")

        stripper = ChadoxmlStripper(src, dest)
        assert stripper.embedded_wiggle_count() == 1
        with pytest.raises(EmbeddedWiggleError):
            stripper.strip_features()
        assert not dest.exists()

    def test_embedded_wiggles_reported_to_command_object(self, tmp_path):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_text(WIGGLE)
        cmd = make_command_object()

        with pytest.raises(EmbeddedWiggleError):
            ChadoxmlStripper(src, dest, command_object=cmd).strip_features()
        assert "ERROR: in.chadoxml contains embedded wiggle files!" in cmd.stderr
        assert cmd.save.called
        assert not dest.exists()

    def test_non_utf8_bytes_pass_through(self, tmp_path):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_bytes(
            b"<chado>\n<desc>caf\xe9</desc>\n<featureprop>\n\xff\n</featureprop>\n</chado>\n"
        )

        ChadoxmlStripper(src, dest).strip_features()
        assert dest.read_bytes() == b"<chado>\n<desc>caf\xe9</desc>\n</chado>\n"

    def test_strict_mode_flags_unterminated(self, tmp_path):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_text("<chado>\n<featureloc>\n<fmin>1</fmin>\n")

        with pytest.raises(UnterminatedElementError):
            ChadoxmlStripper(src, dest, config=Config(strict=True)).strip_features()
        assert dest.read_text() == "<chado>\n"

    def test_default_mode_truncates_silently(self, tmp_path):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_text("<chado>\n<featureloc>\n<fmin>1</fmin>\n")

        stats = ChadoxmlStripper(src, dest).strip_features()
        assert dest.read_text() == "<chado>\n"
        assert stats.terminal_state == "featureloc"


# ============================================================
# MetadataExtractor
# ============================================================

class TestMetadataExtractor:
    def test_extract(self, tmp_path, capsys):
        src = tmp_path / "in.chadoxml"
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        dest = out_dir / "meta.chadoxml"
        src.write_text(SOURCE.replace("</chado>\n", WIGGLE + "</chado>\n"))

        stats = MetadataExtractor(src, dest).extract()

        assert dest.read_text() == STRIPPED.replace("</chado>\n", (
            '  <wiggle_data id="w">\n'
            "    <name>track</name>\n"
            "    <data>Too large, see: track.cleaned.wig\n"
            "    </data>\n"
            "  </wiggle_data>\n"
            "</chado>\n"
        ))
        assert (out_dir / "track.cleaned.wig").read_text() == "1 2\n3 4\n"
        assert stats.wiggles_extracted == 1
        assert "Done!" in capsys.readouterr().out

    def test_existing_destination_untouched(self, tmp_path, capsys):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_text(WIGGLE)
        dest.write_text("precious\n")

        extractor = MetadataExtractor(src, dest)
        assert not extractor.ready
        assert "already exists" in capsys.readouterr().out
        with pytest.raises(DestinationExistsError):
            extractor.extract()
        assert dest.read_text() == "precious\n"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["in.chadoxml", "out.chadoxml"]

    def test_non_utf8_bytes_pass_through(self, tmp_path):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_bytes(
            b"<desc>caf\xe9</desc>\n"
            b'<wiggle_data id="w">\n<name>latin</name>\n<data>\xb5 1\n2\n</data>\n'
        )

        MetadataExtractor(src, dest).extract()
        assert dest.read_bytes() == (
            b"<desc>caf\xe9</desc>\n"
            b'<wiggle_data id="w">\n<name>latin</name>\n'
            b"<data>Too large, see: latin.cleaned.wig\n</data>\n"
        )
        assert (tmp_path / "latin.cleaned.wig").read_bytes() == b"\xb5 1\n2\n"

    def test_collision_reported_to_command_object(self, tmp_path):
        src = tmp_path / "in.chadoxml"
        dest = tmp_path / "out.chadoxml"
        src.write_text(WIGGLE)
        (tmp_path / "track.cleaned.wig").write_text("old\n")
        cmd = make_command_object()

        stats = MetadataExtractor(src, dest, command_object=cmd).extract()

        assert "already exists, skipping!" in cmd.stderr
        assert stats.sidecar_collisions == 1
        assert (tmp_path / "track.cleaned.wig").read_text() == "old\n"

    def test_strict_mode_flags_unterminated(self, tmp_path):
        src = tmp_path / "in.chadoxml"
        src.write_text('<wiggle_data id="w">\n<name>t</name>\n<data>1\n')
        with pytest.raises(UnterminatedElementError):
            MetadataExtractor(src, tmp_path / "out.chadoxml", config=Config(strict=True)).extract()
        assert (tmp_path / "t.cleaned.wig").read_text() == "1\n"
