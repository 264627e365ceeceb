"""Tests for the CLI main module."""

import json
from unittest.mock import patch

import pytest
from bs4 import BeautifulSoup

from xml_highlight_diff import __version__
from xml_highlight_diff.cli.main import (
    create_argument_parser,
    load_config,
    main,
    read_xml_file,
)


@pytest.fixture
def xml_files(tmp_path):
    """Write a pair of slightly different XML files."""
    left = tmp_path / "left.xml"
    right = tmp_path / "right.xml"
    left.write_text('<root attr="1"><x/><extra k="v"/></root>', encoding="utf-8")
    right.write_text('<root attr="2"><x/></root>', encoding="utf-8")
    return left, right


class TestArgumentParser:
    """Test argument parsing."""

    def test_compare_defaults(self):
        """Test default compare options."""
        args = create_argument_parser().parse_args(["compare", "a.xml", "b.xml"])

        assert args.command == "compare"
        assert args.format == "html"
        assert args.output is None
        assert args.highlight_unmatched_elements is False
        assert args.fallback_on_parse_error is False

    def test_flags_become_config_overrides(self):
        """Test that command-line flags end up in the configuration."""
        args = create_argument_parser().parse_args([
            "compare", "a.xml", "b.xml",
            "--highlight-unmatched-elements", "--fallback-on-parse-error",
        ])

        config = load_config(args)

        assert config.render.highlight_unmatched_elements is True
        assert config.fallback_on_parse_error is True

    def test_version(self, capsys):
        """Test the version flag."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestFormatCommand:
    """Test the format command."""

    def test_format_to_stdout(self, tmp_path, capsys):
        """Test formatting a file to stdout."""
        path = tmp_path / "doc.xml"
        path.write_text("<a><b/></a>", encoding="utf-8")

        assert main(["format", str(path)]) == 0

        out = capsys.readouterr().out
        assert out.strip() == "&lt;a&gt;<br/>&nbsp;&nbsp;&nbsp;&nbsp;&lt;b /&gt;<br/>&lt;/a&gt;"

    def test_format_malformed_file(self, tmp_path, capsys):
        """Test that a malformed file is echoed unchanged."""
        path = tmp_path / "bad.xml"
        path.write_text("<a><b></a>", encoding="utf-8")

        assert main(["format", str(path)]) == 0
        assert capsys.readouterr().out.strip() == "<a><b></a>"

    def test_format_to_file(self, tmp_path, capsys):
        """Test writing formatted output to a file."""
        path = tmp_path / "doc.xml"
        path.write_text("<a/>", encoding="utf-8")
        output = tmp_path / "out" / "doc.html"

        assert main(["format", str(path), "-o", str(output)]) == 0

        assert output.read_text(encoding="utf-8") == "&lt;a /&gt;"
        assert "Output written to" in capsys.readouterr().err


class TestInputEncoding:
    """Test decoding of input files."""

    def test_declared_encoding(self, tmp_path, capsys):
        """Test a Latin-1 file that declares its encoding."""
        path = tmp_path / "latin1.xml"
        path.write_bytes(b'<?xml version="1.0" encoding="ISO-8859-1"?><a v="caf\xe9"/>')

        assert main(["format", str(path)]) == 0
        assert "caf\xe9" in capsys.readouterr().out

    def test_utf16_with_byte_order_mark(self, tmp_path):
        """Test a UTF-16 file recognized by its byte order mark."""
        path = tmp_path / "utf16.xml"
        path.write_bytes('<a v="ü"/>'.encode("utf-16"))

        assert read_xml_file(path) == '<a v="ü"/>'

    def test_undecodable_file(self, tmp_path, capsys):
        """Test that undecodable input fails with a message."""
        path = tmp_path / "bad.xml"
        path.write_bytes(b'<a v="caf\xe9"/>')

        assert main(["format", str(path)]) == 1
        assert "Cannot read input" in capsys.readouterr().err

    def test_unknown_declared_encoding(self, tmp_path, capsys):
        """Test a declaration naming an encoding Python does not know."""
        path = tmp_path / "unknown.xml"
        path.write_bytes(b'<?xml version="1.0" encoding="no-such-codec"?><a/>')

        assert main(["compare", str(path), str(path)]) == 1
        assert "Unknown encoding 'no-such-codec'" in capsys.readouterr().err


class TestCompareCommand:
    """Test the compare command."""

    def test_compare_html(self, xml_files, capsys):
        """Test the side-by-side HTML page."""
        left, right = xml_files

        assert main(["compare", str(left), str(right)]) == 0

        soup = BeautifulSoup(capsys.readouterr().out, "html.parser")
        cells = soup.find_all("td")
        assert len(cells) == 2
        assert [s.get_text() for s in cells[0].find_all("span")] == ["1", "v"]
        assert [s.get_text() for s in cells[1].find_all("span")] == ["2"]
        assert [th.get_text() for th in soup.find_all("th")] == [str(left), str(right)]

    def test_compare_json(self, xml_files, capsys):
        """Test JSON output with statistics."""
        left, right = xml_files

        assert main(["compare", str(left), str(right), "--format", "json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["statistics"]["has_differences"] is True
        assert data["statistics"]["unmatched_elements_left"] == 1
        assert data["diagnostics"] == []
        assert "<span" in data["left"]

    def test_compare_to_file(self, xml_files, tmp_path):
        """Test writing the HTML page to a file."""
        left, right = xml_files
        output = tmp_path / "diff.html"

        assert main(["compare", str(left), str(right), "-o", str(output)]) == 0

        assert output.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_compare_malformed(self, xml_files, tmp_path, capsys):
        """Test that a malformed side fails the command."""
        left, _ = xml_files
        bad = tmp_path / "bad.xml"
        bad.write_text("<a><b></a>", encoding="utf-8")

        assert main(["compare", str(left), str(bad)]) == 1

        err = capsys.readouterr().err
        assert "bad.xml is not well-formed XML" in err

    def test_compare_malformed_with_fallback(self, xml_files, tmp_path, capsys):
        """Test that fallback reports a warning and still succeeds."""
        left, _ = xml_files
        bad = tmp_path / "bad.xml"
        bad.write_text("<a><b></a>", encoding="utf-8")

        code = main([
            "compare", str(left), str(bad), "--format", "json", "--fallback-on-parse-error"
        ])

        captured = capsys.readouterr()
        assert code == 0
        assert "Warning: Input is not well-formed XML" in captured.err
        assert json.loads(captured.out)["right"] == "<a><b></a>"

    def test_compare_with_config_file(self, xml_files, tmp_path, capsys):
        """Test loading options from a configuration file."""
        left, right = xml_files
        config_path = tmp_path / "config.json"
        config_path.write_text(
            json.dumps({"render": {"highlight_background": "yellow"}}), encoding="utf-8"
        )

        code = main([
            "compare", str(left), str(right), "--format", "json", "-c", str(config_path)
        ])

        assert code == 0
        assert "background-color: yellow" in json.loads(capsys.readouterr().out)["left"]


class TestErrorHandling:
    """Test exit codes for failures."""

    def test_no_command(self, capsys):
        """Test that running without a command prints help."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        """Test a missing input file."""
        missing = tmp_path / "missing.xml"

        assert main(["format", str(missing)]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_config_file(self, xml_files, tmp_path, capsys):
        """Test an invalid configuration file."""
        left, right = xml_files
        config_path = tmp_path / "config.json"
        config_path.write_text('{"unknown": 1}', encoding="utf-8")

        assert main(["compare", str(left), str(right), "-c", str(config_path)]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_keyboard_interrupt(self, tmp_path):
        """Test the exit code on interruption."""
        path = tmp_path / "doc.xml"
        path.write_text("<a/>", encoding="utf-8")

        with patch("xml_highlight_diff.cli.main.cmd_format", side_effect=KeyboardInterrupt):
            assert main(["format", str(path)]) == 130
