"""
Tests for Source Readers

Covers:
    - Key/value extraction rules shared by all sources
    - File-backed reads
    - Command execution and timeouts
    - key=value parsing
"""

import io
import sys
import pytest

from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from machineprobe.readers import (
    execute,
    find,
    find_in_text,
    read_keyed,
    read_text,
    split_as_dict,
)


class TestFindWithoutKeys:
    """First-line behaviour when no keys are supplied."""

    def test_first_line_trimmed(self):
        """Test the first line is returned trimmed."""
        assert find(["  45500  \n", "second"]) == ("45500", True)

    def test_empty_keys_same_as_none(self):
        """Test an empty key list behaves like no keys."""
        assert find(["value\n"], []) == ("value", True)

    def test_blank_first_line_still_wins(self):
        """Test a blank first line is a valid (empty) value."""
        assert find(["\n", "later"]) == ("", True)

    def test_empty_input(self):
        """Test empty input is not found."""
        assert find([]) == ("", False)

    def test_skips_none_lines(self):
        """Test None entries are skipped."""
        assert find([None, "x"]) == ("x", True)


class TestFindWithKeys:
    """Keyed matching rules."""

    def test_simple_match(self):
        """Test value after the colon is returned trimmed."""
        assert find(["model name\t: Example CPU\n"], ["model name"]) == ("Example CPU", True)

    def test_first_match_wins(self):
        """Test the first matching line wins."""
        lines = ["Serial : AAA", "Serial : BBB"]
        assert find(lines, ["Serial"]) == ("AAA", True)

    def test_any_candidate_matches_in_line_order(self):
        """Test candidate order does not matter, line order does."""
        lines = ["serial: lower", "Serial: upper"]
        assert find(lines, ["Serial", "serial"]) == ("lower", True)

    def test_case_sensitive(self):
        """Test key comparison is case-sensitive."""
        assert find(["SERIAL: x"], ["Serial"]) == ("", False)

    def test_splits_on_first_colon(self):
        """Test only the first colon separates key from value."""
        assert find(["UUID: 01:02:03"], ["UUID"]) == ("01:02:03", True)

    def test_colon_at_start_skipped(self):
        """Test a line starting with a colon never matches."""
        assert find([": value", "ID: 1"], ["ID"]) == ("1", True)

    def test_lines_without_colon_skipped(self):
        """Test lines without a colon are not malformed, just skipped."""
        assert find(["no colon here", "ID: 7"], ["ID"]) == ("7", True)

    def test_no_match(self):
        """Test no match yields not found."""
        assert find(["a: 1", "b: 2"], ["c"]) == ("", False)

    def test_exact_key_only(self):
        """Test a key is not matched as a prefix."""
        assert find(["Serial Number: 123"], ["Serial"]) == ("", False)

    def test_indented_key(self):
        """Test surrounding whitespace of the key is ignored."""
        assert find(["\tID: BA 06 02 00"], ["ID"]) == ("BA 06 02 00", True)

    def test_text_reader(self):
        """Test a TextIO object works as input."""
        assert find(io.StringIO("x: 1\ny: 2\n"), ["y"]) == ("2", True)


class TestReadKeyed:
    """File-backed reads."""

    def test_missing_path(self, tmp_path):
        """Test a missing file is not found and does not raise."""
        assert read_keyed(tmp_path / "missing", ["MemTotal"]) == ("", False)

    def test_keyed_file(self, fake_root):
        """Test a keyed value is read from a file."""
        assert read_keyed(fake_root / "meminfo", ["MemTotal"]) == ("16384000 kB", True)

    def test_whole_file_value(self, fake_root):
        """Test a scalar file is read without keys."""
        assert read_keyed(fake_root / "temp") == ("45500", True)

    def test_directory_is_not_found(self, tmp_path):
        """Test an unreadable path is reported as not found."""
        assert read_keyed(tmp_path, ["x"]) == ("", False)


class TestFindInText:
    """String-backed reads."""

    def test_dmidecode_output(self):
        """Test scanning a command dump."""
        text = "Handle 0x0001\nSystem Information\n\tUUID: 4C4C4544-0042\n"
        assert find_in_text(text, ["UUID"]) == ("4C4C4544-0042", True)

    def test_empty_text(self):
        """Test empty and None text are not found."""
        assert find_in_text("", ["UUID"]) == ("", False)
        assert find_in_text(None) == ("", False)


class TestReadText:
    """Whole-file reads."""

    def test_missing(self, tmp_path):
        assert read_text(tmp_path / "nope") == ""

    def test_content(self, tmp_path):
        path = tmp_path / "redhat-release"
        path.write_text("Rocky Linux release 9.2 (Blue Onyx)\n")
        assert read_text(path) == "Rocky Linux release 9.2 (Blue Onyx)\n"


class TestSplitAsDict:
    """key=value parsing."""

    def test_os_release(self):
        """Test quotes and whitespace are trimmed."""
        data = split_as_dict('NAME="Debian GNU/Linux"\nPRETTY_NAME="Debian GNU/Linux 12 (bookworm)"\n')
        assert data["PRETTY_NAME"] == "Debian GNU/Linux 12 (bookworm)"
        assert data["NAME"] == "Debian GNU/Linux"

    def test_single_quotes(self):
        assert split_as_dict("A='b c'")["A"] == "b c"

    def test_value_containing_separator(self):
        """Test only the first separator splits the pair."""
        assert split_as_dict("URL=http://x/?a=b")["URL"] == "http://x/?a=b"

    def test_lines_without_separator_ignored(self):
        assert split_as_dict("# comment\n\nA=1") == {"A": "1"}

    def test_keep_quotes(self):
        assert split_as_dict('A="1"', trim_quotes=False)["A"] == '"1"'

    def test_empty(self):
        assert split_as_dict("") == {}
        assert split_as_dict(None) == {}


class TestExecute:
    """External command execution."""

    def test_captures_stdout(self):
        """Test stdout is returned as text."""
        output = execute(sys.executable, ["-c", "print('ID: 42')"])
        assert find_in_text(output, ["ID"]) == ("42", True)

    def test_timeout_returns_empty(self):
        """Test a command exceeding the timeout yields an empty result."""
        output = execute(sys.executable, ["-c", "import time; time.sleep(10)"], timeout=0.5)
        assert output == ""

    def test_nonzero_exit_returns_empty(self):
        output = execute(sys.executable, ["-c", "import sys; print('x'); sys.exit(3)"])
        assert output == ""

    def test_missing_command_returns_empty(self):
        """Test a missing executable does not raise."""
        assert execute("machineprobe-no-such-command") == ""

    def test_undecodable_output_replaced(self):
        """Test invalid UTF-8 in command output does not raise."""
        script = "import sys; sys.stdout.buffer.write(b'\\tManufacturer: \\xff\\xfe Bad\\n\\tUUID: abc\\n')"
        output = execute(sys.executable, ["-c", script])
        assert "\ufffd" in output
        assert find_in_text(output, ["UUID"]) == ("abc", True)
