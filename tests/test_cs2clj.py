"""Tests for the cs2clj command-line tool."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'tools'))

import pytest
from cs2clj import convert_file, convert_directory, main

ONE = "namespace N { int F() { return 1; } }"
ONE_CLJ = "(ns N)\n\n(defn F [] 1)\n\n"
BRANCH = "namespace N { int F(int x) { if (x == 1) { return 1; } else { return 2; } } }"


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


class TestConvertFile:
    def test_convert(self, tmp_path):
        src = write(tmp_path / "one.cs", ONE)
        assert convert_file(str(src)) == ONE_CLJ


class TestConvertDirectory:
    def test_recursive(self, tmp_path, capsys):
        write(tmp_path / "src" / "one.cs", ONE)
        write(tmp_path / "src" / "nested" / "two.cs", ONE)
        out = tmp_path / "out" / "deep"

        errors = convert_directory(str(tmp_path / "src"), str(out))

        assert errors == []
        assert (out / "one.clj").read_text(encoding='utf-8') == ONE_CLJ
        assert (out / "nested" / "two.clj").read_text(encoding='utf-8') == ONE_CLJ
        assert "Converted 2 files, 0 errors." in capsys.readouterr().err

    def test_not_recursive(self, tmp_path):
        write(tmp_path / "src" / "one.cs", ONE)
        write(tmp_path / "src" / "nested" / "two.cs", ONE)
        out = tmp_path / "out"

        convert_directory(str(tmp_path / "src"), str(out), recursive=False)

        assert (out / "one.clj").exists()
        assert not (out / "nested").exists()

    def test_errors_collected(self, tmp_path, capsys):
        write(tmp_path / "src" / "bad.cs", "int F() { return 1; }")
        write(tmp_path / "src" / "good.cs", ONE)
        out = tmp_path / "out"

        errors = convert_directory(str(tmp_path / "src"), str(out))

        assert [path for path, _ in errors] == ["bad.cs"]
        assert "namespace" in errors[0][1]
        assert (out / "good.clj").exists()
        assert not (out / "bad.clj").exists()
        assert "ERROR bad.cs" in capsys.readouterr().err


class TestMain:
    def test_stdout(self, tmp_path, capsys):
        src = write(tmp_path / "one.cs", ONE)
        main([str(src)])
        assert capsys.readouterr().out == ONE_CLJ

    def test_output_file_creates_directories(self, tmp_path, capsys):
        src = write(tmp_path / "one.cs", ONE)
        dst = tmp_path / "a" / "b" / "one.clj"
        main([str(src), "-o", str(dst)])
        assert dst.read_text(encoding='utf-8') == ONE_CLJ
        assert "Written to" in capsys.readouterr().err

    def test_indent_options(self, tmp_path, capsys):
        src = write(tmp_path / "branch.cs", BRANCH)
        main([str(src), "--indent-char", "tab", "--indent-width", "1"])
        assert "\n\t(if (= x 1)\n\t\t1\n" in capsys.readouterr().out

    def test_bad_indent_width(self, tmp_path):
        src = write(tmp_path / "one.cs", ONE)
        with pytest.raises(SystemExit) as info:
            main([str(src), "--indent-width", "-1"])
        assert info.value.code == 2

    def test_translation_error(self, tmp_path, capsys):
        src = write(tmp_path / "bad.cs", "namespace N { int F() { return 1; }")
        with pytest.raises(SystemExit) as info:
            main([str(src)])
        assert info.value.code == 1
        assert capsys.readouterr().err.startswith("Error: parse: ")

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as info:
            main([str(tmp_path / "missing.cs")])
        assert info.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_directory(self, tmp_path):
        write(tmp_path / "src" / "one.cs", ONE)
        main(["--dir", str(tmp_path / "src"), "-o", str(tmp_path / "out")])
        assert (tmp_path / "out" / "one.clj").read_text(encoding='utf-8') == ONE_CLJ

    def test_directory_with_errors_exits(self, tmp_path):
        write(tmp_path / "src" / "bad.cs", "namespace N { int F() { return a b; } }")
        with pytest.raises(SystemExit) as info:
            main(["--dir", str(tmp_path / "src"), "-o", str(tmp_path / "out")])
        assert info.value.code == 1

    def test_directory_needs_output(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            main(["--dir", str(tmp_path)])
        assert info.value.code == 1

    def test_no_arguments(self, capsys):
        with pytest.raises(SystemExit) as info:
            main([])
        assert info.value.code == 1
        assert "usage" in capsys.readouterr().out
