"""
Interpreter tests - import, source and lines

Covers context inheritance (command cell, root-ness), the two dedup
universes, cycle handling, path resolution and include failures.
"""

from pathlib import Path

from lineview.lib.interpreter import LineView
from lineview.lib.source import path_expand
from lineview.models.line import CommandTemplate, LineKind


def texts(view):
    return [line.text for line in view]


def rows_of(view):
    return [(line.kind, line.text) for line in view]


class TestImport:
    """import: fresh context, run-wide dedup"""

    def test_import_inlines_lines(self, write):
        root = write("menu.txt", "a\n#-import b.txt\nc\n")
        write("b.txt", "b\n")
        assert texts(LineView.read(root)) == ["a", "b", "c"]

    def test_import_relative_to_including_file(self, write):
        root = write("menu.txt", "#-import sub/b.txt\n")
        write("sub/b.txt", "#-import c.txt\n")
        write("sub/c.txt", "deep\n")
        assert texts(LineView.read(root)) == ["deep"]

    def test_import_gets_fresh_command(self, write):
        root = write("menu.txt", "#-pre echo\n#-import b.txt\nafter\n")
        write("b.txt", "inner\n#-pre ls\n")
        view = LineView.read(root)

        assert view[0].text == "inner"
        assert view[0].has_command is False
        assert view[1].command == CommandTemplate(prefix=("echo",))

    def test_import_cycle_terminates(self, write):
        """A imports B imports A: the second A is skipped"""
        root = write("a.txt", "a1\n#-import b.txt\na2\n")
        write("b.txt", "b1\n#-import a.txt\nb2\n")
        assert texts(LineView.read(root)) == ["a1", "b1", "b2", "a2"]

    def test_diamond_imported_once(self, write):
        root = write("menu.txt", "#-import b.txt\n#-import c.txt\n")
        write("b.txt", "b\n#-import d.txt\n")
        write("c.txt", "c\n#-import d.txt\n")
        write("d.txt", "d\n")
        assert texts(LineView.read(root)) == ["b", "d", "c"]

    def test_title_in_import_ignored(self, write):
        root = write("menu.txt", "#-title Root\n#-import b.txt\n")
        write("b.txt", "#-title Imported\n")
        assert LineView.read(root).title == "Root"

    def test_subtitle_in_import_emitted(self, write):
        root = write("menu.txt", "#-import b.txt\n")
        write("b.txt", "#-subtitle Section\n")
        view = LineView.read(root)
        assert view[0].kind is LineKind.TITLE
        assert view[0].text == "Section"


class TestSource:
    """source: shares command and root-ness, per-lineage dedup"""

    def test_source_shares_command(self, write):
        """pre/suf inside a sourced file affect the parent too"""
        root = write("menu.txt", "#-pre echo\n#-source s.txt\nafter\n")
        write("s.txt", "#-suf x\ninside\n")
        view = LineView.read(root)

        assert view[0].command == CommandTemplate(prefix=("echo",), suffix=("x",))
        assert view[1].command == CommandTemplate(prefix=("echo",), suffix=("x",))

    def test_clean_in_source_does_not_detach_parent(self, write):
        root = write("menu.txt", "#-pre echo\n#-source s.txt\nafter\n")
        write("s.txt", "#-clean\n#-pre ls\ninside\n")
        view = LineView.read(root)

        assert view[0].command.prefix == ("ls",)
        assert view[1].command.prefix == ("echo",)

    def test_title_in_source_applies(self, write):
        root = write("menu.txt", "#-title Root\n#-source s.txt\n")
        write("s.txt", "#-title Sourced\n")
        assert LineView.read(root).title == "Sourced"

    def test_source_twice_in_lineage(self, write):
        root = write("menu.txt", "#-source s.txt\n#-source s.txt\n")
        write("s.txt", "once\n")
        assert texts(LineView.read(root)) == ["once"]

    def test_source_in_sibling_lineages(self, write):
        """Each import starts its own lineage, so both may source s"""
        root = write("menu.txt", "#-import a.txt\n#-import b.txt\n")
        write("a.txt", "#-source s.txt\n")
        write("b.txt", "#-source s.txt\n")
        write("s.txt", "shared\n")
        assert texts(LineView.read(root)) == ["shared", "shared"]

    def test_source_of_self_skipped(self, write):
        root = write("menu.txt", "x\n#-source menu.txt\n")
        assert texts(LineView.read(root)) == ["x"]

    def test_source_cycle_terminates(self, write):
        root = write("a.txt", "#-source b.txt\na\n")
        write("b.txt", "#-source a.txt\nb\n")
        assert texts(LineView.read(root)) == ["b", "a"]

    def test_source_inside_import_is_not_root(self, write):
        root = write("menu.txt", "#-title Root\n#-import i.txt\n")
        write("i.txt", "#-source s.txt\n")
        write("s.txt", "#-title Nope\n")
        assert LineView.read(root).title == "Root"


class TestLines:
    """lines: literal content only, shared command, no dedup"""

    def test_lines_only_literal_content(self, write):
        root = write("menu.txt", "#-title Root\n#-pre echo\n#-lines l.txt\n")
        write("l.txt", "#-title Other\n#-pre rm\none\n\n#-warning hidden\n#-subtitle hidden\ntwo\n")
        view = LineView.read(root)

        assert view.title == "Root"
        assert texts(view) == ["one", "", "two"]
        assert view[0].command == CommandTemplate(prefix=("echo",))
        assert view[2].command == CommandTemplate(prefix=("echo",))

    def test_lines_repeatable(self, write):
        root = write("menu.txt", "#-lines l.txt\n#-lines l.txt\n")
        write("l.txt", "item\n")
        assert texts(LineView.read(root)) == ["item", "item"]

    def test_lines_nested_includes_inert(self, write):
        root = write("menu.txt", "#-lines l.txt\n")
        write("l.txt", "#-import other.txt\nitem\n")
        write("other.txt", "should not appear\n")
        assert texts(LineView.read(root)) == ["item"]

    def test_lines_end_does_not_close_scope(self, write):
        """An `end` inside a lines file is inert"""
        root = write("menu.txt", "#-lines l.txt\n")
        write("l.txt", "#-end\nitem\n")
        view = LineView.read(root)
        assert texts(view) == ["item"]
        assert not any(line.is_warning for line in view)


class TestResolution:
    """Path handling and include failures"""

    def test_missing_import_warns(self, write):
        root = write("menu.txt", "a\n#-import missing.txt\nb\n")
        view = LineView.read(root)

        assert texts(view)[0] == "a"
        assert view[1].is_warning
        assert view[1].text.startswith("could not import missing.txt")
        assert "missing.txt" in view[1].text
        assert view[1].position == 2
        assert texts(view)[2] == "b"

    def test_missing_source_and_lines_warn(self, write):
        root = write("menu.txt", "#-source gone.txt\n#-lines gone.txt\n")
        view = LineView.read(root)
        assert [line.text.split(":")[0] for line in view] == [
            "could not source gone.txt",
            "could not lines gone.txt",
        ]

    def test_failed_import_warning_can_be_ignored(self, write):
        """The failure is replayed through the active scopes"""
        root = write("menu.txt", "#-ignore-warnings\n#-import missing.txt\n#-end\nok\n")
        assert texts(LineView.read(root)) == ["ok"]

    def test_directory_target_warns(self, write, tmp_path):
        (tmp_path / "folder").mkdir()
        root = write("menu.txt", "#-import folder\n")
        view = LineView.read(root)
        assert view[0].is_warning
        assert view[0].text.startswith("could not import folder")

    def test_absolute_path(self, write, tmp_path):
        target = write("elsewhere/abs.txt", "abs\n")
        root = write("menu.txt", f"#-import {target}\n")
        assert texts(LineView.read(root)) == ["abs"]

    def test_home_expansion(self, write, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        write("home/menus/h.txt", "from home\n")
        root = write("menu.txt", "#-import ~/menus/h.txt\n")
        assert texts(LineView.read(root)) == ["from home"]

    def test_path_expand_escape(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert path_expand("~/x.txt") == tmp_path / "x.txt"
        assert path_expand("~/~/x.txt") == Path("~/x.txt")
        assert path_expand("plain.txt") == Path("plain.txt")

    def test_all_sources(self, write):
        root = write("menu.txt", "#-import i.txt\n#-source s.txt\n#-lines l.txt\n#-import missing.txt\n")
        i = write("i.txt", "")
        s = write("s.txt", "")
        l = write("l.txt", "")
        view = LineView.read(root)

        assert view.all_sources() == (root.resolve(), i.resolve(), s.resolve(), l.resolve())

    def test_close_in_import_returns_to_parent(self, write):
        root = write("menu.txt", "#-import b.txt\nafter\n")
        write("b.txt", "b1\n#-close\nb2\n")
        assert texts(LineView.read(root)) == ["b1", "after"]


class TestReadErrors:
    """I/O errors after a nested file was opened"""

    def test_nested_read_error_becomes_warning(self, write, failing_provider):
        root = write("menu.txt", "a\n#-import bad.txt\nb\n")
        bad = write("bad.txt", "never read\n")
        view = LineView.read(root, provider=failing_provider)

        assert rows_of(view) == [
            (LineKind.NORMAL, "a"),
            (LineKind.WARNING, f"could not read {bad.resolve()}, disk gone"),
            (LineKind.NORMAL, "b"),
        ]
        assert view[1].source == bad.resolve()

    def test_nested_read_error_in_source(self, write, failing_provider):
        root = write("menu.txt", "#-source bad.txt\nafter\n")
        write("bad.txt", "")
        view = LineView.read(root, provider=failing_provider)

        assert view[0].is_warning
        assert view[0].text.startswith("could not read")
        assert texts(view)[1:] == ["after"]
