"""
Watcher and renderer tests
"""

import os

from lineview.lib.interpreter import LineView
from lineview.lib.render import line_render, view_render
from lineview.lib.watcher import SourceWatcher


def touch_later(path):
    """Push a file's mtime forward so the change is visible to mtime polling"""
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))


class TestSourceWatcher:
    """mtime polling over a fixed file set"""

    def test_unchanged(self, write):
        watcher = SourceWatcher([write("a.txt", "a\n")], interval=0)
        assert watcher.changed() is False

    def test_modified(self, write):
        path = write("a.txt", "a\n")
        watcher = SourceWatcher([path], interval=0)
        touch_later(path)
        assert watcher.changed() is True

    def test_deleted(self, write):
        path = write("a.txt", "a\n")
        watcher = SourceWatcher([path], interval=0)
        path.unlink()
        assert watcher.changed() is True

    def test_created(self, tmp_path):
        path = tmp_path / "later.txt"
        watcher = SourceWatcher([path], interval=0)
        path.write_text("now\n", encoding="utf-8")
        assert watcher.changed() is True

    def test_rearm_resets(self, write):
        path = write("a.txt", "a\n")
        watcher = SourceWatcher([path], interval=0)
        touch_later(path)
        watcher.rearm([path])
        assert watcher.changed() is False

    def test_rearm_replaces_file_set(self, write):
        a = write("a.txt", "a\n")
        b = write("b.txt", "b\n")
        watcher = SourceWatcher([a], interval=0)
        watcher.rearm([b])
        touch_later(a)

        assert list(watcher.stamps) == [b]
        assert watcher.changed() is False

    def test_watches_view_sources(self, write):
        root = write("menu.txt", "#-import b.txt\n")
        b = write("b.txt", "b\n")
        watcher = SourceWatcher(LineView.read(root).all_sources(), interval=0)
        touch_later(b)
        assert watcher.changed() is True

    def test_wait_returns_on_change(self, write):
        path = write("a.txt", "a\n")
        watcher = SourceWatcher([path], interval=0)
        touch_later(path)
        watcher.wait()


class TestRender:
    """Plain-text listing"""

    def test_marks(self, write):
        view = LineView.read(write("menu.txt", "#-title Menu\n#-subtitle Tools\n#-warning odd\nplain\n"))
        assert [line_render(line) for line in view] == ["-- Tools", "[warning] odd", "plain"]

    def test_plain_render(self, write):
        view = LineView.read(write("menu.txt", "#-title Menu\na\n\nb\n"))
        assert view_render(view) == "Menu\na\n\nb\n"

    def test_numbered_render(self, write):
        view = LineView.read(write("menu.txt", "#-title Menu\n#-pre echo\na\n#-clean\nb\n"))
        assert view_render(view, numbered=True) == "Menu\n0* a\n1  b\n"

    def test_numbered_width(self, write):
        text = "#-title Menu\n" + "".join(f"l{i}\n" for i in range(11))
        rendered = view_render(LineView.read(write("menu.txt", text)), numbered=True).splitlines()
        assert rendered[1] == " 0  l0"
        assert rendered[11] == "10  l10"

    def test_numbered_empty_line(self, write):
        view = LineView.read(write("menu.txt", "#-title Menu\n\n"))
        assert view_render(view, numbered=True) == "Menu\n0\n"

    def test_empty_view(self, write):
        view = LineView.read(write("menu.txt", "#-title Menu\n"))
        assert view_render(view, numbered=True) == "Menu\n"
