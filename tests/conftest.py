"""
Shared fixtures: write small menu documents into a temporary directory
"""

import io

import pytest

from lineview.lib.source import FileProvider


@pytest.fixture
def write(tmp_path):
    """
    Write a document and return its path

    Usage:
        root = write("menu.txt", "a\\n#-import sub/b.txt\\n")
    """
    def writer(name: str, text: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return writer


class FailingStream(io.StringIO):
    """Stream whose every read fails as if the disk went away"""

    def readline(self, *args):
        raise OSError("disk gone")


class FailingProvider(FileProvider):
    """Opens files normally, except `bad.txt` which fails on first read"""

    def provide(self, path):
        if path.name == "bad.txt":
            return FailingStream()
        return super().provide(path)


@pytest.fixture
def failing_provider():
    return FailingProvider()
