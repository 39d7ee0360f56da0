"""
Settings tests - LINEVIEW_ environment overrides
"""

from lineview.config import AppSettings
from lineview.lib.interpreter import LineView
from lineview.lib.parser import Parser
from lineview.models.directives import DirectiveKind


class TestAppSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LINEVIEW_DIRECTIVE_MARKER", raising=False)
        settings = AppSettings(_env_file=None)

        assert settings.directive_marker == "#-"
        assert settings.comment_marker == "#"
        assert settings.line_nr_env == "LINE_VIEW_LINE_NR"
        assert settings.output_file == "lines.txt"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LINEVIEW_WATCH_INTERVAL", "1.5")
        monkeypatch.setenv("LINEVIEW_DIRECTIVE_MARKER", "%%")
        settings = AppSettings(_env_file=None)

        assert settings.watch_interval == 1.5
        assert settings.directive_marker == "%%"

    def test_parser_uses_singleton(self, monkeypatch):
        """Parser markers default to the shared settings instance"""
        from lineview.config import appsettings

        monkeypatch.setattr(appsettings, "directive_marker", "@@")
        assert Parser().line_parse("@@pre echo").kind is DirectiveKind.PREFIX

    def test_encoding_errors_replaced(self, tmp_path):
        path = tmp_path / "menu.txt"
        path.write_bytes(b"caf\xe9\n")
        assert LineView.read(path)[0].text == "caf�"
