"""Tests for infrastructure.i18n.decoders module."""

import pytest

from infrastructure.i18n.decoders import decode
from infrastructure.i18n.errors import TranslationLoadError


class TestDecode:
    """Tests for decode()."""

    def test_yaml(self):
        """YAML documents decode to nested mappings."""
        assert decode("a.yml", "cart:\n  checkout: go\n".encode()) == {
            "cart": {"checkout": "go"}
        }

    def test_json(self):
        """JSON documents decode to nested mappings."""
        assert decode("a.json", b'{"hi": "Hi"}') == {"hi": "Hi"}

    @pytest.mark.parametrize("name", ["a.toml", "a.tml"])
    def test_toml(self, name):
        """TOML documents decode to nested mappings."""
        assert decode(name, b'[cart]\ncheckout = "go"\n') == {"cart": {"checkout": "go"}}

    def test_ini(self):
        """INI sections become nested mappings, DEFAULT keys top-level ones."""
        raw = b"[DEFAULT]\nhi = Hi\n\n[menu]\nHome = Home %s\n"
        assert decode("a.ini", raw) == {"hi": "Hi", "menu": {"Home": "Home %s"}}

    def test_unknown_extension_is_yaml(self):
        """Unknown extensions are decoded as YAML."""
        assert decode("a.txt", b"hi: Hi\n") == {"hi": "Hi"}

    def test_utf8_bom(self):
        """A UTF-8 byte order mark is ignored."""
        assert decode("a.json", "\ufeff{\"hi\": \"Γειά\"}".encode("utf-8")) == {"hi": "Γειά"}

    @pytest.mark.parametrize("name", ["a.yml", "a.json", "a.toml"])
    def test_empty_document(self, name):
        """Empty documents decode to an empty mapping."""
        assert decode(name, b"") == {}

    @pytest.mark.parametrize(
        "name,raw",
        [
            ("a.yml", b"hi: [unclosed"),
            ("a.json", b"{"),
            ("a.toml", b"= nope"),
            ("a.ini", b"no section header"),
            ("a.yml", b"\xff\xfe"),
        ],
    )
    def test_malformed_raises(self, name, raw):
        """Malformed content raises TranslationLoadError naming the file."""
        with pytest.raises(TranslationLoadError, match=name):
            decode(name, raw)

    def test_top_level_list_raises(self):
        """Top-level sequences are rejected."""
        with pytest.raises(TranslationLoadError, match="expected a mapping"):
            decode("a.yml", b"- a\n- b\n")
