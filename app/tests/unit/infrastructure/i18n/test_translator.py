"""Tests for infrastructure.i18n.translator module."""

# pylint: disable=protected-access

import threading
import time

import pytest

from infrastructure.i18n import (
    ResolutionConfig,
    TranslationLoadError,
    Translator,
    glob_loader,
    memory_loader,
)
from tests.factories.i18n import make_locale, make_request_context


class TestTranslatorFiles:
    """Tests for Translator over the sample translation files."""

    @pytest.mark.parametrize(
        "code,key,args,expected",
        [
            ("el", "hi", ({"Name": "kataras"},), "Γειά σου kataras"),
            ("en-US", "hello", ("kataras",), "Hello kataras"),
            ("el-GR", "int", (1,), "1"),
            ("en-US", "buy", (2,), "buy 2"),
            ("el-GR", "buy", (2,), "αγοράστε 2"),
            ("en", "buy", (2,), "buy 2"),
            ("en-US", "cart.checkout", ({"Param": "all"},), "checkout - all"),
            ("el-GR", "cart.checkout", ({"Param": "όλα"},), "ολοκλήρωση παραγγελίας - όλα"),
            ("en-US", "cart.checkout_all", (), "checkout - all"),
            ("el-GR", "cart.checkout_all", (), "ολοκλήρωση παραγγελίας - όλα"),
            ("el-GR", "typeof", ("x",), "τύπος str"),
            ("el-GR", "menu.home", (), "Αρχική"),
        ],
    )
    def test_translate(self, file_translator, code, key, args, expected):
        """translate() renders messages in the matched language."""
        assert file_translator.translate(code, key, *args) == expected

    def test_key_only_on_default_language(self, file_translator):
        """Keys missing in a language fall back to the default language."""
        assert file_translator.translate("el-GR", "KeyOnlyOnDefaultLang") == "value"

    def test_plural_template(self, file_translator):
        """Templates can branch on an integer argument."""
        assert file_translator.tr("en-US", "dogs", 1) == "one dog"
        assert file_translator.tr("en-US", "dogs", 4) == "4 dogs"

    def test_unknown_language_uses_default(self, file_translator):
        """Unmatched codes render in the default language."""
        assert file_translator.translate("fr-FR", "hello", "x") == "Hello x"
        assert file_translator.translate("", "hello", "x") == "Hello x"

    def test_missing_everywhere(self, file_translator):
        """A key missing in every language renders as an empty string."""
        assert file_translator.translate("el", "missing") == ""

    def test_languages(self, file_translator):
        """languages lists the registered codes, default first."""
        assert file_translator.languages == ["en-US", "el-GR"]


class TestTranslatorDefaults:
    """Tests for default language handling."""

    def test_open_mode_set_default(self, single_dir_glob):
        """Languages discovered from files can be made the default."""
        translator = Translator(glob_loader(single_dir_glob))
        assert translator.languages == ["el-GR", "en-US"]

        assert translator.set_default("en-US") is True

        assert translator.languages == ["en-US", "el-GR"]
        assert translator.translate("ch-ZN", "welcome") == "welcome"
        assert translator.translate("el", "welcome") == "καλωσόρισμα"
        assert translator.localizer.get_locale(0).index == 0
        assert translator.localizer.get_locale(1).language == "el-GR"

    def test_set_default_unregistered(self, memory_translator):
        """set_default() rejects unregistered languages."""
        assert memory_translator.set_default("fr-FR") is False
        assert memory_translator.languages == ["en-US", "el-GR"]

    def test_set_default_leaves_previous_registry(self, memory_translator):
        """set_default() publishes a new registry next to the swapped matcher."""
        previous = memory_translator.localizer

        assert memory_translator.set_default("el-GR") is True

        assert memory_translator.localizer is not previous
        assert previous.get_locale(0).language == "en-US"
        assert previous.get_locale(1).language == "el-GR"
        assert memory_translator.localizer.get_locale(0).language == "el-GR"
        assert memory_translator.translate("en", "hello", "x") == "Hello x"
        assert memory_translator.translate("el", "hello", "x") == "Γειά σου x"

    def test_set_default_unsupported_localizer(self):
        """Localizers without set_default keep their default."""

        class FixedLocalizer:
            def get_locale(self, index):
                return make_locale("en-US", 0) if index == 0 else None

        translator = Translator(lambda matcher: FixedLocalizer(), "en-US", "el-GR")
        assert translator.set_default("el-GR") is False
        assert translator.languages == ["en-US", "el-GR"]

    def test_custom_loader(self):
        """Any callable returning a Localizer can serve as loader."""

        class FixedLocalizer:
            def get_locale(self, index):
                return make_locale("en-US", 0) if index == 0 else None

        translator = Translator(lambda matcher: FixedLocalizer(), "en-US", "el-GR")
        assert translator.translate("el", "hello", "x") == "Hello x"


class TestTranslatorFallbackPolicy:
    """Tests for the fallback policy of missing messages."""

    def test_strict_disables_fallback(self, make_translator):
        """Strict mode does not fall back to the default language."""
        translator = make_translator(strict=True)
        assert translator.translate("el", "KeyOnlyOnDefaultLang") == ""
        assert translator.translate("en", "KeyOnlyOnDefaultLang") == "value"

    def test_default_message_hook(self, make_translator):
        """The default message hook replaces the default-language fallback."""
        calls = []

        def default_message(requested, matched, key, args):
            calls.append((requested, matched, key, args))
            return f"[{key}]"

        translator = make_translator(default_message=default_message)
        assert translator.translate("el", "KeyOnlyOnDefaultLang", 1) == "[KeyOnlyOnDefaultLang]"
        assert calls == [("el", "el-GR", "KeyOnlyOnDefaultLang", (1,))]
        assert translator.translate("el", "hello", "x") == "Γειά σου x"

    def test_nested_tr_follows_fallback(self):
        """tr() inside a template falls back to the default language too."""
        translator = Translator(
            memory_loader(
                {
                    "en-US": {"shared": "shared text"},
                    "el-GR": {"page": "σελίδα: {{ tr('shared') }}"},
                }
            ),
            "en-US",
            "el-GR",
        )
        assert translator.translate("el", "page") == "σελίδα: shared text"

    def test_nested_tr_strict(self):
        """tr() inside a template honors strict mode."""
        translator = Translator(
            memory_loader(
                {
                    "en-US": {"shared": "shared text"},
                    "el-GR": {"page": "σελίδα: {{ tr('shared') }}"},
                }
            ),
            "en-US",
            "el-GR",
            config=ResolutionConfig(strict=True),
        )
        assert translator.translate("el", "page") == "σελίδα: "


class TestTranslatorReload:
    """Tests for reloading translations."""

    def test_reload_picks_up_changes(self):
        """reload() publishes freshly loaded translations."""
        data = {"en-US": {"hello": "Hello %s"}}
        translator = Translator(memory_loader(data), "en-US")
        data["en-US"]["hello"] = "Hi %s"
        translator.reload()
        assert translator.translate("en", "hello", "x") == "Hi x"

    def test_failed_reload_keeps_previous(self):
        """A failed reload leaves the published translations in force."""
        data = {"en-US": {"hello": "Hello %s"}}
        translator = Translator(memory_loader(data), "en-US")
        data["en-US"]["hello"] = ["not", "a", "message"]

        with pytest.raises(TranslationLoadError):
            translator.reload()

        assert translator.translate("en", "hello", "x") == "Hello x"

    def test_initial_load_failure_raises(self, tmp_path):
        """Construction fails when the initial load fails."""
        with pytest.raises(TranslationLoadError):
            Translator(glob_loader(str(tmp_path / "*.yml")), "en-US")

    def test_reload_keeps_discovered_languages(self, single_dir_glob):
        """Open mode languages survive a reload in their current order."""
        translator = Translator(glob_loader(single_dir_glob))
        translator.set_default("en-US")
        translator.reload()
        assert translator.languages == ["en-US", "el-GR"]
        assert translator.translate("en", "welcome") == "welcome"


    def test_concurrent_reloads_do_not_overlap(self):
        """Reloads started from several threads run the loader one at a time."""
        load = memory_loader({"en-US": {"hello": "Hello %s"}})
        guard = threading.Lock()
        running = []
        overlaps = []

        def loader(matcher):
            with guard:
                running.append(matcher)
                if len(running) > 1:
                    overlaps.append(len(running))
            time.sleep(0.001)
            try:
                return load(matcher)
            finally:
                with guard:
                    running.pop()

        translator = Translator(loader, "en-US")
        threads = [threading.Thread(target=translator.reload) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlaps == []
        assert translator.translate("en", "hello", "x") == "Hello x"

    def test_lookups_during_reload_and_set_default(self):
        """Concurrent lookups always see a matcher with its own localizer."""
        data = {
            "en-US": {"hello": "Hello %s", "name": "English", "page": "{{ tr('name') }}!"},
            "el-GR": {"hello": "Γειά σου %s", "name": "Ελληνικά", "page": "{{ tr('name') }}!"},
        }
        extra = [("de-DE", "Hallo %s"), ("fr-FR", "Bonjour %s"), ("it-IT", "Ciao %s")]
        sources = dict(data)

        translator = Translator(lambda matcher: memory_loader(dict(sources))(matcher))
        expected = {
            "el": {"Γειά σου x"},
            "en": {"Hello x"},
            "de": {"Hello x", "Hallo x"},
        }
        unexpected = []
        done = threading.Event()

        def read():
            while not done.is_set():
                for code, allowed in expected.items():
                    text = translator.translate(code, "hello", "x")
                    if text not in allowed:
                        unexpected.append((code, text))
                page = translator.translate("el", "page")
                if page != "Ελληνικά!":
                    unexpected.append(("el", page))

        readers = [threading.Thread(target=read) for _ in range(4)]
        for reader in readers:
            reader.start()
        try:
            for round_number in range(30):
                code, hello = extra[round_number % len(extra)]
                sources[code] = {"hello": hello}
                translator.reload()
                translator.set_default("en-US" if round_number % 2 else "el-GR")
        finally:
            done.set()
            for reader in readers:
                reader.join()

        assert unexpected == []
        assert translator.languages[:2] == ["en-US", "el-GR"]
        assert set(translator.languages) == {"en-US", "el-GR", "de-DE", "fr-FR", "it-IT"}


class TestTranslatorRequests:
    """Tests for request-based lookups."""

    def test_get_message_from_header(self, memory_translator):
        """get_message() uses the detected language."""
        ctx = make_request_context(accept_language="el-GR,en;q=0.5")
        assert memory_translator.get_message(ctx, "hello", "x") == "Γειά σου x"

    def test_get_locale(self, make_translator):
        """get_locale() returns the detected Locale, default if none."""
        translator = make_translator(cookie="lang")
        ctx = make_request_context(cookies={"lang": "el"})
        assert translator.get_locale(ctx).language == "el-GR"
        assert translator.get_locale(make_request_context()).language == "en-US"

    def test_render_with_locale(self, memory_translator):
        """render() applies the fallback policy to a resolved Locale."""
        locale = memory_translator.localizer.get_locale(1)
        assert memory_translator.render(locale, "KeyOnlyOnDefaultLang") == "value"
        assert memory_translator.render(None, "hello", "x") == "Hello x"

    def test_try_match_string(self, memory_translator):
        """try_match_string() matches against the registered languages."""
        tag, index, ok = memory_translator.try_match_string("el")
        assert (str(tag), index, ok) == ("el-GR", 1, True)
        assert memory_translator.try_match_string("fr")[1:] == (-1, False)


class TestRouterRewrite:
    """Tests for Translator.router_rewrite()."""

    def test_strips_path_prefix(self, memory_translator):
        """A language prefix is stripped and recorded."""
        ctx = make_request_context(path="/el-GR/some-path")
        rewritten = memory_translator.router_rewrite(ctx)
        assert rewritten.path == "/some-path"
        assert rewritten.header("accept-language") == "el-GR"
        assert ctx.path == "/el-GR/some-path"

    def test_bare_prefix_becomes_root(self, memory_translator):
        """A path made only of a language becomes the root path."""
        assert memory_translator.router_rewrite(make_request_context(path="/el")).path == "/"

    def test_records_context_key_and_cookie(self, make_translator):
        """The detected language is stored under the context key and cookie."""
        translator = make_translator(context_key="language", cookie="lang")
        rewritten = translator.router_rewrite(make_request_context(path="/el/home"))
        assert rewritten.values["language"] == "el-GR"
        assert rewritten.cookies["lang"] == "el-GR"
        assert translator.get_locale(rewritten).language == "el-GR"

    def test_no_language_returns_same_context(self, memory_translator):
        """Requests without a language prefix are left untouched."""
        ctx = make_request_context(path="/some-path/el")
        assert memory_translator.router_rewrite(ctx) is ctx

    def test_subdomain(self, make_translator):
        """With subdomains enabled, a language label is stripped from the host."""
        translator = make_translator(subdomain=True)
        ctx = make_request_context(path="/home", host="el.example.com")
        rewritten = translator.router_rewrite(ctx)
        assert rewritten.host == "example.com"
        assert rewritten.header("host") == "example.com"
        assert rewritten.path == "/home"
        assert rewritten.header("accept-language") == "el-GR"

    def test_subdomain_disabled(self, memory_translator):
        """Hosts are left untouched when subdomains are disabled."""
        ctx = make_request_context(path="/home", host="el.example.com")
        assert memory_translator.router_rewrite(ctx) is ctx


class TestTranslatorRegions:
    """Tests for requested regions the translation data has no entry for."""

    @pytest.fixture
    def region_translator(self):
        return Translator(
            memory_loader(
                {
                    "en-US": {"hello": "Hello"},
                    "el-GR": {"hello": "Γειά"},
                    "de-DE": {"hello": "Hallo"},
                }
            ),
            "en-US",
            "el-GR",
            "de-DE",
        )

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("el-US", "Γειά"),
            ("de-US", "Hallo"),
            ("de_CH", "Hallo"),
            ("en-ZZ", "Hello"),
        ],
    )
    def test_translate_matches_language(self, region_translator, code, expected):
        """A region the data lacks still matches the same language."""
        assert region_translator.translate(code, "hello") == expected

    def test_get_message_from_header(self, region_translator):
        """Accept-Language ranges with foreign regions match their language."""
        ctx = make_request_context(accept_language="de-US,en;q=0.1")
        assert region_translator.get_message(ctx, "hello") == "Hallo"
