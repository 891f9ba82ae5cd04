from live_browser import config


def test_browser_name_defaults_to_chrome() -> None:
    assert config.browser_name({}) == "chrome"


def test_browser_name_is_trimmed() -> None:
    assert config.browser_name({"npm_config_live_browser": "  firefox \n"}) == "firefox"


def test_module_name_for_chrome_is_base_driver() -> None:
    assert config.module_name({"npm_config_live_browser": "chrome"}) == "live_browser.driver"


def test_module_name_for_firefox_has_suffix() -> None:
    assert config.module_name({"npm_config_live_browser": "firefox"}) == "live_browser.driver_firefox"


def test_unknown_browser_resolves_to_empty_suffix() -> None:
    assert config.module_name({"npm_config_live_browser": "netscape"}) == "live_browser.driver"


def test_executable_path_keyed_by_browser_name() -> None:
    env = {
        "npm_config_live_browser": "firefox",
        "npm_config_firefox": "/opt/firefox/firefox",
        "npm_config_chrome": "/opt/chrome/chrome",
    }
    assert config.executable_path(env) == "/opt/firefox/firefox"
    assert config.executable_path({}) is None


def test_executable_path_reads_process_env(monkeypatch) -> None:
    monkeypatch.delenv("npm_config_live_browser", raising=False)
    monkeypatch.setenv("npm_config_chrome", "/usr/bin/chromium")
    assert config.executable_path() == "/usr/bin/chromium"


class TestResolveHeadless:
    def test_visible_true_is_headed(self):
        assert config.resolve_headless(True, "node --inspect build.js") is False
        assert config.resolve_headless(True, "") is False

    def test_visible_false_is_headless(self):
        assert config.resolve_headless(False, "node --inspect build.js") is True

    def test_inspector_flag_opens_window(self):
        assert config.resolve_headless(None, "node --inspect-brk build.js") is False

    def test_no_inspector_flag_stays_headless(self):
        assert config.resolve_headless(None, "node build.js") is True
        assert config.resolve_headless(None) is True


def test_lifecycle_command_default_is_empty() -> None:
    assert config.lifecycle_command({}) == ""
    assert config.lifecycle_command({"npm_lifecycle_script": "live-browser open"}) == "live-browser open"


def test_absolute_url_detection() -> None:
    assert config.is_absolute_url("http://example.com/")
    assert config.is_absolute_url("https://example.com/app")
    assert not config.is_absolute_url("index.html")
    assert not config.is_absolute_url("docs/")


def test_every_driver_module_exposes_launch() -> None:
    import importlib

    for name in ("chrome", "firefox", "webkit"):
        module = importlib.import_module(config.module_name({"npm_config_live_browser": name}))
        assert callable(module.launch)
