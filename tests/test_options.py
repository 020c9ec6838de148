import pytest
from pydantic import ValidationError

from mcp_ditaa_renderer.errors import ConfigurationError
from mcp_ditaa_renderer.models.site_config import SiteConfig
from mcp_ditaa_renderer.options import (
    DEFAULTS,
    EMBEDDED_DEFAULTS,
    EMBEDDED_FALLBACKS,
    EMBEDDED_OPTIONS,
    OPTIONS,
    DiagramOptions,
    EmbeddedDiagramOptions,
    resolve,
    resolve_options,
)


def _document_options(overrides=None, site=None):
    return resolve_options(DiagramOptions, overrides, site, OPTIONS)


def _embedded_options(overrides=None, site=None):
    return resolve_options(EmbeddedDiagramOptions, overrides, site, EMBEDDED_OPTIONS, EMBEDDED_FALLBACKS)


def test_compiled_defaults():
    opts = _document_options()
    assert opts.antialias is True
    assert opts.debug is False
    assert opts.separation is True
    assert opts.round is False
    assert opts.shadows is True
    assert opts.verbose is False
    assert opts.scale == 1.0
    assert opts.tabs == 8
    assert opts.encoding is None


def test_embedded_defaults_extend_base():
    assert EMBEDDED_DEFAULTS["dirname"] == "/images/ditaa"
    assert EMBEDDED_DEFAULTS["name"] == "ditaa-%{hash}.png"
    assert "dirname" not in DEFAULTS
    assert set(DEFAULTS) <= set(EMBEDDED_DEFAULTS)


def test_precedence_per_key():
    merged = resolve(
        {"scale": 1.0, "tabs": 8, "round": False},
        {"scale": 2.0, "tabs": 4},
        {"scale": 3.0},
        OPTIONS,
    )
    assert merged["scale"] == 3.0   # override
    assert merged["tabs"] == 4      # process config
    assert merged["round"] is False  # default


def test_null_override_falls_through():
    merged = resolve({"tabs": 8}, {"tabs": 4}, {"tabs": None}, OPTIONS)
    assert merged["tabs"] == 4


def test_false_is_not_null():
    merged = resolve({"shadows": True}, {"shadows": True}, {"shadows": False}, OPTIONS)
    assert merged["shadows"] is False


def test_fallback_layer_sits_between_process_config_and_defaults():
    merged = resolve({"encoding": None}, {}, {}, OPTIONS, fallbacks={"encoding": "latin-1"})
    assert merged["encoding"] == "latin-1"
    merged = resolve({}, {"encoding": "utf-8"}, {}, OPTIONS, fallbacks={"encoding": "latin-1"})
    assert merged["encoding"] == "utf-8"


def test_unknown_keys_dropped():
    merged = resolve(DEFAULTS, {"theme": "dark"}, {"return": "url", "round": True}, OPTIONS)
    assert "theme" not in merged
    assert "return" not in merged
    assert merged["round"] is True


def test_embedded_only_keys_dropped_for_documents():
    opts = _document_options({"dirname": "/elsewhere", "name": "x.png"})
    assert not hasattr(opts, "dirname")
    assert "dirname" not in opts.model_dump()


def test_site_section_applies_to_every_diagram():
    site = {"ditaa": {"round": True, "tabs": 2}}
    opts = _document_options(site=site)
    assert opts.round is True
    assert opts.tabs == 2
    assert _document_options({"tabs": 6}, site=site).tabs == 6


def test_legacy_encoding_fallback():
    assert _document_options(site={"encoding": "utf-8"}).encoding == "utf-8"
    assert _document_options(site={"encoding": "utf-8", "ditaa": {"encoding": "latin-1"}}).encoding == "latin-1"
    assert _document_options({"encoding": "ascii"}, site={"encoding": "utf-8"}).encoding == "ascii"


@pytest.mark.parametrize(
    "setting, expected",
    [("true", True), (True, True), ("false", False), ("yes", False), (False, False)],
)
def test_legacy_debug_mode(setting, expected):
    assert _document_options(site={"ditaa_debug_mode": setting}).debug is expected


def test_explicit_debug_beats_legacy_debug_mode():
    assert _document_options({"debug": False}, site={"ditaa_debug_mode": "true"}).debug is False
    assert _document_options(site={"ditaa_debug_mode": "true", "ditaa": {"debug": False}}).debug is False


def test_legacy_output_directory_only_for_embedded():
    site = {"ditaa_output_directory": "/assets/diagrams"}
    assert _embedded_options(site=site).dirname == "/assets/diagrams"
    assert _embedded_options({"dirname": "/img"}, site=site).dirname == "/img"
    assert not hasattr(_document_options(site=site), "dirname")


def test_string_values_are_coerced():
    opts = _document_options({"scale": "2", "tabs": "4.9", "antialias": "false", "round": "true"})
    assert opts.scale == 2.0
    assert opts.tabs == 4
    assert opts.antialias is False
    assert opts.round is True


def test_float_tabs_truncate():
    assert _document_options({"tabs": 6.7}).tabs == 6


@pytest.mark.parametrize(
    "overrides, key",
    [
        ({"scale": "big"}, "scale"),
        ({"tabs": "wide"}, "tabs"),
        ({"scale": True}, "scale"),
        ({"encoding": "no-such-codec"}, "encoding"),
        ({"antialias": "maybe"}, "antialias"),
    ],
)
def test_coercion_failure_names_the_key(overrides, key):
    with pytest.raises(ConfigurationError) as exc:
        _document_options(overrides)
    assert exc.value.key == key
    assert key in str(exc.value)


def test_bad_site_section_is_a_configuration_error():
    with pytest.raises(ConfigurationError) as exc:
        _document_options(site={"ditaa": {"tabs": "x"}})
    assert exc.value.key == "tabs"


def test_resolved_options_are_immutable():
    opts = _document_options()
    with pytest.raises(ValidationError):
        opts.scale = 3.0


def test_site_config_load_yaml(tmp_path):
    cfg = tmp_path / "_config.yml"
    cfg.write_text(
        "title: Docs\nencoding: utf-8\nditaa_debug_mode: 'true'\nditaa:\n  scale: 1.5\n",
        encoding="utf-8",
    )
    site = SiteConfig.load(cfg)
    assert site.ditaa == {"scale": 1.5}
    assert site.setting("title") == "Docs"
    assert site.setting("encoding") == "utf-8"
    opts = _document_options(site=site)
    assert opts.scale == 1.5
    assert opts.debug is True


def test_site_config_empty_section(tmp_path):
    cfg = tmp_path / "_config.yml"
    cfg.write_text("ditaa:\n", encoding="utf-8")
    assert SiteConfig.load(cfg).ditaa == {}


def test_site_config_must_be_a_mapping(tmp_path):
    cfg = tmp_path / "_config.yml"
    cfg.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        SiteConfig.load(cfg)


def test_site_config_section_must_be_a_mapping():
    with pytest.raises(ConfigurationError) as exc:
        SiteConfig.from_mapping({"ditaa": "round"})
    assert exc.value.key == "ditaa"
