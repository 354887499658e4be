from pathlib import Path

import pytest
import yaml

from fractalgen import iterators
from fractalgen.coloring import ColormapScheme, black_and_green
from fractalgen.config import RenderConfig, config_to_dict, dict_to_config, load_config, save_config


def test_defaults_are_sample_configuration():
    fparams, rparams = RenderConfig().to_params()

    assert fparams.function is iterators.test0
    assert fparams.start == 0.8 + 0.6j
    assert rparams.max_iterations == 100
    assert rparams.escape_threshold == 2.0
    assert (rparams.display_quality.width, rparams.display_quality.height) == (1080, 1920)
    assert rparams.color_scheme is black_and_green
    assert rparams.viewing_window.min.x == pytest.approx(-1.080 / 7.25 - 0.8)
    assert rparams.viewing_window.max.y == pytest.approx(1.920 / 7.25 + 0.425)


def test_partial_dict_keeps_defaults():
    config = dict_to_config({"computation": {"max_iterations": 250}, "view": {"center": {"x": 0.1}}})

    assert config.max_iterations == 250
    assert config.center == (0.1, 0.425)
    assert config.function == "test0"
    assert config.zoom == 7.25


def test_dict_round_trip():
    config = RenderConfig(function="mandelbrot", start=0j, center=(-0.5, 0.0), zoom=1.0,
                          max_iterations=64, width=40, height=30, scheme="cmap:inferno")
    assert dict_to_config(config_to_dict(config)) == config


def test_unknown_section_rejected():
    with pytest.raises(ValueError):
        dict_to_config({"colour": {"scheme": "x"}})


def test_load_config(tmp_path):
    path = tmp_path / "render.yaml"
    path.write_text(
        "fractal:\n"
        "  function: mandelbrot\n"
        "  start: 0.1-0.2j\n"
        "display:\n"
        "  width: 64\n"
        "  height: 48\n"
        "presentation:\n"
        "  scheme: cmap:magma\n"
    )

    config = load_config(path)
    fparams, rparams = config.to_params()

    assert fparams.function is iterators.mandelbrot
    assert fparams.start == 0.1 - 0.2j
    assert rparams.display_quality.size == 64 * 48
    assert rparams.color_scheme == ColormapScheme("magma")


def test_load_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == RenderConfig()


def test_load_config_not_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_save_config(tmp_path):
    path = tmp_path / "saved.yaml"
    config = RenderConfig(zoom=3.0)
    save_config(config, path)

    with open(path) as f:
        raw = yaml.safe_load(f)
    assert raw["view"]["zoom"] == 3.0
    assert load_config(path) == config


def test_bad_names_fail_on_resolution():
    with pytest.raises(ValueError):
        RenderConfig(function="nope").to_params()
    with pytest.raises(ValueError):
        RenderConfig(scheme="nope").to_params()


def test_shipped_sample_config_matches_defaults():
    ROOT = Path(__file__).resolve().parents[1]
    assert load_config(ROOT / "configs" / "sample.yaml") == RenderConfig()


def test_section_must_be_a_mapping():
    with pytest.raises(ValueError, match="view"):
        dict_to_config({"view": 5})
    with pytest.raises(ValueError, match="center"):
        dict_to_config({"view": {"center": [0.0, 1.0]}})


def test_bad_values_name_the_key():
    with pytest.raises(ValueError, match="zoom"):
        dict_to_config({"view": {"zoom": None}})
    with pytest.raises(ValueError, match="width"):
        dict_to_config({"display": {"width": "wide"}})
    with pytest.raises(ValueError, match="start"):
        dict_to_config({"fractal": {"start": "nope"}})


def test_malformed_yaml_is_a_value_error(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("view: [unclosed\n")
    with pytest.raises(ValueError):
        load_config(path)
