from dataclasses import dataclass

import yaml

from fractalgen.coloring import pick_color_scheme
from fractalgen.geometry import PixelGrid, window_from_center
from fractalgen.iterators import pick_function
from fractalgen.render import FractalParams, RenderingParams
from fractalgen.utils import parse_complex


@dataclass(frozen=True)
class RenderConfig:
    function: str = "test0"
    start: complex = complex(0.8, 0.6)
    center: tuple = (-0.8, 0.425)
    zoom: float = 7.25
    max_iterations: int = 100
    escape_threshold: float = 2.0
    width: int = 1080
    height: int = 1920
    scheme: str = "black_and_green"

    def to_params(self):
        """Resolve names and geometry into (FractalParams, RenderingParams)."""
        grid = PixelGrid(int(self.width), int(self.height))
        fractal_params = FractalParams(
            function=pick_function(self.function),
            start=complex(self.start),
        )
        rendering_params = RenderingParams(
            max_iterations=int(self.max_iterations),
            escape_threshold=float(self.escape_threshold),
            viewing_window=window_from_center(self.center, float(self.zoom), grid),
            display_quality=grid,
            color_scheme=pick_color_scheme(self.scheme),
        )
        return fractal_params, rendering_params


SECTIONS = ("fractal", "view", "computation", "display", "presentation")


def config_to_dict(config):
    """Convert RenderConfig to a dictionary for YAML serialization."""
    return {
        "fractal": {
            "function": config.function,
            "start": str(complex(config.start)),
        },
        "view": {
            "center": {
                "x": config.center[0],
                "y": config.center[1],
            },
            "zoom": config.zoom,
        },
        "computation": {
            "max_iterations": config.max_iterations,
            "escape_threshold": config.escape_threshold,
        },
        "display": {
            "width": config.width,
            "height": config.height,
        },
        "presentation": {
            "scheme": config.scheme,
        },
    }


def _section(config_dict, name):
    section = config_dict.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {section!r}")
    return section


def _value(section, key, default, convert):
    value = section.get(key, default)
    try:
        return convert(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for '{key}': {value!r}") from None


def dict_to_config(config_dict, base=None):
    """
    Build a RenderConfig from a (possibly partial) dictionary. Keys that are
    missing keep the value from `base` (defaults if None).
    """
    base = base or RenderConfig()
    config_dict = config_dict or {}
    unknown = set(config_dict) - set(SECTIONS)
    if unknown:
        raise ValueError(f"Unknown config sections: {sorted(unknown)}")

    fractal = _section(config_dict, "fractal")
    view = _section(config_dict, "view")
    center = _section(view, "center")
    computation = _section(config_dict, "computation")
    display = _section(config_dict, "display")
    presentation = _section(config_dict, "presentation")

    def to_complex(value):
        return parse_complex(value) if isinstance(value, str) else complex(value)

    return RenderConfig(
        function=_value(fractal, "function", base.function, str),
        start=_value(fractal, "start", base.start, to_complex),
        center=(
            _value(center, "x", base.center[0], float),
            _value(center, "y", base.center[1], float),
        ),
        zoom=_value(view, "zoom", base.zoom, float),
        max_iterations=_value(computation, "max_iterations", base.max_iterations, int),
        escape_threshold=_value(computation, "escape_threshold", base.escape_threshold, float),
        width=_value(display, "width", base.width, int),
        height=_value(display, "height", base.height, int),
        scheme=_value(presentation, "scheme", base.scheme, str),
    )


def load_config(path, base=None):
    with open(path, "r") as f:
        try:
            config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Config file {path} is not valid YAML: {e}") from None
    if config_dict is not None and not isinstance(config_dict, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return dict_to_config(config_dict, base=base)


def save_config(config, path):
    with open(path, "w") as f:
        yaml.safe_dump(config_to_dict(config), f, sort_keys=False)
