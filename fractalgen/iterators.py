import cmath
import math

# A chaotic function maps (a, b) -> complex, where a is the current iterate
# and b the fractal's start constant. z^2 + c is the Mandelbrot map.


def mandelbrot(a: complex, b: complex) -> complex:
    return a * a + b


def test0(a: complex, b: complex) -> complex:
    return a * cmath.sqrt(cmath.cosh(a * a * a)) * b


def test1(a: complex, b: complex) -> complex:
    return cmath.sqrt(cmath.sinh(a)) + b


def test2(a: complex, b: complex) -> complex:
    return a * a * cmath.exp(a) + b


def test3(a: complex, b: complex) -> complex:
    return a * a * a * a * a + b


def test4(a: complex, b: complex) -> complex:
    # log(0) is -inf under IEEE arithmetic, so the quotient is 0 there.
    # a == 1 still divides by zero and escapes.
    if a == 0:
        return b
    return (a * a + a) / cmath.log(a) + b


_FUNCTIONS = {
    "mandelbrot": mandelbrot,
    "man": mandelbrot,
    "test0": test0,
    "test1": test1,
    "test2": test2,
    "test3": test3,
    "test4": test4,
}

# Stands in for an iterate the arithmetic could not represent.
_ESCAPED = complex(math.inf, 0.0)


def available_functions():
    return sorted(_FUNCTIONS)


def pick_function(name: str):
    """Return the chaotic function registered under `name` (case-insensitive)."""
    key = name.strip().lower()
    if key not in _FUNCTIONS:
        raise ValueError(f"Unknown function name: {name}")
    return _FUNCTIONS[key]


def _magnitude(z: complex) -> float:
    try:
        return abs(z)
    except OverflowError:
        return math.inf


def iterate_escape(
    z0: complex,
    c: complex,
    function,
    max_iterations: int = 100,
    escape_threshold: float = 2.0,
) -> int:
    """
    Apply z_{n+1} = function(z_n, c) from z0 until |z| >= escape_threshold
    or the counter reaches max_iterations.

    The counter starts at 1, so the result is a 1-based count in
    [1, max_iterations]:
        1              -> z0 itself is outside the threshold
        2              -> escaped on the first application
        max_iterations -> never escaped

    Domain and overflow errors raised by the complex primitives count as an
    escape on the step that raised them. NaN iterates also stop iteration,
    since NaN never compares below the threshold.
    """
    a = z0
    iterations = 1

    while _magnitude(a) < escape_threshold and iterations < max_iterations:
        try:
            a = function(a, c)
        except (ArithmeticError, ValueError):
            a = _ESCAPED
        iterations += 1

    return iterations


def escape_iterations(x: float, y: float, fractal_params, rendering_params) -> int:
    """Escape count for the plane coordinate (x, y)."""
    return iterate_escape(
        complex(x, y),
        fractal_params.start,
        fractal_params.function,
        max_iterations=rendering_params.max_iterations,
        escape_threshold=rendering_params.escape_threshold,
    )
