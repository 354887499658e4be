# fractalgen/utils.py

def parse_complex(s: str) -> complex:
    """
    Parse strings like '0.8+0.6j', '-0.4-0.6i' or '0.5' into a complex number.
    """
    s = s.strip().lower().replace(" ", "").strip("()")
    if s.endswith("i"):
        s = s[:-1] + "j"
    try:
        if s.endswith("j"):
            return complex(s)
        # allow plain real numbers too
        return complex(float(s), 0.0)
    except ValueError:
        raise ValueError(f"Not a complex number: {s!r}") from None


def clamp(v, vmin, vmax):
    return max(vmin, min(v, vmax))
