"""
Q3.29 fixed-point kernel.

All coordinates, steps and orbit values are signed integers with a scale
factor of 2^29. Coordinates live in 32-bit registers; the orbit and the
multiplier accumulate in 64 bits. Every helper here reproduces the hardware
width, so Python's unbounded ints are always narrowed explicitly.
"""

FRAC_BITS = 29
SCALE = 1 << FRAC_BITS  # 1.0 in Q3.29

# modulus_sq threshold: 4.0 (|z| = 2)
ESCAPE_LIMIT = 4 << FRAC_BITS

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1


# -----------------------------
# Register widths
# -----------------------------

def wrap_int32(v: int) -> int:
    """Narrow to a signed 32-bit register (two's complement wraparound)."""
    v &= _MASK32
    if v >= (1 << 31):
        v -= (1 << 32)
    return v


def wrap_int64(v: int) -> int:
    """Narrow to a signed 64-bit register (two's complement wraparound)."""
    v &= _MASK64
    if v >= (1 << 63):
        v -= (1 << 64)
    return v


def to_uint64(v: int) -> int:
    return v & _MASK64


# -----------------------------
# Arithmetic
# -----------------------------

def multiply(a: int, b: int) -> int:
    """
    Q3.29 multiply: (a * b) >> 29.

    The product is formed in a 64-bit accumulator (wrapping) and scaled back
    with an arithmetic shift, which truncates toward negative infinity. The
    resulting downward bias is part of the reference behaviour.
    """
    return wrap_int64(a * b) >> FRAC_BITS


# -----------------------------
# Conversions (CLI / config use only)
# -----------------------------

def float_to_fixed(f: float) -> int:
    """Convert a float to a signed 32-bit Q3.29 value, saturating at the register limits."""
    val = int(round(f * SCALE))
    if val >= (1 << 31):
        val = (1 << 31) - 1
    if val < -(1 << 31):
        val = -(1 << 31)
    return val


def fixed_to_float(q: int) -> float:
    return q / SCALE


def parse_hex_fixed(text: str) -> int:
    """
    Parse a hex-encoded fixed-point field into the 32-bit coordinate register.

    The field is read as a 64-bit two's-complement value (so both
    'FFFFFFFFE0000000' and 'E0000000' style encodings are accepted) and then
    narrowed to 32 bits, matching how the drawing engine latches its centre.
    """
    s = text.strip().lower()
    negative = s.startswith("-")
    if negative:
        s = s[1:]
    if s.startswith("0x"):
        s = s[2:]
    if not s:
        raise ValueError(f"Empty hex field: {text!r}")
    val = int(s, 16)
    if negative:
        val = -val
    return wrap_int32(wrap_int64(val))


def format_hex_fixed(q: int, width: int = 64) -> str:
    """Format a fixed-point value as zero-padded two's-complement hex."""
    digits = width // 4
    return f"{q & ((1 << width) - 1):0{digits}X}"
