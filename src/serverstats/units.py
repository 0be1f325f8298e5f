"""Human-readable number formatting."""

MEMORY_UNITS = ["K", "M", "G", "T"]
DF_UNITS = "KMGTPE"


def format_percent(value: float) -> str:
    """Render a percentage with exactly one fractional digit."""
    return f"{value:.1f}"


def human_readable_kb(kb: float) -> str:
    """
    Format a kB amount with a binary unit, e.g. ``3.5 GB``.

    Scaling stops at terabytes; values below 1024 kB (including negative
    ones) stay in KB.
    """
    value = kb
    scale = 0
    while value >= 1024 and scale < len(MEMORY_UNITS) - 1:
        value /= 1024
        scale += 1
    return f"{value:.1f} {MEMORY_UNITS[scale]}B"


def format_df_size(num_bytes: int) -> str:
    """
    Format a byte count the way ``df -h`` does.

    Powers of 1024, one decimal below 10 units, always rounded up.
    """
    if num_bytes < 1024:
        return str(num_bytes)
    exponent = 1
    while num_bytes >= 1024 ** (exponent + 1) and exponent < len(DF_UNITS):
        exponent += 1
    divisor = 1024**exponent
    tenths = -(-num_bytes * 10 // divisor)
    if tenths < 100:
        return f"{tenths // 10}.{tenths % 10}{DF_UNITS[exponent - 1]}"
    whole = -(-num_bytes // divisor)
    if whole >= 1024 and exponent < len(DF_UNITS):
        return f"1.0{DF_UNITS[exponent]}"
    return f"{whole}{DF_UNITS[exponent - 1]}"


def df_percent(used: int, available: int) -> str:
    """Use% as df prints it: rounded up, ``-`` when there is no capacity."""
    capacity = used + available
    if capacity <= 0:
        return "-"
    return f"{-(-used * 100 // capacity)}%"
