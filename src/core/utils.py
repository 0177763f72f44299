import re
import unicodedata

def lower_lay_string(s: str) -> str:
    """Normalize to NFKD and drop combining marks (accents)."""
    normalized = unicodedata.normalize('NFKD', s)
    return ''.join(c for c in normalized if not unicodedata.combining(c))


def collapse(s: str) -> str:
    """Collapse runs of whitespace into one space and trim both ends."""
    return re.sub(r'\s+', ' ', s).strip()


def prepare_input(input_str: str) -> str:
    """Normalize free text for the *_lower search columns."""
    prepared_input = lower_lay_string(input_str or "")

    # punctuation becomes a separator
    prepared_input = re.sub(r"[`~!@#$%^&*()_|+\-=?;:\",.<>{}\[\]\\\/]", " ", prepared_input)

    prepared_input = re.sub(r"[’']", "", prepared_input)
    prepared_input = prepared_input.lower()

    return collapse(prepared_input)


def format_time(seconds: float) -> str:
    """
    Format a position/duration as m:ss.
    No hours field: 3725 seconds renders as "62:05".
    """
    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        seconds = 0.0
    if seconds != seconds or seconds < 0:  # NaN or negative
        seconds = 0.0
    s = int(seconds)
    return f"{s // 60}:{s % 60:02d}"
