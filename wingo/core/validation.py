import re

def is_valid_period(s) -> bool:
    return bool(re.fullmatch(r"[0-9]{1,32}", str(s or "")))

def is_valid_digit(d) -> bool:
    return isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 9
