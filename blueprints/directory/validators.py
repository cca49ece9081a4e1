from __future__ import annotations
import re

_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)(?:\s*/\s*(\d+))?$")


def parse_weeks(raw) -> list[int]:
    """Week list or range string -> sorted unique week numbers.

    Accepts a list of ints or a string such as ``"1-16"``, ``"1,3,5"``,
    ``"2-16/2"`` (every second week) or a mix ``"1-4,7,9-15/2"``.
    Raises ValueError on anything else, including weeks < 1.
    """
    if isinstance(raw, (list, tuple, set)):
        items = [int(x) for x in raw]
    else:
        text = str(raw or "").strip()
        if not text:
            raise ValueError("weeks is empty")
        items = []
        for part in re.split(r"[,;\s]+", text):
            if not part:
                continue
            m = _RANGE_RE.match(part)
            if m:
                lo, hi, step = int(m.group(1)), int(m.group(2)), int(m.group(3) or 1)
                if hi < lo or step < 1:
                    raise ValueError(f"bad week range {part!r}")
                items.extend(range(lo, hi + 1, step))
            elif part.isdigit():
                items.append(int(part))
            else:
                raise ValueError(f"bad week token {part!r}")
    if not items:
        raise ValueError("weeks is empty")
    if any(w < 1 for w in items):
        raise ValueError("week numbers must be >= 1")
    return sorted(set(items))
