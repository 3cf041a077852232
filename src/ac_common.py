from typing import Any, Hashable, Iterable, List, Optional, Sequence, Union
import os
import logging
import datetime

Symbol = Hashable
Pattern = Union[str, bytes, Sequence[Symbol]]

_BYTES_LIKE = (bytes, bytearray, memoryview)

DEFAULT_MAX_PATTERN_BYTES = 16 * 1024 * 1024
DEFAULT_DUMP_DIR = "./logs/graphs"


# Configure the logger
def setup_logging(enabled=True, tz_offset_hours: Optional[float] = None):
    if tz_offset_hours is None:
        tz_offset_hours = read_tz_offset()
    tz = datetime.timezone(datetime.timedelta(hours=tz_offset_hours))
    if enabled:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.Formatter.converter = lambda *args: datetime.datetime.now(
            tz=tz
        ).timetuple()
    else:
        logging.disable(logging.CRITICAL)  # Disables all logging


def read_tz_offset() -> float:
    value = os.environ.get("AC_LOG_TZ_OFFSET", "0")
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"AC_LOG_TZ_OFFSET must be a number of hours, got {value!r}")


def logging_enabled_by_env() -> bool:
    return os.environ.get("AC_LOG", "") not in ("", "0")


def read_max_pattern_bytes() -> int:
    max_bytes = DEFAULT_MAX_PATTERN_BYTES
    if "AC_MAX_PATTERN_BYTES" in os.environ:
        max_bytes = int(os.environ["AC_MAX_PATTERN_BYTES"])
    return max_bytes


def read_dump_dir() -> str:
    return os.environ.get("AC_DUMP_DIR", DEFAULT_DUMP_DIR)


def is_bytes_like(seq: Any) -> bool:
    return isinstance(seq, _BYTES_LIKE)


def kind_of_symbol(symbol: Any) -> str:
    return type(symbol).__name__


def kind_of_sequence(seq: Any) -> Optional[str]:
    """
    Kind of the symbols held by `seq`: "str" for text, "int" for bytes-like
    objects, otherwise the type name of the first element.
    None when it cannot be told without consuming anything.
    """
    if isinstance(seq, str):
        return "str"
    if is_bytes_like(seq):
        return "int"
    if isinstance(seq, Sequence) and len(seq) > 0:
        return kind_of_symbol(seq[0])
    return None


def freeze_pattern(pattern: Iterable[Symbol]) -> Pattern:
    """Copy a pattern so the caller's buffer can be released or mutated."""
    if isinstance(pattern, (str, bytes)):
        return pattern
    if is_bytes_like(pattern):
        return bytes(pattern)
    return tuple(pattern)


# One pattern per line; trailing newline stripped, blank lines skipped
def load_patterns(path: str, as_bytes: bool = False) -> List[Pattern]:
    max_bytes = read_max_pattern_bytes()
    size = os.path.getsize(path)
    if size > max_bytes:
        raise ValueError(
            f"{path} is {size} bytes, larger than AC_MAX_PATTERN_BYTES={max_bytes}"
        )
    patterns: List[Pattern] = []
    with open(path, "rb") as f:
        for line in f:
            line = line.rstrip(b"\r\n")
            if not line:
                continue
            patterns.append(line if as_bytes else line.decode("utf-8"))
    logging.debug(f"Loaded {len(patterns)} patterns from {path}")
    return patterns
