import time


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def format_mb(size: int) -> str:
    """Formats a byte count as megabytes with two decimals."""
    return f"{size / (1024 * 1024):.2f} MB"
