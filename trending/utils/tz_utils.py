import time
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from typing import Optional

DEFAULT_TIMEZONE = "Asia/Kolkata"
MS_PER_HOUR = 60 * 60 * 1000

def now_ms() -> int:
    """Epoch atual em milissegundos (mesma unidade do createdAt)."""
    return int(time.time() * 1000)

def hours_between(start_ms: int, end_ms: int) -> float:
    """Horas decorridas entre dois epochs em ms (pode ser negativo)."""
    return (end_ms - start_ms) / MS_PER_HOUR

def ms_to_local_str(ts_ms: Optional[int], tz_name: str = DEFAULT_TIMEZONE) -> Optional[str]:
    """Converte epoch em ms para string local formatada."""
    if ts_ms is None:
        return None
    try:
        dt_utc = datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    try:
        tz = ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        # sem tzdata no host: cai para UTC
        tz = timezone.utc
    return dt_utc.astimezone(tz).strftime("%Y-%m-%d %H:%M")
