from dataclasses import dataclass
from datetime import datetime, time, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from app.config import settings


@dataclass(frozen=True)
class DayWindow:
    """Intervalo [inicio, fin] del día local usado para acotar eventos"""
    start: datetime
    end: datetime

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= timestamp <= self.end

    @property
    def day_key(self) -> str:
        return self.start.date().isoformat()

    def __str__(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()}"


def local_timezone() -> tzinfo:
    """Zona horaria del punto de control (TIMEZONE o la del servidor)"""
    if settings.TIMEZONE:
        return ZoneInfo(settings.TIMEZONE)
    return datetime.now().astimezone().tzinfo


def local_now(tz: Optional[tzinfo] = None) -> datetime:
    return datetime.now(tz or local_timezone())


def current_window(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> DayWindow:
    """
    Calcula la ventana del día actual: 00:00:00.000 a 23:59:59.999 en hora local.
    Se recalcula en cada llamada para que un proceso que cruza la medianoche
    pase al nuevo día sin reiniciarse.
    """
    if now is None:
        now = local_now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz or local_timezone())
    elif tz is not None:
        now = now.astimezone(tz)

    today = now.date()
    start = datetime.combine(today, time(0, 0, 0, 0), tzinfo=now.tzinfo)
    end = datetime.combine(today, time(23, 59, 59, 999000), tzinfo=now.tzinfo)
    return DayWindow(start=start, end=end)


def truncate_to_millisecond(timestamp: datetime) -> datetime:
    """Recorta a milisegundos, la misma resolución con la que se cierra la ventana del día"""
    return timestamp.replace(microsecond=timestamp.microsecond // 1000 * 1000)
