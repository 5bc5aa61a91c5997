import calendar
from datetime import datetime


def subtract_months(value: datetime, months: int) -> datetime:
    """
    Resta meses calendario a un datetime (equivalente a DATE_SUB(..., INTERVAL n MONTH)).
    Si el dia no existe en el mes destino, se ajusta al ultimo dia del mes.
    """
    total = value.year * 12 + (value.month - 1) - months
    year, month0 = divmod(total, 12)
    month = month0 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))
