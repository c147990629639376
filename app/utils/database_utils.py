from datetime import datetime
from zoneinfo import ZoneInfo

from app.config.settings import DB_TIMEZONE
#

def now_trimmed():
    """Retorna datetime atual no timezone configurado (padrão São Paulo), sem microsegundos"""
    tz = ZoneInfo(DB_TIMEZONE)
    return datetime.now(tz).replace(microsecond=0)
