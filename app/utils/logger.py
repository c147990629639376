"""
Logger central da aplicação.

Uso:
    from app.utils.logger import logger
    logger.info("[Pedidos] mensagem")
"""
import logging
import sys

from app.config.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class PrometheusLogHandler(logging.Handler):
    """Conta mensagens de log por nível no counter `log_messages_total`."""

    def emit(self, record: logging.LogRecord) -> None:
        # Import tardio: prometheus_metrics também usa logging
        from app.utils.prometheus_metrics import log_messages_total

        try:
            log_messages_total.labels(level=record.levelname).inc()
        except Exception:
            self.handleError(record)


def _configurar_logger(nome: str = "app") -> logging.Logger:
    _logger = logging.getLogger(nome)
    if _logger.handlers:
        return _logger

    _logger.setLevel(LOG_LEVEL)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    _logger.addHandler(stream_handler)
    _logger.addHandler(PrometheusLogHandler())

    # Evita log duplicado quando o root logger também tem handler (uvicorn)
    _logger.propagate = False
    return _logger


logger = _configurar_logger()
