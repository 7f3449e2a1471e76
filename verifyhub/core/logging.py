import json
import logging
import sys
from datetime import datetime, timezone

from verifyhub.core.request_context import request_id_ctx

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s [req=%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(log_level: str = "INFO", log_format: str = "text") -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    use_json = (log_format or "text").strip().lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    # Only replace handlers installed by a previous call; keep foreign ones.
    for existing in list(root.handlers):
        if getattr(existing, "verifyhub_managed", False):
            root.removeHandler(existing)
    handler.verifyhub_managed = True  # type: ignore[attr-defined]
    root.setLevel(level)
    root.addHandler(handler)

    # httpx logs every request line at INFO, including the token endpoint URL.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
