import json
import logging
import os
from datetime import datetime, timezone


# JSON event lines share stderr with the prompts; JOKEBOX_LOG_LEVEL=WARNING quiets them
LOG_LEVEL = os.environ.get("JOKEBOX_LOG_LEVEL", "INFO").upper()

logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))

logger = logging.getLogger("jokebox")


def log_event(event: str, **fields) -> dict:
    """Log one JSON event line on the jokebox logger. Returns the payload."""
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        **fields,
    }

    # default=str: sets, paths and exceptions show up as text instead of failing the dump
    logger.info(json.dumps(payload, default=str))
    return payload
