import sys
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from loguru import logger


def configure_logging(settings) -> None:
    """Console sink plus a rotating JSON audit file."""
    log_path = Path(settings.audit_log)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=settings.log_level)
    logger.add(
        log_path,
        rotation="10 MB",
        serialize=True,
        level="INFO"
    )


class AuditLogger:
    def log(self, *, cycle_id: str, event: str, data: Optional[dict] = None):
        audit_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "cycle_id": cycle_id,
            "event": event,
            "data": data or {},
        }
        logger.info(f"AUDIT | {json.dumps(audit_entry)}")


audit_logger = AuditLogger()
