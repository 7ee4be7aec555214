"""
Reference Service - collision-free document numbers.

A reference is ``prefix + YYYYMMDDHHMMSS + three random digits``. The
candidate is checked against the target column and the random suffix is
resampled until the value is free. Retries are bounded; running out raises
ReferenceGenerationError instead of spinning forever.
"""
import os
import random
import time
from datetime import datetime

from sqlalchemy.orm import InstrumentedAttribute, Session

from logging_config import get_logger
from services.exceptions import ReferenceGenerationError

log = get_logger(__name__)

VOID_PREFIX = "VOD"
REFUND_PREFIX = "REF"

DEFAULT_MAX_ATTEMPTS = int(os.getenv("REFERENCE_MAX_ATTEMPTS", "20"))
DEFAULT_BACKOFF_SECONDS = 0.005


def build_candidate(prefix: str, now: datetime, rng: random.Random = random) -> str:
     """Compose one candidate reference; no database access."""
     return f"{prefix}{now.strftime('%Y%m%d%H%M%S')}{rng.randint(100, 999)}"


def reference_exists(db: Session, column: InstrumentedAttribute, value: str) -> bool:
     """Check whether ``value`` is already stored in ``column``."""
     return db.query(column).filter(column == value).first() is not None


def generate_unique_number(
     db: Session,
     column: InstrumentedAttribute,
     prefix: str,
     *,
     now: datetime,
     max_attempts: int = DEFAULT_MAX_ATTEMPTS,
     backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
     rng: random.Random = random,
) -> str:
     """
     Produce a reference not yet present in ``column``.

     Args:
          db: SQLAlchemy database session
          column: Mapped column holding references, e.g. VoidedSale.void_no
          prefix: Document prefix ("VOD", "REF", ...)
          now: Timestamp embedded in the reference
          max_attempts: Candidates tried before giving up
          backoff_seconds: Base sleep between attempts, grows linearly
          rng: Source of the random suffix

     Returns:
          The free reference string

     Raises:
          ReferenceGenerationError: If every candidate was taken
     """
     for attempt in range(1, max_attempts + 1):
          candidate = build_candidate(prefix, now, rng)
          if not reference_exists(db, column, candidate):
               return candidate
          log.debug("reference_collision", prefix=prefix, candidate=candidate, attempt=attempt)
          if attempt < max_attempts and backoff_seconds:
               time.sleep(backoff_seconds * attempt)

     log.error("reference_generation_exhausted", prefix=prefix, attempts=max_attempts)
     raise ReferenceGenerationError(prefix, max_attempts)
