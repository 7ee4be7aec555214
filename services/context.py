from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class VoidContext:
     """
     Acting user and clock for one call into the void engine.

     ``now`` is the system timestamp stamped as void_sys_date, distinct from
     the caller-supplied effective date.
     """

     actor_id: int
     now: datetime

     @classmethod
     def for_actor(cls, actor_id: int, now: Optional[datetime] = None) -> "VoidContext":
          return cls(actor_id=actor_id, now=now or datetime.now())
