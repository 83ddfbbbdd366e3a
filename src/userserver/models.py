"""
User entity.

The only domain object. ``id`` is None until the store assigns one;
every User read back from the store has it set.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


# Ids live in a signed 32-bit integer column
MIN_ID = -(2 ** 31)
MAX_ID = 2 ** 31 - 1


@dataclass
class User:
    name: str
    email: str
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Field mapping in wire order: id, name, email."""
        return {"id": self.id, "name": self.name, "email": self.email}
