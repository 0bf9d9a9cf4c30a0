from dataclasses import dataclass, field
from typing import List

from gemmatch.components.charm import Charm, CharmKind

@dataclass(slots=True)
class CharmInventory:
    """Charms owned by the player, in purchase order."""
    capacity: int = 5
    charms: List[Charm] = field(default_factory=list)

    def is_full(self) -> bool:
        return len(self.charms) >= self.capacity

    def owns(self, kind: CharmKind, color: str) -> bool:
        return any(c.kind is kind and c.color == color for c in self.charms)
