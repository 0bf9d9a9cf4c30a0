from dataclasses import dataclass

@dataclass(slots=True)
class Economy:
    currency: int = 0

    def can_afford(self, price: int) -> bool:
        return self.currency >= price
