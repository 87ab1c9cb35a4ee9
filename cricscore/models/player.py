from dataclasses import dataclass


@dataclass(frozen=True)
class Player:
    """A player, identified by (last name, first name)"""
    last_name: str
    first_name: str

    def __post_init__(self):
        if not self.last_name or not self.first_name:
            raise ValueError("Player needs both a last name and a first name")

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __str__(self):
        return self.name
