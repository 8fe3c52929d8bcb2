import os
from dataclasses import dataclass, field
from typing import Optional


def new_id() -> str:
    return os.urandom(6).hex()


@dataclass
class Game:
    name: str
    path: str
    args: str = ""
    # not persisted; fresh on every load
    id: str = field(default_factory=new_id, compare=False)

    def __str__(self) -> str:
        return self.name

    def detailed_string(self) -> str:
        out = f"Name: {self.name}\nPath: {self.path}"
        if self.args.strip():
            out += f"\nArgs: {self.args}"
        return out


@dataclass
class GameInput:
    """Raw add/edit form values, untrimmed and unvalidated."""
    name: str
    path: str
    args: Optional[str] = ""
