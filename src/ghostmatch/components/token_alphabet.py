from dataclasses import dataclass, field
from typing import Iterable, List

from ghostmatch.errors import AlphabetError


def _dedupe(names: Iterable[str], allowed=None) -> List[str]:
    seen: set[str] = set()
    filtered: List[str] = []
    for name in names:
        if allowed is not None and name not in allowed:
            continue
        if name not in seen:
            filtered.append(name)
            seen.add(name)
    return filtered


@dataclass(slots=True)
class TokenAlphabet:
    """Token identifiers known to the board, stored on a single registry entity.

    ``spawnable`` is the ordered subset drawn from when filling or refilling
    cells. At least two distinct spawnable tokens are required, otherwise no
    match-free board could ever exist.
    """
    tokens: List[str]
    spawnable: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tokens = _dedupe(self.tokens)
        if self.spawnable:
            self.spawnable = _dedupe(self.spawnable, allowed=set(self.tokens))
        else:
            self.spawnable = list(self.tokens)
        self._check()

    def _check(self) -> None:
        if len(self.spawnable) < 2:
            raise AlphabetError(
                f"at least two distinct spawnable tokens are required, got {self.spawnable!r}"
            )

    def spawnable_tokens(self) -> List[str]:
        return list(self.spawnable)

