from typing import Dict, Iterator, Optional, Tuple


class QueryParams:
    """Query-string parameters owned by a single request builder.

    Values are stored and later emitted verbatim, so callers are responsible
    for any percent-encoding and quoting (``@v`` aliases expect ``'value'``).
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def set(self, name: str, value: str) -> "QueryParams":
        self._values[name] = value
        return self

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._values

    def delete(self, name: str) -> None:
        self._values.pop(name, None)

    def copy(self) -> "QueryParams":
        return QueryParams(self._values)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._values.items()))

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({self._values!r})"
