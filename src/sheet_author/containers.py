from typing import Iterator, Union


class ItemsList:
    """A list of named items that can be indexed by position or by name."""

    def __init__(self, items: list, item_name: str):
        self._item_name = item_name
        self._items = list(items)

    def __getitem__(self, key: Union[int, str]):
        if isinstance(key, int):
            if key < 0:
                key += len(self._items)
            if key < 0 or key >= len(self._items):
                raise IndexError(f"index {key} out of range")
            return self._items[key]
        elif isinstance(key, str):
            for item in self._items:
                if item.name == key:
                    return item
            raise KeyError(f"no {self._item_name} named '{key}'")
        else:
            t = type(key).__name__
            raise LookupError(f"invalid index type {t}")

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator:
        return iter(self._items)

    def __contains__(self, key: str) -> bool:
        return key.lower() in [x.name.lower() for x in self._items]

    def append(self, item) -> None:
        self._items.append(item)
