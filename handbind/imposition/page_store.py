from __future__ import annotations

from typing import Any, Iterable, Protocol, TypeAlias

BlankPageToken: TypeAlias = str

BLANK_PAGE: BlankPageToken = "__BLANK_PAGE__"


class PageStore(Protocol):
    """Ordered, index-addressed pages the driver can rearrange in place."""

    def get_page_count(self) -> int: ...

    def get_page_content(self, index: int) -> Any: ...

    def set_page_content(self, index: int, content: Any) -> None: ...

    def append_blank_page(self, at_start: bool) -> None: ...


class InMemoryPageStore:
    def __init__(self, pages: Iterable[Any] = ()) -> None:
        self.pages: list[Any] = list(pages)

    @classmethod
    def numbered(cls, page_count: int) -> InMemoryPageStore:
        if page_count < 0:
            raise ValueError("page_count must be >= 0")
        return cls(range(page_count))

    def get_page_count(self) -> int:
        return len(self.pages)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.pages):
            raise IndexError(f"page index {index} out of range for {len(self.pages)} pages")

    def get_page_content(self, index: int) -> Any:
        self._check_index(index)
        return self.pages[index]

    def set_page_content(self, index: int, content: Any) -> None:
        self._check_index(index)
        self.pages[index] = content

    def append_blank_page(self, at_start: bool) -> None:
        if at_start:
            self.pages.insert(0, BLANK_PAGE)
        else:
            self.pages.append(BLANK_PAGE)
