"""BeautifulSoup 트리를 감싸는 문서/노드 조회 추상화.

추출기는 이 모듈의 `Node` 메서드만 사용하므로 파서 구현과 분리되어
고정 HTML 문서로 독립적으로 테스트할 수 있다.
"""

import copy
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment

PARSER = 'html.parser'


class Node:
    """하나의 요소(Tag)에 대한 조회 인터페이스."""

    def __init__(self, tag: Tag):
        self._tag = tag

    def find(self, selector: str) -> Optional["Node"]:
        """CSS 선택자와 일치하는 첫 번째 하위 노드를 반환한다."""
        tag = self._tag.select_one(selector)
        return Node(tag) if tag is not None else None

    def find_all(self, selector: str) -> List["Node"]:
        """CSS 선택자와 일치하는 모든 하위 노드를 문서 순서대로 반환한다."""
        return [Node(tag) for tag in self._tag.select(selector)]

    def __iter__(self) -> Iterator["Node"]:
        for child in self._tag.children:
            if isinstance(child, Tag):
                yield Node(child)

    def attr(self, name: str, default: str = "") -> str:
        """속성 값을 문자열로 반환한다 (없으면 default)."""
        value = self._tag.get(name)
        if value is None:
            return default
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def has_attr(self, name: str) -> bool:
        return self._tag.has_attr(name)

    def text(self) -> str:
        """하위 텍스트 전체를 앞뒤 공백 없이 반환한다."""
        return self._tag.get_text().strip()

    def own_text(self) -> str:
        """자식 요소를 제외한 직접 텍스트 노드만 이어 붙여 반환한다."""
        parts = [
            str(child) for child in self._tag.children
            if isinstance(child, NavigableString) and not isinstance(child, Comment)
        ]
        return "".join(parts).strip()

    def text_excluding(self, selector: str) -> str:
        """selector 와 일치하는 하위 요소를 뺀 텍스트를 반환한다 (원본 트리는 유지)."""
        clone = copy.copy(self._tag)
        for tag in clone.select(selector):
            tag.decompose()
        return clone.get_text().strip()

    def inner_html(self) -> str:
        """요소 내부 마크업을 그대로 반환한다."""
        return self._tag.decode_contents()

    def next_sibling(self, name: str) -> Optional["Node"]:
        """바로 다음 형제 요소가 name 이면 반환한다. 다른 요소가 먼저 오면 None."""
        for sibling in self._tag.next_siblings:
            if isinstance(sibling, Tag):
                return Node(sibling) if sibling.name == name else None
        return None

    @property
    def name(self) -> str:
        return self._tag.name

    def __repr__(self) -> str:
        return f"Node(<{self._tag.name}>)"


class Document(Node):
    """파싱된 HTML 문서 전체."""

    def __init__(self, soup: BeautifulSoup):
        super().__init__(soup)
        self.soup = soup

    @classmethod
    def from_html(cls, html: str) -> "Document":
        return cls(BeautifulSoup(html, PARSER))

    def meta(self, prop: str) -> str:
        """`<meta property=...>` 또는 `<meta name=...>` 의 content 값을 반환한다."""
        node = self.find(f'meta[property="{prop}"]') or self.find(f'meta[name="{prop}"]')
        return node.attr('content').strip() if node is not None else ""
