"""Shared DOM helpers for listing templates.

Provides a single `make_soup` helper so pages are parsed consistently,
plus the small lookup primitives every template relies on. Lookups
return None for a missing element instead of raising, so templates can
treat "not found" as an ordinary outcome.
"""
from typing import List, Optional
from bs4 import BeautifulSoup, Tag


def make_soup(html: str) -> BeautifulSoup:
    """Parse HTML using BeautifulSoup with lxml backend.

    The lxml 'strip_cdata' DeprecationWarning is filtered once in the
    package `__init__`; the warnings state is never touched per call.
    """
    return BeautifulSoup(html, 'lxml')


def find_first_by_class(node: Optional[Tag], class_name: str) -> Optional[Tag]:
    """First descendant of `node` carrying `class_name`, or None."""
    if node is None:
        return None
    return node.find(class_=class_name)


def element_children(node: Optional[Tag]) -> List[Tag]:
    """Child elements of `node`, skipping text and comments."""
    if node is None:
        return []
    return [c for c in node.children if isinstance(c, Tag)]


def first_child(node: Optional[Tag]) -> Optional[Tag]:
    children = element_children(node)
    return children[0] if children else None


def element_text(node: Optional[Tag]) -> Optional[str]:
    """Whitespace-normalized text of `node` (runs collapsed, ends trimmed)."""
    if node is None:
        return None
    return ' '.join(node.get_text().split())


def attr(node: Optional[Tag], name: str) -> str:
    """String value of an attribute, '' when absent.

    Multi-valued attributes such as `class` are joined with spaces.
    """
    if node is None:
        return ''
    value = node.get(name)
    if value is None:
        return ''
    if isinstance(value, list):
        return ' '.join(value)
    return value


def has_any_class(node: Optional[Tag], *class_names: str) -> bool:
    if node is None:
        return False
    classes = node.get('class') or []
    return any(c in classes for c in class_names)


def inner_html(node: Optional[Tag]) -> str:
    if node is None:
        return ''
    return node.decode_contents()


def table_rows(table: Optional[Tag]) -> List[Tag]:
    """Row elements of a grid table.

    lxml does not synthesize `tbody`, so rows may sit directly under the
    table. Non-table grids fall back to the children of their first
    child element.
    """
    if table is None:
        return []
    if table.name == 'table':
        body = table.find('tbody', recursive=False)
        return element_children(body if body is not None else table)
    return element_children(first_child(table))


__all__ = [
    'attr',
    'element_children',
    'element_text',
    'find_first_by_class',
    'first_child',
    'has_any_class',
    'inner_html',
    'make_soup',
    'table_rows',
]
