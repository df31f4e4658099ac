"""
Generic document tree and dotted-path lookups

A parsed feed is a tree of three kinds of values: text scalars, lists of
values (repeated elements) and maps (elements with children or attributes).
Element text that sits next to attributes or children is stored under
TEXT_KEY.
"""
from typing import Any, Dict, List, Optional, Union

TEXT_KEY = "#text"

TreeValue = Union[str, List[Any], Dict[str, Any]]


def split_path(path: Optional[str]) -> List[str]:
    """Split a dotted path, ignoring empty segments and attribute markers"""
    if not path:
        return []
    return [segment.lstrip("@") for segment in path.split(".") if segment.strip("@ ")]


def _step(node: Any, segment: str) -> Any:
    if node is None:
        return None

    if isinstance(node, dict):
        return node.get(segment)

    if isinstance(node, list):
        if segment.isdigit():
            index = int(segment)
            return node[index] if index < len(node) else None

        # Repeated elements: apply the segment to each and flatten
        collected = []
        for item in node:
            value = _step(item, segment)
            if value is None:
                continue
            if isinstance(value, list):
                collected.extend(value)
            else:
                collected.append(value)
        return collected or None

    # Scalars have no children
    return None


def extract_path(tree: Any, path: Optional[str]) -> Any:
    """
    Walk `path` through `tree` segment by segment.

    Returns None when any segment is missing; absence is an ordinary outcome.
    A path with no segments yields None rather than the whole tree.
    """
    segments = split_path(path)
    if not segments:
        return None

    node = tree
    for segment in segments:
        node = _step(node, segment)
        if node is None:
            return None
    return node


def as_list(value: Any) -> List[Any]:
    """Coerce an extracted value into list form (absent -> [], scalar -> [scalar])"""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def text_of(value: Any) -> Optional[str]:
    """Scalar text of an extracted value, or None when there is none"""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return text_of(value.get(TEXT_KEY))
    if isinstance(value, list):
        for item in value:
            text = text_of(item)
            if text is not None:
                return text
        return None
    return str(value)


def first_text(tree: Any, paths: List[Optional[str]]) -> Optional[str]:
    """First non-blank stripped text found among candidate paths, in order"""
    for path in paths:
        text = text_of(extract_path(tree, path))
        if text is not None and text.strip():
            return text.strip()
    return None
