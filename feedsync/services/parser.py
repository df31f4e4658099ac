"""
Structured parser: feed markup into a generic tree
"""
import re
from typing import Any, Dict
from xml.etree.ElementTree import Element, ParseError as XMLSyntaxError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from feedsync.core.exceptions import ParseError
from feedsync.utils.tree import TEXT_KEY, TreeValue

XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def _local_name(tag: str) -> str:
    """Drop a {namespace} prefix"""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def element_to_tree(element: Element) -> TreeValue:
    """
    Convert one element:
    - attributes and child elements become keys of one map
    - repeated children become a list under their tag
    - text alone becomes a string; next to keys it is stored under TEXT_KEY
    - text interleaved with child elements is joined in document order
    """
    node: Dict[str, Any] = {_local_name(name): value for name, value in element.attrib.items()}
    repeated = set()

    for child in element:
        if not isinstance(child.tag, str):
            # Comments and processing instructions
            continue
        tag = _local_name(child.tag)
        value = element_to_tree(child)
        if tag in repeated:
            node[tag].append(value)
        elif tag in node:
            node[tag] = [node[tag], value]
            repeated.add(tag)
        else:
            node[tag] = value

    text = (element.text or "").strip()
    if len(element) and (text or any((child.tail or "").strip() for child in element)):
        # Mixed content: inline markup keeps its text
        text = "".join(element.itertext()).strip()
    if not node:
        return text
    if text:
        node[TEXT_KEY] = text
    return node


def parse_document(text: str) -> Dict[str, TreeValue]:
    """Parse markup into {root_tag: tree}; raises ParseError on malformed input"""
    if text is None or not text.strip():
        raise ParseError("Feed document is empty")

    # The body is already decoded; a leftover encoding declaration would confuse the parser
    body = XML_DECLARATION.sub("", text.lstrip("\ufeff"), count=1)
    try:
        root = fromstring(body)
    except XMLSyntaxError as e:
        raise ParseError(f"Malformed feed document: {e}")
    except DefusedXmlException as e:
        raise ParseError(f"Rejected feed document: {e.__class__.__name__}")

    return {_local_name(root.tag): element_to_tree(root)}
