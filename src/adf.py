"""
Atlassian Document Format helpers
Lenient conversion of Jira rich-text documents to plain text
"""
from dataclasses import dataclass, field
from typing import Any, List, Union


@dataclass
class TextSpan:
    text: str


@dataclass
class UnknownInline:
    type: str = ''


@dataclass
class Paragraph:
    spans: List[Union[TextSpan, UnknownInline]] = field(default_factory=list)


@dataclass
class UnknownBlock:
    type: str = ''


Inline = Union[TextSpan, UnknownInline]
Block = Union[Paragraph, UnknownBlock]


def _parse_inline(node: Any) -> Inline:
    if isinstance(node, dict):
        text = node.get('text')
        if isinstance(text, str) and text:
            return TextSpan(text)
        return UnknownInline(str(node.get('type', '')))
    return UnknownInline()


def _parse_block(node: Any) -> Block:
    if not isinstance(node, dict):
        return UnknownBlock()
    block_type = node.get('type')
    content = node.get('content')
    # A paragraph without an inline list is treated like any unrecognized block;
    # an empty list is a blank line
    if block_type == 'paragraph' and isinstance(content, list):
        return Paragraph([_parse_inline(child) for child in content])
    return UnknownBlock(str(block_type or ''))


def parse_document(document: Any) -> List[Block]:
    """Parse an ADF document into blocks; malformed input yields no blocks"""
    if not isinstance(document, dict):
        return []
    content = document.get('content')
    if not isinstance(content, list):
        return []
    return [_parse_block(node) for node in content]


def extract_plain_text(document: Any) -> str:
    """Extract plain text from Atlassian Document Format

    Only paragraph blocks are rendered: the text of their inline spans is
    concatenated and each paragraph is terminated by a newline. The result
    is stripped of surrounding whitespace.
    """
    text = ''
    for block in parse_document(document):
        if isinstance(block, Paragraph):
            for span in block.spans:
                if isinstance(span, TextSpan):
                    text += span.text
            text += '\n'
        elif isinstance(block, UnknownBlock):
            continue
    return text.strip()


def rich_text_to_plain(value: Any) -> str:
    """Plain strings are returned verbatim, ADF documents are extracted"""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return extract_plain_text(value)
    return ''
