"""tree-sitter helpers for reading Ruby route files, plus `singularize`."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

import tree_sitter_ruby as tsruby
from tree_sitter import Language, Node, Parser

RUBY_LANGUAGE = Language(tsruby.language())

CALL_NODE_TYPES = ("call", "command", "command_call")
BLOCK_NODE_TYPES = ("do_block", "block")
PUNCTUATION = ("(", ")", ",")


def parse_ruby(source: bytes) -> Node:
    """Parse Ruby source and return the root `program` node."""
    tree = Parser(RUBY_LANGUAGE).parse(source)
    return tree.root_node


def node_text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    return node.text.decode("utf-8")


def extract_call_info(node: Node) -> Optional[Tuple[str, List[Node], Optional[Node]]]:
    """Return (method_name, argument_nodes, block_node) for a call-like node.

    `resources :users do ... end` parses as a single `call` whose children
    include the argument list and the do_block. Returns None for anything
    that is not a method call.
    """
    if node.type == "call":
        method_node = node.child_by_field_name("method")
        if method_node is None:
            return None
        args: List[Node] = []
        block = None
        for child in node.children:
            if child.type == "argument_list":
                args = list(child.children)
            elif child.type in BLOCK_NODE_TYPES:
                block = child
        return node_text(method_node), args, block

    if node.type == "command":
        children = list(node.children)
        if not children:
            return None
        return node_text(children[0]), children[1:], None

    if node.type == "command_call":
        method_node = node.child_by_field_name("method")
        if method_node is None:
            return None
        args = []
        for child in node.children:
            if child.type == "argument_list":
                args = list(child.children)
        return node_text(method_node), args, None

    return None


def find_block_body(block_node: Optional[Node]) -> List[Node]:
    """Statements inside a `do ... end` or `{ ... }` block."""
    if block_node is None:
        return []
    for child in block_node.children:
        if child.type in ("body_statement", "block_body"):
            return list(child.children)
    return []


def extract_string_value(node: Node) -> Optional[str]:
    """Value of a string or symbol literal; other nodes return their source text."""
    if node.type == "string":
        for child in node.children:
            if child.type == "string_content":
                return node_text(child)
        return ""
    text = node_text(node).strip()
    if node.type == "string_content":
        return text
    if text[:1] in ("'", '"'):
        return text[1:-1] if len(text) >= 2 else ""
    if text.startswith(":"):
        return text[1:]
    # `path:` hash keys come through as hash_key_symbol
    return text.rstrip(":") if node.type == "hash_key_symbol" else text


def extract_array_elements(node: Node) -> List[str]:
    """Values of `[:show, :index]`, `%i[show index]` or `%w[show index]`."""
    if node.type == "array":
        values = []
        for child in node.children:
            if child.type in ("simple_symbol", "string", "string_content"):
                value = extract_string_value(child)
                if value:
                    values.append(value)
        return values
    if node.type in ("symbol_array", "string_array"):
        return [node_text(child) for child in node.children if child.type in ("bare_symbol", "bare_string")]
    return []


def pair_nodes(pair: Node) -> Tuple[Optional[Node], Optional[Node]]:
    """(key, value) of a `key: value` or `key => value` pair."""
    key = pair.child_by_field_name("key")
    value = pair.child_by_field_name("value")
    if key is not None and value is not None:
        return key, value
    children = [c for c in pair.children if c.type not in (":", "=>", ",")]
    if len(children) >= 2:
        return children[0], children[1]
    return None, None


def extract_hash_from_args(args: List[Node]) -> Dict[str, Node]:
    """Keyword arguments from an argument list, as {key: value_node}.

    Covers bare `key: value` pairs and `{ key: value }` hash literals;
    `**options` splats cannot be resolved statically and are ignored.
    """
    result: Dict[str, Node] = {}
    for arg in args:
        if arg.type == "pair":
            pairs = [arg]
        elif arg.type == "hash":
            pairs = [c for c in arg.children if c.type == "pair"]
        else:
            continue
        for pair in pairs:
            key_node, value_node = pair_nodes(pair)
            if key_node is None:
                continue
            key = extract_string_value(key_node)
            if key:
                result[key] = value_node
    return result


# ---- Inflection ----

IRREGULARS = {
    "people": "person",
    "children": "child",
    "men": "man",
    "women": "woman",
    "teeth": "tooth",
    "feet": "foot",
    "mice": "mouse",
    "geese": "goose",
    "oxen": "ox",
}

UNCOUNTABLE = {
    "equipment", "information", "rice", "money", "species",
    "series", "fish", "sheep", "jeans", "police", "data",
    "feedback", "status", "metadata", "news",
}

SINGULAR_RULES = [
    (r"(database)s$", r"\1"),
    (r"(quiz)zes$", r"\1"),
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"(alias|status)es$", r"\1"),
    (r"(octop|vir)i$", r"\1us"),
    (r"(cris|ax|test)es$", r"\1is"),
    (r"(shoe)s$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"(bus)es$", r"\1"),
    (r"(m|l)ice$", r"\1ouse"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"(m)ovies$", r"\1ovie"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"([lr])ves$", r"\1f"),
    (r"(tive)s$", r"\1"),
    (r"(hive)s$", r"\1"),
    (r"([^f])ves$", r"\1fe"),
    (r"(analy|diagno|parenthe|progno|synop|the)ses$", r"\1sis"),
    (r"([ti])a$", r"\1um"),
    (r"ss$", "ss"),
    (r"s$", ""),
]


def singularize(word: str) -> str:
    """Singularize a resource name the way Rails names member helpers."""
    if not word:
        return word
    lower = word.lower()
    if lower in UNCOUNTABLE:
        return word
    if lower in IRREGULARS:
        return IRREGULARS[lower]
    for pattern, replacement in SINGULAR_RULES:
        result, count = re.subn(pattern, replacement, word, flags=re.IGNORECASE)
        if count:
            return result
    return word
