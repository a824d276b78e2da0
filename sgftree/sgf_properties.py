# sgf_properties.py
# Property text of a single SGF node: tokenizer, parser and formatter.
#
# A node's text looks like  B[dd]C[a comment]AB[aa][bb]
# - split_brackets() cuts it into key tokens and bracket-value tokens
# - parse_node_data() folds the tokens into a PropertyMap
# - format_node_data() writes a PropertyMap back in the same shape
#
# Escaped "]" inside values is not handled: the first "]" always ends a value.
from collections import namedtuple
from typing import Dict, List, Union


# Exceptions (raised in strict mode only)
class SgfError(Exception): pass


class UnterminatedPropertyValue(SgfError): pass


class MissingPropertyKey(SgfError): pass


# key -> single value, or ordered list of values (at least two)
PropertyValue = Union[str, List[str]]
PropertyMap = Dict[str, PropertyValue]

# is_value: True for the text between "[" and "]", False for a key / leftover text
Token = namedtuple('Token', ['is_value', 'text'])


def split_brackets(text: str, strict: bool = False) -> List[Token]:
    tokens: List[Token] = []
    buf: List[str] = []
    in_value = False

    for ch in text:
        if ch == "[":
            if in_value:
                tokens.append(Token(True, "".join(buf)))
            elif buf:
                tokens.append(Token(False, "".join(buf)))
            buf = []
            in_value = True
        elif ch == "]":
            if in_value:
                tokens.append(Token(True, "".join(buf)))
            elif buf:
                tokens.append(Token(False, "".join(buf)))
            buf = []
            in_value = False
        else:
            buf.append(ch)

    if in_value:
        if strict:
            raise UnterminatedPropertyValue("unterminated value: [%s" % "".join(buf))
        # dropped, same as text that never gets closed
    elif buf:
        tokens.append(Token(False, "".join(buf)))
    return tokens


def parse_node_data(text: str, strict: bool = False) -> PropertyMap:
    """
    Build the PropertyMap of one node from its property text.

    The first value of a key is stored as a plain string; a second value
    promotes it to a list, further values are appended:
        parse_node_data("AB[aa]")         -> {"AB": "aa"}
        parse_node_data("AB[aa][bb][cc]") -> {"AB": ["aa", "bb", "cc"]}
    """
    data: PropertyMap = {}
    current_key = ""

    for token in split_brackets(text, strict=strict):
        if not token.is_value:
            current_key = token.text
            continue
        if strict and not current_key:
            raise MissingPropertyKey("value [%s] has no property key" % token.text)
        if current_key not in data:
            data[current_key] = token.text
        elif isinstance(data[current_key], str):
            data[current_key] = [data[current_key], token.text]
        else:
            data[current_key].append(token.text)

    return data


def format_node_data(data: PropertyMap) -> str:
    parts: List[str] = []
    for key, value in data.items():
        values = [value] if isinstance(value, str) else value
        parts.append(key + "".join(f"[{v}]" for v in values))
    return "".join(parts)


def values_as_list(value: PropertyValue) -> List[str]:
    """Normalize a single or multiple property value to a new list."""
    if isinstance(value, str):
        return [value]
    return list(value)
