"""
Standalone map text parser.
Reads brace-delimited KeyValues text (.vmf) and produces a Node tree.
"""
import warnings

from vmf_scene.nodes import Node, NODE_TYPES


# ── Token kinds ───────────────────────────────────────────────────────

OPEN = 'open'        # `{`
CLOSE = 'close'      # `}`
PAIR = 'pair'        # `"key" "value"`
HEADER = 'header'    # block name, e.g. `solid`

COMMENT_PREFIX = '//'
FALLBACK_ENCODING = 'cp1252'     # what Hammer writes on Windows when text is not UTF-8


class ParseError(Exception):
    """Raised when the map text is structurally malformed."""

    def __init__(self, message, lineno=None):
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


# ── Line classifier ───────────────────────────────────────────────────

def classify_lines(text):
    """Split text into (lineno, stripped_line) pairs, dropping blanks and comments."""
    lines = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line and not line.startswith(COMMENT_PREFIX):
            lines.append((lineno, line))
    return lines


def token_kind(line):
    """Classify a non-empty line by its first character."""
    first = line[0]
    if first == '{':
        return OPEN
    if first == '}':
        return CLOSE
    if first == '"':
        return PAIR
    return HEADER


def split_pair(line, lineno=None):
    """Split `"key" "value"` into (key, value).

    The key is the text between the first two quotes; the value is everything
    from the next quote to the end of the line, with surrounding quotes removed.
    """
    key_end = line.find('"', 1)
    if key_end < 0:
        raise ParseError(f"Unterminated key in '{line}'", lineno)
    value_start = line.find('"', key_end + 1)
    if value_start < 0:
        raise ParseError(f"Missing quoted value in '{line}'", lineno)
    key = line[1:key_end]
    value = line[value_start:].strip('"')
    return key, value


def resolve_node_type(header):
    """Map a block name to its Node class, falling back to the generic Node."""
    name = header[0].upper() + header[1:]
    return NODE_TYPES.get(name, Node)


# ── Tree builder ──────────────────────────────────────────────────────

def build_tree(lines):
    """Build a Node tree from classified (lineno, line) pairs.

    A single `active` cursor tracks the innermost open block: headers push a
    new node, `}` pops back to the parent, and key/value lines are handed to
    the active node's `parse`.

    Returns:
        the root Node
    """
    root = Node()
    active = root
    pending_open = None     # lineno of a header still waiting for its `{`

    for lineno, line in lines:
        kind = token_kind(line)

        if pending_open is not None and kind != OPEN:
            raise ParseError(f"Expected '{{' after block '{active.key}'", lineno)

        if kind == OPEN:
            if pending_open is None:
                raise ParseError("Unexpected '{' without a block name", lineno)
            pending_open = None
        elif kind == CLOSE:
            if active is root:
                raise ParseError("Unbalanced '}'", lineno)
            active = active.parent
        elif kind == PAIR:
            key, value = split_pair(line, lineno)
            try:
                active.parse(key, value)
            except ValueError as e:
                raise ParseError(f"Bad value for '{key}': {e}", lineno) from e
        else:
            node = resolve_node_type(line)(line)
            node.parent = active
            active = node
            pending_open = lineno

    if pending_open is not None:
        raise ParseError(f"Block '{active.key}' never opened", pending_open)
    if active is not root:
        raise ParseError(f"Unclosed block '{active.key}' at end of input")
    return root


# ── Main entry points ─────────────────────────────────────────────────

def parse_vmf_text(text):
    """Parse map text into a Node tree (no scene assembly)."""
    return build_tree(classify_lines(text))


def parse_vmf_file(path):
    """
    Parse a map file into a Node tree (no scene assembly).

    Args:
        path: path to the .vmf file

    Text is decoded as UTF-8 (BOM tolerated). Files that are not valid UTF-8
    are decoded as cp1252 with a warning; bytes cp1252 leaves undefined
    become U+FFFD.

    Returns:
        root Node
    """
    with open(path, 'rb') as f:
        data = f.read()
    try:
        text = data.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        warnings.warn(f"{path} is not valid UTF-8 ({e.reason} at byte {e.start}), "
                      f"decoding as {FALLBACK_ENCODING}")
        text = data.decode(FALLBACK_ENCODING, errors='replace')
    return parse_vmf_text(text)
