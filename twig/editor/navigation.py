"""
Moving the text cursor across node boundaries.

Inside a literal the cursor is the business of whatever displays the text; the functions in this module only come into
play when the cursor is at the very start or end of a literal's text, or when the literal is empty and is being deleted.
Both return the new `Focus` (or None if there is nowhere to go).

>>> from twig.editor.structure import EditorSession
>>> session = EditorSession.from_python(("define", ("goose", "n"), ("*", "n", "n")))
>>> tree = session.tree
>>> [(node.id, node.value) for node in tree.all_nodes() if node.type_ != 'list']
[(1, 'define'), (3, 'goose'), (4, 'n'), (6, '*'), (7, 'n'), (8, 'n')]

Right from the end of `n` in `(goose n)` crosses into the next list:

>>> navigate_boundary(tree, tree.node(4), RIGHT)
Focus(focused=True, node_id=6, cursor_offset=0)

Left from the start of `goose` lands at the end of `define`:

>>> navigate_boundary(tree, tree.node(3), LEFT)
Focus(focused=True, node_id=1, cursor_offset=6)

There's nothing beyond the edges of the tree:

>>> navigate_boundary(tree, tree.node(8), RIGHT) is None
True
"""

from twig.lisp.structure import is_literal
from twig.editor.clef import BACKSPACE, LEFT, RIGHT
from twig.editor.structure import Focus


def _adjacent(tree, node, direction):
    """The node next to `node` in the given direction, climbing out of as many lists as required; None at the edge of
    the tree."""
    while True:
        parent = tree.parent(node)
        if parent is None:
            return None

        index = node.sibling_index + direction
        if 0 <= index < len(parent.children):
            return tree.node(parent.children[index])

        node = parent


def _literal_from(tree, node, direction):
    """Descends into `node` from the side we're coming from until a literal is found. Empty lists have no literal to
    offer; they are passed over."""
    while node is not None:
        if is_literal(node):
            return node

        if len(node.children) > 0:
            node = tree.node(node.children[0 if direction == RIGHT else -1])
        else:
            node = _adjacent(tree, node, direction)

    return None


def _focus_on(literal, direction):
    # moving left we arrive at the end of the text, moving right at its start
    return Focus(True, literal.id, len(literal.value) if direction == LEFT else 0)


def navigate_boundary(tree, node, direction):
    target = _literal_from(tree, _adjacent(tree, node, direction), direction)
    if target is None:
        return None
    return _focus_on(target, direction)


def delete_climb(tree, node, key):
    """Decides what goes when the (empty) literal `node` is deleted, and where the cursor goes next.

    A node which is the only child of its list takes the list with it, and the same question is asked one level up. The
    cursor moves out of the deleted node's way: to the left if it is the last child, to the right if it's the first,
    and otherwise in the direction of the key (Backspace: left, Delete: right).

    Returns (node_to_delete, focus); a focus of None means there's nothing left to put the cursor in.

    >>> from twig.editor.structure import EditorSession
    >>> session = EditorSession.from_python(("a", ("",), "b"))
    >>> delete_climb(session.tree, session.tree.node(3), BACKSPACE)
    (<list #2 [3]>, Focus(focused=True, node_id=1, cursor_offset=1))
    """
    parent = tree.parent(node)
    if parent is None:
        # no parent means all the code is gone, so refocusing is impossible.
        return node, None

    if len(parent.children) == 1:
        return delete_climb(tree, parent, key)

    if node.sibling_index == len(parent.children) - 1:
        direction = LEFT
    elif node.sibling_index == 0:
        direction = RIGHT
    elif key == BACKSPACE:
        direction = LEFT
    else:
        direction = RIGHT

    neighbour = tree.node(parent.children[node.sibling_index + direction])
    target = _literal_from(tree, neighbour, direction)

    if target is None:
        return node, None
    return node, _focus_on(target, direction)
