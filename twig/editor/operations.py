"""
Structural edits on the tree. Each of these leaves the sibling indexes consistent; none of them renumbers existing nodes.
"""

import logging

from twig.utils import pmts
from twig.lisp.attributes import relabel
from twig.lisp.structure import LiteralNode, Node, SYMBOL, is_literal, reindex

logger = logging.getLogger(__name__)


def insert_sibling_after(tree, sibling, value):
    """Inserts a fresh (symbol, untagged) literal right after `sibling` and returns it.

    >>> from twig.lisp.from_python import from_python
    >>> tree = from_python(("a", "b"))
    >>> new = insert_sibling_after(tree, tree.node(1), "c")
    >>> new.id, new.sibling_index, [n.value for n in tree.children(tree.root)]
    (3, 1, ['a', 'c', 'b'])
    >>> tree.node(2).sibling_index
    2
    """
    pmts(sibling, Node)
    parent = tree.parent(sibling)
    assert parent is not None, "adding sibblings to the root is not possible (it would lead to a forest)"

    node = tree.add(LiteralNode(value, SYMBOL))
    node.parent_id = parent.id
    parent.children.insert(sibling.sibling_index + 1, node.id)

    reindex(tree, parent)
    logger.debug("inserted %r after %r", node, sibling)
    return node


def split_literal(tree, node, offset, dirty=None):
    """Splits a literal at `offset`, the position where the trigger (a space) was typed. The text left of the trigger
    stays with node, the rest goes to a new sibling right after it. Returns the new sibling.

    The sibblings after node have all moved one position to the right, so the whole parent list is relabeled: position
    decides who is the assignee.

    >>> from twig.lisp.from_python import from_python
    >>> tree = from_python(("abn",))
    >>> right = split_literal(tree, tree.node(1), 2)
    >>> tree.node(1).value, right.value, right.type_
    ('ab', 'n', 'symbol')
    >>> split_literal(tree, right, 1).type_
    'proto'

    >>> tree = from_python(("define", ("f", "x"), "y"))
    >>> _ = relabel(tree, tree.root)
    >>> sorted(tree.node(2).attr)
    ['assignee']
    >>> new = split_literal(tree, tree.node(1), 6)
    >>> new.sibling_index, tree.node(2).sibling_index, tree.node(2).attr, tree.node(4).attr
    (1, 2, set(), set())
    """
    assert is_literal(node), "only literals can be split"

    left_value = node.value[:offset]
    right_value = node.value[offset:]

    node.value = left_value
    new_node = insert_sibling_after(tree, node, right_value)

    relabel(tree, tree.parent(node), dirty)
    return new_node


def delete_child(tree, node):
    """Removes node (and its descendants) from the tree; returns it.

    >>> from twig.lisp.from_python import from_python
    >>> tree = from_python(("a", ("b",), "c"))
    >>> delete_child(tree, tree.node(2)).id
    2
    >>> [n.sibling_index for n in tree.children(tree.root)], sorted(tree.nodes)
    ([0, 1], [0, 1, 4])
    """
    parent = tree.parent(node)
    assert parent is not None, "the root cannot be deleted as a child"

    logger.debug("deleting %r", node)

    del parent.children[node.sibling_index]
    reindex(tree, parent)
    tree.forget(node)
    return node
