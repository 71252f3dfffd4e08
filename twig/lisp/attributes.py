"""
Attribute inference ("relabeling"): the semantic tags of a node follow from its content and its position in the tree.

The rules, in the order in which they are applied:

* a definition keyword (`define`, `define-syntax`) is a `keyword` and a `definition`; as the first child of a list it
  makes that list a `definition` too.
* a builtin operator is a `builtin`.
* a literal's type is derived from its value: empty is `proto`, a finite number is `numeric`, anything else `symbol`.
* the list in the second position of a `definition` is the `assignee`; inside an `assignee` the first child is an
  `assignee` as well and all the others are `boundVariable`s.

>>> from twig.lisp.from_python import from_python
>>> tree = from_python(("define", ("goose", "n"), ("*", "n", "42")))
>>> _ = relabel(tree, tree.root)
>>> [(node.value if is_literal(node) else '()', node.type_, sorted(node.attr)) for node in tree.all_nodes()]
... # doctest: +NORMALIZE_WHITESPACE
[('()', 'list', ['definition']),
 ('define', 'symbol', ['definition', 'keyword']),
 ('()', 'list', ['assignee']),
 ('goose', 'symbol', ['assignee']),
 ('n', 'symbol', ['boundVariable']),
 ('()', 'list', []),
 ('*', 'symbol', ['builtin']),
 ('n', 'symbol', []),
 ('42', 'numeric', [])]
"""

import logging
import re

from twig.utils import as_set
from twig.lisp.structure import NUMERIC, PROTO, SYMBOL, is_literal

logger = logging.getLogger(__name__)

BUILTIN = 'builtin'
KEYWORD = 'keyword'
DEFINITION = 'definition'
ASSIGNEE = 'assignee'
BOUND_VARIABLE = 'boundVariable'

BUILTIN_SYMBOLS = frozenset(['*', '**', '/', '+', '-', '^', '!', '|', '&'])
DEFINITION_SYMBOLS = frozenset(['define', 'define-syntax'])

# Decorations a renderer may put on nodes that carry these attributes
ATTR_LABELS = {
    ASSIGNEE: '=',
    BOUND_VARIABLE: '↓',
    KEYWORD: '*',
}

# "parses as a finite floating point number"; spelled out rather than left to float(), which also takes 'inf', 'nan',
# '1_000' and surrounding whitespace.
NUMERIC_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')


def imbue(node, attr):
    """Adds one or more attributes; returns whether anything changed.

    >>> from twig.lisp.structure import LiteralNode
    >>> node = LiteralNode('define')
    >>> imbue(node, [KEYWORD, DEFINITION])
    True
    >>> imbue(node, KEYWORD)
    False
    """
    new = as_set(attr) - node.attr
    node.attr |= new
    return len(new) > 0


def deprive(node, attr):
    """Removes one or more attributes; returns whether anything changed.

    >>> from twig.lisp.structure import LiteralNode
    >>> node = LiteralNode('x', attr=[BUILTIN])
    >>> deprive(node, [BUILTIN, KEYWORD])
    True
    >>> deprive(node, BUILTIN)
    False
    """
    old = as_set(attr) & node.attr
    node.attr -= old
    return len(old) > 0


def literal_type(value):
    """
    >>> [literal_type(v) for v in ['', '42', '-1.5e3', '.5', 'goose', '12abc', 'inf', 'nan']]
    ['proto', 'numeric', 'numeric', 'numeric', 'symbol', 'symbol', 'symbol', 'symbol']
    """
    if len(value) == 0:
        return PROTO
    if NUMERIC_PATTERN.match(value):
        return NUMERIC
    return SYMBOL


def relabel(tree, node, dirty=None):
    """Recomputes node's attributes (and, for a list, those of its descendants) from scratch.

    Relabeling a literal in first position may change whether its parent list is a definition; in that case the parent
    is re-tagged and the parent's second child (the potential assignee) is relabeled too. That is the only effect
    relabel has outside of the relabeled subtree. The ids of the nodes outside of that subtree whose attributes actually
    changed are added to `dirty`, if given, so that the caller may redraw them.

    >>> from twig.lisp.from_python import from_python
    >>> tree = from_python(("define", ("f", "a"), "x"))
    >>> _ = relabel(tree, tree.root)
    >>> dirty = set()
    >>> _ = relabel(tree, tree.node(1), dirty)
    >>> dirty
    set()
    >>> tree.node(1).value = "lambda"
    >>> _ = relabel(tree, tree.node(1), dirty)
    >>> sorted(dirty)
    [0, 2, 3, 4]
    """
    parent = tree.parent(node)
    scope = node if parent is None else parent
    before = dict((n.id, set(n.attr)) for n in tree.all_nodes(scope))

    _relabel(tree, node)

    if dirty is not None:
        own = set(n.id for n in tree.all_nodes(node))
        for n in tree.all_nodes(scope):
            if n.id not in own and n.attr != before[n.id]:
                _mark_dirty(dirty, n)

    return node


def _relabel(tree, node):
    logger.debug("relabeling %r", node)

    old_attr = node.attr
    node.attr = set()
    parent = tree.parent(node)

    if not is_literal(node):
        if parent is not None and DEFINITION in parent.attr and node.sibling_index == 1:
            imbue(node, ASSIGNEE)

        _label_by_assignee_parent(node, parent)

        for child in tree.children(node):
            _relabel(tree, child)
        return

    definition_parent = None
    if node.value in DEFINITION_SYMBOLS:
        imbue(node, [KEYWORD, DEFINITION])

    if parent is not None and node.sibling_index == 0:
        if DEFINITION in node.attr:
            imbue(parent, DEFINITION)
            definition_parent = parent
        elif DEFINITION in old_attr:
            deprive(parent, DEFINITION)
            definition_parent = parent

    if node.value in BUILTIN_SYMBOLS:
        imbue(node, BUILTIN)

    node.type_ = literal_type(node.value)

    _label_by_assignee_parent(node, parent)

    if definition_parent is not None and len(definition_parent.children) >= 2:
        _relabel(tree, tree.children(definition_parent)[1])


def _label_by_assignee_parent(node, parent):
    if parent is None or ASSIGNEE not in parent.attr:
        return

    # assigning to a function call: (define (name arg ...) ...)
    if node.sibling_index == 0:
        imbue(node, ASSIGNEE)
    else:
        imbue(node, BOUND_VARIABLE)


def _mark_dirty(dirty, node):
    logger.debug("dirtying %r", node)
    if dirty is not None:
        dirty.add(node.id)
