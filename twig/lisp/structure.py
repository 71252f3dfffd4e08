"""
The tree that is being edited: lists and literals.

Nodes live in an id-indexed table (the `Tree`); a list refers to its children by id, and each node refers to its parent
by id. Each node also caches its position among its sibblings (`sibling_index`); whoever changes a list of children
must `reindex` that list afterwards.

>>> from twig.lisp.from_python import from_python
>>> tree = from_python(("define", ("goose", "n"), ("*", "n", "n")))
>>> [(node.id, node.parent_id, node.sibling_index) for node in tree.all_nodes()][:4]
[(0, None, None), (1, 0, 0), (2, 0, 1), (3, 2, 0)]
>>> tree_to_text(tree)
'(define (goose n) (* n n))'
"""

from twig.utils import pmts

LIST = 'list'
SYMBOL = 'symbol'
NUMERIC = 'numeric'
PROTO = 'proto'

LITERAL_TYPES = (SYMBOL, NUMERIC, PROTO)


class InvalidTypeError(Exception):
    def __init__(self, type_):
        super(InvalidTypeError, self).__init__("invalid type '%s'" % (type_,))
        self.type_ = type_


class Node(object):
    type_ = None

    def __init__(self, attr=None, dropped=False):
        self.id = None
        self.attr = set(attr) if attr else set()
        self.dropped = dropped

        # set by retag / the edit operations; the root keeps None for both.
        self.parent_id = None
        self.sibling_index = None


class ListNode(Node):
    type_ = LIST

    def __init__(self, children=None, attr=None, dropped=False):
        super(ListNode, self).__init__(attr, dropped)
        self.children = list(children) if children else []

    def __repr__(self):
        return "<list #%s %s>" % (self.id, self.children)


class LiteralNode(Node):

    def __init__(self, value, type_=SYMBOL, attr=None, dropped=False):
        pmts(value, str)
        if type_ not in LITERAL_TYPES:
            raise InvalidTypeError(type_)

        super(LiteralNode, self).__init__(attr, dropped)
        self.type_ = type_
        self.value = value

    def __repr__(self):
        return "<%s #%s %r>" % (self.type_, self.id, self.value)


def is_literal(node):
    if node.type_ in LITERAL_TYPES:
        return True
    if node.type_ == LIST:
        return False
    raise InvalidTypeError(node.type_)


class Tree(object):

    def __init__(self):
        self.nodes = {}
        self.root_id = None

        # ids are handed out incrementally and never reused; deleted ids are simply left unused.
        self.last_id = -1

    @property
    def root(self):
        if self.root_id is None:
            return None
        return self.nodes[self.root_id]

    def is_empty(self):
        return self.root_id is None

    def node(self, id_):
        return self.nodes[id_]

    def parent(self, node):
        if node.parent_id is None:
            return None
        return self.nodes[node.parent_id]

    def children(self, node):
        if is_literal(node):
            return []
        return [self.nodes[child_id] for child_id in node.children]

    def next_id(self):
        self.last_id += 1
        return self.last_id

    def add(self, node):
        pmts(node, Node)
        node.id = self.next_id()
        self.nodes[node.id] = node
        return node

    def forget(self, node):
        """Removes node and all its descendants from the table (but not from their parent's children)."""
        for n in list(self.all_nodes(node)):
            del self.nodes[n.id]

    def clear(self):
        self.nodes = {}
        self.root_id = None

    def all_nodes(self, node=None):
        """Pre-order"""
        if node is None:
            if self.is_empty():
                return
            node = self.root

        yield node
        for child in self.children(node):
            yield from self.all_nodes(child)


def reindex(tree, list_node):
    for i, child in enumerate(tree.children(list_node)):
        child.sibling_index = i
    return list_node


def retag(tree):
    """Gives each list & literal of the tree a unique id, by pre-order traversal starting at 0, and tags each node with
    its parent's id and its own sibling_index.

    This renumbers all nodes, i.e. any ids held elsewhere become meaningless; it is meant to be run once, when a tree is
    constructed. Running it again on an unchanged arrangement yields the same ids.

    >>> from twig.lisp.from_python import from_python
    >>> tree = from_python((("a",), "b"))
    >>> [(node.id, repr(node)) for node in tree.all_nodes()]
    [(0, '<list #0 [1, 3]>'), (1, '<list #1 [2]>'), (2, "<symbol #2 'a'>"), (3, "<symbol #3 'b'>")]
    >>> [node.id for node in retag(tree).all_nodes()]
    [0, 1, 2, 3]
    >>> tree.last_id
    3
    """
    old_nodes = tree.nodes
    new_nodes = {}

    def tag(node, id_, parent_id, sibling_index):
        node.id = id_
        node.parent_id = parent_id
        node.sibling_index = sibling_index
        new_nodes[id_] = node

        deepest_id = id_
        if not is_literal(node):
            old_children = node.children
            node.children = []
            for i, child_id in enumerate(old_children):
                child = old_nodes[child_id]
                deepest_id = tag(child, deepest_id + 1, id_, i)
                node.children.append(child.id)

        return deepest_id

    if tree.is_empty():
        return tree

    last_id = tag(old_nodes[tree.root_id], 0, None, None)

    tree.nodes = new_nodes
    tree.root_id = 0
    tree.last_id = last_id
    return tree


# ## Textual projection

def tree_to_text(tree, node=None):
    """One-way projection of the tree (or the subtree at `node`) to text; dropped nodes start on a new, indented line.

    >>> from twig.lisp.from_python import from_python, Dropped
    >>> tree_to_text(from_python(("define", ("goose", "n"), Dropped(("*", "n", "n")))))
    '(define (goose n) \\n  (* n n))'
    >>> tree_to_text(from_python(("a", "", "b")))
    '(a  b)'
    """
    if node is None:
        if tree.is_empty():
            return ""
        node = tree.root

    indent = "\n" + "  " if node.dropped else ""

    if is_literal(node):
        if node.type_ == PROTO:
            return ""
        return indent + node.value

    return indent + "(" + " ".join(tree_to_text(tree, child) for child in tree.children(node)) + ")"
