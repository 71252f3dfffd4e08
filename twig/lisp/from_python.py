from collections import namedtuple

from twig.lisp.structure import LIST, LITERAL_TYPES, PROTO, SYMBOL, InvalidTypeError, ListNode, LiteralNode, Tree, retag

# Marks the wrapped item as "dropped", i.e. to be displayed on a line of its own.
Dropped = namedtuple('Dropped', ('item',))


def from_python(python_obj):
    """
    Constructs a tree given a Python-modelling of it, as such:

    * Python tuples being interpreted as lists
    * Python strings being interpreted as literals (the empty string as a proto)
    * `Dropped(...)` marking its item as dropped
    * Python dicts being interpreted as full node descriptions, with keys `type`, `value` (literals), `children`
      (lists), `attr` and `dropped`

    The tree is id-tagged, but not relabeled: a literal's type and attributes are as described (for strings: symbol or
    proto, no attributes).

    >>> tree = from_python(("foo", Dropped(("bar", ""))))
    >>> [(node.type_, node.dropped) for node in tree.all_nodes()]
    [('list', False), ('symbol', False), ('list', True), ('symbol', False), ('proto', False)]

    >>> from_python({'type': 'vector', 'children': []})
    Traceback (most recent call last):
    ...
    twig.lisp.structure.InvalidTypeError: invalid type 'vector'
    """
    tree = Tree()
    tree.root_id = _node_from_python(tree, python_obj, False).id
    return retag(tree)


def _node_from_python(tree, python_obj, dropped):
    # children are added to the tree before their parents; retag puts the ids in their final (pre-order) shape.
    if isinstance(python_obj, Dropped):
        return _node_from_python(tree, python_obj.item, True)

    if isinstance(python_obj, tuple):
        children = [_node_from_python(tree, child, False) for child in python_obj]
        return tree.add(ListNode([child.id for child in children], dropped=dropped))

    if isinstance(python_obj, str):
        return tree.add(LiteralNode(python_obj, PROTO if python_obj == "" else SYMBOL, dropped=dropped))

    if isinstance(python_obj, dict):
        type_ = python_obj.get('type')
        attr = python_obj.get('attr', ())
        dropped = dropped or python_obj.get('dropped', False)

        if type_ == LIST:
            children = [_node_from_python(tree, child, False) for child in python_obj.get('children', [])]
            return tree.add(ListNode([child.id for child in children], attr, dropped))

        if type_ in LITERAL_TYPES:
            return tree.add(LiteralNode(python_obj.get('value', ""), type_, attr, dropped))

        raise InvalidTypeError(type_)

    raise Exception("Not a tree description: %s" % type(python_obj))


# The program the editor starts out with
GOOSE = {
    'type': 'list',
    'attr': ['definition'],
    'children': [
        {'type': 'symbol', 'attr': ['keyword', 'definition'], 'value': 'define'},
        {
            'type': 'list',
            'attr': ['assignee'],
            'children': [
                {'type': 'symbol', 'attr': ['assignee'], 'value': 'goose'},
                {'type': 'symbol', 'attr': ['boundVariable'], 'value': 'n'},
            ],
        },
        {
            'type': 'list',
            'attr': [],
            'dropped': True,
            'children': [
                {'type': 'symbol', 'attr': ['builtin'], 'value': '*'},
                {'type': 'symbol', 'attr': [], 'value': 'n'},
                {'type': 'symbol', 'attr': [], 'value': 'n'},
            ],
        },
    ],
}
