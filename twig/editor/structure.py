from collections import namedtuple

from twig.utils import pmts
from twig.lisp.attributes import relabel
from twig.lisp.from_python import from_python
from twig.lisp.structure import Tree, is_literal

# Where the text cursor is: `focused` is False when there is nothing to put it in (e.g. all code has been deleted)
Focus = namedtuple('Focus', ('focused', 'node_id', 'cursor_offset'))

NO_FOCUS = Focus(False, None, 0)

REFRESH_ALL = 'all'

Effects = namedtuple('Effects', (
    'refresh',       # id of the subtree whose presentation must be rebuilt | REFRESH_ALL | None
    'delete_node',   # id of a node that was removed from the tree | None
    'refocus',       # whether the text cursor must be moved to the session's focus
    'invalidated',   # frozenset of ids whose attributes changed as a side effect of the command
))

NO_EFFECTS = Effects(None, None, False, frozenset())


class EditorSession(object):
    """All of the editor's state: the tree (which carries the id counter) and the focus.

    The tree is edited in place; a new session is created for each played command.
    """

    def __init__(self, tree, focus):
        pmts(tree, Tree)
        pmts(focus, Focus)
        self.tree = tree
        self.focus = focus

    @staticmethod
    def from_python(python_obj):
        """A fresh session for a tree described as Python (see `twig.lisp.from_python`), fully relabeled, with the
        cursor at the start of the first literal."""
        tree = from_python(python_obj)

        if not tree.is_empty():
            relabel(tree, tree.root)

        focus = NO_FOCUS
        for node in tree.all_nodes():
            if is_literal(node):
                focus = Focus(True, node.id, 0)
                break

        return EditorSession(tree, focus)


def initial_effects():
    return Effects(REFRESH_ALL, None, True, frozenset())
