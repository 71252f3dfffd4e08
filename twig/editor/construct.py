import logging

from twig.lisp.attributes import relabel
from twig.lisp.structure import is_literal

from twig.editor.clef import (
    DeleteEmpty,
    EditLiteral,
    NavigateBoundary,
    SPLIT_TRIGGER,
)
from twig.editor.navigation import delete_climb, navigate_boundary
from twig.editor.operations import delete_child, split_literal
from twig.editor.structure import EditorSession, Effects, Focus, NO_EFFECTS, NO_FOCUS

logger = logging.getLogger(__name__)


def command_play(session, command):
    # :: EditorSession, Command => (new) EditorSession, Effects
    #
    # The tree is edited in place; the returned session shares it with the given one. Effects are only a description of
    # what the presentation layer must do; it's up to the caller to decide when to do it.
    logger.debug("playing %r", command)

    if not isinstance(command, (EditLiteral, DeleteEmpty, NavigateBoundary)):
        raise Exception("Unknown command %s" % type(command).__name__)

    tree = session.tree

    def unchanged():
        return session, NO_EFFECTS

    if tree.is_empty() or command.node_id not in tree.nodes:
        return unchanged()

    node = tree.node(command.node_id)
    if not is_literal(node):
        return unchanged()  # all commands are about the text in literals

    dirty = set()

    def with_effects(focus, refresh=None, delete_node=None, refocus=True):
        invalidated = frozenset(id_ for id_ in dirty if id_ in tree.nodes)
        return EditorSession(tree, focus), Effects(refresh, delete_node, refocus, invalidated)

    if isinstance(command, EditLiteral):
        text, cursor_offset = command.text, command.cursor_offset

        if cursor_offset > 0 and text[cursor_offset - 1:cursor_offset] == SPLIT_TRIGGER and node.parent_id is not None:
            # a space means we're adding another element to the parent
            node.value = text[:cursor_offset - 1] + text[cursor_offset:]
            new_node = split_literal(tree, node, cursor_offset - 1, dirty)
            return with_effects(Focus(True, new_node.id, 0), refresh=node.parent_id)

        node.value = text
        relabel(tree, node, dirty)
        return with_effects(Focus(True, node.id, cursor_offset), refresh=node.id)

    if isinstance(command, DeleteEmpty):
        if len(node.value) > 0:
            return unchanged()

        to_delete, focus = delete_climb(tree, node, command.key)
        parent = tree.parent(to_delete)

        if parent is None:
            # the climb reached the root: all the code is gone.
            tree.clear()
            return with_effects(NO_FOCUS, delete_node=to_delete.id, refocus=False)

        delete_child(tree, to_delete)

        # the remaining sibblings have shifted; their position-dependent attributes may have changed.
        relabel(tree, parent, dirty)

        if focus is None:
            return with_effects(NO_FOCUS, refresh=parent.id, delete_node=to_delete.id, refocus=False)
        return with_effects(focus, refresh=parent.id, delete_node=to_delete.id)

    if isinstance(command, NavigateBoundary):
        if not command.at_boundary:
            return unchanged()

        focus = navigate_boundary(tree, node, command.direction)
        if focus is None:
            return unchanged()
        return with_effects(focus)
