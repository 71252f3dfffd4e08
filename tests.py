import unittest
import doctest
from importlib.util import find_spec
from unittest import mock

from twig import __main__ as launcher, utils
from twig.lisp import attributes, from_python as lisp_from_python, structure
from twig.editor import navigation, operations

from twig.editor.clef import BACKSPACE, DELETE, LEFT, RIGHT, DeleteEmpty, EditLiteral, NavigateBoundary
from twig.editor.construct import command_play
from twig.editor.structure import EditorSession, NO_EFFECTS
from twig.lisp.attributes import ASSIGNEE, BOUND_VARIABLE, BUILTIN, DEFINITION, KEYWORD, relabel
from twig.lisp.from_python import GOOSE, Dropped, from_python
from twig.lisp.structure import (
    InvalidTypeError,
    NUMERIC,
    PROTO,
    SYMBOL,
    is_literal,
    retag,
    tree_to_text,
)
from twig.editor.operations import delete_child, insert_sibling_after, split_literal


def literals(tree):
    return [node for node in tree.all_nodes() if is_literal(node)]


class TreeConsistencyMixin(object):

    def assertConsistent(self, tree):
        seen = set()
        for node in tree.all_nodes():
            self.assertNotIn(node.id, seen)
            seen.add(node.id)
            self.assertIs(tree.nodes[node.id], node)

            parent = tree.parent(node)
            if parent is None:
                self.assertEqual(tree.root_id, node.id)
                continue

            self.assertIs(tree.children(parent)[node.sibling_index], node)

            if is_literal(node):
                self.assertEqual(node.type_ == PROTO, node.value == "")

        # nothing in the table that isn't in the tree
        self.assertEqual(seen, set(tree.nodes))

    def assertLabelsSettled(self, tree):
        # relabeling everything from scratch must not change a thing
        before = dict((node.id, set(node.attr)) for node in tree.all_nodes())
        if not tree.is_empty():
            relabel(tree, tree.root)
        self.assertEqual(before, dict((node.id, node.attr) for node in tree.all_nodes()))


class StructureTestCase(TreeConsistencyMixin, unittest.TestCase):

    def test_serialization_of_dropped_nodes(self):
        tree = from_python(GOOSE)
        self.assertEqual("(define (goose n) \n  (* n n))", tree_to_text(tree))

    def test_concise_and_full_descriptions_agree(self):
        concise = from_python(("define", ("goose", "n"), Dropped(("*", "n", "n"))))
        self.assertEqual(tree_to_text(from_python(GOOSE)), tree_to_text(concise))

    def test_full_description_keeps_attributes(self):
        tree = from_python(GOOSE)
        self.assertEqual({KEYWORD, DEFINITION}, tree.node(1).attr)
        self.assertEqual({ASSIGNEE}, tree.node(2).attr)
        self.assertTrue(tree.node(5).dropped)

    def test_retag_is_idempotent(self):
        tree = from_python(GOOSE)
        before = [(node.id, node.parent_id, node.sibling_index) for node in tree.all_nodes()]
        retag(tree)
        self.assertEqual(before, [(node.id, node.parent_id, node.sibling_index) for node in tree.all_nodes()])
        self.assertEqual(8, tree.last_id)
        self.assertConsistent(tree)

    def test_invalid_types(self):
        self.assertRaises(InvalidTypeError, from_python, {'type': 'vector'})
        self.assertRaises(InvalidTypeError, structure.LiteralNode, "x", structure.LIST)

        tree = from_python(("a",))
        tree.node(1).type_ = 'vector'
        self.assertRaises(InvalidTypeError, is_literal, tree.node(1))
        self.assertRaises(InvalidTypeError, tree_to_text, tree)

    def test_empty_lists(self):
        tree = from_python(((), "a"))
        self.assertEqual("(() a)", tree_to_text(tree))
        self.assertConsistent(tree)


class RelabelTestCase(unittest.TestCase):

    def relabeled(self, python_obj):
        tree = from_python(python_obj)
        relabel(tree, tree.root)
        return tree

    def test_literal_types(self):
        tree = self.relabeled(("42", "", "x", "3.5"))
        self.assertEqual([NUMERIC, PROTO, SYMBOL, NUMERIC], [node.type_ for node in literals(tree)])

    def test_definition(self):
        tree = self.relabeled(("define", "x"))
        self.assertEqual({KEYWORD, DEFINITION}, tree.node(1).attr)
        self.assertEqual({DEFINITION}, tree.root.attr)

    def test_definition_keyword_elsewhere_does_not_define_the_list(self):
        tree = self.relabeled(("x", "define-syntax"))
        self.assertEqual({KEYWORD, DEFINITION}, tree.node(2).attr)
        self.assertEqual(set(), tree.root.attr)

    def test_builtins(self):
        tree = self.relabeled(("**", "&", "plus"))
        self.assertEqual([{BUILTIN}, {BUILTIN}, set()], [node.attr for node in literals(tree)])

    def test_assignee_and_bound_variables(self):
        tree = self.relabeled(("define", ("f", "a", "b"), ("+", "a", "b")))
        self.assertEqual({ASSIGNEE}, tree.node(2).attr)
        self.assertEqual(
            [{ASSIGNEE}, {BOUND_VARIABLE}, {BOUND_VARIABLE}], [n.attr for n in tree.children(tree.node(2))])
        self.assertEqual(set(), tree.node(6).attr)

    def test_changing_the_keyword_propagates_one_hop(self):
        tree = self.relabeled(("define", ("f", "a"), "x"))
        dirty = set()

        tree.node(1).value = "lambda"
        relabel(tree, tree.node(1), dirty)

        self.assertEqual({0, 2, 3, 4}, dirty)
        self.assertEqual(set(), tree.root.attr)
        self.assertEqual(set(), tree.node(2).attr)
        self.assertEqual(set(), tree.node(3).attr)

    def test_relabel_without_changes_reports_nothing(self):
        tree = self.relabeled(("define", ("f", "a")))
        dirty = set()
        relabel(tree, tree.node(1), dirty)
        self.assertEqual(set(), dirty)

    def test_relabeling_a_list_reports_nothing_outside_of_it(self):
        tree = self.relabeled(("define", ("f", "a"), "x"))
        dirty = set()
        relabel(tree, tree.root, dirty)
        relabel(tree, tree.node(2), dirty)
        self.assertEqual(set(), dirty)

    def test_tag_mutators(self):
        node = structure.LiteralNode("x")
        self.assertTrue(attributes.imbue(node, {KEYWORD, BUILTIN}))
        self.assertFalse(attributes.imbue(node, [KEYWORD]))
        self.assertTrue(attributes.deprive(node, KEYWORD))
        self.assertFalse(attributes.deprive(node, KEYWORD))
        self.assertEqual({BUILTIN}, node.attr)


class OperationsTestCase(TreeConsistencyMixin, unittest.TestCase):

    def test_split(self):
        tree = from_python(("abn",))
        right = split_literal(tree, tree.node(1), 2)

        self.assertEqual(["ab", "n"], [node.value for node in literals(tree)])
        self.assertEqual(SYMBOL, right.type_)
        self.assertConsistent(tree)

    def test_split_at_the_end_gives_a_proto(self):
        tree = from_python(("ab",))
        right = split_literal(tree, tree.node(1), 2)
        self.assertEqual(PROTO, right.type_)
        self.assertConsistent(tree)

    def test_split_at_the_start_leaves_a_proto(self):
        tree = from_python(("ab", "c"))
        right = split_literal(tree, tree.node(1), 0)
        self.assertEqual(PROTO, tree.node(1).type_)
        self.assertEqual(("ab", 1), (right.value, right.sibling_index))
        self.assertEqual(2, tree.node(2).sibling_index)
        self.assertConsistent(tree)

    def test_split_moves_the_assignee_along(self):
        tree = from_python(("define", ("f", "x"), "y"))
        relabel(tree, tree.root)

        split_literal(tree, tree.node(1), 6)

        self.assertEqual(2, tree.node(2).sibling_index)
        self.assertEqual([set(), set(), set()], [tree.node(i).attr for i in (2, 3, 4)])
        self.assertConsistent(tree)
        self.assertLabelsSettled(tree)

    def test_insertions_get_fresh_ids(self):
        tree = from_python(("a", ("b",)))
        ids = set(tree.nodes)

        for node in [tree.node(1), tree.node(3), tree.node(2)]:
            new = insert_sibling_after(tree, node, "x")
            self.assertNotIn(new.id, ids)
            ids.add(new.id)
            self.assertConsistent(tree)

        self.assertEqual(ids, set(tree.nodes))

    def test_ids_of_deleted_nodes_are_not_reused(self):
        tree = from_python(("a", "b"))
        deleted = delete_child(tree, tree.node(2))
        new = insert_sibling_after(tree, tree.node(1), "c")

        self.assertNotEqual(deleted.id, new.id)
        self.assertConsistent(tree)

    def test_delete_keeps_other_ids(self):
        tree = from_python(("a", ("b", "c"), "d"))
        delete_child(tree, tree.node(3))

        self.assertEqual([0, 1, 2, 4, 5], [node.id for node in tree.all_nodes()])
        self.assertConsistent(tree)

    def test_cannot_add_sibblings_to_the_root(self):
        tree = from_python(("a",))
        self.assertRaises(AssertionError, insert_sibling_after, tree, tree.root, "x")
        self.assertRaises(AssertionError, delete_child, tree, tree.root)


class NavigationTestCase(unittest.TestCase):

    def test_right_into_a_nested_list(self):
        session = EditorSession.from_python((("a", "b"), (("c",), "d")))
        focus = navigation.navigate_boundary(session.tree, session.tree.node(3), RIGHT)
        self.assertEqual((True, 6, 0), focus)

    def test_left_lands_at_the_end(self):
        session = EditorSession.from_python((("a", "bcd"), "e"))
        focus = navigation.navigate_boundary(session.tree, session.tree.node(4), LEFT)
        self.assertEqual((True, 3, 3), focus)

    def test_delete_climb_follows_the_key_in_the_middle(self):
        session = EditorSession.from_python(("a", "", "b"))
        tree = session.tree

        self.assertEqual((True, 1, 1), navigation.delete_climb(tree, tree.node(2), BACKSPACE)[1])
        self.assertEqual((True, 3, 0), navigation.delete_climb(tree, tree.node(2), DELETE)[1])

    def test_delete_climb_recurses_to_the_parent(self):
        session = EditorSession.from_python(("a", ("",)))
        tree = session.tree

        to_delete, focus = navigation.delete_climb(tree, tree.node(3), DELETE)
        self.assertIs(tree.node(2), to_delete)
        self.assertEqual((True, 1, 1), focus)

    def test_delete_climb_at_the_root(self):
        session = EditorSession.from_python(("",))
        to_delete, focus = navigation.delete_climb(session.tree, session.tree.node(1), DELETE)
        self.assertIs(session.tree.root, to_delete)
        self.assertIsNone(focus)


class CommandPlayTestCase(TreeConsistencyMixin, unittest.TestCase):

    def play(self, session, *commands):
        for command in commands:
            session, effects = command_play(session, command)
            self.assertConsistent(session.tree)
            self.assertLabelsSettled(session.tree)
        return session, effects

    def test_typing_a_program(self):
        session = EditorSession.from_python(("",))
        session, effects = self.play(
            session,
            EditLiteral(1, "d", 1),
            EditLiteral(1, "define", 6),
            EditLiteral(1, "define ", 7),
        )
        self.assertEqual(2, session.focus.node_id)

        session, effects = self.play(
            session,
            EditLiteral(2, "x", 1),
            EditLiteral(2, "x ", 2),
            EditLiteral(3, "42", 2),
        )

        self.assertEqual("(define x 42)", tree_to_text(session.tree))
        self.assertEqual(NUMERIC, session.tree.node(3).type_)
        self.assertEqual({DEFINITION}, session.tree.root.attr)

    def test_splitting_the_keyword_shifts_the_assignee(self):
        session = EditorSession.from_python(("define", ("f", "x"), "y"))
        self.assertEqual({ASSIGNEE}, session.tree.node(2).attr)

        session, effects = self.play(session, EditLiteral(1, "define ", 7))

        tree = session.tree
        self.assertEqual((6, 1), (session.focus.node_id, tree.node(6).sibling_index))
        self.assertEqual([set(), set(), set()], [tree.node(i).attr for i in (2, 3, 4)])
        self.assertEqual({DEFINITION}, tree.root.attr)

        # the shifted list is inside the refreshed subtree
        self.assertEqual(0, effects.refresh)
        self.assertIn(2, [node.id for node in tree.all_nodes(tree.node(effects.refresh))])

    def test_splitting_inside_the_assignee_keeps_the_definition(self):
        session = EditorSession.from_python(("define", ("f", "x"), "y"))
        session, effects = self.play(session, EditLiteral(3, "f ", 2))

        tree = session.tree
        self.assertEqual(2, effects.refresh)
        self.assertEqual(frozenset(), effects.invalidated)
        self.assertEqual(
            [{ASSIGNEE}, {BOUND_VARIABLE}, {BOUND_VARIABLE}], [node.attr for node in tree.children(tree.node(2))])

    def test_edit_without_trigger(self):
        session = EditorSession.from_python(("ab",))
        session, effects = command_play(session, EditLiteral(1, "a b", 1))

        self.assertEqual("a b", session.tree.node(1).value)
        self.assertEqual(1, effects.refresh)
        self.assertEqual((True, 1, 1), session.focus)

    def test_deleting_all_and_nothing_more(self):
        session = EditorSession.from_python((("",),))
        session, effects = self.play(session, DeleteEmpty(2, BACKSPACE))

        self.assertTrue(session.tree.is_empty())
        self.assertFalse(effects.refocus)
        self.assertEqual(0, effects.delete_node)

        self.assertEqual(NO_EFFECTS, command_play(session, DeleteEmpty(2, BACKSPACE))[1])

    def test_navigation_past_the_edge_is_a_noop(self):
        session = EditorSession.from_python(("a",))
        new_session, effects = command_play(session, NavigateBoundary(1, LEFT, True))

        self.assertIs(session, new_session)
        self.assertEqual(NO_EFFECTS, effects)

    def test_commands_on_lists_are_ignored(self):
        session = EditorSession.from_python((("a",),))
        self.assertEqual(NO_EFFECTS, command_play(session, EditLiteral(1, "x", 1))[1])

    def test_invalid_type_aborts_the_command(self):
        session = EditorSession.from_python(("a",))
        session.tree.node(1).type_ = 'vector'
        self.assertRaises(InvalidTypeError, command_play, session, EditLiteral(1, "b", 1))

    def test_unknown_command(self):
        session = EditorSession.from_python(("a",))
        self.assertRaises(Exception, command_play, session, object())

    def test_invalidated_only_contains_live_nodes(self):
        session = EditorSession.from_python(("define", ("f", "x"), "y"))
        session, effects = command_play(session, EditLiteral(1, "def", 3))

        self.assertEqual({0, 2, 3, 4}, effects.invalidated)
        for node_id in effects.invalidated:
            self.assertIn(node_id, session.tree.nodes)


class LauncherTestCase(unittest.TestCase):

    def test_missing_kivy_is_reported(self):
        with mock.patch.object(launcher, 'find_spec', return_value=None):
            with self.assertRaises(SystemExit) as context:
                launcher.main()
        self.assertIn("gui", str(context.exception.code))


@unittest.skipIf(find_spec("kivy") is None, "needs Kivy")
class ColorSchemeTestCase(unittest.TestCase):

    def test_colors(self):
        from twig import colorscheme
        self.assertEqual([0.0, 0.0, 1.0, 1.0], colorscheme.rgba(0, 0, 255, 255))
        self.assertRaises(Exception, colorscheme.rgba, [0, 0, 0, 255])
        self.assertEqual(colorscheme.NUMERIC_COLOR, colorscheme.color_for_attr(set(), True))
        self.assertEqual(colorscheme.color2, colorscheme.color_for_attr({DEFINITION, KEYWORD}, False))


def load_tests(loader, tests, ignore):
    # Test the docstrings inside our actual codebase
    tests.addTests(doctest.DocTestSuite(utils))
    tests.addTests(doctest.DocTestSuite(structure))
    tests.addTests(doctest.DocTestSuite(lisp_from_python))
    tests.addTests(doctest.DocTestSuite(attributes))
    tests.addTests(doctest.DocTestSuite(operations))
    tests.addTests(doctest.DocTestSuite(navigation))

    # Some tests in the doctests style are too large to nicely fit into a docstring; better to keep them separate:
    tests.addTests(doctest.DocFileSuite("doctests/command_play.txt"))
    tests.addTests(doctest.DocFileSuite("doctests/climbing.txt"))

    return tests


if __name__ == '__main__':
    unittest.main()
