from kivy.core.text import Label
from kivy.graphics import Color, Rectangle
from kivy.logger import Logger
from kivy.metrics import pt
from kivy.uix.behaviors.focus import FocusBehavior
from kivy.uix.widget import Widget

from twig.colorscheme import color_for_attr
from twig.lisp.attributes import ATTR_LABELS
from twig.lisp.structure import NUMERIC, PROTO, is_literal, tree_to_text

from twig.editor.clef import (
    BACKSPACE,
    DELETE,
    DeleteEmpty,
    EditLiteral,
    LEFT,
    NavigateBoundary,
    RIGHT,
)
from twig.editor.construct import command_play
from twig.editor.structure import REFRESH_ALL, initial_effects

from twig.widgets.utils import (
    apply_offset,
    no_offset,
    BoxNonTerminal,
    BoxTerminal,
    bring_into_offset,
    OffsetBox,
    X,
    Y,
)

from twig.widgets.layout_constants import (
    CARET_WIDTH,
    FONT_NAME,
    FONT_SIZE_PT,
    INDENT,
    MARGIN,
    PADDING,
    PINK,
)


class TreeWidget(FocusBehavior, Widget):
    """Draws the tree as nested boxes, and turns keypresses into editor commands.

    The widget never touches the tree itself: all changes go through `command_play`, whose effects tell us which boxes
    must be rebuilt. Moving the caret _inside_ a literal's text is ours to do though; the editor only hears about the
    caret when it reaches the edge of a literal.
    """

    def __init__(self, **kwargs):
        self.session = kwargs.pop('session')

        super(TreeWidget, self).__init__(**kwargs)

        # the caret as displayed: (re)set from the session's focus whenever the editor says so.
        self.caret = self.session.focus

        # node_id -> BoxNonTerminal; a box is valid as long as neither the node nor any of its descendants changed.
        self.boxes = {}
        self.box_structure = None

        # set by the app to show the textual projection of the tree.
        self.report_text_to_app = None

        self.bind(pos=self.refresh)
        self.bind(size=self.refresh)

        self._apply_effects(initial_effects())

    # ## Section for talking to the editor
    def _handle_command(self, command):
        self.session, effects = command_play(self.session, command)
        Logger.debug("TreeWidget: %r => %r" % (command, effects))
        self._apply_effects(effects)

    def _apply_effects(self, effects):
        tree = self.session.tree

        if effects.refresh == REFRESH_ALL:
            self.boxes = {}

        elif effects.refresh is not None:
            for node in tree.all_nodes(tree.node(effects.refresh)):
                self.boxes.pop(node.id, None)
            self._invalidate(effects.refresh)

        for node_id in effects.invalidated:
            self._invalidate(node_id)

        if effects.delete_node is not None:
            # boxes of deleted nodes are simply no longer valid
            for node_id in list(self.boxes):
                if node_id not in tree.nodes:
                    del self.boxes[node_id]

        if effects.refocus or effects.delete_node is not None:
            self._set_caret(self.session.focus)

        self.refresh()

        if self.report_text_to_app is not None:
            self.report_text_to_app(tree_to_text(tree))

    def _invalidate(self, node_id):
        """The box for node_id and those of all its ancestors (which contain it) must be rebuilt."""
        tree = self.session.tree
        while node_id is not None and node_id in tree.nodes:
            self.boxes.pop(node_id, None)
            node_id = tree.node(node_id).parent_id

    def _set_caret(self, focus):
        for node_id in [self.caret.node_id, focus.node_id]:
            self._invalidate(node_id)
        self.caret = focus

    def _caret_node(self):
        if not self.caret.focused or self.caret.node_id not in self.session.tree.nodes:
            return None
        return self.session.tree.node(self.caret.node_id)

    # ## Section for keyboard & touch input
    def keyboard_on_key_down(self, window, keycode, text, modifiers):
        result = FocusBehavior.keyboard_on_key_down(self, window, keycode, text, modifiers)

        node = self._caret_node()
        if node is None:
            return result

        code, textual_code = keycode
        value, offset = node.value, self.caret.cursor_offset

        if textual_code == 'left':
            if offset == 0:
                self._handle_command(NavigateBoundary(node.id, LEFT, True))
            else:
                self._move_caret(node, offset - 1)

        elif textual_code == 'right':
            if offset == len(value):
                self._handle_command(NavigateBoundary(node.id, RIGHT, True))
            else:
                self._move_caret(node, offset + 1)

        elif textual_code == 'home':
            self._move_caret(node, 0)

        elif textual_code == 'end':
            self._move_caret(node, len(value))

        elif textual_code == 'backspace':
            if len(value) == 0:
                self._handle_command(DeleteEmpty(node.id, BACKSPACE))
            elif offset > 0:
                self._handle_command(EditLiteral(node.id, value[:offset - 1] + value[offset:], offset - 1))

        elif textual_code == 'delete':
            if len(value) == 0:
                self._handle_command(DeleteEmpty(node.id, DELETE))
            elif offset < len(value):
                self._handle_command(EditLiteral(node.id, value[:offset] + value[offset + 1:], offset))

        return result

    def keyboard_on_textinput(self, window, text):
        node = self._caret_node()
        if node is None:
            return

        value, offset = node.value, self.caret.cursor_offset
        self._handle_command(EditLiteral(node.id, value[:offset] + text + value[offset:], offset + len(text)))

    def _move_caret(self, node, offset):
        self._set_caret(self.caret._replace(node_id=node.id, cursor_offset=offset))
        self.refresh()

    def on_touch_down(self, touch):
        # see https://kivy.org/docs/guide/inputs.html#touch-event-basics
        # Basically:
        # 1. Kivy (intentionally) does not limit its passing of touch events to widgets that it applies to, you
        #   need to do this youself
        # 2. You need to call super and return its value
        ret = super(TreeWidget, self).on_touch_down(touch)

        if not self.collide_point(*touch.pos):
            return ret

        self.focus = True
        touch.grab(self)

        if self.box_structure is None:
            return ret

        clicked_id = self.box_structure.from_point(bring_into_offset(self.offset, (touch.x, touch.y)))
        if clicked_id is not None:
            clicked = self.session.tree.node(clicked_id)
            if is_literal(clicked):
                self._set_caret(self.caret._replace(focused=True, node_id=clicked.id, cursor_offset=len(clicked.value)))
                self.refresh()

        return ret

    def on_touch_up(self, touch):
        # Taken from the docs: https://kivy.org/docs/guide/inputs.html#grabbing-touch-events
        if touch.grab_current is self:
            self.focus = True
            touch.ungrab(self)
            return True

    # ## Section for drawing boxes
    def refresh(self, *args):
        """refresh means: redraw (I suppose we could rename, but I believe it's "canonical Kivy" to use 'refresh'"""
        self.canvas.clear()

        self.offset = (self.pos[X], self.pos[Y] + self.size[Y])  # default offset: start on top_left

        with self.canvas:
            Color(1, 1, 1, 1)
            Rectangle(pos=self.pos, size=self.size,)

        tree = self.session.tree
        if tree.is_empty():
            # all the code is gone; an empty editor is all there is to show.
            self.box_structure = None
            return

        with apply_offset(self.canvas, self.offset):
            self.box_structure = self._nt_for_node(tree.root)
            self._render_box(self.box_structure)

    def _nt_for_node(self, node):
        if node.id not in self.boxes:
            if is_literal(node):
                self.boxes[node.id] = self._nt_for_literal(node)
            else:
                self.boxes[node.id] = self._nt_for_list(node)
        return self.boxes[node.id]

    def _nt_for_literal(self, node):
        is_cursor = self.caret.focused and node.id == self.caret.node_id

        labels = "".join(ATTR_LABELS[a] for a in sorted(node.attr) if a in ATTR_LABELS)
        text_color = Color(*color_for_attr(node.attr, node.type_ == NUMERIC))

        caret_at = None
        if is_cursor:
            before_caret = labels + node.value[:self.caret.cursor_offset]
            caret_at = self._texture_for_text(before_caret).width if before_caret else 0

        t = self._t_for_text(labels + node.value, self.color_for_node(node, is_cursor), text_color, caret_at)
        return BoxNonTerminal(node.id, [], [no_offset(t)])

    def _nt_for_list(self, node):
        # A list is drawn on a single line, except for its dropped children which each start a new, indented line.
        tree = self.session.tree
        box_color = self.color_for_node(node, False)
        paren_color = Color(0, 0, 0, 1)

        t = self._t_for_text("(", box_color, paren_color)
        offset_terminals = [
            no_offset(t),
        ]
        offset_nonterminals = []

        offset_right = t.outer_dimensions[X]
        offset_down = 0
        line_height = t.outer_dimensions[Y]

        for child in tree.children(node):
            if child.dropped:
                offset_down += line_height
                offset_right = INDENT
                line_height = 0

            nt = self._nt_for_node(child)
            offset_nonterminals.append(OffsetBox((offset_right, offset_down), nt))

            # continue right after the final drawn item, which may be on a lower line than where the child started
            last_drawn = nt.get_all_terminals()[-1]
            offset_right += last_drawn.offset[X] + last_drawn.item.outer_dimensions[X]
            offset_down += last_drawn.offset[Y]
            line_height = min(line_height, last_drawn.item.outer_dimensions[Y])

        t = self._t_for_text(")", box_color, paren_color)
        offset_terminals.append(OffsetBox((offset_right, offset_down), t))

        return BoxNonTerminal(node.id, offset_nonterminals, offset_terminals)

    def color_for_node(self, node, is_cursor):
        if is_cursor:
            return Color(0.95, 0.95, 0.95, 1)  # Ad Hoc Grey
        if node.type_ == PROTO:
            return Color(*PINK)
        return Color(1, 1, 0.97, 1)  # Ad Hoc Light Yellow

    def _t_for_text(self, text, box_color, text_color, caret_at=None):
        text_texture = self._texture_for_text(text)
        content_height = text_texture.height
        content_width = text_texture.width

        top_left = 0, 0
        bottom_left = (top_left[X], top_left[Y] - PADDING - MARGIN - content_height - MARGIN - PADDING)
        bottom_right = (bottom_left[X] + PADDING + MARGIN + content_width + MARGIN + PADDING, bottom_left[Y])

        instructions = [
            box_color,
            Rectangle(
                pos=(bottom_left[0] + PADDING, bottom_left[1] + PADDING),
                size=(content_width + 2 * MARGIN, content_height + 2 * MARGIN),
                ),
            text_color,
            Rectangle(
                pos=(bottom_left[0] + PADDING + MARGIN, bottom_left[1] + PADDING + MARGIN),
                size=text_texture.size,
                texture=text_texture,
                ),
        ]

        if caret_at is not None:
            instructions += [
                Color(0, 0, 0, 1),
                Rectangle(
                    pos=(bottom_left[0] + PADDING + MARGIN + caret_at, bottom_left[1] + PADDING + MARGIN),
                    size=(CARET_WIDTH, content_height),
                    ),
            ]

        return BoxTerminal(instructions, bottom_right)

    def _render_box(self, box):
        for o, t in box.offset_terminals:
            with apply_offset(self.canvas, o):
                for instruction in t.instructions:
                    self.canvas.add(instruction)

        for o, nt in box.offset_nonterminals:
            with apply_offset(self.canvas, o):
                self._render_box(nt)

    def _texture_for_text(self, text):
        kw = {
            'font_size': pt(FONT_SIZE_PT),
            'font_name': FONT_NAME,
            'bold': True,
            'anchor_x': 'left',
            'anchor_y': 'top',
            'padding_x': 0,
            'padding_y': 0,
            'padding': (0, 0)}

        # an empty text has no texture; a proto is drawn as a space
        label = Label(text=text or " ", **kw)
        label.refresh()
        return label.texture
