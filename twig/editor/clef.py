"""
The commands that the input layer sends to the editor; each of them names the literal that has the text cursor.

Raw key capture and text composition are not modelled here: by the time a command is sent, the input layer has already
decided what the new text of the literal is, or that the cursor is at one of the literal's boundaries.
"""

# Directions are modelled as the step to take in a list of sibblings.
LEFT = -1
RIGHT = 1

# Keys that trigger deletion of an empty literal (Kivy's names for them)
BACKSPACE = 'backspace'
DELETE = 'delete'

# Typing this character splits a literal in two.
SPLIT_TRIGGER = ' '


class Command(object):
    pass


class EditLiteral(Command):
    def __init__(self, node_id, text, cursor_offset):
        """text: the literal's text after the edit; cursor_offset: the cursor position in that text"""
        self.node_id = node_id
        self.text = text
        self.cursor_offset = cursor_offset

    def __repr__(self):
        return "(EDIT %s %r %s)" % (self.node_id, self.text, self.cursor_offset)


class DeleteEmpty(Command):
    def __init__(self, node_id, key):
        assert key in (BACKSPACE, DELETE)
        self.node_id = node_id
        self.key = key

    def __repr__(self):
        return "(DELETE-EMPTY %s %s)" % (self.node_id, self.key)


class NavigateBoundary(Command):
    def __init__(self, node_id, direction, at_boundary):
        assert direction in (LEFT, RIGHT)
        self.node_id = node_id
        self.direction = direction
        self.at_boundary = at_boundary

    def __repr__(self):
        return "(NAVIGATE %s %s %s)" % (self.node_id, self.direction, self.at_boundary)
