MARGIN = 5
PADDING = 3

# horizontal offset of a dropped node, relative to the start of its list
INDENT = 30

CARET_WIDTH = 2

FONT_NAME = 'DejaVuSans'
FONT_SIZE_PT = 13

PINK = (1, 0.8, 0.8, 1)
