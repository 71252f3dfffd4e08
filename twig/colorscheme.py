from kivy.utils import get_color_from_hex

from twig.lisp.attributes import ASSIGNEE, BOUND_VARIABLE, BUILTIN, DEFINITION, KEYWORD


def rgba(s, *args):
    '''Return a Kivy color (4 value from 0-1 range) from either a hex string or
    separate 0-255 values.
    '''
    if isinstance(s, str):
        return get_color_from_hex(s)
    elif isinstance(s, (int, float)):
        return [x / 255. for x in [s] + list(args)]
    raise Exception('Invalid value (not a string / number)')


color1 = rgba(153, 0, 0, 255)
color2 = rgba(115, 0, 230, 255)
color3 = rgba(0, 0, 179, 255)
color4 = rgba(0, 115, 230, 255)
color5 = rgba(79, 153, 0, 255)
color6 = rgba(0, 179, 179, 255)

# Text colors for literals, by attribute; the first matching attribute in this order wins.
ATTR_COLORS = [
    (KEYWORD, color2),
    (BUILTIN, color1),
    (ASSIGNEE, color3),
    (BOUND_VARIABLE, color5),
    (DEFINITION, color2),
]

NUMERIC_COLOR = color6
SYMBOL_COLOR = color4


def color_for_attr(attr, numeric):
    for attribute, color in ATTR_COLORS:
        if attribute in attr:
            return color
    return NUMERIC_COLOR if numeric else SYMBOL_COLOR
