from os.path import isfile

from kivy.app import App
from kivy.config import Config
from kivy.core.text.markup import LabelBase
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label

from twig.editor.structure import EditorSession
from twig.lisp.from_python import GOOSE
from twig.lisp.structure import tree_to_text
from twig.widgets.layout_constants import FONT_NAME
from twig.widgets.tree import TreeWidget

DEJAVU = "/usr/share/fonts/truetype/dejavu/"

# How to tell Kivy about font locations; falls back on the fonts that ship with Kivy.
if isfile(DEJAVU + "DejaVuSans.ttf"):
    LabelBase.register(name=FONT_NAME,
                       fn_regular=DEJAVU + "DejaVuSans.ttf",
                       fn_bold=DEJAVU + "DejaVuSans-Bold.ttf",
                       fn_italic=DEJAVU + "DejaVuSans-Oblique.ttf",
                       fn_bolditalic=DEJAVU + "DejaVuSans-BoldOblique.ttf",)
else:
    LabelBase.register(name=FONT_NAME,
                       fn_regular="Roboto-Regular.ttf",
                       fn_bold="Roboto-Bold.ttf",)

Config.set('kivy', 'exit_on_escape', '0')


class EditorGUI(App):

    def __init__(self, seed):
        super(EditorGUI, self).__init__()
        self.session = EditorSession.from_python(seed)

    def build(self):
        self.vertical_layout = BoxLayout(spacing=10, orientation='vertical')

        tree = TreeWidget(session=self.session, size_hint=(1, .7))

        # the textual projection of the tree, as the editor's output
        self.text_label = Label(
            size_hint=(1, .3),
            font_name=FONT_NAME,
            halign='left',
            valign='top',
        )
        self.text_label.bind(size=self.text_label.setter('text_size'))

        tree.report_text_to_app = self.show_text
        self.vertical_layout.add_widget(tree)
        self.vertical_layout.add_widget(self.text_label)

        tree.focus = True
        self.show_text(tree_to_text(tree.session.tree))
        return self.vertical_layout

    def show_text(self, text):
        self.text_label.text = text


def main():
    EditorGUI(GOOSE).run()


if __name__ == "__main__":
    main()
