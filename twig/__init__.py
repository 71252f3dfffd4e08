"""
twig: a projectional editor for a small Lisp-like expression tree.

In the subparts of the application we apply the same pattern:

* a structure
* a Clef (set of commands that operate on that structure)
* play_... can be used to combine the 2.

`twig.lisp` holds the tree itself (structure, attribute inference); `twig.editor` holds the edit engine that is driven
by commands; `twig.widgets` and `twig.app` form the Kivy presentation layer on top of it.
"""
