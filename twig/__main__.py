import sys
from importlib.util import find_spec


def main():
    if find_spec("kivy") is None:
        sys.exit("twig: the editor window needs Kivy; install it with `pip install twig[gui]`")

    from twig.app import main as run_app
    run_app()


if __name__ == "__main__":
    main()
