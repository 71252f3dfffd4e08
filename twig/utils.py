def pmts(v, type_):
    """Poor man's type system"""
    assert isinstance(v, type_), "Expected value of type '%s' but is type '%s'" % (
        type_.__name__ if isinstance(type_, type) else " | ".join(t.__name__ for t in type_), type(v).__name__)


def as_set(item_or_items):
    """A single string is a single item; any other iterable is taken as a collection of items.

    >>> sorted(as_set('keyword'))
    ['keyword']
    >>> sorted(as_set(['keyword', 'definition', 'keyword']))
    ['definition', 'keyword']
    """
    if isinstance(item_or_items, str):
        return {item_or_items}
    return set(item_or_items)
