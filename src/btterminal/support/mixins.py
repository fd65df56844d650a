class CommonEqualityMixin(object):
    """
    Value semantics for simple record classes: instances of the same class compare equal
    when their attributes are equal. Attribute values must be hashable.
    """

    def _fields(self):
        return tuple(sorted(vars(self).items()))

    def __eq__(self, other):
        return type(other) is type(self) and self._fields() == other._fields()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self._fields())

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % f for f in self._fields()))
