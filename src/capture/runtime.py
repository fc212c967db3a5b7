"""
Reference types used by code expanded for the Python target.

Python has no borrow operator, so `ref x` and `ref mut x` bind the
name to one of these wrappers instead. Both point at the very object
the previous binding held; neither copies it.
"""


class SharedRef:
    """Read-only view of a value (`ref x`)."""

    __slots__ = ("_value",)

    def __init__(self, value):
        object.__setattr__(self, "_value", value)

    @property
    def value(self):
        return self._value

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __eq__(self, other):
        if isinstance(other, SharedRef):
            return self._value is other._value
        return NotImplemented

    def __hash__(self):
        return hash((SharedRef, id(self._value)))

    def __repr__(self):
        return f"SharedRef({self._value!r})"


class MutRef:
    """
    Exclusive, writable handle on a value (`ref mut x`).

    Unlike Rust's `&mut`, this does not alias the caller's variable:
    assigning `.value` or calling `replace()` rebinds the handle only, and
    the caller's name keeps the object it had. Mutating that object in place
    (`y.value.append(1)`) is visible to the caller.
    """

    __slots__ = ("_value",)

    def __init__(self, value):
        self._value = value

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, new_value):
        self._value = new_value

    def replace(self, new_value):
        """Store `new_value` and return the previous one."""
        old, self._value = self._value, new_value
        return old

    def __eq__(self, other):
        if isinstance(other, MutRef):
            return self._value is other._value
        return NotImplemented

    def __repr__(self):
        return f"MutRef({self._value!r})"


__all__ = ["SharedRef", "MutRef"]
