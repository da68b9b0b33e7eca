class VexCtxError(Exception):
    pass


class InvalidLiteral(VexCtxError, ValueError):
    """A token looks like a number but does not parse in its base."""

    def __init__(self, token, base):
        self.token = token
        self.base = base
        if base is None:
            super().__init__(f"not a numeral: {token!r}")
        else:
            super().__init__(f"invalid base-{base} literal: {token!r}")


class InvalidAssignment(VexCtxError, ValueError):
    """A declaration line that is not of the form `<location> = <value>`."""

    def __init__(self, token, reason):
        self.token = token
        self.reason = reason
        super().__init__(f"invalid assignment {token!r}: {reason}")


class PlatformUnavailable(VexCtxError):
    pass


class ContextError(VexCtxError):
    pass


class UnknownRegister(ContextError, KeyError):
    def __init__(self, name):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"unknown register {self.name!r}"


class InvalidAddress(ContextError, ValueError):
    pass


class ValueTooWide(ContextError, ValueError):
    def __init__(self, value, width):
        self.value = value
        self.width = width
        super().__init__(f"value {value:#x} does not fit in {width} bits")
