class AhoCorasickError(Exception):
    pass


class SymbolTypeMismatch(AhoCorasickError, TypeError):
    def __init__(self, expected: str, actual: str):
        super().__init__(f"symbol kind mismatch: automaton has {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class EmptyPatternSet(AhoCorasickError, ValueError):
    pass


class AlreadyExists(AhoCorasickError, KeyError):
    pass


class FrozenAutomatonError(AhoCorasickError):
    pass


# Programmer errors: a broken link table or a scan before freeze()
class InvariantViolation(AhoCorasickError, AssertionError):
    pass


class NotFinalizedError(InvariantViolation):
    pass
