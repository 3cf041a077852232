from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Set, Tuple
from itertools import islice
import logging

from AcTrie import AcTrie, TrieNode, ROOT
from ac_common import (
    Pattern,
    Symbol,
    freeze_pattern,
    is_bytes_like,
    kind_of_sequence,
    kind_of_symbol,
)
from ac_errors import (
    EmptyPatternSet,
    FrozenAutomatonError,
    NotFinalizedError,
    SymbolTypeMismatch,
)


class ScanEvent(NamedTuple):
    end: int  # exclusive
    pattern_id: int
    length: int

    @property
    def start(self) -> int:
        return self.end - self.length


class MatchItem(NamedTuple):
    start: int
    pattern_id: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


def _next_state(nodes: List[TrieNode], state: TrieNode, symbol: Symbol) -> TrieNode:
    child_id = state.find_child(symbol)
    while child_id is None and state.node_id != ROOT:
        state = nodes[state.fail]  # type: ignore
        child_id = state.find_child(symbol)
    if child_id is None:
        return state
    return nodes[child_id]


def _is_sequence(corpus) -> bool:
    return is_bytes_like(corpus) or isinstance(corpus, Sequence)


class AhoCorasick:
    """
    Multi-pattern searcher. Patterns are added first, then `freeze()`
    computes the links once; only a frozen automaton can scan.
    Passing `patterns` to the constructor does both steps.
    """

    def __init__(
        self,
        patterns: Optional[Iterable[Iterable[Symbol]]] = None,
        *,
        byte_table: Optional[bool] = None,
        allow_empty_set: bool = True,
    ):
        # None: use the byte table iff the first pattern is bytes-like
        self.byte_table = byte_table
        self.allow_empty_set = allow_empty_set
        self.trie: Optional[AcTrie] = None
        # pattern id -> private copy of the pattern
        self.patterns: List[Pattern] = []
        self.symbol_kind: Optional[str] = None
        self.max_length = 0
        self.frozen = False
        if patterns is not None:
            for pattern in patterns:
                self.add(pattern)
            self.freeze()

    def _ensure_trie(self, first_pattern=None) -> AcTrie:
        if self.trie is None:
            if self.byte_table is None:
                self.byte_table = is_bytes_like(first_pattern)
            self.trie = AcTrie(byte_table=self.byte_table)
        return self.trie

    def _pattern_kind(self, pattern: Pattern) -> Optional[str]:
        kind = kind_of_sequence(pattern)
        if isinstance(pattern, tuple):
            for symbol in pattern:
                if kind_of_symbol(symbol) != kind:
                    raise SymbolTypeMismatch(kind, kind_of_symbol(symbol))  # type: ignore
        return kind

    def add(self, pattern: Iterable[Symbol]) -> int:
        """Insert one pattern and return its id (existing id for a duplicate)."""
        if self.frozen:
            raise FrozenAutomatonError("cannot add patterns after freeze()")
        frozen = freeze_pattern(pattern)
        kind = self._pattern_kind(frozen)
        if kind is not None and self.symbol_kind is not None and kind != self.symbol_kind:
            raise SymbolTypeMismatch(self.symbol_kind, kind)
        trie = self._ensure_trie(frozen)
        if trie.byte_table and kind not in (None, "int"):
            raise SymbolTypeMismatch("int", kind)  # type: ignore
        node, inserted = trie.insert(frozen)
        if kind is not None and self.symbol_kind is None:
            self.symbol_kind = kind
        if inserted:
            assert node.pattern_id == len(self.patterns)
            self.patterns.append(frozen)
            self.max_length = max(self.max_length, len(frozen))
        return node.pattern_id  # type: ignore

    def freeze(self, validate: bool = False):
        if self.frozen:
            return
        trie = self._ensure_trie()
        if not self.patterns and not self.allow_empty_set:
            raise EmptyPatternSet("no patterns were added")
        if not trie.finalized:
            trie.finalize()
        if validate:
            trie.check_links(deep=True)
        self.frozen = True
        logging.debug(
            f"Froze automaton: {len(self.patterns)} patterns, {len(trie)} nodes, "
            f"byte_table={self.byte_table}"
        )

    def pattern(self, pattern_id: int) -> Pattern:
        return self.patterns[pattern_id]

    def __len__(self):
        return len(self.patterns)

    def __contains__(self, pattern) -> bool:
        if self.trie is None:
            return False
        frozen = freeze_pattern(pattern)
        kind = kind_of_sequence(frozen)
        if kind is not None and self.symbol_kind is not None and kind != self.symbol_kind:
            return False
        node = self.trie.find(frozen)
        return node is not None and node.accept

    def __repr__(self):
        state = "frozen" if self.frozen else "building"
        return f"AhoCorasick({len(self.patterns)} patterns, {state})"

    def _prepare(self, corpus, start: int, end: Optional[int]) -> Tuple[Iterator, int, int]:
        """
        Check the automaton and the corpus, and return
        (symbol iterator, index of its first symbol, end-of-corpus sentinel).
        The sentinel is -1 for streams whose length is unknown.
        """
        if not self.frozen or self.trie is None or not self.trie.finalized:
            raise NotFinalizedError("scan() called before freeze()")
        if _is_sequence(corpus):
            length = len(corpus)
            if end is None:
                end = length
            if not 0 <= start <= end <= length:
                raise IndexError(f"bad corpus bounds [{start}, {end}) for length {length}")
            kind = kind_of_sequence(corpus)
            if kind is not None and self.symbol_kind is not None and kind != self.symbol_kind:
                raise SymbolTypeMismatch(self.symbol_kind, kind)
            return islice(corpus, start, end), start, end
        symbols = iter(corpus)
        if end is not None:
            symbols = islice(symbols, max(end - start, 0))
        return symbols, start, -1

    def _check_stream(self, symbols: Iterator) -> Iterator:
        """Check the kind of the first symbol pulled from a stream."""
        for symbol in symbols:
            if self.symbol_kind is not None and kind_of_symbol(symbol) != self.symbol_kind:
                raise SymbolTypeMismatch(self.symbol_kind, kind_of_symbol(symbol))
            yield symbol
            break
        yield from symbols

    def scan(self, corpus, start: int = 0, end: Optional[int] = None) -> Iterator[ScanEvent]:
        """
        Lazily yield ScanEvent(end, pattern_id, length) for every occurrence.
        Events come in non-decreasing `end`; for one `end`, longest first.
        """
        symbols, offset, sentinel = self._prepare(corpus, start, end)
        if sentinel < 0:
            symbols = self._check_stream(symbols)
        return self._scan(symbols, offset)

    def _scan(self, symbols: Iterator, offset: int) -> Iterator[ScanEvent]:
        # Cache attribute lookups in local variables
        nodes = self.trie.nodes  # type: ignore
        root = nodes[ROOT]
        state = root
        idx = offset

        for symbol in symbols:
            if idx == offset and root.accept:
                # the empty pattern also matches before the first symbol
                yield ScanEvent(idx, root.pattern_id, 0)  # type: ignore
            state = _next_state(nodes, state, symbol)
            idx += 1
            if state.accept:
                yield ScanEvent(idx, state.pattern_id, state.depth)  # type: ignore
            out_id = state.out
            while out_id is not None:
                out = nodes[out_id]
                yield ScanEvent(idx, out.pattern_id, out.depth)  # type: ignore
                out_id = out.out

    def find_first(self, corpus, start: int = 0, end: Optional[int] = None) -> int:
        """
        Start index of the earliest match (shortest one on a tie).
        Returns the end of the scanned range when nothing matches.
        With the empty pattern this is `start`, which for an empty range
        equals the not-found value although `scan` yields no event there.
        """
        symbols, offset, sentinel = self._prepare(corpus, start, end)
        if sentinel < 0:
            symbols = self._check_stream(symbols)
        nodes = self.trie.nodes  # type: ignore
        root = nodes[ROOT]
        if root.accept:
            return offset
        best: Optional[Tuple[int, int]] = None
        state = root
        idx = offset
        for symbol in symbols:
            state = _next_state(nodes, state, symbol)
            idx += 1
            # The deepest node ending here has the earliest start
            node = state if state.accept else None
            if node is None and state.out is not None:
                node = nodes[state.out]
            if node is not None:
                candidate = (idx - node.depth, node.depth)
                if best is None or candidate < best:
                    best = candidate
            # No later match can start before best
            if best is not None and idx + 1 - self.max_length >= best[0]:
                break
        if best is not None:
            return best[0]
        return sentinel if sentinel >= 0 else idx

    def finditer(self, corpus, start: int = 0, end: Optional[int] = None) -> Iterator[MatchItem]:
        for event in self.scan(corpus, start, end):
            yield MatchItem(event.start, event.pattern_id, event.length)

    def find_all(self, corpus, start: int = 0, end: Optional[int] = None) -> List[MatchItem]:
        return list(self.finditer(corpus, start, end))

    def matched_patterns(self, corpus, start: int = 0, end: Optional[int] = None) -> Set[int]:
        results: Set[int] = set()
        for event in self.scan(corpus, start, end):
            results.add(event.pattern_id)
        return results


def make_aho_corasick(*patterns: Iterable[Symbol], **kwargs) -> AhoCorasick:
    return AhoCorasick(patterns, **kwargs)


def aho_corasick_search(
    corpus, pattern: Iterable[Symbol], start: int = 0, end: Optional[int] = None
) -> int:
    """First match of a single pattern; the end of the range when not found."""
    return AhoCorasick([pattern]).find_first(corpus, start, end)


def aho_corasick_find_all(
    corpus, patterns: Iterable[Iterable[Symbol]], start: int = 0, end: Optional[int] = None
) -> List[MatchItem]:
    return AhoCorasick(patterns).find_all(corpus, start, end)
