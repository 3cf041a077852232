from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from collections import deque
import logging

from ac_common import Symbol
from ac_errors import AlreadyExists, InvariantViolation

ROOT = 0
BYTE_FANOUT = 256
BYTE_VALUES = frozenset(range(BYTE_FANOUT))


class TrieNode:
    def __init__(self, node_id: int, value: Optional[Symbol], depth: int):
        # Index of this node in the owning trie's arena; root is 0
        self.node_id: int = node_id
        # Symbol on the edge from the parent; None for root
        self.value: Optional[Symbol] = value
        # Number of edges from root, i.e. length of the prefix
        self.depth: int = depth
        # Some inserted pattern ends here
        self.accept: bool = False
        # Id of the pattern ending here (valid only when accept)
        self.pattern_id: Optional[int] = None
        # Failure link (node id); None until the trie is finalized
        self.fail: Optional[int] = None
        # Output link (node id) to the nearest accepting node on the fail chain
        self.out: Optional[int] = None
        self.children: Dict[Symbol, int] = {}

    def find_child(self, symbol: Symbol) -> Optional[int]:
        return self.children.get(symbol)

    def add_child(self, symbol: Symbol, child_id: int):
        if symbol in self.children:
            raise AlreadyExists(f"node {self.node_id} already has a child {symbol!r}")
        self.children[symbol] = child_id

    def iter_children(self) -> Iterator[Tuple[Symbol, int]]:
        return iter(self.children.items())

    def child_count(self) -> int:
        return len(self.children)

    def make_child(self, node_id: int, symbol: Symbol) -> "TrieNode":
        """Create (but do not link) a node one level below this one."""
        return type(self)(node_id, symbol, self.depth + 1)

    def set_accept(self, pattern_id: Optional[int] = None):
        self.accept = True
        self.pattern_id = pattern_id

    def __str__(self):
        return f"#{self.node_id}@{self.depth}"

    def __repr__(self):
        return self.__str__()


class ByteTrieNode(TrieNode):
    """
    Node for byte symbols: children sit in a 256-slot table indexed by the
    byte value instead of a dict.
    """

    def __init__(self, node_id: int, value: Optional[int], depth: int):
        super().__init__(node_id, value, depth)
        self.children: List[Optional[int]] = [None] * BYTE_FANOUT  # type: ignore

    def find_child(self, symbol: int) -> Optional[int]:
        # Same hash and equality rule as the dict children
        if symbol in BYTE_VALUES:
            return self.children[int(symbol)]
        return None

    def add_child(self, symbol: int, child_id: int):
        if not 0 <= symbol < BYTE_FANOUT:
            raise ValueError(f"{symbol!r} is not a byte value")
        if self.children[symbol] is not None:
            raise AlreadyExists(f"node {self.node_id} already has a child {symbol!r}")
        self.children[symbol] = child_id

    def iter_children(self) -> Iterator[Tuple[int, int]]:
        for symbol, child_id in enumerate(self.children):
            if child_id is not None:
                yield symbol, child_id

    def child_count(self) -> int:
        return BYTE_FANOUT - self.children.count(None)


class AcTrie:
    """
    Prefix tree of all patterns plus failure/output links.
    Nodes are kept in an arena (`self.nodes`); links are node ids.
    """

    def __init__(self, byte_table: bool = False):
        self.byte_table = byte_table
        self.node_cls = ByteTrieNode if byte_table else TrieNode
        self.nodes: List[TrieNode] = [self.node_cls(ROOT, None, 0)]
        self.pattern_count = 0
        # Links are valid only while this is True
        self.finalized = False
        self.finalize()

    @property
    def root(self) -> TrieNode:
        return self.nodes[ROOT]

    def node(self, node_id: int) -> TrieNode:
        return self.nodes[node_id]

    def fail_of(self, node: TrieNode) -> TrieNode:
        if node.fail is None:
            raise InvariantViolation(f"{node} has no failure link")
        return self.nodes[node.fail]

    def out_of(self, node: TrieNode) -> Optional[TrieNode]:
        if node.out is None:
            return None
        return self.nodes[node.out]

    def __len__(self):
        return len(self.nodes)

    def insert(self, pattern: Iterable[Symbol]) -> Tuple[TrieNode, bool]:
        """
        Insert a pattern and return (terminal node, inserted).
        `inserted` is False only when the pattern was already a member.
        Either every new node gets linked or none does.
        """
        cur_node = self.root
        symbols = iter(pattern)
        pending: List[Symbol] = []
        for symbol in symbols:
            child_id = cur_node.find_child(symbol)
            if child_id is None:
                pending.append(symbol)
                pending.extend(symbols)
                break
            cur_node = self.nodes[child_id]

        new_nodes: List[TrieNode] = []
        if pending:
            # Build the new branch aside; it becomes visible only once complete
            next_id = len(self.nodes)
            tail = cur_node
            for symbol in pending:
                new_node = tail.make_child(next_id + len(new_nodes), symbol)
                if new_nodes:
                    tail.add_child(symbol, new_node.node_id)
                new_nodes.append(new_node)
                tail = new_node
            if self.byte_table:
                # Validate the first edge before anything becomes visible
                head = new_nodes[0].value
                if not 0 <= head < BYTE_FANOUT:  # type: ignore
                    raise ValueError(f"{head!r} is not a byte value")
            self.nodes.extend(new_nodes)
            cur_node.add_child(pending[0], new_nodes[0].node_id)
            cur_node = tail

        if cur_node.accept:
            assert not new_nodes
            return cur_node, False
        cur_node.set_accept(self.pattern_count)
        self.pattern_count += 1
        self.finalized = False
        return cur_node, True

    def find(self, sequence: Iterable[Symbol]) -> Optional[TrieNode]:
        cur_node = self.root
        for symbol in sequence:
            child_id = cur_node.find_child(symbol)
            if child_id is None:
                return None
            cur_node = self.nodes[child_id]
        return cur_node

    def finalize(self):
        """Compute failure and output links by breadth-first traversal."""
        nodes = self.nodes
        root = self.root
        root.fail = ROOT
        root.out = None
        root_out = ROOT if root.accept else None

        queue: deque = deque()
        for _, child_id in root.iter_children():
            child = nodes[child_id]
            child.fail = ROOT
            child.out = root_out
            queue.append(child)

        while queue:
            node = queue.popleft()
            for symbol, child_id in node.iter_children():
                child = nodes[child_id]
                failure = nodes[node.fail]  # type: ignore
                while failure.node_id != ROOT and failure.find_child(symbol) is None:
                    failure = nodes[failure.fail]  # type: ignore
                target = failure.find_child(symbol)
                if target is not None and target != child_id:
                    child.fail = target
                else:
                    child.fail = ROOT
                fail_node = nodes[child.fail]
                child.out = fail_node.node_id if fail_node.accept else fail_node.out
                queue.append(child)

        self.finalized = True
        logging.debug(
            f"Finalized trie: {len(nodes)} nodes, {self.pattern_count} patterns"
        )

    def iter_bfs(self) -> Iterator[TrieNode]:
        queue: deque = deque([self.root])
        while queue:
            node = queue.popleft()
            yield node
            for _, child_id in node.iter_children():
                queue.append(self.nodes[child_id])

    def parent_map(self) -> Dict[int, Tuple[int, Symbol]]:
        """child id -> (parent id, edge symbol); computed on demand"""
        parents: Dict[int, Tuple[int, Symbol]] = {}
        for node in self.iter_bfs():
            for symbol, child_id in node.iter_children():
                parents[child_id] = (node.node_id, symbol)
        return parents

    def path_of(
        self, node: TrieNode, parents: Optional[Dict[int, Tuple[int, Symbol]]] = None
    ) -> Tuple[Symbol, ...]:
        if parents is None:
            parents = self.parent_map()
        path: List[Symbol] = []
        node_id = node.node_id
        while node_id != ROOT:
            node_id, symbol = parents[node_id]
            path.append(symbol)
        path.reverse()
        return tuple(path)

    def check_links(self, deep: bool = False):
        """
        Raise InvariantViolation if the link table is inconsistent.
        With `deep`, also check that every fail link points at the longest
        proper suffix present in the trie (quadratic in depth).
        """
        if not self.finalized:
            raise InvariantViolation("trie has structural changes since finalize()")
        root = self.root
        if root.depth != 0 or root.fail != ROOT or root.out is not None:
            raise InvariantViolation(f"bad root links: fail={root.fail} out={root.out}")
        parents = self.parent_map() if deep else {}
        reached = 1
        for node in self.iter_bfs():
            for _, child_id in node.iter_children():
                reached += 1
                if self.nodes[child_id].depth != node.depth + 1:
                    raise InvariantViolation(f"{self.nodes[child_id]} has a bad depth")
            if node.node_id == ROOT:
                continue
            if node.fail is None:
                raise InvariantViolation(f"{node} has no failure link")
            fail_node = self.nodes[node.fail]
            if fail_node.depth >= node.depth:
                raise InvariantViolation(f"{node} fails to deeper node {fail_node}")
            expected_out = None
            walk = fail_node
            while True:
                if walk.accept:
                    expected_out = walk.node_id
                    break
                if walk.node_id == ROOT:
                    break
                walk = self.nodes[walk.fail]  # type: ignore
            if node.out != expected_out:
                raise InvariantViolation(
                    f"{node} has out={node.out}, expected {expected_out}"
                )
            if deep:
                path = self.path_of(node, parents)
                expected_fail = root
                for cut in range(1, len(path)):
                    candidate = self.find(path[cut:])
                    if candidate is not None:
                        expected_fail = candidate
                        break
                if expected_fail is not fail_node:
                    raise InvariantViolation(
                        f"{node} fails to {fail_node}, expected {expected_fail}"
                    )
        if reached != len(self.nodes):
            raise InvariantViolation(
                f"{len(self.nodes) - reached} nodes are unreachable from root"
            )
