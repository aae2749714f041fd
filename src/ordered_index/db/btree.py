
from bisect import bisect_left
from functools import cmp_to_key
from typing import Any, Callable, Iterator, List, Optional, Tuple

SPLIT_POLICIES = ("overflow", "preemptive")

_MISSING = object()


def _identity(k):
    return k


class DuplicateKeyError(KeyError):
    """La clave ya existe en el árbol. Política única: se rechaza, nunca se sobrescribe."""

    def __init__(self, key: Any):
        super().__init__(key)
        self.key = key

    def __str__(self):
        return f"clave duplicada: {self.key!r}"


class BTreeNode:
    """
    Nodo de Árbol B. `leaf` es la etiqueta del nodo: se fija al crearlo y no cambia.
    - keys: claves estrictamente crecientes (máx. max_keys)
    - records: records[i] corresponde a keys[i] (hojas e internos, política Árbol B)
    - children: solo internos, len(children) == len(keys) + 1
    """
    __slots__ = ("leaf", "max_keys", "sort_key", "keys", "records", "children")

    def __init__(self, max_keys: int, sort_key: Callable[[Any], Any] = _identity, leaf: bool = True):
        self.leaf = leaf
        self.max_keys = max_keys
        self.sort_key = sort_key
        self.keys: List[Any] = []
        self.records: List[Any] = []
        self.children: List['BTreeNode'] = []

    @property
    def min_keys(self) -> int:
        # ceil(order / 2) - 1, con order = max_keys + 1
        return (self.max_keys + 2) // 2 - 1

    def is_full(self) -> bool:
        return len(self.keys) == self.max_keys

    def find_index(self, key: Any) -> int:
        """Posición de la primera clave >= key (búsqueda binaria)."""
        return bisect_left(self.keys, self.sort_key(key), key=self.sort_key)

    def holds(self, i: int, key: Any) -> bool:
        return i < len(self.keys) and self.sort_key(self.keys[i]) == self.sort_key(key)

    def insert_sorted(self, key: Any, record: Any) -> int:
        """Inserta en su posición ordenada desplazando el resto a la derecha."""
        assert self.leaf, "insert_sorted solo aplica a hojas"
        assert len(self.keys) <= self.max_keys, "hoja ya sobrellena"
        i = self.find_index(key)
        self.keys.insert(i, key)
        self.records.insert(i, record)
        return i

    def split_child(self, index: int) -> Tuple[Any, 'BTreeNode']:
        """
        Divide el hijo lleno children[index] por la mitad.
        La entrada del medio sube a este nodo y la mitad derecha pasa a ser
        un hermano nuevo en children[index + 1]. Devuelve (clave_promovida, hermano).
        """
        assert not self.leaf, "split_child sobre una hoja"
        full = self.children[index]
        assert len(full.keys) >= full.max_keys, "split_child sobre un hijo que no está lleno"

        mid = len(full.keys) // 2
        sibling = BTreeNode(full.max_keys, full.sort_key, leaf=full.leaf)
        promoted_key = full.keys[mid]
        promoted_record = full.records[mid]

        sibling.keys = full.keys[mid + 1:]
        sibling.records = full.records[mid + 1:]
        full.keys = full.keys[:mid]
        full.records = full.records[:mid]
        if not full.leaf:
            sibling.children = full.children[mid + 1:]
            full.children = full.children[:mid + 1]

        self.keys.insert(index, promoted_key)
        self.records.insert(index, promoted_record)
        self.children.insert(index + 1, sibling)
        return promoted_key, sibling

    def rotate_right(self, index: int) -> None:
        """Presta la última entrada de children[index - 1] a children[index] vía el separador."""
        left, node = self.children[index - 1], self.children[index]
        node.keys.insert(0, self.keys[index - 1])
        node.records.insert(0, self.records[index - 1])
        self.keys[index - 1] = left.keys.pop()
        self.records[index - 1] = left.records.pop()
        if not left.leaf:
            node.children.insert(0, left.children.pop())

    def rotate_left(self, index: int) -> None:
        """Presta la primera entrada de children[index + 1] a children[index] vía el separador."""
        node, right = self.children[index], self.children[index + 1]
        node.keys.append(self.keys[index])
        node.records.append(self.records[index])
        self.keys[index] = right.keys.pop(0)
        self.records[index] = right.records.pop(0)
        if not right.leaf:
            node.children.append(right.children.pop(0))

    def merge_children(self, index: int) -> 'BTreeNode':
        """Fusiona children[index + 1] dentro de children[index], bajando el separador keys[index]."""
        left = self.children[index]
        right = self.children.pop(index + 1)
        left.keys.append(self.keys.pop(index))
        left.records.append(self.records.pop(index))
        left.keys.extend(right.keys)
        left.records.extend(right.records)
        left.children.extend(right.children)
        assert len(left.keys) <= left.max_keys, "fusión sobrellenó el nodo"
        return left


class BTree:
    """
    Árbol B de orden fijo en memoria.
    API: insert(key, record), search(key), traverse(), range_search(lo, hi),
    delete(key), dump().

    order: máximo de hijos por nodo interno (>= 3); max_keys = order - 1.
    comparator: función estilo cmp (a, b) -> <0 / 0 / >0. None usa el orden natural.
    split: "overflow" divide de abajo hacia arriba al sobrepasar max_keys (cualquier orden);
           "preemptive" divide cada nodo lleno antes de descender (solo órdenes pares).
    """

    def __init__(self, order: int = 4, comparator: Optional[Callable[[Any, Any], int]] = None,
                 split: str = "overflow"):
        if order < 3:
            raise ValueError("order must be >= 3")
        if split not in SPLIT_POLICIES:
            raise ValueError(f"split must be one of {SPLIT_POLICIES}, got {split!r}")
        if split == "preemptive" and order % 2:
            raise ValueError("split 'preemptive' requiere un orden par (max_keys impar)")
        self._order = order
        self.split = split
        self._sort_key = cmp_to_key(comparator) if comparator is not None else _identity
        self.root = self._new_node(leaf=True)
        self._size = 0

    @property
    def order(self) -> int:
        return self._order

    @property
    def max_keys(self) -> int:
        return self._order - 1

    def _new_node(self, leaf: bool) -> BTreeNode:
        return BTreeNode(self.max_keys, self._sort_key, leaf=leaf)

    def _node_at(self, path: List[int]) -> BTreeNode:
        # la pila guarda índices, no nodos: se re-recorre desde la raíz
        node = self.root
        for i in path:
            node = node.children[i]
        return node

    def _grow_root(self) -> None:
        new_root = self._new_node(leaf=False)
        new_root.children.append(self.root)
        new_root.split_child(0)
        self.root = new_root

    # ------------------------------------------------------------
    # inserción
    # ------------------------------------------------------------

    def insert(self, key: Any, record: Any = None) -> None:
        """Inserta (key, record). Lanza DuplicateKeyError si la clave ya existe."""
        if self.split == "preemptive":
            self._insert_preemptive(key, record)
        else:
            self._insert_overflow(key, record)
        self._size += 1

    def _insert_overflow(self, key: Any, record: Any) -> None:
        path: List[int] = []
        node = self.root
        while True:
            i = node.find_index(key)
            if node.holds(i, key):
                raise DuplicateKeyError(key)
            if node.leaf:
                break
            path.append(i)
            node = node.children[i]

        node.insert_sorted(key, record)

        # deshacer la pila dividiendo mientras haya un nodo sobrellenado
        while len(node.keys) > self.max_keys:
            if not path:
                self._grow_root()
                break
            index = path.pop()
            node = self._node_at(path)
            node.split_child(index)

    def _insert_preemptive(self, key: Any, record: Any) -> None:
        sk = self._sort_key
        if self.root.is_full():
            self._grow_root()

        node = self.root
        while not node.leaf:
            i = node.find_index(key)
            if node.holds(i, key):
                raise DuplicateKeyError(key)
            if node.children[i].is_full():
                promoted, _ = node.split_child(i)
                if sk(promoted) == sk(key):
                    raise DuplicateKeyError(key)
                if sk(promoted) < sk(key):
                    i += 1
            node = node.children[i]

        if node.holds(node.find_index(key), key):
            raise DuplicateKeyError(key)
        node.insert_sorted(key, record)

    # ------------------------------------------------------------
    # búsqueda
    # ------------------------------------------------------------

    def search(self, key: Any, default: Any = None) -> Any:
        node = self.root
        while True:
            i = node.find_index(key)
            if node.holds(i, key):
                return node.records[i]
            if node.leaf:
                return default
            node = node.children[i]

    def __contains__(self, key: Any) -> bool:
        return self.search(key, _MISSING) is not _MISSING

    def __getitem__(self, key: Any) -> Any:
        record = self.search(key, _MISSING)
        if record is _MISSING:
            raise KeyError(key)
        return record

    # ------------------------------------------------------------
    # recorridos
    # ------------------------------------------------------------

    def traverse(self) -> Iterator[Tuple[Any, Any]]:
        """Pares (key, record) en orden ascendente. Cada llamada da un generador nuevo."""
        return self._walk(self.root)

    items = traverse

    def _walk(self, node: BTreeNode) -> Iterator[Tuple[Any, Any]]:
        for i, key in enumerate(node.keys):
            if not node.leaf:
                yield from self._walk(node.children[i])
            yield key, node.records[i]
        if not node.leaf:
            yield from self._walk(node.children[-1])

    def __iter__(self) -> Iterator[Any]:
        for key, _ in self.traverse():
            yield key

    def range_search(self, low: Any = None, high: Any = None) -> Iterator[Tuple[Any, Any]]:
        """Pares con low <= key <= high (None = sin límite) en orden ascendente."""
        return self._walk_range(self.root, low, high)

    def _walk_range(self, node: BTreeNode, low: Any, high: Any) -> Iterator[Tuple[Any, Any]]:
        sk = self._sort_key
        start = node.find_index(low) if low is not None else 0
        for i in range(start, len(node.keys)):
            if not node.leaf:
                yield from self._walk_range(node.children[i], low, high)
            key = node.keys[i]
            if high is not None and sk(high) < sk(key):
                return
            yield key, node.records[i]
        if not node.leaf:
            yield from self._walk_range(node.children[-1], low, high)

    def min_key(self) -> Any:
        if not self._size:
            raise ValueError("min_key() de un árbol vacío")
        node = self.root
        while not node.leaf:
            node = node.children[0]
        return node.keys[0]

    def max_key(self) -> Any:
        if not self._size:
            raise ValueError("max_key() de un árbol vacío")
        node = self.root
        while not node.leaf:
            node = node.children[-1]
        return node.keys[-1]

    # ------------------------------------------------------------
    # borrado: redistribución y fusión de abajo hacia arriba
    # ------------------------------------------------------------

    def delete(self, key: Any) -> bool:
        """Elimina key. Devuelve False (sin tocar el árbol) si no existe."""
        path: List[int] = []
        node = self.root
        while True:
            i = node.find_index(key)
            if node.holds(i, key):
                break
            if node.leaf:
                return False
            path.append(i)
            node = node.children[i]

        if node.leaf:
            del node.keys[i]
            del node.records[i]
        else:
            # se reemplaza por el predecesor: la entrada más a la derecha de children[i]
            holder = node
            path.append(i)
            node = node.children[i]
            while not node.leaf:
                path.append(len(node.children) - 1)
                node = node.children[-1]
            holder.keys[i] = node.keys.pop()
            holder.records[i] = node.records.pop()

        self._size -= 1
        self._rebalance(path)
        return True

    def _rebalance(self, path: List[int]) -> None:
        node = self._node_at(path)
        while path and len(node.keys) < node.min_keys:
            index = path.pop()
            parent = self._node_at(path)
            left = parent.children[index - 1] if index > 0 else None
            right = parent.children[index + 1] if index + 1 < len(parent.children) else None

            if left is not None and len(left.keys) > left.min_keys:
                parent.rotate_right(index)
            elif right is not None and len(right.keys) > right.min_keys:
                parent.rotate_left(index)
            elif left is not None:
                parent.merge_children(index - 1)
            else:
                parent.merge_children(index)
            node = parent

        if not self.root.leaf and not self.root.keys:
            self.root = self.root.children[0]

    # ------------------------------------------------------------
    # diagnóstico
    # ------------------------------------------------------------

    def __len__(self) -> int:
        return self._size

    def __repr__(self):
        return f"BTree(order={self._order}, split={self.split!r}, size={self._size}, height={self.height})"

    @property
    def height(self) -> int:
        h = 1
        node = self.root
        while not node.leaf:
            node = node.children[0]
            h += 1
        return h

    def node_count(self) -> int:
        count = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count

    def dump(self, formatter: Optional[Callable[[Any, Any], str]] = None) -> str:
        """Estructura en pre-orden, dos espacios de sangría por nivel."""
        fmt = formatter or (lambda k, r: str(k))
        lines: List[str] = []

        def visit(node: BTreeNode, level: int):
            entries = ", ".join(fmt(k, r) for k, r in zip(node.keys, node.records))
            lines.append("  " * level + f"[{entries}]")
            for child in node.children:
                visit(child, level + 1)

        visit(self.root, 0)
        return "\n".join(lines)

    def check_invariants(self) -> None:
        """AssertionError con el primer invariante violado."""
        leaf_depths = set()
        total = self._check_node(self.root, _MISSING, _MISSING, 0, leaf_depths)
        assert len(leaf_depths) == 1, f"hojas a distintas profundidades: {sorted(leaf_depths)}"
        assert total == self._size, f"conteo {total} != tamaño {self._size}"

    def _check_node(self, node: BTreeNode, low: Any, high: Any, depth: int, leaf_depths: set) -> int:
        sk = self._sort_key
        assert len(node.keys) <= self.max_keys, f"nodo sobrellenado: {node.keys}"
        assert len(node.records) == len(node.keys), "records y keys desalineados"
        if node is not self.root:
            assert len(node.keys) >= node.min_keys, f"nodo por debajo del mínimo: {node.keys}"
        elif not node.leaf:
            assert node.keys, "raíz interna sin claves"
        for a, b in zip(node.keys, node.keys[1:]):
            assert sk(a) < sk(b), f"claves no crecientes: {a!r}, {b!r}"
        if node.keys:
            if low is not _MISSING:
                assert sk(low) < sk(node.keys[0]), f"{node.keys[0]!r} fuera de rango (> {low!r})"
            if high is not _MISSING:
                assert sk(node.keys[-1]) < sk(high), f"{node.keys[-1]!r} fuera de rango (< {high!r})"

        if node.leaf:
            assert not node.children, "hoja con hijos"
            leaf_depths.add(depth)
            return len(node.keys)

        assert len(node.children) == len(node.keys) + 1, "len(children) != len(keys) + 1"
        bounds = [low] + node.keys + [high]
        total = len(node.keys)
        for i, child in enumerate(node.children):
            total += self._check_node(child, bounds[i], bounds[i + 1], depth + 1, leaf_depths)
        return total

    def to_networkx(self):
        """
        DiGraph con un nodo por nodo del árbol (id en pre-orden).
        Atributos: label, level, leaf. Requiere networkx instalado.
        """
        import networkx as nx
        G = nx.DiGraph()
        counter = 0

        def visit(node: BTreeNode, level: int) -> int:
            nonlocal counter
            nid = counter
            counter += 1
            G.add_node(nid, label=" | ".join(str(k) for k in node.keys), level=level, leaf=node.leaf)
            for i, child in enumerate(node.children):
                cid = visit(child, level + 1)
                G.add_edge(nid, cid, index=i)
            return nid

        visit(self.root, 0)
        return G


# alias
OrderedTree = BTree
