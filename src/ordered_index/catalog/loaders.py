# src/ordered_index/catalog/loaders.py
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Any

import pandas as pd

from ordered_index.catalog.model import Book, Product
from ordered_index.db.btree import BTree, DuplicateKeyError

BOOK_COLUMNS = ["title", "author", "isbn"]
PRODUCT_COLUMNS = ["id", "name", "category"]

# ============================================================
# FUNCIONES AUXILIARES
# ============================================================

def _warn(msg: str):
    print(f"AVISO: {msg}", file=sys.stderr)


def read_delimited(path, columns: List[str], sep: str = ",") -> pd.DataFrame:
    """
    Lee un archivo delimitado sin encabezado con exactamente len(columns) campos por línea.
    Las líneas con campos de más o de menos se reportan por stderr y se descartan.
    Devuelve un DataFrame de strings sin espacios en los extremos.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    # utf-8-sig descarta el BOM que dejan algunos editores al inicio del archivo
    lines = pd.Series(p.read_text(encoding="utf-8-sig").splitlines(), dtype=object)
    lines = lines[lines.str.strip() != ""]
    if lines.empty:
        return pd.DataFrame(columns=columns)

    parts = lines.str.split(sep, regex=False)
    ok = parts.str.len() == len(columns)
    for line in lines[~ok]:
        _warn(f"línea mal formada ignorada: {line}")

    df = pd.DataFrame(parts[ok].tolist(), columns=columns)
    for c in columns:
        df[c] = df[c].str.strip()
    return df

# ============================================================
# LECTORES DE REGISTROS
# ============================================================

def read_books(path, sep: str = ",") -> List[Book]:
    """Líneas 'titulo,autor,isbn'. El ISBN es la clave."""
    df = read_delimited(path, BOOK_COLUMNS, sep=sep)
    books = []
    for _, row in df.iterrows():
        if not row["isbn"]:
            _warn(f"libro sin ISBN ignorado: {row['title']}")
            continue
        books.append(Book(isbn=row["isbn"], title=row["title"], author=row["author"]))
    return books


def read_products(path, sep: str = ",") -> List[Product]:
    """Líneas 'id,nombre,categoria'. El id (entero) es la clave."""
    df = read_delimited(path, PRODUCT_COLUMNS, sep=sep)
    # solo enteros escritos como tales; sin pasar por float para no perder precisión
    valid = df["id"].str.fullmatch(r"[+-]?\d+").fillna(False).astype(bool)
    products = []
    for (_, row), ok in zip(df.iterrows(), valid):
        if not ok:
            _warn(f"error al interpretar el ID: {row['id']} en la línea: {row['id']},{row['name']},{row['category']}")
            continue
        products.append(Product(id=int(row["id"]), name=row["name"], category=row["category"]))
    return products

# ============================================================
# CONSTRUCCIÓN DEL ÁRBOL
# ============================================================

def insert_all(tree: BTree, pairs: Iterable[Tuple[Any, Any]]) -> int:
    """Inserta pares (clave, registro); las claves repetidas se reportan y se saltan."""
    inserted = 0
    for key, record in pairs:
        try:
            tree.insert(key, record)
        except DuplicateKeyError as e:
            _warn(f"{e}; registro ignorado")
            continue
        inserted += 1
    return inserted


def build_tree_from_books(path, order: int = 5, split: str = "overflow",
                          comparator: Optional[Callable[[Any, Any], int]] = None) -> BTree:
    """Construye un árbol indexado por ISBN a partir de un archivo de libros."""
    print("Leyendo libros...")
    books = read_books(path)
    tree = BTree(order=order, comparator=comparator, split=split)
    print("Insertando en el árbol...")
    n = insert_all(tree, ((b.isbn, b) for b in books))
    print(f"Árbol construido: {n} libros, altura {tree.height}")
    return tree


def build_tree_from_products(path, order: int = 3, split: str = "overflow") -> BTree:
    """Construye un árbol indexado por id de producto."""
    print("Leyendo productos...")
    products = read_products(path)
    tree = BTree(order=order, split=split)
    print("Insertando en el árbol...")
    n = insert_all(tree, ((p.id, p) for p in products))
    print(f"Árbol construido: {n} productos, altura {tree.height}")
    return tree


LOADERS = {
    "books": build_tree_from_books,
    "products": build_tree_from_products,
}
