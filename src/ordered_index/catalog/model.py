# src/ordered_index/catalog/model.py
from collections import namedtuple

# Registros que los cargadores entregan al árbol. El árbol no interpreta su contenido.
Book = namedtuple("Book", ["isbn", "title", "author"])
Product = namedtuple("Product", ["id", "name", "category"])


def format_book(key, book: Book) -> str:
    """Formato del volcado de estructura: 'isbn (titulo)'."""
    return f"{key} ({book.title})"


def format_product(key, product: Product) -> str:
    return f"{key} ({product.name})"
