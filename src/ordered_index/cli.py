# src/ordered_index/cli.py
import argparse
import os
import sys

from ordered_index.catalog.loaders import LOADERS
from ordered_index.catalog.model import Book, Product, format_book, format_product
from ordered_index.db.btree import SPLIT_POLICIES
from ordered_index.utils import entries_frame, format_table, save_listing_csv, sort_entries

# visualización opcional
try:
    from ordered_index.viz.visualizer import visualize_tree
    HAS_VIS = True
except Exception:
    HAS_VIS = False

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_DATA_PATH = os.path.join(PROJECT_ROOT, "data", "sample", "livros.csv")

FORMATTERS = {"books": format_book, "products": format_product}
DEFAULT_SORT = {"books": "title", "products": None}
FIELDS = {"books": Book._fields, "products": Product._fields}


def parse_key(kind: str, raw: str):
    # los productos usan id entero; los libros, el ISBN como texto
    if kind != "products":
        return raw
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"el id de producto debe ser un entero: {raw!r}") from None


def load_tree(args):
    path = args.data or DEFAULT_DATA_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"No se encontró el archivo de datos en {path}")
    return LOADERS[args.kind](path, order=args.order, split=args.split)


def cmd_search(tree, args):
    key = parse_key(args.kind, args.key)
    record = tree.search(key)
    if record is None:
        print(f"Registro con clave {key} no encontrado en el árbol.")
        return 1
    print("Registro encontrado!")
    for field, value in record._asdict().items():
        print(f"{field}: {value}")
    return 0


def cmd_list(tree, args):
    by = args.by if args.by is not None else DEFAULT_SORT[args.kind]
    if by and by not in FIELDS[args.kind]:
        raise ValueError(f"atributo desconocido para --by: {by!r} (opciones: {', '.join(FIELDS[args.kind])})")
    entries = list(tree.traverse())
    if by:
        entries = sort_entries(entries, by)
    if args.limit is not None:
        entries = entries[:args.limit]
    if args.out:
        out = save_listing_csv(entries, args.out)
        print("Saved:", out)
        return 0
    df = entries_frame(entries)
    header = f"Registros ordenados por {by}:" if by else "Registros en orden de clave:"
    print(header)
    if len(tree) == 0:
        print("(árbol vacío)")
        return 0
    columns = list(FIELDS[args.kind])
    rows = df[columns].values.tolist() if not df.empty else []
    print(format_table(rows, columns))
    return 0


def cmd_dump(tree, args):
    print(f"Estructura del árbol (orden {tree.order}, altura {tree.height}):")
    print(tree.dump(formatter=FORMATTERS[args.kind]))
    return 0


def cmd_delete(tree, args):
    for raw in args.keys:
        key = parse_key(args.kind, raw)
        record = tree.search(key)
        if tree.delete(key):
            print(f"Eliminado: {record}")
        else:
            print(f"Registro con clave {key} no encontrado en el árbol.")
    print(f"Registros restantes: {len(tree)}")
    if args.show:
        print(tree.dump(formatter=FORMATTERS[args.kind]))
    return 0


def cmd_plot(tree, args):
    if not HAS_VIS:
        print("Visualización no disponible. Instala networkx y matplotlib.")
        return 1
    out = visualize_tree(tree, title=f"Árbol B (orden {tree.order})", out_path=args.out)
    if out:
        print("Saved:", out)
    return 0


COMMANDS = {
    "search": cmd_search,
    "list": cmd_list,
    "dump": cmd_dump,
    "delete": cmd_delete,
    "plot": cmd_plot,
}


def build_parser():
    p = argparse.ArgumentParser(prog="ordered_index")
    p.add_argument("--data", help="Archivo delimitado con los registros (por defecto data/sample/livros.csv)")
    p.add_argument("--kind", choices=sorted(LOADERS), default="books", help="Tipo de registro del archivo")
    p.add_argument("--order", type=int, default=5, help="Máximo de hijos por nodo (>= 3)")
    p.add_argument("--split", choices=SPLIT_POLICIES, default="overflow", help="Estrategia de división (preemptive solo admite órdenes pares, p. ej. --order 4)")
    sub = p.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("search", help="Buscar un registro por clave")
    ps.add_argument("key", help="ISBN (libros) o id (productos)")

    pl = sub.add_parser("list", help="Listar todos los registros")
    pl.add_argument("--by", help="Atributo para el orden secundario (libros: title)")
    pl.add_argument("--limit", "-n", type=int, default=None, help="Solo las primeras N filas (también con --out)")
    pl.add_argument("--out", "-o", default=None, help="Guardar el listado como CSV")

    sub.add_parser("dump", help="Mostrar la estructura del árbol")

    pd_ = sub.add_parser("delete", help="Eliminar registros por clave")
    pd_.add_argument("keys", nargs="+")
    pd_.add_argument("--show", action="store_true", help="Mostrar la estructura tras eliminar")

    pp = sub.add_parser("plot", help="Dibujar la estructura (si hay dependencias)")
    pp.add_argument("--out", "-o", default=None, help="Guardar la figura en un archivo")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        tree = load_tree(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    try:
        return COMMANDS[args.cmd](tree, args)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
