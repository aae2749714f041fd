#!/usr/bin/env python3
# scripts/run_removal_demo.py
"""
Carga productos, mide el tiempo de inserción y elimina N ids aleatorios
comparando las dos estrategias de división.
Uso:
  python scripts/run_removal_demo.py --data data/sample/produtos.csv --removals 10 --seed 42
"""
from pathlib import Path
import argparse
import sys
import time

import numpy as np

try:
    from ordered_index.catalog.loaders import read_products, insert_all
    from ordered_index.db.btree import BTree
except Exception:
    print("ERROR: No se pudo importar ordered_index. Asegúrate de haberlo instalado (pip install -e .)")
    raise

ROOT = Path(__file__).resolve().parents[1]


def run_case(label: str, tree: BTree, products, ids_to_remove):
    print(f"--- Probando {label} ---")
    t0 = time.perf_counter()
    insert_all(tree, ((p.id, p) for p in products))
    t1 = time.perf_counter()
    print(f"Tiempo de inserción: {(t1 - t0) * 1000:.2f} ms ({len(tree)} registros, altura {tree.height})")

    print(f"\nEliminando {len(ids_to_remove)} productos aleatorios...")
    t0 = time.perf_counter()
    for pid in ids_to_remove:
        found = tree.search(pid)
        if found is not None:
            print("Producto encontrado:", found)
            tree.delete(pid)
        else:
            print(f"Producto con ID {pid} no encontrado.")
    t1 = time.perf_counter()
    print(f"Tiempo de eliminación: {(t1 - t0) * 1000:.2f} ms")
    tree.check_invariants()
    print("Invariantes OK. Registros restantes:", len(tree))


def main(argv=None):
    p = argparse.ArgumentParser(description="Inserción y eliminación aleatoria en el árbol B")
    p.add_argument("--data", default=str(ROOT / "data" / "sample" / "produtos.csv"))
    p.add_argument("--removals", type=int, default=10, help="Cantidad de ids a eliminar")
    p.add_argument("--low", type=int, default=1000)
    p.add_argument("--high", type=int, default=2000)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args(argv)

    try:
        products = read_products(args.data)
    except FileNotFoundError as e:
        print(f"ERROR: no existe el archivo {e}", file=sys.stderr)
        return 2
    if not products:
        print("Ningún producto encontrado en el archivo. Abortando.")
        return 1

    rng = np.random.default_rng(args.seed)
    # ids en [low, high], igual para ambos casos para poder comparar
    ids = rng.integers(args.low, args.high, endpoint=True, size=args.removals).tolist()

    run_case("Árbol B (orden 3, división por desborde)", BTree(order=3), products, ids)
    print("\n" + "-" * 40 + "\n")
    run_case("Árbol B (orden 4, división preventiva)", BTree(order=4, split="preemptive"), products, ids)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
