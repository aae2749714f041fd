from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

Entry = Tuple[Any, Any]


def _record_fields(record: Any) -> dict:
    # namedtuple -> dict; cualquier otro registro se guarda tal cual en "record"
    if hasattr(record, "_asdict"):
        return dict(record._asdict())
    if isinstance(record, dict):
        return dict(record)
    return {"record": record}


def entries_frame(entries: Iterable[Entry]) -> pd.DataFrame:
    """
    DataFrame con una fila por par (clave, registro) del recorrido.
    Columna "key" + los campos del registro si es namedtuple o dict.
    """
    rows = []
    for key, record in entries:
        row = {"key": key}
        row.update(_record_fields(record))
        rows.append(row)
    return pd.DataFrame(rows)


def sort_entries(entries: Iterable[Entry], by: str) -> List[Entry]:
    """
    Orden secundario de pares (clave, registro) por un atributo del registro.
    Es estable: a igual atributo se conserva el orden de clave del recorrido.
    """
    def attr(entry: Entry):
        record = entry[1]
        if isinstance(record, dict):
            return record[by]
        return getattr(record, by)

    return sorted(entries, key=attr)


def format_table(rows: Sequence[Sequence[Any]], columns: Sequence[str], limit: Optional[int] = None) -> str:
    """Tabla de ancho fijo: encabezado, separador y filas alineadas a la izquierda."""
    rows = [[str(v) for v in r] for r in rows]
    if limit is not None:
        rows = rows[:limit]
    widths = [len(c) for c in columns]
    for r in rows:
        widths = [max(w, len(v)) for w, v in zip(widths, r)]
    lines = ["   ".join(c.ljust(w) for c, w in zip(columns, widths)).rstrip()]
    lines.append("-" * (sum(widths) + 3 * (len(widths) - 1)))
    for r in rows:
        lines.append("   ".join(v.ljust(w) for v, w in zip(r, widths)).rstrip())
    return "\n".join(lines)


def save_listing_csv(entries: Iterable[Entry], out_path, by: Optional[str] = None) -> Path:
    """
    Guarda el listado como CSV (no es persistencia del árbol: solo exporta el recorrido).
    Si `by` se indica, las filas salen ordenadas por esa columna (orden estable).
    """
    out_p = Path(out_path)
    out_p.parent.mkdir(parents=True, exist_ok=True)
    df = entries_frame(entries)
    if by is not None and not df.empty:
        df = df.sort_values(by, kind="mergesort")
    df.to_csv(out_p, index=False)
    return out_p
