# tests/test_cli.py
from ordered_index.cli import build_parser, main

BOOKS = (
    "Vidas Secas,Graciliano Ramos,978-3\n"
    "Iracema,José de Alencar,978-1\n"
    "Dom Casmurro,Machado de Assis,978-2\n"
    "O Quinze,Rachel de Queiroz,978-5\n"
    "Sagarana,João Guimarães Rosa,978-4\n"
)


def _data(tmp_path, text=BOOKS, name="livros.csv"):
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_search_found(tmp_path, capsys):
    rc = main(["--data", _data(tmp_path), "search", "978-2"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "Registro encontrado!" in out
    assert "title: Dom Casmurro" in out
    assert "author: Machado de Assis" in out


def test_search_not_found(tmp_path, capsys):
    rc = main(["--data", _data(tmp_path), "search", "ISBN-999"])
    assert rc == 1
    assert "ISBN-999 no encontrado" in capsys.readouterr().out


def test_list_by_title(tmp_path, capsys):
    rc = main(["--data", _data(tmp_path), "list"])
    out = capsys.readouterr().out
    assert rc == 0
    titles = ["Dom Casmurro", "Iracema", "O Quinze", "Sagarana", "Vidas Secas"]
    positions = [out.index(t) for t in titles]
    assert positions == sorted(positions)


def test_list_to_csv(tmp_path, capsys):
    target = tmp_path / "listado.csv"
    rc = main(["--data", _data(tmp_path), "list", "--out", str(target)])
    assert rc == 0
    lines = target.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "key,isbn,title,author"
    assert lines[1].startswith("978-2,978-2,Dom Casmurro")


def test_dump(tmp_path, capsys):
    rc = main(["--data", _data(tmp_path), "--order", "4", "dump"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "[978-3 (Vidas Secas)]" in out
    assert "  [978-1 (Iracema), 978-2 (Dom Casmurro)]" in out


def test_delete_products(tmp_path, capsys):
    data = _data(tmp_path, "".join(f"{1000 + i},Produto {i},Casa\n" for i in range(20)), "produtos.csv")
    rc = main(["--data", data, "--kind", "products", "--order", "3", "delete", "1005", "1999"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "Eliminado: Product(id=1005" in out
    assert "Registro con clave 1999 no encontrado" in out
    assert "Registros restantes: 19" in out


def test_missing_data_file(tmp_path, capsys):
    rc = main(["--data", str(tmp_path / "nada.csv"), "dump"])
    assert rc == 1
    assert "ERROR" in capsys.readouterr().err


def test_invalid_order_reported(tmp_path, capsys):
    rc = main(["--data", _data(tmp_path), "--order", "5", "--split", "preemptive", "dump"])
    assert rc == 1
    err = capsys.readouterr().err
    assert "ERROR" in err
    assert "orden par" in err


def test_split_help_mentions_even_order():
    # argparse reparte la ayuda en varias líneas
    text = " ".join(build_parser().format_help().split())
    assert "preemptive solo admite órdenes pares" in text


def _products(tmp_path):
    return _data(tmp_path, "".join(f"{1000 + i},Produto {i},Casa\n" for i in range(10)), "produtos.csv")


def test_search_non_integer_product_id(tmp_path, capsys):
    rc = main(["--data", _products(tmp_path), "--kind", "products", "search", "abc"])
    assert rc == 1
    assert "ERROR" in capsys.readouterr().err


def test_delete_non_integer_product_id(tmp_path, capsys):
    rc = main(["--data", _products(tmp_path), "--kind", "products", "delete", "1x"])
    assert rc == 1
    assert "ERROR" in capsys.readouterr().err


def test_list_unknown_attribute(tmp_path, capsys):
    rc = main(["--data", _data(tmp_path), "list", "--by", "isbnx"])
    assert rc == 1
    err = capsys.readouterr().err
    assert "ERROR" in err
    assert "isbnx" in err


def test_list_limit_zero(tmp_path, capsys):
    rc = main(["--data", _data(tmp_path), "list", "--limit", "0"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "isbn" in out
    assert "Dom Casmurro" not in out
    assert "árbol vacío" not in out


def test_list_to_csv_respects_limit(tmp_path, capsys):
    target = tmp_path / "listado.csv"
    rc = main(["--data", _data(tmp_path), "list", "--out", str(target), "--limit", "2"])
    assert rc == 0
    lines = target.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert lines[1].startswith("978-2,978-2,Dom Casmurro")
    assert lines[2].startswith("978-1,978-1,Iracema")
