"""
Helpers puros de URL (sin I/O).

- remove_tag_params: quita `tag` y `tagging` del query string.
- normalize_bulk_archive_url: reconstruye la URL como prefijo + filename.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TAG_PARAMS = ("tag", "tagging")


def remove_tag_params(raw_url: str) -> tuple[str, bool]:
    """
    Remueve los query params `tag` y `tagging` (todas sus ocurrencias).

    Retorna (nueva_url, changed). Si la URL no se puede parsear o no trae
    ninguno de los dos params, retorna la URL original con changed=False.

    Al re-serializar, los params restantes quedan ordenados por key y
    codificados de forma canonica (los valores de una misma key mantienen
    su orden). Los valores se tratan como bytes: un escape que no es UTF-8
    valido (ej. `%FF`) sale igual que entro.
    """
    if not raw_url:
        return raw_url, False

    try:
        parts = urlsplit(raw_url)
        # latin-1 mapea cada byte a un caracter y vuelve sin perdida
        query = parts.query.encode("utf-8").decode("latin-1")
        pairs = parse_qsl(query, keep_blank_values=True, encoding="latin-1")
    except ValueError:
        return raw_url, False

    if not any(key in TAG_PARAMS for key, _ in pairs):
        return raw_url, False

    kept = [(key, value) for key, value in pairs if key not in TAG_PARAMS]
    kept.sort(key=lambda kv: kv[0])
    return urlunsplit(parts._replace(query=urlencode(kept, encoding="latin-1"))), True


def normalize_bulk_archive_url(raw_url: str, storage_prefix: str) -> str:
    """
    Reconstruye la URL del archivo bulk usando el prefijo S3 configurado,
    conservando solo el filename (ultimo segmento del path).

    Ej: https://old/a/b/bulk_upload_client_rate_1754324774.xlsx
        -> {prefix}/bulk_upload_client_rate_1754324774.xlsx

    Si el prefijo o la URL estan vacios, o no se puede parsear, o no hay
    filename, retorna la URL tal cual.
    """
    if not storage_prefix or not raw_url:
        return raw_url

    try:
        path = urlsplit(raw_url).path
    except ValueError:
        return raw_url

    filename = path.strip("/").split("/")[-1]
    if not filename:
        return raw_url

    return storage_prefix.rstrip("/") + "/" + filename
