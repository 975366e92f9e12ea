def normalize_identifier(raw: str) -> str:
    """
    Normaliza un número de matrícula escaneado.
    Elimina los ceros a la izquierda; si no queda nada devuelve "0",
    de modo que "007" y "7" (o "" y "0") apunten al mismo estudiante.
    """
    stripped = raw.lstrip("0")
    return stripped or "0"
