from __future__ import annotations

LABEL_PREFIX = "vm."
HALT_LABEL = "vm$program.end"
STATIC_PREFIX = "static."

class LabelAllocator:
    """Genera etiquetas únicas 'vm.<nombre>$<n>' durante una traducción.

    El contador solo crece; cada traducción usa su propio asignador.
    """

    def __init__(self, prefix: str = LABEL_PREFIX):
        self.prefix = prefix
        self._count = 0

    @property
    def issued(self) -> int:
        return self._count

    def next(self, name: str) -> str:
        if not name or "$" in name:
            raise ValueError(f"Nombre de etiqueta inválido: '{name}'")
        label = f"{self.prefix}{name}${self._count}"
        self._count += 1
        return label

def static_symbol(index: int) -> str:
    return f"{STATIC_PREFIX}{index}"
