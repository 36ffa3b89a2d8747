'''
mapa de segmentos de memoria (rangos de direcciones y registros base)
'''

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

@dataclass(frozen=True)
class Segment:
    """Rango de direcciones [begin, end] (inclusivo) de un segmento.

    - register: símbolo de la celda que guarda la base del segmento
      ('SP', 'LCL', ...) o None si el segmento está en direcciones fijas.
    """
    name: str
    begin: int
    end: int
    register: Optional[str] = None

    @property
    def size(self) -> int:
        return self.end - self.begin + 1

    def contains(self, addr: int) -> bool:
        return self.begin <= addr <= self.end

# Orden en que el arranque inicializa los registros puntero
BOOTSTRAP_ORDER: Tuple[str, ...] = ("stack", "local", "argument", "this", "that")

# Segmentos VM cuya base se lee de un registro puntero
INDIRECT_SEGMENTS = ("argument", "local", "this", "that")

# pointer 0 -> THIS, pointer 1 -> THAT
POINTER_REGISTERS: Tuple[str, ...] = ("THIS", "THAT")

_DEFAULT = (
    Segment("pointer",  3,    4),
    Segment("temp",     5,    12),
    Segment("general",  13,   15),
    Segment("static",   16,   255),
    Segment("stack",    256,  2047, "SP"),
    Segment("local",    2048, 2303, "LCL"),
    Segment("argument", 2304, 2559, "ARG"),
    Segment("this",     2560, 3071, "THIS"),
    Segment("that",     3072, 3583, "THAT"),
)

class SegmentMap(Mapping[str, Segment]):
    """Tabla inmutable nombre -> Segment. Se construye una vez y se pasa al generador."""

    def __init__(self, segments):
        table: Dict[str, Segment] = {}
        for seg in segments:
            if seg.begin > seg.end:
                raise ValueError(f"Segmento '{seg.name}' con rango vacío: {seg.begin}..{seg.end}")
            if seg.name in table:
                raise ValueError(f"Segmento duplicado: {seg.name}")
            table[seg.name] = seg
        missing = [n for n in ("pointer", "temp", "general", "static") + BOOTSTRAP_ORDER if n not in table]
        if missing:
            raise ValueError(f"Faltan segmentos: {', '.join(missing)}")
        self._table = MappingProxyType(table)

    def __getitem__(self, name: str) -> Segment:
        try:
            return self._table[name]
        except KeyError:
            raise KeyError(f"Segmento desconocido: {name}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    @property
    def scratch(self) -> int:
        """Celda de intercambio usada por 'pop' (inicio de 'general')."""
        return self["general"].begin

    def base_register(self, name: str) -> str:
        """Registro puntero de un segmento indirecto ('local' -> 'LCL')."""
        reg = self[name].register
        if reg is None:
            raise KeyError(f"El segmento '{name}' no tiene registro base")
        return reg

    def pointer_register(self, index: int) -> str:
        """'THIS' para el índice 0, 'THAT' para el 1."""
        if not 0 <= index < len(POINTER_REGISTERS):
            raise IndexError(f"Índice de pointer inválido: {index} (esperado 0 o 1)")
        return POINTER_REGISTERS[index]

    def bootstrap(self):
        """Pares (registro, dirección base) en el orden de arranque."""
        return [(self[n].register, self[n].begin) for n in BOOTSTRAP_ORDER]

DEFAULT_SEGMENTS = SegmentMap(_DEFAULT)
