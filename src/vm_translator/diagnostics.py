'''
clase Diagnostic, helpers y excepciones de traducción
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

# Severidad de los diagnósticos (en español)
Severity = Literal["error", "advertencia", "nota"]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
    "nota": "NOTA",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Abarca errores, advertencias y notas, con ubicación opcional (archivo y línea)
    y un mensaje de ayuda (pista) para orientar la corrección.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(message: str, *, line: int | None = None,
          file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, hint, file)

def warning(message: str, *, line: int | None = None,
            file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", message, line, hint, file)

# ---- Excepciones ----

class TranslationError(Exception):
    """Error que aborta la traducción. Lleva el diagnóstico que lo describe."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic

    @property
    def line(self) -> Optional[int]:
        return self.diagnostic.line

class ClassificationError(TranslationError):
    """Línea VM mal formada o no reconocida."""

    def __init__(self, diagnostic: Diagnostic, text: str):
        super().__init__(diagnostic)
        self.text = text

class UnsupportedCommandError(TranslationError):
    """Comando reconocido por el clasificador pero sin plantilla de código."""

class OutputWriteError(TranslationError):
    """La salida no acepta más datos."""

class InvalidArgumentError(TranslationError):
    """Acceso a un argumento que la instrucción actual no tiene."""
