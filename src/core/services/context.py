"""Preferencias de sesión inyectables.

El locale activo se lee en cada llamada, así que cambiar de idioma afecta a
la siguiente consulta sin reconstruir repositorios.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.domain.language import Locale


@dataclass
class Preferences:
    locale: Locale = field(default_factory=Locale.default)

    def set_locale(self, value: Locale | str) -> Locale:
        self.locale = Locale.parse(value)
        return self.locale
