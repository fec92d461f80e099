"""Traductor en→tr basado en diccionario de términos técnicos.

Reemplazo literal, sin distinguir mayúsculas, de los términos conocidos
(coincidencias completas o parciales). Los términos largos se aplican antes
que los cortos para que "Faulty fan" gane a "Fan". El resultado es
aproximado: el texto sin términos conocidos queda tal cual.
"""

from __future__ import annotations

import re
from collections.abc import Mapping


TECHNICAL_TERMS: dict[str, str] = {
    # Averías
    "Ignition failure": "Ateşleme hatası",
    "boiler fails to ignite": "kazan ateşlenemiyor",
    "Low water pressure": "Düşük su basıncı",
    "High pressure": "Yüksek basınç",
    "Overheating": "Aşırı ısınma",
    "Flame detection": "Alev algılama",
    "Flame loss": "Alev kaybı",
    "Fan fault": "Fan arızası",
    "Pump fault": "Pompa arızası",
    "Temperature sensor": "Sıcaklık sensörü",
    "Pressure sensor": "Basınç sensörü",
    "Circuit board": "Devre kartı",
    "Gas valve": "Gaz valfi",
    "Air pressure switch": "Hava basınç anahtarı",
    "Condensate trap": "Kondensat tuzağı",
    # Causas
    "Gas supply issue": "Gaz besleme sorunu",
    "gas valve closed": "gaz valfi kapalı",
    "Faulty ignition electrode": "Arızalı ateşleme elektrotu",
    "Air in gas line": "Gaz hattında hava",
    "Low gas pressure": "Düşük gaz basıncı",
    "Blocked flue": "Tıkalı baca",
    "condensate pipe": "kondensat borusu",
    "Water leak": "Su kaçağı",
    "pressure relief valve": "basınç tahliye valfi",
    "Expansion vessel": "Genleşme tankı",
    "bleeding radiators": "radyatör havalandırma",
    "Faulty PCB": "Arızalı devre kartı",
    "Faulty fan": "Arızalı fan",
    "Fan not running": "Fan çalışmıyor",
    "Blocked air intake": "Tıkalı hava girişi",
    "Faulty pressure switch": "Arızalı basınç anahtarı",
    "Condensate trap blocked": "Kondensat tuzağı tıkalı",
    # Acciones
    "Check": "Kontrol edin",
    "Inspect": "İnceleyin",
    "Replace": "Değiştirin",
    "Clean": "Temizleyin",
    "Reset": "Sıfırlayın",
    "Call": "Arayın",
    "Contact": "İletişime geçin",
    "Turn off": "Kapatın",
    "Turn on": "Açın",
    "Press": "Basın",
    "Wait": "Bekleyin",
    "Listen": "Dinleyin",
    # Seguridad
    "Gas Safe registered engineer": "Yetkili gaz teknisyeni",
    "immediately": "hemen",
    "Warning": "Uyarı",
    "Caution": "Dikkat",
    "Do not attempt": "Denemeyin",
    "Professional required": "Profesyonel gerekli",
    # Herramientas
    "Screwdriver": "Tornavida",
    "Multimeter": "Multimetre",
    "Pressure gauge": "Basınç göstergesi",
    "Adjustable wrench": "Ayarlanabilir anahtar",
    "Pipe wrench": "Boru anahtarı",
    "Flashlight": "El feneri",
    "Ladder": "Merdiven",
    "Bucket": "Kova",
    "Towels": "Havlular",
    "Wire brush": "Tel fırça",
    "Vacuum cleaner": "Elektrik süpürgesi",
    # Unidades
    "minutes": "dakika",
    "hours": "saat",
    # Frases comunes
    "The boiler": "Kazan",
    "the system": "sistem",
    "water pressure": "su basıncı",
    "heating system": "ısıtma sistemi",
    "central heating": "merkezi ısıtma",
    "hot water": "sıcak su",
    "radiators": "radyatörler",
    "thermostat": "termostat",
}


class TermDictionaryTranslator:
    def __init__(self, terms: Mapping[str, str] | None = None) -> None:
        items = sorted((terms or TECHNICAL_TERMS).items(), key=lambda kv: len(kv[0]), reverse=True)
        self._rules = [(re.compile(re.escape(en), re.IGNORECASE), tr) for en, tr in items if en]

    def __call__(self, text: str) -> str:
        return self.translate(text)

    def translate(self, text: str) -> str:
        translated = text
        for pattern, replacement in self._rules:
            translated = pattern.sub(lambda _m, r=replacement: r, translated)
        return translated


_default = TermDictionaryTranslator()


def translate_text(text: str) -> str:
    return _default.translate(text)
