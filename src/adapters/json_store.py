"""Store local persistido en un fichero JSON.

Guarda los datos del usuario (favoritos, estado de plan/cuota) cuando no hay
backend remoto configurado. Cada mutación reescribe el fichero completo con
formato estable, igual que la exportación JSON.
"""

from __future__ import annotations

import json
from pathlib import Path

from adapters.memory_store import InMemoryRecordStore
from core.errors import TransportError


class JsonFileRecordStore(InMemoryRecordStore):
    def __init__(self, path: Path) -> None:
        self._path = path
        tables: dict[str, list[dict]] = {}
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise TransportError(f"Cannot read local store {path}: {exc}") from exc
            if isinstance(raw, dict):
                tables = {k: v for k, v in raw.items() if isinstance(v, list)}
        super().__init__(tables)

    @property
    def path(self) -> Path:
        return self._path

    async def _after_mutation(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self.snapshot(), ensure_ascii=False, indent=2, sort_keys=True) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise TransportError(f"Cannot write local store {self._path}: {exc}") from exc
