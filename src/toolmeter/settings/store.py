# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Key-value stores backing a single settings scope."""

from __future__ import annotations

import logging
import os
import threading

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic_core import from_json, to_json

from toolmeter.exceptions import SettingsError


logger = logging.getLogger(__name__)

type SettingValue = str | bool | int | float


@runtime_checkable
class SettingsStore(Protocol):
    """A flat key-value namespace that can be flushed to durable storage."""

    def get(self, key: str) -> SettingValue | None: ...

    def set(self, key: str, value: SettingValue) -> None: ...

    def delete(self, key: str) -> None: ...

    def persist(self) -> None: ...


class InMemorySettings(SettingsStore):
    """Settings held only in memory. `persist` is a no-op."""

    def __init__(self, initial: dict[str, SettingValue] | None = None) -> None:
        self._values: dict[str, SettingValue] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> SettingValue | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: SettingValue) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def persist(self) -> None:
        pass

    def as_dict(self) -> dict[str, SettingValue]:
        with self._lock:
            return dict(self._values)


class JsonFileSettings(InMemorySettings):
    """Settings mirrored to a JSON object on disk.

    The file is read once at construction. `persist` rewrites the whole file
    through a temporary sibling so a crash never leaves a truncated file behind.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(self._load(path))
        self.path = path

    @staticmethod
    def _load(path: Path) -> dict[str, SettingValue]:
        if not path.exists():
            return {}
        try:
            data: Any = from_json(path.read_bytes())
        except OSError as e:
            raise SettingsError(
                "Could not read settings file", details={"file_path": str(path), "error": str(e)}
            ) from e
        except ValueError as e:
            raise SettingsError(
                "Settings file is not valid JSON",
                details={"file_path": str(path)},
                suggestions=["Delete the file to restore default settings"],
            ) from e
        if not isinstance(data, dict):
            raise SettingsError(
                "Settings file must contain a JSON object", details={"file_path": str(path)}
            )
        return data

    def persist(self) -> None:
        payload = to_json(self.as_dict(), indent=2)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise SettingsError(
                "Could not write settings file",
                details={"file_path": str(self.path), "error": str(e)},
            ) from e
        logger.debug("Persisted settings to %s", self.path)


__all__ = ("InMemorySettings", "JsonFileSettings", "SettingValue", "SettingsStore")
