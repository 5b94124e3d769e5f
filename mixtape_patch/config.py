from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_INPUT_URL = (
    "https://gist.githubusercontent.com/jmodjeska/0679cf6cd670f76f07f1874ce00daaeb/raw/"
    "a4ac53fa86452ac26d706df2e851fb7d02697b4b/mixtape-data.json"
)


def _expand(value: Optional[str | Path]) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(value).expanduser()


class InputSettings(BaseModel):
    url: str = DEFAULT_INPUT_URL
    path: Optional[Path] = None

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Optional[Path]:
        return _expand(value)


class HttpSettings(BaseModel):
    timeout_seconds: float = Field(default=5.0, gt=0)
    total_timeout_seconds: float = Field(default=180.0, gt=0)


class Settings(BaseModel):
    input: InputSettings = InputSettings()
    changes_path: Path = Path("changes.json")
    output_path: Path = Path("output.json")
    http: HttpSettings = HttpSettings()
    log_level: str = "INFO"

    @field_validator("changes_path", "output_path", mode="before")
    @classmethod
    def _expand_file(cls, value: str | Path) -> Path:
        return Path(value).expanduser()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})

    def with_overrides(
        self,
        *,
        url: Optional[str] = None,
        input_path: Optional[str | Path] = None,
        changes_path: Optional[str | Path] = None,
        output_path: Optional[str | Path] = None,
        log_level: Optional[str] = None,
    ) -> "Settings":
        """Return a copy where every non-None argument replaces the configured value."""
        data: dict[str, Any] = self.model_dump()
        if url is not None:
            data["input"]["url"] = url
        if input_path is not None:
            data["input"]["path"] = input_path
        if changes_path is not None:
            data["changes_path"] = changes_path
        if output_path is not None:
            data["output_path"] = output_path
        if log_level is not None:
            data["log_level"] = log_level
        return type(self).model_validate(data)


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file {explicit_path} does not exist.")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "mixtape.yaml", cwd / "mixtape.yml"):
        if candidate.exists():
            return candidate
    return None
