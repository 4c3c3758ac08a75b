from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    package_dir: Path
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path


def get_paths(workdir: Path | None = None) -> Paths:
    """Content ships inside the package; user data goes under the working directory."""
    package_dir = Path(__file__).resolve().parent
    data_dir = package_dir / "data"
    base = workdir if workdir is not None else Path.cwd()
    return Paths(
        package_dir=package_dir,
        data_dir=data_dir,
        schema_dir=data_dir / "schemas",
        userdata_dir=base / "userdata",
    )
