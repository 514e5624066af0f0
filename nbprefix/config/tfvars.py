# nbprefix/config/tfvars.py

from __future__ import annotations
import json
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union

from nbprefix.errors import DocumentError
from nbprefix.models import NamedSubnet, PrefixRecord
from nbprefix.utils.logging import get_logger

log = get_logger(__name__)

PathLike = Union[str, Path]

PREFIXES_KEY = "prefixes"
VALID_STATUSES = ("container", "active", "reserved", "deprecated")
NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9_]*")


def validate_prefix_name(name: str) -> str:
    """Names start with a letter and hold only letters, digits and underscores."""
    if not NAME_RE.fullmatch(name):
        raise DocumentError(
            f"Invalid prefix name {name!r}: must start with a letter and contain only letters, numbers and underscores"
        )
    return name


@dataclass
class AddResult:
    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _read_json(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DocumentError(f"{path} is not valid JSON: {e}") from e
    except OSError as e:
        raise DocumentError(f"Could not read {path}: {e}") from e

    if not isinstance(data, dict):
        raise DocumentError(f"{path} must contain a JSON object at the top level")
    return data


def _record_from_dict(name: str, raw: object) -> PrefixRecord:
    if not isinstance(raw, dict) or "prefix" not in raw:
        raise DocumentError(f"Prefix entry {name!r} must be an object with a 'prefix' field")
    tenant_id = raw.get("tenant_id")
    if tenant_id is not None and (isinstance(tenant_id, bool) or not isinstance(tenant_id, int)):
        raise DocumentError(f"Prefix entry {name!r} has a non-integer tenant_id: {tenant_id!r}")
    return PrefixRecord(
        prefix=str(raw["prefix"]),
        description=str(raw.get("description", "")),
        status=str(raw.get("status", "active")),
        is_pool=bool(raw.get("is_pool", False)),
        tenant_id=tenant_id,
    )


class PrefixDocument:
    """
    Terraform variables file (JSON syntax) holding the ``prefixes`` map.

    Entries keep insertion order; any other top-level variables in the file
    are carried through untouched on save.
    """

    def __init__(self, path: PathLike, variables: Optional[dict] = None) -> None:
        self.path = Path(path)
        variables = dict(variables or {})
        raw_prefixes = variables.pop(PREFIXES_KEY, None) or {}
        if not isinstance(raw_prefixes, dict):
            raise DocumentError(f"'{PREFIXES_KEY}' in {self.path} must be an object")

        self._other = variables
        self._prefixes: dict[str, PrefixRecord] = {
            name: _record_from_dict(name, raw) for name, raw in raw_prefixes.items()
        }

    @classmethod
    def load(cls, path: PathLike, example: Optional[PathLike] = None) -> "PrefixDocument":
        """
        Read ``path``. If it does not exist yet, start from ``example``.

        Raises DocumentError when neither file is present.
        """
        path = Path(path).expanduser()
        if path.exists():
            log.info("Loading prefixes from %s", path)
            return cls(path, _read_json(path))

        if example is not None and Path(example).expanduser().exists():
            example = Path(example).expanduser()
            log.info("Creating %s from %s", path, example)
            return cls(path, _read_json(example))

        raise DocumentError(
            f"Neither {path} nor {example} exists" if example else f"{path} does not exist"
        )

    @property
    def prefixes(self) -> dict[str, PrefixRecord]:
        return dict(self._prefixes)

    def names(self) -> list[str]:
        return list(self._prefixes)

    def get(self, name: str) -> Optional[PrefixRecord]:
        return self._prefixes.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._prefixes

    def __len__(self) -> int:
        return len(self._prefixes)

    def add(self, name: str, record: PrefixRecord) -> bool:
        """
        Insert a prefix. Returns False, leaving the document as is, if the name is taken.

        Raises DocumentError for a malformed name or an unknown status.
        """
        if name in self._prefixes:
            log.warning("Prefix with name '%s' already exists in %s, skipping", name, self.path)
            return False
        validate_prefix_name(name)
        if record.status not in VALID_STATUSES:
            raise DocumentError(
                f"Invalid status {record.status!r} for {name!r}; expected one of {', '.join(VALID_STATUSES)}"
            )
        self._prefixes[name] = record
        log.debug("Added %s (%s)", name, record.prefix)
        return True

    def add_sequence(
            self,
            named: Iterable[NamedSubnet],
            description_prefix: str = "Subnet",
            status: str = "active",
            is_pool: bool = False,
    ) -> AddResult:
        """Add generated subnets in order, skipping names already present."""
        result = AddResult()
        for item in named:
            description = f"{description_prefix} {item.cidr}".strip()
            record = PrefixRecord(
                prefix=item.cidr,
                description=description,
                status=status,
                is_pool=is_pool,
            )
            if self.add(item.name, record):
                result.added.append(item.name)
            else:
                result.skipped.append(item.name)
        return result

    def to_dict(self) -> dict:
        data = dict(self._other)
        data[PREFIXES_KEY] = {name: rec.to_dict() for name, rec in self._prefixes.items()}
        return data

    def save(self, backup: bool = True) -> Optional[Path]:
        """
        Write the document back to ``self.path``.

        Returns the backup path when an existing file was copied aside first.
        """
        backup_path = None
        if backup and self.path.exists():
            backup_path = self.path.with_name(self.path.name + ".backup")
            shutil.copy2(self.path, backup_path)
            log.info("Backed up %s to %s", self.path, backup_path)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        log.info("Wrote %d prefixes to %s", len(self), self.path)
        return backup_path
