"""Local persistence for wallet account records."""

from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional, Protocol, Tuple
import json
import os
import tempfile
import threading

from chain_adapter.starknet.models import normalize_address

from .models import AccountRecord, AccountRef


class AccountStore(Protocol):
    def store(self, record: AccountRecord) -> None:
        ...

    def find(self, ref: AccountRef) -> Optional[AccountRecord]:
        ...

    def load(self, ref: AccountRef) -> AccountRecord:
        ...

    def list_records(self) -> Tuple[AccountRecord, ...]:
        ...

    def mark_deployed(self, ref: AccountRef) -> AccountRecord:
        ...


def _key(ref: AccountRef) -> Tuple[str, str]:
    return normalize_address(ref.address), ref.network_id


# Shared by every store instance in the process.
_WRITE_LOCK = threading.RLock()


class FileAccountStore:
    """JSON-file account store.

    Read-modify-write cycles are serialized within one process and the file
    is replaced atomically. Separate processes writing the same file are not
    coordinated; run a single writer per store file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def store(self, record: AccountRecord) -> None:
        record = replace(record, address=normalize_address(record.address))
        with _WRITE_LOCK:
            records = {_key(item.ref): item for item in self._read_all()}
            records[_key(record.ref)] = record
            self._write_all(records.values())

    def find(self, ref: AccountRef) -> Optional[AccountRecord]:
        key = _key(ref)
        for record in self._read_all():
            if _key(record.ref) == key:
                return record
        return None

    def load(self, ref: AccountRef) -> AccountRecord:
        record = self.find(ref)
        if record is None:
            raise KeyError(f"Unknown account: {ref.address} on {ref.network_id}")
        return record

    def list_records(self) -> Tuple[AccountRecord, ...]:
        return self._read_all()

    def mark_deployed(self, ref: AccountRef) -> AccountRecord:
        with _WRITE_LOCK:
            record = self.load(ref)
            if record.deployed:
                return record
            updated = replace(record, deployed=True)
            self.store(updated)
        return updated

    def _read_all(self) -> Tuple[AccountRecord, ...]:
        if not self._path.exists():
            return ()
        data = json.loads(self._path.read_text())
        return tuple(AccountRecord.from_dict(item) for item in data)

    def _write_all(self, records: Iterable[AccountRecord]) -> None:
        payload = [record.to_dict() for record in records]
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self._path.name}.")
        try:
            with os.fdopen(fd, "w") as handle:
                json.dump(payload, handle, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            os.unlink(tmp_name)
            raise
