import io
import logging
import threading

import fsspec

from .constants import DFTAG_NULL, EXTENDED_BIT, MAGIC
from .errors import InvalidFile, UnresolvedReference
from .kinds import make_record
from .record import RecordID
from .stream import ByteSource

lggr = logging.getLogger("hdf4dd.file")


class HDF4File:
    """Directory of the data descriptors in one HDF4 file

    Walks the linked list of descriptor blocks at open, making one (unloaded)
    record per descriptor. All records share this object's file handle; reads
    are serialised with ``lock``.

    Parameters
    ----------
    path: str or file-like
        fsspec URL of the file, or an open binary file-like object
    storage_options: dict
        passed to fsspec if path is a str
    error: "warn" (default) | "ignore" | "raise"
        What to do when a record uses a special element or compression which
        is not supported. "warn" and "ignore" leave the record loaded but with
        no fields, and the exception as ``record.error``; "raise" propagates it
        and leaves the record unloaded.
    """

    def __init__(self, path, storage_options=None, error="warn"):
        if error not in ["warn", "ignore", "raise"]:
            raise ValueError(f"error must be warn, ignore or raise, got {error!r}")
        self.path = path
        self.storage_options = storage_options
        self.error = error
        self.lock = threading.RLock()
        self.f = None
        self._records = {}

    def open(self):
        if self.f is not None:
            return self
        if isinstance(self.path, str):
            lggr.debug("HDF4 file: %s", self.path)
            self.f = fsspec.open(self.path, **(self.storage_options or {})).open()
        elif isinstance(self.path, io.IOBase):
            self.f = self.path
        else:
            raise ValueError("type of input `path` not recognised")
        try:
            with self.lock:
                self._read_directory()
        except Exception:
            self.close()
            raise
        return self

    def close(self):
        if self.f is not None and isinstance(self.path, str):
            self.f.close()
        self.f = None
        self._records = {}

    def __enter__(self):
        return self.open()

    def __exit__(self, *_):
        self.close()

    def _read_directory(self):
        source = ByteSource(self.seek(0))
        if source.read(4) != MAGIC:
            raise InvalidFile(f"{self.path} is not an HDF4 file")
        # all the data descriptors in a linked list of blocks
        seen = set()
        while True:
            ndd = source.read_u16()
            next_block = source.read_u32()
            lggr.debug("descriptor block with %d entries, next at %d", ndd, next_block)
            for _ in range(ndd):
                self._read_dd(source)
            if next_block == 0:
                break
            if next_block in seen:
                raise InvalidFile(f"Descriptor blocks loop back to {next_block}")
            seen.add(next_block)
            self.seek(next_block)
        lggr.debug("found %d records", len(self._records))

    def _read_dd(self, source):
        tag = source.read_u16()
        ref = source.read_u16()
        offset = source.read_u32()
        length = source.read_u32()
        extended = bool(tag & EXTENDED_BIT)
        tag &= ~EXTENDED_BIT
        if tag == DFTAG_NULL:
            # unused slot
            return
        ident = RecordID(tag, ref)
        self._records[ident] = make_record(self, tag, ref, offset, length, extended)

    def seek(self, offset):
        """Position the shared stream; callers should hold ``lock``"""
        if self.f is None:
            raise ValueError("File is not open")
        self.f.seek(offset)
        return self.f

    def resolve(self, ident):
        try:
            return self._records[RecordID(*ident)]
        except KeyError:
            raise UnresolvedReference(ident) from None

    __getitem__ = resolve

    def __contains__(self, ident):
        return RecordID(*ident) in self._records

    def __iter__(self):
        return iter(self._records)

    def __len__(self):
        return len(self._records)

    def records(self, tag=None):
        """All records, or those with the given tag, in directory order"""
        return [r for r in self._records.values() if tag is None or r.tag == tag]

    def __str__(self):
        return f"<HDF4 file {self.path}: {len(self)} records>"

    __repr__ = __str__

