import logging
from collections import namedtuple

from .constants import (
    COMP_CODE_DEFLATE,
    DFTAG_COMPRESSED,
    SPECIAL_CHUNKED,
    SPECIAL_COMP,
    comp,
    spec,
    tag_name,
)
from .errors import (
    InvalidFile,
    UnsupportedCodec,
    UnsupportedExtensionKind,
    UnsupportedFeature,
)
from .stream import ByteSource

lggr = logging.getLogger("hdf4dd.record")


class RecordID(namedtuple("RecordID", ["tag", "ref"])):
    """(tag, reference number) pair naming one record within a file"""

    __slots__ = ()

    def __new__(cls, tag, ref):
        tag, ref = int(tag), int(ref)
        if not 0 <= tag <= 0xFFFF or not 0 <= ref <= 0xFFFF:
            raise ValueError(f"Tag and ref must fit in 16 bits, got ({tag}, {ref})")
        return super().__new__(cls, tag, ref)

    def __str__(self):
        return f"<{self.tag},{self.ref}>"


class Record:
    """A data descriptor: one tagged block of bytes in an HDF4 file

    Instances are cheap; nothing is read until ``ensure_loaded()`` (or an
    accessor of a subclass which calls it). Extended records hold a
    special-element header instead of their data; the compressed and chunked
    kinds are followed here, so that subclasses only ever see the logical
    bytes in ``decode_fields``.

    Parameters
    ----------
    directory: hdf4dd.file.HDF4File
        Owner of the shared stream, used to seek and to resolve other records
    tag, ref: int
        Identity of this record
    offset: int
        Absolute position of the stored bytes
    length: int
        Number of stored bytes (header bytes, for an extended record)
    extended: bool
        Whether the stored bytes are a special-element header
    """

    #: attributes set by ``decode_fields``, None until loaded
    field_names = ()

    def __init__(self, directory, tag, ref, offset, length, extended=False):
        self.directory = directory
        self.tag = tag
        self.ref = ref
        self.offset = offset
        self.stored_length = length
        self.extended = extended
        self.uncompressed_length = 0
        self.loaded = False
        self.error = None
        self.chunking = None
        for field in self.field_names:
            setattr(self, field, None)

    @property
    def ident(self):
        return RecordID(self.tag, self.ref)

    @property
    def length(self):
        """Logical length of the data, after any decompression"""
        if self.extended and self.uncompressed_length > 0:
            return self.uncompressed_length
        return self.stored_length

    def ensure_loaded(self):
        """Read and decode this record, once

        I/O errors and unresolved references propagate and leave the record
        unloaded, so that the call can be retried. Unsupported special
        elements are handled according to the directory's ``error`` policy.
        """
        if self.loaded:
            return
        with self.directory.lock:
            if self.loaded:
                # another thread got here first
                return
            f = self.directory.seek(self.offset)
            if not self.extended:
                fields = self.decode_fields(ByteSource(f, self.stored_length))
            else:
                source = ByteSource(f, self.stored_length)
                try:
                    fields = self._load_extended(source)
                except UnsupportedFeature as e:
                    if self.directory.error == "raise":
                        raise
                    if self.directory.error == "warn":
                        lggr.warning("%s: %s", self, e)
                    self.error = e
                    fields = {}
            self.__dict__.update(fields)
            self.loaded = True

    def require_fields(self):
        """Load, and fail if the fields were not decoded

        For records consulted by another record's load: a degraded record
        re-raises its ``UnsupportedFeature``, so the outer load is subject to
        the same ``error`` policy.
        """
        self.ensure_loaded()
        if self.error is not None:
            raise self.error
        if self.field_names and getattr(self, self.field_names[0]) is None:
            # e.g. chunked, which only yields ``chunking``
            raise UnsupportedFeature(f"{self} has no decoded fields")

    def _load_extended(self, source):
        kind = source.read_u16()
        if kind == SPECIAL_COMP:
            return self._load_compressed(source)
        elif kind == SPECIAL_CHUNKED:
            return self._load_chunked(source)
        raise UnsupportedExtensionKind(spec.get(kind, kind))

    def _load_compressed(self, source):
        source.read_u16()  # compression version, always 0
        self.uncompressed_length = source.read_i32()
        linked_ref = source.read_u16()
        source.read_u16()  # model type, always 0
        codec = source.read_u16()
        if codec != COMP_CODE_DEFLATE:
            raise UnsupportedCodec(comp.get(codec, codec))
        level = source.read_u16()
        block = self.directory.resolve(RecordID(DFTAG_COMPRESSED, linked_ref))
        lggr.debug("%s: inflating %s at level %d", self, block, level)
        return self.decode_fields(block.decompress(level))

    def _load_chunked(self, source):
        # the whole header is consumed before the chunk table is loaded,
        # since that moves the shared stream
        source.read_i32()  # length of the rest of the header
        info = {
            "version": source.read_u8(),
            "flag": source.read_i32(),
            # logical element count; physical storage can be larger due to
            # ghost areas in edge chunks
            "elem_total_length": source.read_i32(),
            "chunk_size": source.read_i32(),
            "nt_size": source.read_i32(),
            "chunk_table": RecordID(source.read_u16(), source.read_u16()),
            # ghost chunk table, reserved by the format
            "special_table": RecordID(source.read_u16(), source.read_u16()),
        }
        ndims = source.read_u16()
        info["dims"] = [
            {
                "flag": source.read_i32(),
                "dim_length": source.read_i32(),
                "chunk_length": source.read_i32(),
            }
            for _ in range(ndims)
        ]
        fill_length = source.read_i32()
        if fill_length < 0:
            raise InvalidFile(f"{self}: negative fill value length {fill_length}")
        info["fill_value"] = source.read(fill_length)

        table = self.directory.resolve(info["chunk_table"])
        chunks = []
        for i in range(table.entry_count()):
            entry = table.entry_at(i)
            lggr.debug("%s: chunk %d at %s", self, i, entry)
            chunks.append(entry)
        info["chunks"] = chunks
        return {"chunking": info}

    def decode_fields(self, source):
        """Parse this kind's fields from the logical bytes

        Parameters
        ----------
        source: hdf4dd.stream.ByteSource
            Positioned at the first byte of the data, and bounded to the
            logical length

        Returns
        -------
        dict of attribute names to values, applied to the record once the
        whole load has succeeded
        """
        raise NotImplementedError

    def read_raw(self):
        """The stored bytes, verbatim; possibly compressed or a special header"""
        with self.directory.lock:
            f = self.directory.seek(self.offset)
            return ByteSource(f).read(self.stored_length)

    def summary(self):
        return {
            "tag": self.tag,
            "name": tag_name(self.tag),
            "ref": self.ref,
            "offset": self.offset,
            "stored_length": self.stored_length,
            "length": self.length,
            "extended": self.extended,
            "loaded": self.loaded,
            "error": str(self.error) if self.error else None,
        }

    def __str__(self):
        return (
            f"<{self.tag},{self.ref}> offset: {self.offset}, "
            f"length: {self.stored_length}"
        )

    __repr__ = __str__
