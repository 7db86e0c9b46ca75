import io

import numcodecs
import numpy as np

from .constants import (
    DFTAG_CHUNK,
    DFTAG_COMPRESSED,
    DFTAG_NDG,
    DFTAG_NT,
    DFTAG_SD,
    DFTAG_SDD,
    DFTAG_VERSION,
    DFTAG_VG,
    DFTAG_VH,
    DFTAG_VS,
    dtypes,
)
from .errors import TruncatedRead
from .record import Record, RecordID
from .stream import ByteSource

kinds = {}


def reg(tag):
    def f(cls):
        kinds[tag] = cls
        return cls

    return f


def make_record(directory, tag, ref, offset, length, extended=False):
    """Instantiate the record class registered for ``tag``"""
    return kinds.get(tag, RawRecord)(directory, tag, ref, offset, length, extended)


class RawRecord(Record):
    """Any record whose layout is not decoded here; only its bytes are available"""

    def decode_fields(self, source):
        return {}


@reg(DFTAG_VERSION)
class VersionRecord(Record):
    field_names = ("major", "minor", "release", "string")

    def decode_fields(self, source):
        return {
            "major": source.read_u32(),
            "minor": source.read_u32(),
            "release": source.read_u32(),
            "string": source.read_str(source.remaining),
        }


@reg(DFTAG_COMPRESSED)
class CompressedBlock(Record):
    """Deflated payload of some other, extended record"""

    def decode_fields(self, source):
        return {}

    def decompress(self, level):
        """Inflate the stored bytes

        ``level`` is the level the data were written with; zlib streams
        carry everything needed to decode them, so it is not used further.
        """
        data = numcodecs.Zlib(level=level).decode(self.read_raw())
        data = bytes(data)
        return ByteSource(io.BytesIO(data), len(data))


@reg(DFTAG_CHUNK)
class ChunkRecord(Record):
    """One stored chunk of a chunked element; located via its chunk table"""

    def decode_fields(self, source):
        return {}


@reg(DFTAG_NT)
class NumberType(Record):
    field_names = ("version", "typ", "width", "cls")

    def decode_fields(self, source):
        version, typ, width, cls = source.read(4)
        return {
            "version": version,
            "typ": dtypes.get(typ, typ),
            "width": width,
            "cls": cls,
        }


@reg(DFTAG_SDD)
class SDDimension(Record):
    """Shape of a scientific dataset, with the ids of its scales"""

    field_names = ("rank", "dims", "data_tag", "scale_tags")

    def decode_fields(self, source):
        rank = source.read_u16()
        dims = [source.read_u32() for _ in range(rank)]
        data_tag = RecordID(source.read_u16(), source.read_u16())
        scale_tags = [
            RecordID(source.read_u16(), source.read_u16()) for _ in range(rank)
        ]
        return {
            "rank": rank,
            "dims": dims,
            "data_tag": data_tag,
            "scale_tags": scale_tags,
        }


@reg(DFTAG_SD)
class ScientificData(Record):
    field_names = ("data",)

    def decode_fields(self, source):
        return {"data": source.read_all()}

    def as_array(self, dtype, shape=None):
        self.ensure_loaded()
        if self.data is None:
            # chunked or unsupported, nothing contiguous to view
            return None
        arr = np.frombuffer(self.data, dtype=dtype)
        return arr.reshape(shape) if shape is not None else arr


@reg(DFTAG_NDG)
class NumericDataGroup(Record):
    field_names = ("members",)

    def decode_fields(self, source):
        return {
            "members": [
                RecordID(source.read_u16(), source.read_u16())
                for _ in range(source.remaining // 4)
            ]
        }


@reg(DFTAG_VH)
class VDataHeader(Record):
    """Header of a vdata ("table"); the rows live in the VS record with the same ref

    Also serves as the chunk table of chunked elements: one row per chunk,
    giving its origin and the (tag, ref) of the chunk record.
    """

    field_names = (
        "interface",
        "nvert",
        "ivsize",
        "types",
        "isize",
        "offsets",
        "order",
        "names",
        "name",
        "cls",
        "extension",
    )

    def decode_fields(self, source):
        interface = source.read_u16()
        nvert = source.read_u32()
        ivsize = source.read_u16()
        nfields = source.read_u16()
        types = [source.read_u16() for _ in range(nfields)]
        isize = [source.read_u16() for _ in range(nfields)]
        offsets = [source.read_u16() for _ in range(nfields)]
        order = [source.read_u16() for _ in range(nfields)]
        names = [source.read_str(source.read_u16()) for _ in range(nfields)]
        name = source.read_str(source.read_u16())
        cls = source.read_str(source.read_u16())
        extension = RecordID(source.read_u16(), source.read_u16())
        return {
            "interface": interface,
            "nvert": nvert,
            "ivsize": ivsize,
            "types": types,
            "isize": isize,
            "offsets": offsets,
            "order": order,
            "names": names,
            "name": name,
            "cls": cls,
            "extension": extension,
        }

    @property
    def dtype(self):
        """numpy structured dtype of one row"""
        self.require_fields()
        formats = []
        for typ, size, order in zip(self.types, self.isize, self.order):
            base = dtypes[typ]
            if base == "str":
                formats.append(f"S{size}")
            elif order > 1:
                formats.append((base, (order,)))
            else:
                formats.append(base)
        return np.dtype(
            {
                "names": self.names,
                "formats": formats,
                "offsets": self.offsets,
                "itemsize": self.ivsize,
            }
        )

    def entry_count(self):
        self.require_fields()
        return self.nvert

    def entry_at(self, i):
        """Row ``i`` as a tuple of python values, in field order"""
        if not 0 <= i < self.entry_count():
            raise IndexError(i)
        row = self.rows()[i]
        return tuple(row[name].tolist() for name in row.dtype.names)

    def rows(self):
        values = self.directory.resolve(RecordID(DFTAG_VS, self.ref))
        values.require_fields()
        if len(values.data) < self.nvert * self.ivsize:
            raise TruncatedRead(
                f"{values} holds {len(values.data)} bytes, "
                f"{self.nvert} rows of {self.ivsize} expected"
            )
        return np.frombuffer(values.data, dtype=self.dtype, count=self.nvert)


@reg(DFTAG_VS)
class VData(Record):
    """Packed rows of a vdata; the layout is in the matching VH"""

    field_names = ("data",)

    def decode_fields(self, source):
        return {"data": source.read_all()}


@reg(DFTAG_VG)
class VGroup(Record):
    field_names = ("members", "name", "cls")

    def decode_fields(self, source):
        nelt = source.read_u16()
        tags = [source.read_u16() for _ in range(nelt)]
        refs = [source.read_u16() for _ in range(nelt)]
        name = source.read_str(source.read_u16())
        cls = source.read_str(source.read_u16())
        return {
            "members": [RecordID(t, r) for t, r in zip(tags, refs)],
            "name": name,
            "cls": cls,
        }
