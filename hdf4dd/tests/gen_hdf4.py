"""Writes small synthetic HDF4 files for the tests

Only the descriptor directory and the byte layouts read by hdf4dd are
produced; the files are not meant to be opened by the HDF4 C library.
"""
import struct
import zlib

from hdf4dd.constants import (
    COMP_CODE_DEFLATE,
    DFTAG_VH,
    EXTENDED_BIT,
    MAGIC,
    SPECIAL_CHUNKED,
    SPECIAL_COMP,
)


def build(*blocks, magic=MAGIC):
    """File made of descriptor blocks, each a list of (tag, ref, payload[, extended])

    Blocks are written one after the other, linked through their ``next``
    field, followed by all the payloads in order.
    """
    blocks = [[tuple(r) + (False,) * (4 - len(r)) for r in b] for b in blocks]
    block_pos = []
    pos = len(magic)
    for b in blocks:
        block_pos.append(pos)
        pos += 6 + 12 * len(b)
    head = [magic]
    payloads = []
    for i, b in enumerate(blocks):
        nxt = block_pos[i + 1] if i + 1 < len(blocks) else 0
        head.append(struct.pack(">HI", len(b), nxt))
        for tag, ref, payload, extended in b:
            if extended:
                tag |= EXTENDED_BIT
            head.append(struct.pack(">HHII", tag, ref, pos, len(payload)))
            payloads.append(payload)
            pos += len(payload)
    return b"".join(head + payloads)


def offsets(data):
    """(tag, ref) -> (offset, length, extended) for every descriptor of the first block"""
    ndd, _ = struct.unpack(">HI", data[4:10])
    out = {}
    for i in range(ndd):
        tag, ref, off, length = struct.unpack(">HHII", data[10 + 12 * i : 22 + 12 * i])
        out[(tag & ~EXTENDED_BIT, ref)] = (off, length, bool(tag & EXTENDED_BIT))
    return out


def comp_header(uncompressed_length, linked_ref, codec=COMP_CODE_DEFLATE, level=6):
    head = struct.pack(
        ">HHiHHH", SPECIAL_COMP, 0, uncompressed_length, linked_ref, 0, codec
    )
    if codec == COMP_CODE_DEFLATE:
        head += struct.pack(">H", level)
    return head


def deflated(data, level=6):
    return zlib.compress(data, level)


def chunked_header(
    table_ref,
    dims,
    fill=b"",
    table_tag=DFTAG_VH,
    nt_size=4,
    special=(0, 0),
):
    """dims: list of (dim_length, chunk_length)"""
    total = 1
    chunk_size = 1
    for dim_length, chunk_length in dims:
        total *= dim_length
        chunk_size *= chunk_length
    body = struct.pack(
        ">BiiiiHHHHH",
        0,
        0,
        total,
        chunk_size,
        nt_size,
        table_tag,
        table_ref,
        special[0],
        special[1],
        len(dims),
    )
    for dim_length, chunk_length in dims:
        body += struct.pack(">iii", 0, dim_length, chunk_length)
    body += struct.pack(">i", len(fill)) + fill
    return struct.pack(">Hi", SPECIAL_CHUNKED, len(body)) + body


def vdata_header(fields, nvert, name="", cls=""):
    """fields: list of (name, type, isize, order)"""
    offs = []
    pos = 0
    for _, _, isize, _ in fields:
        offs.append(pos)
        pos += isize
    out = struct.pack(">HIHH", 0, nvert, pos, len(fields))
    out += b"".join(struct.pack(">H", f[1]) for f in fields)
    out += b"".join(struct.pack(">H", f[2]) for f in fields)
    out += b"".join(struct.pack(">H", o) for o in offs)
    out += b"".join(struct.pack(">H", f[3]) for f in fields)
    for f in fields:
        out += _pstr(f[0])
    out += _pstr(name) + _pstr(cls)
    out += struct.pack(">HH", 0, 0)
    return out


def chunk_table(ndims, nvert):
    return vdata_header(
        [("origin", 24, 4 * ndims, ndims), ("chk_tag", 23, 2, 1), ("chk_ref", 23, 2, 1)],
        nvert,
        name="_HDF_CHK_TBL_0",
        cls="_HDF_CHK_TBL_CLASS",
    )


def chunk_rows(rows):
    """rows: list of (origin, tag, ref)"""
    out = b""
    for origin, tag, ref in rows:
        out += struct.pack(f">{len(origin)}iHH", *origin, tag, ref)
    return out


def _pstr(s):
    b = s.encode()
    return struct.pack(">H", len(b)) + b
