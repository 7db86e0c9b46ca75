from .errors import TruncatedRead


class ByteSource:
    """Sequential big-endian reader over a binary file-like object

    Parameters
    ----------
    f: file-like
        Anything with ``read(n)``; reads start wherever it is positioned.
    limit: int | None
        If given, no more than this many bytes may be consumed through this
        source, so that a record decoder cannot run into its neighbour.
    """

    def __init__(self, f, limit=None):
        self.f = f
        self.remaining = limit

    def read(self, n):
        if n < 0:
            raise ValueError(f"Cannot read {n} bytes")
        if self.remaining is not None and n > self.remaining:
            raise TruncatedRead(
                f"Read of {n} bytes overruns source with {self.remaining} left"
            )
        data = self.f.read(n)
        if len(data) < n:
            raise TruncatedRead(f"Expected {n} bytes, got {len(data)}")
        if self.remaining is not None:
            self.remaining -= n
        return data

    def read_int(self, n, signed=False):
        return int.from_bytes(self.read(n), "big", signed=signed)

    def read_u8(self):
        return self.read(1)[0]

    def read_u16(self):
        return self.read_int(2)

    def read_u32(self):
        return self.read_int(4)

    def read_i32(self):
        return self.read_int(4, signed=True)

    def read_str(self, n):
        """Fixed-width text field, cut at the first NULL"""
        return self.read(n).split(b"\x00", 1)[0].decode()

    def skip(self, n):
        self.read(n)

    def read_all(self):
        """Everything left in a bounded source"""
        if self.remaining is None:
            data = self.f.read()
            return data
        return self.read(self.remaining)
