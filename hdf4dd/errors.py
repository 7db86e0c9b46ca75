class HDF4Error(Exception):
    """Base class for everything raised while reading an HDF4 file"""


class InvalidFile(HDF4Error, ValueError):
    pass


class TruncatedRead(HDF4Error, OSError):
    """Fewer bytes were available than a read asked for"""


class UnresolvedReference(HDF4Error, KeyError):
    """A record refers to a (tag, ref) that is not in the file's directory"""

    def __init__(self, ident):
        super().__init__(ident)
        self.ident = ident

    def __str__(self):
        return f"No record {self.ident} in directory"


class UnsupportedFeature(HDF4Error, NotImplementedError):
    """The record uses a special-element feature this reader does not decode

    Depending on the directory's ``error`` policy, this is either raised or
    kept on the record as ``record.error``.
    """


class UnsupportedExtensionKind(UnsupportedFeature):
    def __init__(self, kind):
        super().__init__(f"Unsupported extension type {kind}")
        self.kind = kind


class UnsupportedCodec(UnsupportedFeature):
    def __init__(self, codec):
        super().__init__(f"Unsupported compression {codec}")
        self.codec = codec
