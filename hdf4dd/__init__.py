from importlib.metadata import version as _version

from .errors import (
    HDF4Error,
    InvalidFile,
    TruncatedRead,
    UnresolvedReference,
    UnsupportedCodec,
    UnsupportedExtensionKind,
    UnsupportedFeature,
)
from .file import HDF4File
from .record import Record, RecordID

try:
    __version__ = _version("hdf4dd")
except Exception:
    # Local copy or not installed with setuptools.
    __version__ = "9999"

__all__ = [
    "__version__",
    "HDF4Error",
    "HDF4File",
    "InvalidFile",
    "Record",
    "RecordID",
    "TruncatedRead",
    "UnresolvedReference",
    "UnsupportedCodec",
    "UnsupportedExtensionKind",
    "UnsupportedFeature",
]
