# hdf/src/htags.h
tags = {
    1: "NULL",
    20: "LINKED",
    30: "VERSION",
    40: "COMPRESSED",
    50: "VLINKED",
    51: "VLINKED_DATA",
    60: "CHUNKED",
    61: "CHUNK",
    100: "FID",
    101: "FD",
    102: "TID",
    103: "TD",
    104: "DIL",
    105: "DIA",
    106: "NT",
    107: "MT",
    108: "FREE",
    300: "ID",
    301: "LUT",
    302: "RI",
    303: "CI",
    306: "RIG",
    700: "SDG",
    701: "SDD",
    702: "SD",
    703: "SDS",
    704: "SDL",
    705: "SDU",
    706: "SDF",
    707: "SDM",
    708: "SDC",
    709: "SDT",
    710: "SDLNK",
    720: "NDG",
    731: "CAL",
    732: "FV",
    1962: "VH",
    1963: "VS",
    1965: "VG",
}

DFTAG_NULL = 1
DFTAG_VERSION = 30
DFTAG_COMPRESSED = 40
DFTAG_CHUNK = 61
DFTAG_NT = 106
DFTAG_SDD = 701
DFTAG_SD = 702
DFTAG_NDG = 720
DFTAG_VH = 1962
DFTAG_VS = 1963
DFTAG_VG = 1965

# set on the tag of a descriptor whose data is a special-element header
EXTENDED_BIT = 0x4000

MAGIC = b"\x0e\x03\x13\x01"

# hdf/src/hlimits.h, special element kinds
spec = {
    1: "LINKED",
    2: "EXT",
    3: "COMP",
    4: "VLINKED",
    5: "CHUNKED",
    6: "BUFFERED",
    7: "COMPRAS",
}
SPECIAL_COMP = 3
SPECIAL_CHUNKED = 5

# hdf4/hdf/src/hcomp.h
comp = {
    0: "NONE",
    1: "RLE",
    2: "NBIT",
    3: "SKPHUFF",
    4: "DEFLATE",  # zlib stream, despite the name
    5: "SZIP",
    7: "JPEG",
}
COMP_CODE_DEFLATE = 4

# hdf4/hdf/src/hntdefs.h, always stored big-endian
dtypes = {
    3: "u1",
    4: "str",  # char8, size given by the field order
    5: ">f4",
    6: ">f8",
    20: "i1",
    21: "u1",
    22: ">i2",
    23: ">u2",
    24: ">i4",
    25: ">u4",
    26: ">i8",
    27: ">u8",
}


def tag_name(tag):
    return tags.get(tag, str(tag))
