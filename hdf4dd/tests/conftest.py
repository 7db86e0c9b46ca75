import io

import fsspec
import pytest


@pytest.fixture()
def m():
    fs = fsspec.filesystem("memory")
    yield fs
    fs.store.clear()
    del fs.pseudo_dirs[1:]


class CountingFile(io.BytesIO):
    """In-memory file which records seeks and reads, and can be made to fail"""

    def __init__(self, data):
        super().__init__(data)
        self.seeks = []
        self.reads = 0
        self.fail = False

    def seek(self, pos, whence=0):
        self.seeks.append(pos)
        return super().seek(pos, whence)

    def read(self, n=-1):
        if self.fail:
            raise OSError("device not ready")
        self.reads += 1
        return super().read(n)

    def reset_counts(self):
        self.seeks = []
        self.reads = 0


@pytest.fixture()
def counting():
    return CountingFile
