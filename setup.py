from os.path import exists
from setuptools import setup

setup(
    name="hdf4dd",
    version="0.1.0",
    packages=["hdf4dd"],
    license="MIT",
    description="Lazy reader for the data descriptors of HDF4 files",
    python_requires=">=3.8",
    long_description=(open("README.md").read() if exists("README.md") else ""),
    long_description_content_type="text/markdown",
    install_requires=list(open("requirements.txt").read().strip().split("\n")),
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "hdf4dd-ls = hdf4dd.cli:cli",
        ],
    },
    zip_safe=False,
)
