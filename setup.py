import setuptools
from setuptools import setup

install_deps = ['numpy',
                'fastremap',
                'numba>=0.60.0']

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name="labelmap",
    version="0.1.0",
    license="BSD",
    description="sparse run-length label map for segmented images",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires = install_deps,
    extras_require={
      'test': ['pytest'],
    },
    include_package_data=True,
    classifiers=(
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
    )
)
