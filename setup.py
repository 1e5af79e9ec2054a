#! /usr/bin/env python

from setuptools import setup, find_packages

ver_dic = {}
version_file_name = "densor/version.py"
with open(version_file_name) as version_file:
    version_file_contents = version_file.read()

exec(compile(version_file_contents, version_file_name, "exec"), ver_dic)

setup(
    name="densor",
    version=ver_dic["VERSION_TEXT"],
    description="Dense N-dimensional arrays with zero-copy views and "
                "NumPy-style broadcasting",
    long_description=open("README.rst", "r").read(),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires="~=3.10",
    install_requires=[
        "numpy>=1.23",
        "pytools>=2024.1",
        "immutabledict>=4.1",
        ],
    extras_require={
        "test": ["pytest>=7"],
        },
    author="Densor Contributors",
    license="MIT",
    packages=find_packages(exclude=["test", "examples"]),
)
