"""
Setup file.
"""

import os

from setuptools import setup

KEYWORDS = "java annotation-processing apt javac code-generation incremental build"
HERE = os.path.dirname(os.path.abspath(__file__))



if __name__ == "__main__":
    setup(
        maintainer="aptgen developers",
        keywords=KEYWORDS,
        include_package_data=True)
