import re

from setuptools import setup

# read the version without importing the package (and its dependencies)
with open("chansig/__init__.py") as init_file:
    __version__ = re.search(
        r'^__version__ = "([^"]+)"', init_file.read(), re.MULTILINE
    ).group(1)

with open("README.rst") as readme:
    long_description = readme.read()

setup(
    name="chansig",
    version=__version__,
    description="Canonical ECDSA signatures for payment channel transactions",
    long_description=long_description,
    author="The python-bitcoin-utils developers",
    license="MIT",
    keywords="bitcoin ecdsa signatures payment-channels sighash",
    install_requires=[
        # base58check is not packaged everywhere; base58 offers the same codec
        "base58>=2.1,<3.0",
        "ecdsa>=0.18,<1.0",
        "sympy>=1.2,<2.0",
    ],
    extras_require={"test": ["pytest"]},
    packages=["chansig"],
    py_modules=["chansig_cli"],
    python_requires=">=3.9",
    zip_safe=False,
)
