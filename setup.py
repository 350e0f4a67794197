#%%
import re
from pathlib import Path

from setuptools import setup, find_packages


def read_version():
    """Read ``__version__`` from the package without importing it."""
    text = Path("duet/__init__.py").read_text(encoding="utf-8")
    return re.search(r'^__version__ = "([^"]+)"', text, re.M).group(1)


def read_requirements():
    """Read runtime dependencies from requirements.txt."""
    with open("requirements.txt") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]


def read_long_description():
    with open("README.md", encoding="utf-8") as f:
        return f.read()

#%%
setup(
    name="duet-ml",
    version=read_version(),

    long_description=read_long_description(),
    long_description_content_type='text/markdown',
    license="BSD-3-Clause",
    description="Resampling versus class weighting: dual-model prediction of an imbalanced binary status from latent-factor scores.",

    packages=find_packages(include=["duet", "duet.*"]),
    python_requires=">=3.9",
    install_requires=read_requirements(),
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["duet-run=duet.cli.run:main"]},

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
    ],

    keywords="imbalanced-classification ROSE random-forest logistic-regression latent-factors sklearn",
)
