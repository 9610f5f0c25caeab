import os
from setuptools import setup, find_namespace_packages

# locate files relative to this setup.py
HERE = os.path.abspath(os.path.dirname(__file__))


def parse_requirements(rel_path):
    path = os.path.join(HERE, rel_path)
    with open(path, "r") as f:
        lines = f.read().splitlines()
    return [line.strip() for line in lines if line.strip() and not line.startswith("#")]


setup(
    name="reactprops",
    version="0.1.0",
    author="Juspay",
    author_email="opensource@juspay.in",
    description="Extract React function components and their props from TSX/JSX using Tree-sitter",
    long_description=open(os.path.join(HERE, "README.md")).read(),
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["reactprops", "reactprops.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=parse_requirements("reactprops/requirements.txt"),
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "reactprops=reactprops.main:main",
        ],
    },
    include_package_data=True,
)
