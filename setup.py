# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="multilogger",
    version="1.0.0",
    description="Multi destination logging facade with a declarative template language",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["multilogger", "multilogger.*"]),
    python_requires=">=3.9",
    install_requires=[
        "colorama>=0.4.6",  # ANSI codes and Windows console support
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
