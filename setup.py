# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="contexter",
    version="1.0.0",
    description="Filtered, token-annotated directory trees and markdown bundles for LLM prompts",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["contexter", "contexter.*"]),
    python_requires=">=3.9",
    install_requires=[
        "tiktoken>=0.5",
        "pathspec>=0.11,<1.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        'console_scripts': [
            'contexter=contexter.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
