from setuptools import setup

setup(
    name="note_pages",
    version="0.1.0",
    packages=["note_pages"],
    python_requires=">=3.9",
    install_requires=[
        "pdfplumber>=0.10.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["note-pages=note_pages.cli:main"],
    },
)
