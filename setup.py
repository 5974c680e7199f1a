import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="bifstruct",
    version="0.0.1",
    description="BIF thumbnail containers for humans",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        'test': [
            'pytest',
            'pillow',
        ],
    },
    entry_points={
        'console_scripts': [
            'bif=bifstruct.cli:main',
        ],
    },
    scripts=['scripts/bif.py'],
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
        "Operating System :: OS Independent",
    ],
)
