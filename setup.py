from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="splfl",
    version="0.1.0",
    description="Feature location in combinatorial software product lines.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"splfl.schemas": ["*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=["pyyaml", "jsonschema", "pandas"],
    extras_require={"test": ["pytest"]},
    tests_require=["pytest"],
    entry_points={"console_scripts": ["splfl=splfl.cli:main"]},
)
