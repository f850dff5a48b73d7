import setuptools


with open('README.md', 'r') as fh:
    long_description = fh.read()

setuptools.setup(
    name="evspool",
    version="0.1.0",
    description="Bounded persistent buffer for telemetry events.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=("tests",)),
    python_requires=">=3.6",
    classifiers=(
        "Programming Language :: Python :: 3",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries",
        "Topic :: System :: Logging",
    ),
    install_requires=[
        "PyYAML>=5.1",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
