"""Packaging settings."""

from codecs import open as codecs_open
from os.path import abspath, dirname, join

from setuptools import find_packages, setup

THIS_DIR = abspath(dirname(__file__))


def local_scheme(version):  # pylint: disable=unused-argument
    """Skip the local version (eg. +xyz) to upload to Test PyPI."""
    return ""


with codecs_open(join(THIS_DIR, "README.md"), encoding="utf-8") as readfile:
    LONG_DESCRIPTION = readfile.read()


INSTALL_REQUIRES = [
    "awacs",  # IAM policy documents
    "boto3>=1.26,<2.0",
    "botocore>=1.29",
    "click>=8.0",
    "coloredlogs",
    "formic2",
    "humanfriendly",
    "pydantic>=2.0,<3.0",
    "tomli>=1.1.0",
    "typing_extensions",
]

EXTRAS_REQUIRE = {
    "test": [
        "pytest>=7.0",
        "pytest-mock",
    ],
}


setup(
    name="sln",
    description="Deploy Python projects to AWS Lambda, API Gateway and S3 events",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    license="Apache License 2.0",
    classifiers=[
        "Intended Audience :: Developers",
        "Topic :: Utilities",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    keywords="cli aws lambda",
    packages=find_packages(exclude=("tests*",)),
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    setup_requires=["setuptools_scm"],
    use_scm_version={"local_scheme": local_scheme, "fallback_version": "0.0.0"},
    entry_points={"console_scripts": ["sln=sln._cli.main:cli"]},
)
