"""
python -m build
twine upload dist/*
"""

from setuptools import setup, find_packages


def transitnet_setup():
    with open("requirements.txt", "rt") as fp:
        install_requires = fp.read().strip().split("\n")

    version = "1.0.0"

    setup(
        name="transitnet",
        packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
        version=version,
        license="MIT",
        description="transitnet : shaped, sorted and paginated REST collections for a transportation network",
        long_description=open("README.rst").read(),
        keywords=["SqlAlchemy", "Flask", "REST", "Pagination", "Filtering"],
        python_requires=">=3.8, <4",
        install_requires=install_requires,
        classifiers=[
            "Development Status :: 3 - Alpha",
            "Intended Audience :: Developers",
            "Framework :: Flask",
            "Environment :: Web Environment",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.8",
        ],
        extras_require={"test": ["pytest>=7.0"]},
    )


transitnet_setup()  # pragma: no cover
