# coding: utf-8

from setuptools import setup, find_packages

with open("README.rst", "r", encoding="utf8") as file:
    long_description = file.read()


def _get_requirements_from_files(groups_files):
    groups_reqlist = {}

    for k, v in groups_files.items():
        with open(v, "r") as f:
            pkg_list = f.read().splitlines()
        groups_reqlist[k] = [pkg for pkg in pkg_list if pkg and not pkg.startswith("#")]

    return groups_reqlist


def setup_package():
    _groups_files = {
        "base": "requirements.txt",
        "tests": "requirements_tests.txt",
    }

    reqs = _get_requirements_from_files(_groups_files)
    install_reqs = reqs.pop("base")
    extras_reqs = reqs

    setup(
        name="spweights",
        version="0.1.0",
        description="Spatial neighbor graphs, spatial weights and Moran's I.",
        long_description=long_description,
        long_description_content_type="text/x-rst",
        license="BSD",
        packages=find_packages(exclude=["benchmarks"]),
        keywords="spatial statistics weights autocorrelation",
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Science/Research",
            "Intended Audience :: Developers",
            "Topic :: Scientific/Engineering",
            "Topic :: Scientific/Engineering :: GIS",
            "License :: OSI Approved :: BSD License",
            "Programming Language :: Python",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
        ],
        install_requires=install_reqs,
        extras_require=extras_reqs,
        python_requires=">=3.10",
    )


if __name__ == "__main__":
    setup_package()
