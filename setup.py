from setuptools import setup, find_packages

import re
import os

this_directory = os.path.abspath(os.path.dirname(__file__))
__version__ = re.findall(
    r"""__version__ = ["']+([0-9\.]*)["']+""",
    open(os.path.join(this_directory, "trimlin/version.py")).read(),
)[0]

with open(os.path.join(this_directory, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="trimlin",
    version=__version__,
    description="""trimlin finds steady flight (trim) conditions of nonlinear
    flight dynamics models with a Nelder-Mead simplex and linearises the model
    about them with finite differences.""",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords="flight dynamics trim linearisation state-space",
    author="",
    author_email="",
    license="BSD 3-Clause License",
    packages=find_packages(
        where='./',
        include=['trimlin*'],
        exclude=['tests']
        ),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "configobj",
        "h5py",
        "scipy",
        "colorama",
        "control",
    ],
    extras_require={
        "test": [
            "pytest",
                 ],
        "docs": [
            "sphinx",
            "sphinx_rtd_theme>=0.4.3",
                 ],
    },
    classifiers=[
        "Operating System :: Linux, Mac OS",
        "Programming Language :: Python :: 3",
        ],

    entry_points={
        'console_scripts': ['trimlin=trimlin.trimlin_main:trimlin_run'],
        }
)
