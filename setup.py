#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages
import os
import subprocess
import sys

# To be updated to the current version
VERSION = "1.10.0"
# We cannot use the git version because it's not (always) available when building
# the debian package


# almost copy from xsdk.__init__.py, but we cannot load it as it's not installed yet
def _get_version_git():
    """
    Get the version via git
    raises LookupError if no version info found
    """
    # change directory to root
    rootdir = os.path.dirname(__file__)

    try:
        out = subprocess.check_output(args=["git", "describe", "--tags", "--dirty", "--always"],
                                      cwd=rootdir, stderr=subprocess.DEVNULL)

        return out.strip().decode("utf-8")
    except (EnvironmentError, subprocess.CalledProcessError):
        raise LookupError("Unable to run git")

# Check version
try:
    gver = _get_version_git()
    if "-" in gver:
        sys.stderr.write("Warning: packaging a non-tagged version: %s\n" % gver)
    if VERSION != gver:
        sys.stderr.write("Warning: package version and git version don't match:"
                         " %s <> %s\n" % (VERSION, gver))
except LookupError:
    pass


if sys.platform.startswith('linux'):
    data_files = [('/etc/', ['install/linux/etc/xsdk.conf']),
                  ]
else:
    data_files = []

dist = setup(name='xsdk-catalogue',
             version=VERSION,
             description='Catalogue of the camera-control SDK: operation codes, values and records',
             author='XSDK catalogue developers',
             classifiers=["License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
                          "Operating System :: OS Independent",
                          "Programming Language :: Python :: 3",
                          "Intended Audience :: Developers",
                          "Topic :: Multimedia :: Graphics :: Capture :: Digital Camera",
                          "Environment :: Console",
                         ],
             package_dir={'': 'src'},
             packages=find_packages('src', include=["xsdk", "xsdk.*"], exclude=["*.test"]),
             package_data={'xsdk.catalogue': ["data/*.yaml", "data/views/*.yaml"],
                          },
             python_requires=">=3.8",
             install_requires=["numpy", "PyYAML>=5.1"],
             extras_require={"test": ["pytest"]},
             entry_points={"console_scripts": ["xsdk-cli = xsdk.cli.main:run",
                                               "xsdk-headergen = xsdk.util.headergen:run",
                                               ]},
             data_files=data_files,  # not officially in setuptools, but works as for distutils
            )
