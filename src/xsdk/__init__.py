# -*- coding: utf-8 -*-
'''
Created on 17 Oct 2026

@author: XSDK catalogue developers

Copyright © 2026 XSDK catalogue developers

This file is part of XSDK Catalogue.

XSDK Catalogue is free software: you can redistribute it and/or modify it under
the terms of the GNU General Public License version 2 as published by the Free
Software Foundation.

XSDK Catalogue is distributed in the hope that it will be useful, but WITHOUT ANY
WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR A
PARTICULAR PURPOSE. See the GNU General Public License for more details.

You should have received a copy of the GNU General Public License along with
XSDK Catalogue. If not, see http://www.gnu.org/licenses/.
'''

import logging
import os
import subprocess

# Generic metadata about the package

def _get_version_git():
    """
    Get the version via git
    raises LookupError if no version info found
    """
    rootdir = os.path.join(os.path.dirname(__file__), "..", "..") # xsdk/src/xsdk/../..

    if not os.path.isdir(rootdir) or not os.path.isdir(os.path.join(rootdir, ".git")):
        raise LookupError("Not in a git directory")

    try:
        out = subprocess.check_output(args=["git", "describe", "--tags", "--dirty", "--always"],
                                      cwd=rootdir)
        ver = out.strip().decode("utf-8", errors="replace")
        if ver.startswith("v"):
            ver = ver[1:]
        return ver
    except OSError:
        raise LookupError("Unable to run git")
    except subprocess.CalledProcessError as ex:
        logging.warning("Failed to run git: %s", ex)
        raise LookupError("Execution of git failed")


def _get_version_metadata():
    """
    Gets the version from the installed distribution
    raises LookupError if no version info found
    """
    from importlib import metadata
    try:
        return metadata.version("xsdk-catalogue")
    except metadata.PackageNotFoundError:
        raise LookupError("Not installed as a distribution")


def _get_version():
    try:
        return _get_version_git()
    except LookupError:
        # fallback to the packaging metadata (if it's not in git, it should be installed)
        try:
            return _get_version_metadata()
        except LookupError:
            logging.warning("Unable to find the actual version")
            return "Unknown"


__version__ = _get_version()
__fullname__ = "XSDK camera-control catalogue"
__shortname__ = "XSDK Catalogue"
__copyright__ = "Copyright © 2026 XSDK catalogue developers"
__authors__ = ["XSDK catalogue developers"]
__license__ = "GNU General Public License version 2"
__licensetxt__ = (
"""XSDK Catalogue is free software: you can redistribute it and/or modify it under
the terms of the GNU General Public License version 2 as published by the Free
Software Foundation.

XSDK Catalogue is distributed in the hope that it will be useful, but WITHOUT ANY
WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR A
PARTICULAR PURPOSE. See the GNU General Public License for more details.

You should have received a copy of the GNU General Public License along with
XSDK Catalogue. If not, see http://www.gnu.org/licenses/.
""")

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
