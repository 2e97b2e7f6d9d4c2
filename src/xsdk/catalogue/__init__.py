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
# Load the package namespace here so that it's possible to just do
# "from xsdk import catalogue" and call catalogue.operation_code("SetImageSize")

from ._core import *
from ._arity import *
from ._operations import *
from ._enums import *
from ._records import *
from ._catalogue import *
from ._view import *
from ._loader import get_catalogue, get_view, list_views, load_catalogue, load_view, \
    read_yaml, build_catalogue, build_view, view_path


# Lookups in the shipped catalogue
def operation_code(name):
    """
    name (str): name of the operation, such as "SetImageSize"
    returns (int): its 16-bit code
    raises UnknownOperation: if no operation has this name
    """
    return get_catalogue().operation_code(name)


def enum_value(domain, name):
    """
    domain (str): name of the domain, such as "FilmSimulation" or "ColorTemp"
    name (str): name of the value, such as "PROVIA" or "5600"
    returns (int): the encoding of the value
    raises UnknownEnumValue: if the domain or the value is not published
    """
    return get_catalogue().enum_value(domain, name)


def layout(name):
    """
    returns (RecordLayout)
    raises UnknownLayout
    """
    return get_catalogue().layout(name)


def operations(view):
    """
    view (ModelView or str): the view, or the name of the model
    returns (tuple of str): operations of the view, ordered by family then code
    """
    if isinstance(view, str):
        view = get_view(view)
    return view.operations()

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
