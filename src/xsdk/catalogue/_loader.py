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
# Reads the catalogue and the model views from the YAML data files.
# The tables are built once, on first access, and then shared read-only.

from collections import OrderedDict
import glob
import itertools
import logging
import os
import threading
import yaml
from yaml.constructor import ConstructorError
from yaml.nodes import MappingNode

from xsdk.util import config as xconfig
from ._catalogue import Catalogue
from ._core import ParseError, SemanticError, UnknownEnumValue
from ._enums import EnumDomain, RangeDomain, FlagCategory, BitsetDomain, KIND_TOKEN
from ._operations import Family, OperationTable
from ._records import Field, RecordLayout
from ._view import ModelView

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
BASE_FILE = os.path.join(DATA_DIR, "base.yaml")
VIEWS_DIR = os.path.join(DATA_DIR, "views")

PART_KEYS = ("operations", "domains", "bitsets", "layouts")


class SafeLoader(yaml.SafeLoader):
    """
    Safe YAML loader which refuses duplicated keys, and supports including
    another file with the "!include" tag.
    """

    def __init__(self, stream):
        self._root = os.path.dirname(getattr(stream, "name", ""))  # Directory containing the YAML file
        super(SafeLoader, self).__init__(stream)

    def construct_mapping(self, node, deep=False):
        # From BaseConstructor
        if not isinstance(node, MappingNode):
            raise ConstructorError(None, None,
                    "expected a mapping node, but found %s" % node.id,
                    node.start_mark)
        # From SafeConstructor
        self.flatten_mapping(node)
        mapping = OrderedDict()
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                hash(key)
            except TypeError as exc:
                raise ConstructorError("while constructing a mapping", node.start_mark,
                        "found unacceptable key (%s)" % exc, key_node.start_mark)
            if key in mapping:
                raise ConstructorError("while constructing a mapping", node.start_mark,
                                       "key (%s) already defined" % (key,),
                                       key_node.start_mark)
            value = self.construct_object(value_node, deep=deep)
            mapping[key] = value
        return mapping

    def construct_yaml_map(self, node):
        data = OrderedDict()
        yield data
        value = self.construct_mapping(node)
        data.update(value)

    def include(self, node):
        """
        Load the content of another YAML file, relative to the current one
        node (yaml.nodes.ScalarNode): the path to the file
        returns: the data of the file
        """
        filename = os.path.join(self._root, self.construct_scalar(node))
        try:
            with open(filename, 'r') as f:
                logging.info("Loading file '%s' via the !include key", filename)
                return yaml.load(f, SafeLoader)
        except FileNotFoundError:
            logging.error("Failed to find file '%s' referenced by !include", filename)
            raise


SafeLoader.add_constructor('!include', SafeLoader.include)
SafeLoader.add_constructor('tag:yaml.org,2002:map', SafeLoader.construct_yaml_map)


def read_yaml(filename):
    """
    Parse a YAML data file
    filename (str): path to the file
    returns (dict): the content of the file
    raises ParseError: in case of syntax error or duplicated key
    """
    with open(filename, "r") as f:
        try:
            data = yaml.load(f, SafeLoader)
        except yaml.YAMLError as exc:
            logging.error("Syntax error in data file %s: %s", filename, exc)
            mark = getattr(exc, "problem_mark", None)
            if mark is not None and mark.name == f.name:
                # display the line
                f.seek(0)
                line = list(itertools.islice(f, mark.line, mark.line + 1))
                if line:
                    logging.error("%s", line[0].rstrip("\n"))
                    # display the column
                    logging.error(" " * mark.column + "^")
            raise ParseError("Syntax error in data file %s: %s" % (filename, exc))

    if not isinstance(data, dict):
        raise ParseError("Data file %s doesn't contain a mapping" % (filename,))
    return data


def _merge_parts(data):
    """
    Put together the content of the main file and of its parts
    returns (dict str -> OrderedDict): key -> merged content
    raises SemanticError: if an entry is defined twice
    """
    merged = {k: OrderedDict() for k in PART_KEYS}
    parts = [data] + list(data.get("parts", []))
    for part in parts:
        if not isinstance(part, dict):
            raise SemanticError("Catalogue part is not a mapping: %r" % (part,))
        for k in PART_KEYS:
            for name, content in (part.get(k) or {}).items():
                if name in merged[k]:
                    raise SemanticError("Catalogue %s '%s' is defined twice" % (k[:-1], name))
                merged[k][name] = content
    return merged


def _parse_operation(name, content):
    if isinstance(content, int):
        return name, content, ()
    elif isinstance(content, dict):
        try:
            code = content["code"]
        except KeyError:
            raise SemanticError("Operation %s has no code" % (name,))
        return name, code, tuple(content.get("aliases", ()))
    raise SemanticError("Operation %s has an invalid definition: %r" % (name, content))


def _parse_value(name, content):
    """
    returns (tuple): name, value, alias_of, reserved, extension
    """
    if isinstance(content, int) and not isinstance(content, bool):
        return (name, content, None, False, False)
    elif isinstance(content, dict):
        return (name, content.get("value"), content.get("alias"),
                bool(content.get("reserved", False)), False)
    raise SemanticError("Value %s has an invalid definition: %r" % (name, content))


def build_domain(name, content, number=1):
    """
    Create a domain from its description
    content (dict): description in the data file
    number (int): category number, for flag categories
    returns (Domain)
    """
    if not isinstance(content, dict):
        raise SemanticError("Domain %s has an invalid definition" % (name,))
    prefixes = content.get("prefix", name.upper())
    aliases = content.get("aliases", ())
    unit = content.get("unit")
    if "range" in content:
        try:
            minimum, maximum = content["range"]
        except (TypeError, ValueError):
            raise SemanticError("Domain %s has an invalid range %r" % (name, content["range"]))
        return RangeDomain(name, prefixes, minimum, maximum, content.get("step", 1),
                           aliases, unit)
    elif "bits" in content:
        return FlagCategory(name, prefixes, content["bits"], number,
                            content.get("flag_aliases"), content.get("reserved", ()),
                            aliases)
    elif "values" in content:
        entries = [_parse_value(n, v) for n, v in content["values"].items()]
        return EnumDomain(name, prefixes, content.get("kind", KIND_TOKEN), entries,
                          aliases, unit)
    raise SemanticError("Domain %s has neither values, range nor bits" % (name,))


def build_layouts(descriptions):
    """
    descriptions (OrderedDict str -> dict): name -> description. A layout
      may contain a previous layout.
    returns (list of RecordLayout)
    """
    layouts = OrderedDict()
    for name, content in descriptions.items():
        fields = []
        for fd in content.get("fields", ()):
            fd = dict(fd)
            try:
                fname = fd.pop("name")
                fmt = fd.pop("type")
                offset = fd.pop("offset")
            except KeyError as ex:
                raise SemanticError("Field of layout %s misses %s" % (name, ex))
            sub = None
            if fmt == "record":
                try:
                    sub = layouts[fd.pop("layout")]
                except KeyError as ex:
                    raise SemanticError("Layout %s refers to unknown layout %s" % (name, ex))
            minimum, maximum = fd.pop("range", (None, None))
            fields.append(Field(fname, fmt, offset, fd.pop("count", 1), fd.pop("role", None),
                                minimum, maximum, fd.pop("terminated", False), sub))
            if fd:
                raise SemanticError("Field %s of layout %s has unknown keys %s" %
                                    (fname, name, ", ".join(fd)))
        layouts[name] = RecordLayout(name, fields, content.get("size"), content.get("doc"))
    return list(layouts.values())


def build_catalogue(data):
    """
    Create the catalogue from the content of the data files
    data (dict): content of the main file, with its parts
    returns (Catalogue)
    raises SemanticError: if the content is not consistent
    """
    merged = _merge_parts(data)

    families = []
    for prefix, content in (data.get("families") or {}).items():
        if isinstance(content, dict):
            families.append(Family(prefix, content.get("name"), content.get("label")))
        else:
            families.append(Family(prefix, content))
    ops = OperationTable(families, [_parse_operation(n, c) for n, c in merged["operations"].items()])

    # category -> position in its bitset
    numbers = {}
    for bname, content in merged["bitsets"].items():
        for i, cname in enumerate(content.get("categories", ()), 1):
            numbers[cname] = i

    domains = [build_domain(n, c, numbers.get(n, 1)) for n, c in merged["domains"].items()]
    by_name = {d.name: d for d in domains}
    bitsets = []
    for bname, content in merged["bitsets"].items():
        try:
            cats = [by_name[c] for c in content.get("categories", ())]
        except KeyError as ex:
            raise SemanticError("Bitset %s refers to unknown category %s" % (bname, ex))
        if not all(isinstance(c, FlagCategory) for c in cats):
            raise SemanticError("Bitset %s has categories which are not flags" % (bname,))
        bitsets.append(BitsetDomain(bname, cats, content.get("aliases", ())))

    layouts = build_layouts(merged["layouts"])
    return Catalogue(ops, domains, layouts, bitsets)


def load_catalogue(filename=BASE_FILE):
    """
    Read the catalogue from a data file
    returns (Catalogue)
    raises ParseError, SemanticError
    """
    logging.debug("Loading catalogue from %s", filename)
    return build_catalogue(read_yaml(filename))


def _restrict_domain(view, base, desc):
    if desc in (None, "all"):
        return base.restrict()
    elif isinstance(desc, list):
        return base.restrict(desc)
    elif isinstance(desc, dict):
        args = dict(desc)
        if "names" in args and args["names"] == "all":
            args["names"] = None
        try:
            return base.restrict(**args)
        except TypeError as ex:
            raise SemanticError("View %s has an invalid definition of domain %s: %s" %
                                (view, base.name, ex))
    raise SemanticError("View %s has an invalid definition of domain %s" % (view, base.name))


def build_view(data, catalogue):
    """
    Create a model view from the content of its data file
    data (dict): content of the view file
    catalogue (Catalogue): the base catalogue
    returns (ModelView)
    raises SemanticError: if the view refers to unknown domains, values or layouts
    """
    try:
        model = data["model"]
    except KeyError:
        raise SemanticError("View file has no model")

    operations = list((data.get("operations") or {}).items())
    aliases = data.get("aliases") or {}
    for a, target in aliases.items():
        if not catalogue.has_operation(target):
            raise SemanticError("View %s aliases %s to unknown operation %s" % (model, a, target))

    domains = []
    restricted = {}
    for dname, desc in (data.get("domains") or {}).items():
        try:
            base = catalogue.domain(dname)
            d = _restrict_domain(model, base, desc)
        except UnknownEnumValue as ex:
            raise SemanticError("View %s has invalid domain %s: %s" % (model, dname, ex.args[0]))
        domains.append(d)
        restricted[base.name] = d

    # A bitset is published if all its categories are
    bitsets = []
    for b in catalogue.bitsets():
        if all(c.name in restricted for c in b.categories):
            bitsets.append(b.restrict([restricted[c.name] for c in b.categories]))

    try:
        view = ModelView(model, catalogue, operations, aliases, data.get("codes"),
                         domains, bitsets, data.get("layouts") or (), data.get("label"))
    except (LookupError, ValueError) as ex:
        raise SemanticError("View %s is invalid: %s" % (model, ex))
    return view


def load_view(filename, catalogue=None):
    """
    Read a model view from a data file
    catalogue (Catalogue or None): the base catalogue, default is the shipped one
    returns (ModelView)
    """
    if catalogue is None:
        catalogue = get_catalogue()
    logging.debug("Loading view from %s", filename)
    return build_view(read_yaml(filename), catalogue)


# Lazy publication of the shipped tables
_lock = threading.Lock()
_catalogue = None
_views = {}


def get_catalogue():
    """
    returns (Catalogue): the shipped catalogue, loaded on first call
    """
    global _catalogue
    with _lock:
        if _catalogue is None:
            _catalogue = load_catalogue()
        return _catalogue


def view_path(config=None):
    """
    returns (list of str): the directories where view files are looked for,
      in order of priority
    """
    if config is None:
        config = xconfig.get_config()
    return xconfig.get_view_path(config) + [VIEWS_DIR]


def _view_files(config=None):
    """
    returns (OrderedDict str -> str): model (upper case) -> file name
    """
    files = OrderedDict()
    for d in view_path(config):
        for fn in sorted(glob.glob(os.path.join(d, "*.yaml"))):
            model = os.path.splitext(os.path.basename(fn))[0].upper()
            # The first directories have priority
            files.setdefault(model, fn)
    return files


def list_views(config=None):
    """
    returns (list of str): the models which have a view file
    """
    return list(_view_files(config).keys())


def get_view(model, config=None):
    """
    model (str): model name, such as "GFX50SII" (case doesn't matter)
    returns (ModelView): the view of the model, loaded on first call for each
      view file
    raises LookupError: if no view file exists for the model
    """
    try:
        fn = _view_files(config)[model.upper()]
    except KeyError:
        raise LookupError("No view for model %s" % (model,))
    # Another config can point to another file for the same model
    key = (model.upper(), os.path.abspath(fn))
    catalogue = get_catalogue()
    with _lock:
        if key not in _views:
            _views[key] = load_view(fn, catalogue)
        return _views[key]

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
