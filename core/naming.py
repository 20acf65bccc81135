#!/usr/bin/env python3
"""
Naming Module
Identifier helpers for the generated TypeScript
"""

import re

_IDENTIFIER = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')

RESERVED_WORDS = frozenset({
    'break', 'case', 'catch', 'class', 'const', 'continue', 'debugger', 'default',
    'delete', 'do', 'else', 'enum', 'export', 'extends', 'false', 'finally', 'for',
    'function', 'if', 'implements', 'import', 'in', 'instanceof', 'interface', 'let',
    'new', 'null', 'package', 'private', 'protected', 'public', 'return', 'static',
    'super', 'switch', 'this', 'throw', 'true', 'try', 'typeof', 'var', 'void',
    'while', 'with', 'yield', 'await', 'arguments', 'eval', 'undefined', 'NaN',
    'Infinity',
})


def is_var_name(name):
    """True when name can be used as a plain JavaScript identifier"""
    return bool(name) and _IDENTIFIER.match(name) is not None and name not in RESERVED_WORDS


def quote(text):
    """Single-quoted JavaScript string literal"""
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def member_access(name):
    """Property access suffix: ".name" or "['na me']" """
    return f".{name}" if is_var_name(name) else f"[{quote(name)}]"


def property_key(name):
    """Key for an object type literal: name or 'na me'"""
    return name if is_var_name(name) else quote(name)


def nodes_accessor(name):
    """Loader accessor of a named object, e.g. "nodes.Chair" """
    return "nodes" + member_access(name)


def materials_accessor(name):
    return "materials" + member_access(name)


def kebab_case(type_name):
    """"SkinnedMesh" -> "skinned-mesh", "skinnedMesh" -> "skinned-mesh" """
    return re.sub(r'([A-Z])', r'-\1', type_name).lower().lstrip('-')


def pascal_case(text):
    """Class name from a file stem: "my_model-v2" -> "MyModelV2" """
    parts = [p for p in re.split(r'[^A-Za-z0-9]+', text) if p]
    name = "".join(p[0].upper() + p[1:] for p in parts)
    if not name or name[0].isdigit():
        name = "Model" + name
    return name
