"""Lightweight request payload validation.

Minimal schema-like checking with clear, consistent error responses for the
JSON API; not a general JSON Schema implementation.

Schema mini-language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'seed' (int or str), 'bool', 'dict'
Extras: min / max (int), max_len (str)

Example:
 schema = {'max_rooms': ('int', False, {'min': 2, 'max': 200})}
 ok, data_or_err = validate(data, schema)

If invalid: (False, {'field': 'max_rooms', 'error': 'must be >= 2', 'code': 'min'})
If valid: (True, normalized_data)
"""
from __future__ import annotations
from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': (str,),
    'int': (int,),
    'seed': (int, str),
    'bool': (bool,),
    'dict': (dict,),
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        if not isinstance(spec, tuple) or len(spec) < 2:
            return _fail('__schema__', f'invalid spec for {name}', 'schema')
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        value = payload[name]
        # bool is an int subclass; only accept it where asked for
        if isinstance(value, bool) and type_name != 'bool':
            return _fail(name, f'expected {type_name}', 'type')
        if not isinstance(value, PRIMITIVES[type_name]):
            return _fail(name, f'expected {type_name}', 'type')
        if isinstance(value, int) and not isinstance(value, bool):
            if 'min' in extras and value < extras['min']:
                return _fail(name, f"must be >= {extras['min']}", 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, f"must be <= {extras['max']}", 'max')
        if isinstance(value, str):
            value = value.strip()
            if 'max_len' in extras and len(value) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
        out[name] = value
    return True, out


GENERATE_REQUEST = {
    'seed': ('seed', False, {'max_len': 128}),
    'max_rooms': ('int', False, {'min': 2, 'max': 200}),
    'iteration_budget': ('int', False, {'min': 1, 'max': 1_000_000}),
    'max_bound_span': ('int', False, {'min': 0, 'max': 200}),
    'min_path_length': ('int', False, {'min': 0, 'max': 200}),
    'attempts': ('int', False, {'min': 1}),
    'restore_bounds_on_backtrack': ('bool', False),
    'include_ascii': ('bool', False),
}
