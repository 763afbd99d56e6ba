"""
Input validation for calculator parameters.

A rule is a plain dict:
    {'required': bool, 'type': 'number'|'positive'|'integer'|'string',
     'min': float, 'max': float, 'high': float | None,  # warn above, default 10000
     'custom': callable(value) -> str | None,    # error message
     'warn': callable(value) -> str | None}      # warning message

Results are {'is_valid': bool, 'errors': [...], 'warnings': [...]}.

Calculators keep a rule set per input group and call ``require_valid``
before computing; ``labels`` maps parameter keys to the names used in
messages.
"""

import math
from typing import Any, Callable, Dict, List, Optional

from mepcalc.units import c_to_f, f_to_c

UNUSUALLY_HIGH = 10000

Check = Callable[[Any], Optional[str]]


class InputValidationError(ValueError):
    """Raised when calculator inputs fail validation.

    The individual messages are kept on ``errors``.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid input")


def _is_empty(value: Any) -> bool:
    return value is None or value == ''


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def validate_field(value: Any, name: str, rules: Optional[Dict] = None) -> Dict:
    """Validate one value against a rule dict."""
    rules = rules or {}
    errors: List[str] = []
    warnings: List[str] = []

    if _is_empty(value):
        if rules.get('required'):
            return {'is_valid': False, 'errors': [f"{name} is required"], 'warnings': []}
        return {'is_valid': True, 'errors': [], 'warnings': []}

    kind = rules.get('type')
    number = _as_number(value)
    if kind == 'number' and number is None:
        errors.append(f"{name} must be a valid number")
    elif kind == 'positive' and (number is None or number <= 0):
        errors.append(f"{name} must be a positive number")
    elif kind == 'integer' and (number is None or not number.is_integer()):
        errors.append(f"{name} must be a whole number")
    elif kind == 'string' and not isinstance(value, str):
        errors.append(f"{name} must be text")

    if kind in ('number', 'positive', 'integer') and not errors:
        if rules.get('min') is not None and number < rules['min']:
            errors.append(f"{name} must be at least {rules['min']:g}")
        if rules.get('max') is not None and number > rules['max']:
            errors.append(f"{name} must be no more than {rules['max']:g}")
        high = rules.get('high', UNUSUALLY_HIGH)
        if kind == 'positive' and high is not None and number > high:
            warnings.append(f"{name} value ({number:g}) seems unusually high")

    # range checks only see values that already passed the type rule
    if not errors:
        custom: Optional[Check] = rules.get('custom')
        message = custom(value) if custom is not None else None
        if message:
            errors.append(message)
        warn: Optional[Check] = rules.get('warn')
        message = warn(value) if warn is not None else None
        if message:
            warnings.append(message)

    return {'is_valid': not errors, 'errors': errors, 'warnings': warnings}


def validate_form(data: Dict[str, Any], rules: Dict[str, Dict],
                  labels: Optional[Dict[str, str]] = None) -> Dict:
    """Validate every field named in ``rules`` and merge the messages."""
    labels = labels or {}
    errors: List[str] = []
    warnings: List[str] = []
    for key, field_rules in rules.items():
        result = validate_field(data.get(key), labels.get(key, key), field_rules)
        errors.extend(result['errors'])
        warnings.extend(result['warnings'])
    return {'is_valid': not errors, 'errors': errors, 'warnings': warnings}


def require_valid(data: Dict[str, Any], rules: Dict[str, Dict],
                  labels: Optional[Dict[str, str]] = None) -> Dict:
    """validate_form, raising InputValidationError on any error."""
    result = validate_form(data, rules, labels)
    if not result['is_valid']:
        raise InputValidationError(result['errors'])
    return result


# --- HVAC checks ---

def check_temperature(value: float, unit: str = 'C') -> Optional[str]:
    celsius = f_to_c(float(value)) if unit == 'F' else float(value)
    if celsius < -50 or celsius > 100:
        lo, hi = (-50, 100) if unit == 'C' else (c_to_f(-50), c_to_f(100))
        return f"Temperature {float(value):g}°{unit} is outside typical HVAC range ({lo:g}°{unit} to {hi:g}°{unit})"
    return None


def check_airflow(value: float) -> Optional[str]:
    """Warning for airflows (l/s) beyond a single air system."""
    if float(value) > 100000:
        return "Air flow rate above 100,000 L/s is very high. Please verify."
    return None


COMMON_RULES: Dict[str, Dict] = {
    'positive_number': {'required': True, 'type': 'positive'},
    'non_negative': {'required': True, 'type': 'number', 'min': 0},
    'count': {'required': True, 'type': 'integer', 'min': 1},
    'percentage': {'required': True, 'type': 'number', 'min': 0, 'max': 100},
    'fraction': {'required': True, 'type': 'number', 'min': 0, 'max': 1},
    'safety_factor': {'required': True, 'type': 'number', 'min': 1},
    'temperature': {'required': True, 'type': 'number', 'custom': check_temperature},
    'area': {'required': True, 'type': 'positive', 'max': 1000000},
    'airflow_lps': {'required': True, 'type': 'positive', 'warn': check_airflow},
}
