"""
Export calculation results as CSV, JSON or plain text.

Each export carries the calculator identity, a timestamp, the inputs the
user entered and the results the engine returned.
"""

import csv
import io
import json
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

GENERATED_BY = 'MEPCalc Engine'

EXPORT_FORMATS = {
    'csv': ('text/csv', 'csv'),
    'json': ('application/json', 'json'),
    'text': ('text/plain', 'txt'),
}


@dataclass
class ExportData:
    title: str
    calculator_name: str
    discipline: str
    inputs: Dict[str, Any]
    results: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    project_name: Optional[str] = None
    notes: Optional[str] = None


def format_key(key: str) -> str:
    """'totalPressureDrop' or 'total_pressure_drop' -> 'Total Pressure Drop'."""
    spaced = re.sub(r'([A-Z])', r' \1', key).replace('_', ' ')
    return ' '.join(word[:1].upper() + word[1:] for word in spaced.split())


def format_value(value: Any) -> str:
    if value is None:
        return 'N/A'
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else f"{value:.3f}"
    if isinstance(value, (list, tuple)):
        return ', '.join(str(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def sanitize_filename(name: str) -> str:
    cleaned = re.sub(r'[^a-zA-Z0-9]', '_', name)
    cleaned = re.sub(r'_{2,}', '_', cleaned).strip('_')
    return cleaned[:100] or 'export'


def export_csv(data: ExportData) -> str:
    """Export results as a CSV string, every cell quoted."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')

    writer.writerow(['Engineering Calculator Export'])
    writer.writerow([''])
    writer.writerow(['Calculator', data.calculator_name])
    writer.writerow(['Discipline', data.discipline])
    writer.writerow(['Date', data.timestamp.isoformat()])
    if data.project_name:
        writer.writerow(['Project', data.project_name])

    writer.writerow([''])
    writer.writerow(['INPUT PARAMETERS'])
    writer.writerow(['Parameter', 'Value'])
    for key, value in data.inputs.items():
        writer.writerow([format_key(key), format_value(value)])

    writer.writerow([''])
    writer.writerow(['CALCULATION RESULTS'])
    writer.writerow(['Result', 'Value'])
    for key, value in data.results.items():
        writer.writerow([format_key(key), format_value(value)])

    if data.notes:
        writer.writerow([''])
        writer.writerow(['NOTES'])
        writer.writerow([data.notes])

    return output.getvalue()


def export_json(data: ExportData) -> str:
    """Export results as a JSON string."""
    export_data = asdict(data)
    export_data['timestamp'] = data.timestamp.isoformat()
    export_data['generated_by'] = GENERATED_BY
    return json.dumps(export_data, indent=2, default=str)


def export_text(data: ExportData) -> str:
    """Export results as a plain text report."""
    lines = ['ENGINEERING CALCULATOR RESULTS', '=' * 50, '']
    lines.append(f"Calculator: {data.calculator_name}")
    lines.append(f"Discipline: {data.discipline}")
    lines.append(f"Date: {data.timestamp.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}")
    if data.project_name:
        lines.append(f"Project: {data.project_name}")
    lines.append('')

    lines += ['INPUT PARAMETERS', '-' * 20]
    lines += [f"{format_key(k)}: {format_value(v)}" for k, v in data.inputs.items()]
    lines.append('')

    lines += ['CALCULATION RESULTS', '-' * 20]
    lines += [f"{format_key(k)}: {format_value(v)}" for k, v in data.results.items()]

    if data.notes:
        lines += ['', 'NOTES', '-' * 10, data.notes]

    lines += ['', '-' * 50, f"Generated by {GENERATED_BY}"]
    return '\n'.join(lines)


_EXPORTERS = {
    'csv': export_csv,
    'json': export_json,
    'text': export_text,
}


def export(data: ExportData, fmt: str) -> Dict[str, str]:
    """Render an export in the named format.

    Returns:
        {'content', 'media_type', 'filename'}
    """
    if fmt not in _EXPORTERS:
        raise ValueError(f"Unknown export format '{fmt}'. Available: {list(_EXPORTERS.keys())}")
    media_type, extension = EXPORT_FORMATS[fmt]
    return {
        'content': _EXPORTERS[fmt](data),
        'media_type': media_type,
        'filename': f"{sanitize_filename(data.title)}.{extension}",
    }
