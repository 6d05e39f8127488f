"""
Web Interface for Markup Module Comparison
"""

import logging
import os
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flask import Flask, jsonify, request
from core.errors import MarkupDiffError
from core.markup_diff import MarkupDiff
from core.source_loader import descriptor_from_string
from comparator.report_builder import ReportBuilder

logger = logging.getLogger(__name__)

app = Flask(__name__)
# glob sources must stay under SOURCE_ROOT; url sources must name a host in ALLOWED_HOSTS
app.config['SOURCE_ROOT'] = os.environ.get('MARKUP_DIFF_SOURCE_ROOT')
app.config['ALLOWED_HOSTS'] = [
    host.strip() for host in os.environ.get('MARKUP_DIFF_ALLOWED_HOSTS', '').split(',') if host.strip()
]


def _check_source(source):
    """Return the descriptor if the server may load it, or raise ValueError."""
    descriptor = descriptor_from_string(source) if isinstance(source, str) else source
    if not isinstance(descriptor, dict):
        return descriptor

    if descriptor.get('host'):
        if descriptor['host'] not in app.config['ALLOWED_HOSTS']:
            raise ValueError(f'Host "{descriptor["host"]}" is not allowed')
        return descriptor

    if descriptor.get('glob'):
        root = app.config['SOURCE_ROOT']
        if not root:
            raise ValueError('Glob sources are disabled on this server')
        root = Path(os.path.abspath(root))
        pattern = Path(str(descriptor['glob']))
        if '..' in pattern.parts:
            raise ValueError('Glob patterns may not contain ".."')
        if not pattern.is_absolute():
            pattern = root / pattern
        if not pattern.is_relative_to(root):
            raise ValueError(f'Glob "{descriptor["glob"]}" is outside the source root')
        options = descriptor.get('options') or {}
        if not isinstance(options, dict) or set(options) - {'recursive'}:
            raise ValueError('Only the "recursive" glob option is accepted')
        return {'glob': str(pattern), 'options': options}

    return descriptor


def _read_request():
    """Return (sources, options) from the JSON body, or raise ValueError."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError('Request body must be a JSON object')
    sources = payload.get('sources')
    if not isinstance(sources, list) or not sources:
        raise ValueError('"sources" must be a non-empty list')
    options = payload.get('options') or {}
    if not isinstance(options, dict):
        raise ValueError('"options" must be an object')
    # the server never writes to its own console
    options = {**options, 'console_out': False}
    return [_check_source(source) for source in sources], options


def _run_comparison():
    sources, options = _read_request()
    return MarkupDiff(options).compare(sources)


@app.route('/api/compare', methods=['POST'])
def api_compare():
    """Compare the posted sources and return modules and results as JSON."""
    try:
        result = _run_comparison()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except MarkupDiffError as e:
        return jsonify({'error': e.description, 'code': e.code}), 400
    return jsonify(result.to_dict())


@app.route('/report', methods=['POST'])
def html_report():
    """Compare the posted sources and return the rendered HTML report."""
    try:
        result = _run_comparison()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except MarkupDiffError as e:
        return jsonify({'error': e.description, 'code': e.code}), 400
    builder = ReportBuilder()
    builder.collect_metrics(result)
    return builder.render_html(), 200, {'Content-Type': 'text/html; charset=utf-8'}


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port)
