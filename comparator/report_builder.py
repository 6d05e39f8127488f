"""
Report Builder Module
Renders comparison results to the console, JSON and HTML (Jinja2 templates).
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.config import DiffOptions
from core.models import DiffResult
from utils.file_utils import ensure_directory

TEMPLATE_DIR = Path(__file__).parent / 'templates'


class ReportBuilder:
    def __init__(self, output: Callable[[str], None] = print):
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(['html'])
        )
        self.template = self.env.get_template('report.html')
        self.output = output
        self.data: Dict = {}

    def report(self, result: DiffResult, options: Optional[DiffOptions] = None) -> None:
        """Reporting sink used by MarkupDiff; writes to the console if enabled."""
        options = options or DiffOptions()
        self.collect_metrics(result)
        if options.console_out:
            for line in self.console_lines(result, options.console_out_first_error_only):
                self.output(line)

    def collect_metrics(self, comparison_results: DiffResult) -> Dict:
        """Collect and organize comparison metrics."""
        report = comparison_results.results
        modules = comparison_results.modules
        self.data = {
            'generated': datetime.now().isoformat(timespec='seconds'),
            'module_count': len(modules),
            'source_count': len({path for sources in modules.values() for path in sources}),
            'mismatch_count': report.mismatch_count(),
            'summary': {
                name: {
                    'sources': sorted(sources),
                    'mismatches': report.mismatch_count(name),
                    'warning': report.warnings[name].description if name in report.warnings else None
                }
                for name, sources in modules.items()
            },
            **comparison_results.to_dict()
        }
        return self.data

    def console_lines(self, result: DiffResult, first_error_only: bool = True) -> List[str]:
        report = result.results
        lines = [f'Found {len(result.modules)} module(s).']

        if report.errors:
            lines.append('Detected the following mismatches : ')
            for module, errors in report.errors.items():
                for index, (line_number, pair) in enumerate(sorted(errors.items())):
                    if first_error_only and index == 1:
                        lines.append(f'{module} - additional errors suppressed')
                        break
                    lines.append('')
                    lines.append(f'module {module}, line {line_number}')
                    lines.extend(ref.path for ref in pair)
                    lines.extend(ref.src for ref in pair)
        else:
            lines.append('No mismatches detected.')

        for module, warning in report.warnings.items():
            lines.append(f'Warning: {warning.description} ({warning.path})')

        return lines

    def generate_html_report(self, output_path, result: Optional[DiffResult] = None) -> Path:
        """Generate HTML report with every mismatching line."""
        if result is not None:
            self.collect_metrics(result)
        path = Path(output_path)
        ensure_directory(path.parent)
        path.write_text(self.render_html(), encoding='utf-8')
        return path

    def render_html(self) -> str:
        return self.template.render(**self.data)

    def generate_json_report(self, output_path, result: Optional[DiffResult] = None) -> Path:
        """Generate JSON report with raw comparison data."""
        if result is not None:
            self.collect_metrics(result)
        path = Path(output_path)
        ensure_directory(path.parent)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.data, f, indent=2)
        return path
