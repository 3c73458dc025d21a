"""
Jinja2 rendering of the generated source file.

The default template produces an ES module declaring the schema with
`prop-types`. A custom template can be supplied as a string or a file; it
receives `name` and `schema` in its context, and may use the `field_name`
filter to quote a value the way the renderer quotes field names, e.g.
`{{ name | field_name }}`.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError

from .common import ConfigError
from .renderer import field_name

MODULE_TEMPLATE = """import PropType from 'prop-types'

const {{ name }} = {{ schema }}

export default {{ name }}
"""


class ModuleTemplateRenderer:
    """Renders generated source files from Jinja2 templates"""

    def __init__(self):
        # Output is source code, not HTML: no autoescaping
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            enable_async=False,
        )
        self.env.filters['field_name'] = field_name

    def render_template(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Raises:
            TemplateError: If the template is malformed or uses an unknown variable
        """
        try:
            template = self.env.from_string(template_string)
            return template.render(**context)
        except TemplateError as e:
            raise TemplateError(f"Template rendering failed: {e}")

    def render_module(self, name: str, schema: str, template: Optional[Union[str, Path]] = None) -> str:
        """
        Wrap rendered schema text into a complete source file.

        Args:
            name: Declaration name, embedded verbatim
            schema: Rendered schema expression
            template: Template text, or a Path to a template file; defaults to MODULE_TEMPLATE
        """
        if template is None:
            template_string = MODULE_TEMPLATE
        elif isinstance(template, Path):
            try:
                template_string = template.read_text(encoding='utf-8')
            except OSError as e:
                raise ConfigError(f"Could not read template {template}: {e}") from e
        else:
            template_string = template
        return self.render_template(template_string, {'name': name, 'schema': schema})


_renderer = None

def get_template_renderer() -> ModuleTemplateRenderer:
    """Get the global template renderer instance"""
    global _renderer
    if _renderer is None:
        _renderer = ModuleTemplateRenderer()
    return _renderer
