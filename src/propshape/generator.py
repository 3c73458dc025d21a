from pathlib import Path
from typing import Any, Optional, Union

from .common import InvalidNameError, log, logger
from .inference import infer
from .renderer import render
from .schema import describe
from .template_renderer import get_template_renderer

DEFAULT_OUTPUT_DIR = "src/propTypes"


def create_schema(data: Any, depth: int = 0) -> str:
    """Infer and render the schema expression for `data`"""
    node = infer(data)
    logger().debug(f"Inferred {describe(node)}")
    return render(node, depth)


def render_module(name: str, schema: str, template: Optional[Union[str, Path]] = None) -> str:
    return get_template_renderer().render_module(name, schema, template)


def module_path(name: str, output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR) -> Path:
    """The file for `name`; the name must be a plain file stem so the path stays in `output_dir`"""
    if not name or not name.strip():
        raise InvalidNameError("name must not be empty")
    if "/" in name or "\\" in name or name in (".", ".."):
        raise InvalidNameError(f"name must not contain path separators: {name!r}")
    return Path(output_dir) / f"{name}.js"


@log
def write_module(name: str, content: str, output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR) -> Path:
    """Write `content` to <output_dir>/<name>.js, creating the directory if needed"""
    path = module_path(name, output_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    logger().info(f"Wrote {path}")
    return path


def generate(
    data: Any,
    name: str,
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR,
    template: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Infer a schema for `data` and write it as a module declaring `name`.

    The module is rendered completely before anything touches the disk, so
    a failure leaves no partial file behind.
    """
    # Validate the destination before doing the work
    module_path(name, output_dir)
    logger().info(f"Generating schema '{name}'")
    logger().push()
    try:
        content = render_module(name, create_schema(data), template)
        return write_module(name, content, output_dir)
    finally:
        logger().pop()
