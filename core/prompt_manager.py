from pathlib import Path
from typing import Any, Dict, Union

import jinja2
import yaml


class PromptManager:
    def __init__(self, file_path: Union[str, Path], **defaults: Any) -> None:
        """Initialize the prompt manager with a YAML file path.

        Args:
            file_path: Path to the YAML file containing tool prompts
            **defaults: Variables available to every rendered template

        Raises:
            FileNotFoundError: If the prompt file doesn't exist
            yaml.YAMLError: If the YAML file is malformed
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Prompt file not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                self._prompt_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {file_path}: {e}")

        self._defaults = defaults
        self._environment = jinja2.Environment(undefined=jinja2.StrictUndefined)
        self._template_cache: Dict[str, jinja2.Template] = {}

    def _traverse_path(self, path: str) -> Any:
        """Traverse nested dictionary structure using dot notation."""
        current = self._prompt_data

        try:
            for key in path.split("."):
                current = current[key]
        except (KeyError, TypeError):
            raise ValueError(f"Prompt '{path}' not found in prompts data")

        return current

    def render_prompt(self, prompt_name: str, **prompt_args: Any) -> str:
        """Render a prompt template with the manager defaults and ``prompt_args``.

        Raises:
            ValueError: If the prompt is missing or is not a string
            jinja2.TemplateError: If template rendering fails
        """
        template_str = self._traverse_path(prompt_name)
        if not isinstance(template_str, str):
            raise ValueError(f"Prompt '{prompt_name}' is not a string")

        if template_str not in self._template_cache:
            self._template_cache[template_str] = self._environment.from_string(template_str)

        return self._template_cache[template_str].render(
            **{**self._defaults, **prompt_args}
        ).strip()

    def tool_description(self, tool_name: str) -> str:
        """Render the description advertised for tool ``tool_name``."""
        return self.render_prompt(f"tools.{tool_name}.description")

    def parameter_description(self, tool_name: str, parameter: str) -> str:
        """Render the description of one parameter of tool ``tool_name``."""
        return self.render_prompt(f"tools.{tool_name}.parameters.{parameter}")
