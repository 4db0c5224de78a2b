from pathlib import Path

import pytest

from core import PromptManager

PROMPTS_FILE = Path(__file__).parent.parent / "prompts" / "prompts.yaml"


class TestPromptManager:
    """Unit tests for PromptManager."""

    @pytest.fixture
    def prompt_manager(self):
        return PromptManager(PROMPTS_FILE, default_repo="mozilla-central", default_limit=50)

    def test_tool_descriptions(self, prompt_manager):
        """Test that both tools have descriptions."""
        assert prompt_manager.tool_description("search_code").startswith(
            "Search for code in Mozilla repositories using Searchfox."
        )
        assert "specific file" in prompt_manager.tool_description("get_file")

    def test_parameter_descriptions_are_rendered(self, prompt_manager):
        """Test that template variables are filled from the defaults."""
        assert prompt_manager.parameter_description("search_code", "repo") == (
            "Repository to search in (e.g., mozilla-central, comm-central)"
        )
        assert "50" in prompt_manager.parameter_description("search_code", "limit")

    def test_render_arguments_override_defaults(self, prompt_manager):
        rendered = prompt_manager.render_prompt(
            "tools.get_file.parameters.repo", default_repo="autoland"
        )
        assert rendered == "Repository name (default: autoland)"

    def test_missing_prompt(self, prompt_manager):
        with pytest.raises(ValueError, match="not found"):
            prompt_manager.tool_description("list_repos")

    def test_non_string_prompt(self, prompt_manager):
        with pytest.raises(ValueError, match="is not a string"):
            prompt_manager.render_prompt("tools.search_code.parameters")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PromptManager(tmp_path / "missing.yaml")
