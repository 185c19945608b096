"""Tests for the naming template language"""
import pytest

from git_worktree_keeper.exceptions import TemplateError, TemplateSyntaxError, UnknownVariable, ValidationFailed
from git_worktree_keeper.models.pattern import PatternContext
from git_worktree_keeper.naming import parse_template, resolve, template_functions, template_variables


@pytest.fixture
def context():
    return PatternContext(
        project="my-project",
        branch="feature/Auth",
        worktree="feature-auth-0102-143045",
        timestamp="20240102-143045",
        user_name="john-doe",
        prefix="main",
        suffix="dev",
    )


class TestResolve:
    """Test rendering of templates."""

    def test_plain_variables(self, context):
        assert resolve("{{.Project}}-{{.Suffix}}", context) == "my-project-dev"

    def test_all_variables(self, context):
        result = resolve(
            "{{.Project}}|{{.Branch}}|{{.Worktree}}|{{.Timestamp}}|{{.UserName}}|{{.Prefix}}|{{.Suffix}}",
            context,
        )
        assert result == "my-project|feature/Auth|feature-auth-0102-143045|20240102-143045|john-doe|main|dev"

    def test_literal_only(self, context):
        assert resolve("worktrees", context) == "worktrees"

    def test_whitespace_inside_action(self, context):
        assert resolve("{{ .Project }}", context) == "my-project"

    def test_lower_upper(self, context):
        assert resolve("{{.Branch | lower}}", context) == "feature/auth"
        assert resolve("{{.Branch | upper}}", context) == "FEATURE/AUTH"

    def test_title(self, context):
        assert resolve("{{.Project | title}}", context) == "My-Project"

    def test_replace(self, context):
        assert resolve('{{.Branch | replace "/" "-"}}', context) == "feature-Auth"

    def test_trim(self):
        assert resolve("{{.Suffix | trim}}", PatternContext(suffix="  x  ")) == "x"

    def test_sanitize(self, context):
        assert resolve("{{.Branch | sanitize}}", context) == "feature-auth"

    def test_truncate(self, context):
        assert resolve("{{.Worktree | truncate 10}}", context) == "feature..."

    def test_pipeline_chain(self, context):
        assert resolve('{{.Branch | lower | replace "/" "_"}}', context) == "feature_auth"

    def test_mapping_context(self):
        assert resolve("{{.Project}}", {"Project": "api"}) == "api"

    def test_mapping_context_missing_key(self):
        with pytest.raises(UnknownVariable):
            resolve("{{.Branch}}", {"Project": "api"})


class TestParseErrors:
    """Test rejection of bad templates."""

    def test_unknown_variable(self, context):
        with pytest.raises(UnknownVariable) as exc_info:
            resolve("{{.Secret}}", context)
        assert "{{.Secret}}" in str(exc_info.value)

    def test_restricted_whitelist(self):
        with pytest.raises(UnknownVariable):
            parse_template("{{.Timestamp}}", {"Project": "Project name"})

    @pytest.mark.parametrize(
        "template",
        [
            "{{.Project",
            "{{.Project}}}}",
            "{{}}",
            "{{Project}}",
            "{{.Project | nosuch}}",
            "{{.Project | truncate}}",
            '{{.Project | truncate "ten"}}',
            '{{.Project | replace "a"}}',
            "{{.Project | }}",
            "{{.Project {{.Branch}}}}",
            "{{.Project .Branch}}",
            "{{.Project @}}",
        ],
    )
    def test_syntax_errors(self, template):
        with pytest.raises(TemplateSyntaxError):
            parse_template(template)

    def test_errors_are_validation_failures(self):
        with pytest.raises(ValidationFailed):
            parse_template("{{.Nope}}")
        with pytest.raises(TemplateError):
            parse_template("{{.Project")


class TestTemplateIntrospection:
    """Test template metadata helpers."""

    def test_variables_in_order(self):
        template = parse_template("{{.Branch}}-{{.Project}}-{{.Branch}}")
        assert template.variables == ["Branch", "Project", "Branch"]
        assert template.has_actions

    def test_literal_has_no_actions(self):
        assert not parse_template("static").has_actions

    def test_available_variables(self):
        variables = template_variables()
        assert "{{.Project}}" in variables
        assert "{{.UserName}}" in variables
        assert len(variables) == 7

    def test_available_functions(self):
        assert set(template_functions()) == {"lower", "upper", "title", "replace", "trim", "sanitize", "truncate"}
