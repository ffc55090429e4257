"""Unit tests for TeX expansion (prepare_tex / render_tex)."""

import pytest
from jinja2 import UndefinedError

from texrecipe import RecipeIOError, TemplateRecipe, TemplateRenderError, prepare_tex, render_tex
from texrecipe.utils.latex import latex_escape

LATEX_INPUT = r"""
            \documentclass{article}
            \begin{document}
                Hello, {{foo}}!
            \end{document}
        """

LATEX_OUTPUT = r"""
            \documentclass{article}
            \begin{document}
                Hello, boo!
            \end{document}
        """


def make_recipe(tmp_path, template_text, data=None, **kwargs):
    """Write template_text to a temp file and build a recipe for it."""
    tex_path = tmp_path / "test.tex"
    tex_path.write_text(template_text, encoding="utf-8")
    return TemplateRecipe(
        template=tex_path,
        output=tmp_path / "test.pdf",
        data=data if data is not None else {},
        **kwargs,
    )


@pytest.mark.unit
def test_prepare_tex_substitutes_placeholders(tmp_path):
    """Test exact expansion, whitespace included."""
    recipe = make_recipe(tmp_path, LATEX_INPUT, {"foo": "boo"})

    assert prepare_tex(recipe) == LATEX_OUTPUT


@pytest.mark.unit
def test_prepare_tex_html_like_values(tmp_path):
    """Test that special characters are inserted without escaping."""
    recipe = make_recipe(tmp_path, "Hello, {{name}}!", {"name": "<&%#>"})

    assert prepare_tex(recipe) == "Hello, <&%#>!"


@pytest.mark.unit
def test_prepare_tex_accepts_string_paths(tmp_path):
    """Test that recipes coerce string paths."""
    (tmp_path / "t.tex").write_text("{{a}}", encoding="utf-8")
    recipe = TemplateRecipe(
        template=str(tmp_path / "t.tex"), output=str(tmp_path / "t.pdf"), data={"a": "x"}
    )

    assert prepare_tex(recipe) == "x"


@pytest.mark.unit
def test_prepare_tex_missing_key_renders_empty(tmp_path):
    """Test that unknown keys render as empty rather than failing."""
    recipe = make_recipe(tmp_path, "Hello, {{name}}!", {"other": "value"})

    assert prepare_tex(recipe) == "Hello, !"


@pytest.mark.unit
def test_prepare_tex_strict_missing_key(tmp_path):
    """Test that strict recipes fail on unknown keys."""
    recipe = make_recipe(tmp_path, "Hello, {{name}}!", {}, strict=True)

    with pytest.raises(TemplateRenderError) as exc_info:
        prepare_tex(recipe)

    assert isinstance(exc_info.value.original_error, UndefinedError)
    assert exc_info.value.template_path == recipe.template


@pytest.mark.unit
def test_prepare_tex_nested_data(tmp_path):
    """Test attribute access into nested mappings and loops over lists."""
    template = "{{author.name}}: {{% for t in tags %}}[{{t}}]{{% endfor %}}"
    data = {"author": {"name": "Fry"}, "tags": ["a", "b"]}
    recipe = make_recipe(tmp_path, template, data)

    assert prepare_tex(recipe) == "Fry: [a][b]"


@pytest.mark.unit
def test_prepare_tex_with_helpers(tmp_path):
    """Test that recipe helpers are available in the template."""
    recipe = make_recipe(
        tmp_path,
        r"\textbf{ {{ upper(company) }} } {{ motto | escape }}",
        {"company": "momcorp", "motto": "100% & more"},
        helpers={"upper": str.upper, "escape": latex_escape},
    )

    assert prepare_tex(recipe) == r"\textbf{ MOMCORP } 100\% \& more"


@pytest.mark.unit
def test_prepare_tex_helper_failure(tmp_path):
    """Test that an exception inside a helper becomes a template error."""

    def explode(value):
        raise ValueError(f"cannot format {value}")

    recipe = make_recipe(tmp_path, "{{ explode(x) }}", {"x": 1}, helpers={"explode": explode})

    with pytest.raises(TemplateRenderError, match="Template expansion failed") as exc_info:
        prepare_tex(recipe)

    assert isinstance(exc_info.value.original_error, ValueError)


@pytest.mark.unit
def test_prepare_tex_malformed_template(tmp_path):
    """Test that unterminated placeholders raise a template error with a line number."""
    recipe = make_recipe(tmp_path, "line one\nHello, {{foo\n", {"foo": "boo"})

    with pytest.raises(TemplateRenderError, match="Malformed template syntax") as exc_info:
        prepare_tex(recipe)

    assert exc_info.value.lineno is not None


@pytest.mark.unit
def test_prepare_tex_missing_template(tmp_path):
    """Test that a nonexistent template raises an IO error."""
    recipe = TemplateRecipe(
        template=tmp_path / "missing.tex", output=tmp_path / "out.pdf", data={}
    )

    with pytest.raises(RecipeIOError) as exc_info:
        prepare_tex(recipe)

    assert exc_info.value.path == tmp_path / "missing.tex"
    assert isinstance(exc_info.value.original_error, FileNotFoundError)


@pytest.mark.unit
def test_prepare_tex_non_utf8_template(tmp_path):
    """Test that undecodable templates raise an IO error."""
    tex_path = tmp_path / "latin1.tex"
    tex_path.write_bytes("Café".encode("latin-1"))
    recipe = TemplateRecipe(template=tex_path, output=tmp_path / "out.pdf", data={})

    with pytest.raises(RecipeIOError):
        prepare_tex(recipe)


@pytest.mark.unit
def test_render_tex_writes_expanded_source(tmp_path):
    """Test that render_tex writes the expansion and no PDF."""
    recipe = make_recipe(tmp_path, LATEX_INPUT, {"foo": "boo"})
    tex_out = tmp_path / "expanded.tex"

    render_tex(recipe, tex_out)

    assert tex_out.read_text(encoding="utf-8") == LATEX_OUTPUT
    assert not recipe.output.exists()


@pytest.mark.unit
def test_render_tex_unwritable_destination(tmp_path):
    """Test that a destination in a missing directory raises an IO error."""
    recipe = make_recipe(tmp_path, "{{foo}}", {"foo": "boo"})

    with pytest.raises(RecipeIOError, match="Cannot write TeX file"):
        render_tex(recipe, tmp_path / "no_such_dir" / "expanded.tex")


@pytest.mark.unit
def test_template_error_message_has_no_blank_lines(tmp_path):
    """Test that the error message lists headline, location and cause on consecutive lines."""
    template = tmp_path / "bad.tex"
    template.write_text("Hello, {{foo", encoding="utf-8")
    recipe = TemplateRecipe(template=template, output=tmp_path / "bad.pdf", data={})

    with pytest.raises(TemplateRenderError) as exc_info:
        prepare_tex(recipe)

    lines = str(exc_info.value).split("\n")
    assert lines[0] == "Malformed template syntax"
    assert lines[1].startswith(f"Template: {template}:")
    assert lines[2].startswith("Original error: ")
    assert "" not in lines
