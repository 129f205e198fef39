from esalert.services.rendering import render_templates, translate_dot_refs


def test_renders_go_style_reference() -> None:
    rendered = render_templates({"summary": "Error: {{.errorMsg}}"}, {"errorMsg": "boom"})
    assert rendered == {"summary": "Error: boom"}


def test_renders_plain_jinja_reference() -> None:
    rendered = render_templates({"summary": "{{ appname }}/{{ env }}"}, {"appname": "api", "env": "prod"})
    assert rendered["summary"] == "api/prod"


def test_invalid_template_keeps_raw_source() -> None:
    broken = "Error: {{ .errorMsg "
    rendered = render_templates({"summary": broken}, {"errorMsg": "boom"})
    assert rendered["summary"] == broken


def test_failures_are_isolated_per_key() -> None:
    templates = {
        "good": "Error: {{ .errorMsg }}",
        "bad": "{% if %}",
        "runtime": "{{ 1 / 0 }}",
    }
    rendered = render_templates(templates, {"errorMsg": "boom"})

    assert rendered["good"] == "Error: boom"
    assert rendered["bad"] == "{% if %}"
    assert rendered["runtime"] == "{{ 1 / 0 }}"


def test_input_mapping_is_not_mutated() -> None:
    templates = {"summary": "{{ value }}"}
    render_templates(templates, {"value": "3"})
    assert templates == {"summary": "{{ value }}"}


def test_undefined_names_render_empty() -> None:
    assert render_templates({"s": "[{{ .missing }}]"}, {})["s"] == "[]"


def test_autoescape_can_be_disabled() -> None:
    context = {"errorMsg": "a < b"}
    assert render_templates({"s": "{{ errorMsg }}"}, context)["s"] == "a &lt; b"
    assert render_templates({"s": "{{ errorMsg }}"}, context, autoescape=False)["s"] == "a < b"


def test_sandbox_blocks_attribute_escape() -> None:
    source = "{{ errorMsg.__class__() }}"
    assert render_templates({"s": source}, {"errorMsg": "x"})["s"] == source


def test_translate_dot_refs_only_touches_template_blocks() -> None:
    assert translate_dot_refs("v1.2 {{ .a }} {% if .b %}x{% endif %}") == "v1.2 {{ a }} {% if b %}x{% endif %}"
    assert translate_dot_refs("{{ 1.5 }}") == "{{ 1.5 }}"
