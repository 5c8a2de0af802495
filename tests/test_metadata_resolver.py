from datetime import date

from preview_app.core.metadata_resolver import build_template_context, compute_defaults, resolve
from preview_app.core.models import PersonalInfo, RenderSettings


def test_present_empty_override_clears_frontmatter_value():
    context = resolve({"title": ""}, {"title": "From front-matter"}, {})
    assert context["title"] == ""


def test_frontmatter_used_when_override_key_absent():
    context = resolve({}, {"title": "  From front-matter "}, {"title": "Default"})
    assert context["title"] == "From front-matter"


def test_default_used_when_nothing_else_set():
    context = resolve({}, {"title": ""}, {"publish_date": "2024-05-01"})
    assert context["title"] == ""
    assert context["publish_date"] == "2024-05-01"
    assert context["author"] == ""


def test_frontmatter_aliases():
    context = resolve({}, {"articleTitle": "Alias", "date": "2023-01-02"}, {"publish_date": "x"})
    assert context["title"] == "Alias"
    assert context["publish_date"] == "2023-01-02"


def test_empty_override_tags_do_not_hide_frontmatter_tags():
    assert resolve({"tags": []}, {"tags": ["a", "b"]}, {})["tags"] == ["a", "b"]
    assert resolve({"tags": ["c"]}, {"tags": ["a", "b"]}, {})["tags"] == ["c"]
    assert resolve({}, {"tags": "a, b"}, {})["tags"] == ["a", "b"]


def test_other_override_keys_need_a_value():
    context = resolve({"subtitle": "", "series": "Intro"}, {"subtitle": "FM", "series": "FM"}, {})
    assert context["subtitle"] == "FM"
    assert context["series"] == "Intro"


def test_resolve_does_not_mutate_inputs():
    override = {"title": "T"}
    frontmatter = {"title": "F", "tags": ["a"]}
    resolve(override, frontmatter, {})
    assert override == {"title": "T"}
    assert frontmatter == {"title": "F", "tags": ["a"]}


def test_compute_defaults_adds_author_only_when_profile_enabled():
    today = date(2024, 5, 1)
    disabled = RenderSettings(default_author_name="Ada")
    enabled = RenderSettings(enable_default_author_profile=True, default_author_name="Ada")

    assert compute_defaults(disabled, today) == {"publish_date": "2024-05-01"}
    assert compute_defaults(enabled, today)["author"] == "Ada"


def test_template_context_hides_title_and_normalizes_epigraph():
    settings = RenderSettings(
        hide_leading_heading=True,
        personal_info=PersonalInfo(name="Ada", avatar="a.png"),
    )
    context = build_template_context(
        {"author_avatar": "b.png"},
        {"title": "Hello", "epigraph": "One line"},
        settings,
        date(2024, 5, 1),
    )

    assert context["title"] == ""
    assert context["epigraph"] == ["One line"]
    assert context["personal_info"]["name"] == "Ada"
    assert context["personal_info"]["avatar"] == "b.png"
