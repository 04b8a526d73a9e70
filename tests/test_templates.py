"""Tests for template loading."""

from jinja2 import Environment

from mediablocks.templates import copy_default_templates, get_template_loader


class TestTemplateLoader:
    def test_bundled_page_template(self, tmp_path):
        env = Environment(loader=get_template_loader(tmp_path / "missing"))
        html = env.get_template("page.html").render(
            title="Hello", site_name="Site", content="<p>Body</p>", page={"meta": {}}
        )
        assert "<title>Hello | Site</title>" in html
        assert "<p>Body</p>" in html

    def test_user_template_wins(self, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "page.html").write_text("mine")

        env = Environment(loader=get_template_loader(templates))

        assert env.get_template("page.html").render() == "mine"

    def test_without_vault(self):
        env = Environment(loader=get_template_loader(None))
        assert env.get_template("page.html")


class TestCopyDefaultTemplates:
    def test_copies_templates(self, tmp_path):
        created = copy_default_templates(tmp_path / "templates")
        assert created == [str(tmp_path / "templates" / "page.html")]

    def test_keeps_existing_without_force(self, tmp_path):
        target = tmp_path / "templates"
        target.mkdir()
        (target / "page.html").write_text("edited")

        assert copy_default_templates(target) == []
        assert (target / "page.html").read_text() == "edited"

        assert copy_default_templates(target, force=True)
        assert (target / "page.html").read_text() != "edited"
