from datetime import date
from pathlib import Path

from quire import utils


def test_slugify_and_titleize_strip_date():
    assert utils.slugify("2024-01-02-post-title") == "post-title"
    assert utils.slugify("Mixed_Case Slug") == "mixed-case-slug"
    assert utils.slugify("!!!") == "index"
    assert utils.titleize("2024-01-02-post-title.md") == "Post Title"
    assert utils.titleize("getting_started.md") == "Getting Started"
    assert utils.titleize("---.md") == "Untitled"


def test_extract_date_from_name():
    assert utils.extract_date_from_name("2024-01-15-cool") == date(2024, 1, 15)
    assert utils.extract_date_from_name("2024-01-15") == date(2024, 1, 15)
    assert utils.extract_date_from_name("invalid") is None
    assert utils.extract_date_from_name("2024-13-32-post") is None


def test_normalize_tags_lowercases_and_dedupes():
    assert utils.normalize_tags(["GSoC", "coding", "gsoc", "  Deep   Learning "]) == [
        "gsoc",
        "coding",
        "deep learning",
    ]
    assert utils.normalize_tags(["", "  "]) == []


def test_tag_slug_encodes_reserved_characters():
    assert utils.tag_slug("gsoc") == "gsoc"
    assert utils.tag_slug("machine learning") == "machine-learning"
    assert utils.tag_slug("c++") == "c++"
    assert utils.tag_slug("c#") == "c%23"
    assert utils.tag_slug("c++") != utils.tag_slug("c#")


def test_first_paragraph_skips_headings_and_code():
    text = "# Heading\n\n```python\nx = 1\n```\n\nFirst <em>real</em>\nparagraph.\n\nSecond."
    assert utils.first_paragraph(text) == "First real paragraph."
    assert utils.first_paragraph("") == ""
    assert utils.first_paragraph("word " * 100, limit=9) == "word word"


def test_word_count_and_reading_time():
    body = "Hello there, world.\n\n```\nignored code here\n```\n\nIt's a well-known fact."
    assert utils.word_count(body) == 7
    assert utils.reading_time(0) == 1
    assert utils.reading_time(213) == 1
    assert utils.reading_time(214) == 2


def test_path_helpers():
    assert utils.is_markdown(Path("post.md"))
    assert utils.is_markdown(Path("post.MARKDOWN"))
    assert not utils.is_markdown(Path("post.html"))
    assert utils.is_internal_path(Path("posts/_index.md"))
    assert utils.is_internal_path(Path("_drafts/post.md"))
    assert not utils.is_internal_path(Path("posts/post.md"))


def test_number_prefix_helpers():
    assert utils.extract_number_from_name("01-intro") == 1
    assert utils.extract_number_from_name("2024-01-15-03-post") == 3
    assert utils.extract_number_from_name("2024-01-15-post") is None
    assert utils.extract_number_from_name("intro") is None
    assert utils.strip_number_prefix("2024-01-15-03-post") == "post"
    assert utils.strip_number_prefix("02-second") == "second"
    assert utils.strip_number_prefix("plain") == "plain"
