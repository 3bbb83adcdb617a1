"""Rendering engine: per-type markup, visibility, ordering, media origin."""
import re

import pytest

from pagecms.domain.schema import Block, ContentDocument
from pagecms.normalizers.content import normalize
from pagecms.rendering.engine import clearfix, render, render_content, render_html
from pagecms.rendering.video import classify_video_url

ORIGIN = "https://media.example.com"


def doc(*blocks):
    return ContentDocument(blocks=[Block.model_validate(b) for b in blocks])


def html_of(block, media_origin=ORIGIN):
    rendered = render(doc(block), media_origin)
    assert len(rendered) == 1
    return str(rendered[0].html)


# ── Engine ───────────────────────────────────────────────────────────────────

def test_inactive_blocks_are_not_rendered(sample_document):
    rendered = render(normalize(sample_document), ORIGIN)
    assert "d1" not in [r.block_id for r in rendered]
    assert len(rendered) == 8


def test_blocks_render_in_order_ties_keep_position():
    rendered = render(doc(
        {"id": "late", "type": "divider", "order": 5},
        {"id": "tie-1", "type": "divider", "order": 1},
        {"id": "first", "type": "divider", "order": 0},
        {"id": "tie-2", "type": "divider", "order": 1},
    ))
    assert [r.block_id for r in rendered] == ["first", "tie-1", "tie-2", "late"]


def test_missing_is_active_counts_as_visible():
    assert len(render(normalize('[{"id": "a", "type": "divider"}]'))) == 1


def test_blocks_without_output_are_dropped():
    rendered = render(doc(
        {"id": "img", "type": "image", "config": {"imageUrl": ""}},
        {"id": "txt", "type": "text", "content": "   "},
        {"id": "q", "type": "quote", "config": {}},
    ))
    assert rendered == []


def test_render_is_pure(sample_document):
    document = normalize(sample_document)
    before = document.to_json()
    first = render_html(document, ORIGIN)
    assert render_html(document, ORIGIN) == first
    assert document.to_json() == before


def test_render_html_clears_floats_after_every_block(sample_document):
    document = normalize(sample_document)
    page = str(render_html(document, ORIGIN))
    assert page.count('class="block-clearfix"') == len(render(document, ORIGIN))
    assert page.endswith(str(clearfix()))


def test_render_content_reads_legacy_strings():
    assert "<p>Old page</p>" in str(render_content("<p>Old page</p>"))


# ── text ─────────────────────────────────────────────────────────────────────

def test_text_float_image_gets_inline_layout_and_absolute_src():
    html = html_of({
        "id": "t", "type": "text",
        "content": '<p>Intro</p><img src="/uploads/a.jpg" data-float="left"><p>Wrap</p>',
    })
    assert 'src="https://media.example.com/uploads/a.jpg"' in html
    assert "float: left" in html
    assert "margin: 0 20px 20px 0" in html
    assert "width: 300px" in html
    assert html.startswith('<div class="text-content-block"')


def test_text_explicit_width_wins_over_default():
    html = html_of({
        "id": "t", "type": "text",
        "content": '<img src="/a.jpg" data-float="none" style="width: 420px;">',
    })
    assert "width: 420px" in html
    assert "600px" not in html
    assert "margin: 20px auto" in html


def test_text_headings_clear_floats():
    html = html_of({"id": "t", "type": "text", "content": "<h2>Title</h2><p>x</p>"})
    assert '<h2 style="clear: both;">Title</h2>' in html


def test_text_without_images_is_left_as_written():
    content = "<p>Plain <b>text</b> &amp; more</p>"
    assert content in html_of({"id": "t", "type": "text", "content": content})


# ── image ────────────────────────────────────────────────────────────────────

def test_image_markup():
    html = html_of({
        "id": "i", "type": "image", "title": "Fallback alt",
        "config": {"imageUrl": "/a.jpg", "caption": "A caption", "width": 640, "alignment": "left"},
    })
    assert 'src="https://media.example.com/a.jpg"' in html
    assert 'alt="Fallback alt"' in html
    assert 'width="640"' in html
    assert "text-align: left" in html
    assert "A caption" in html


def test_image_url_from_content_of_older_blocks():
    html = html_of({"id": "i", "type": "image", "content": "/old.png", "config": {}})
    assert 'src="https://media.example.com/old.png"' in html


def test_image_text_values_are_escaped():
    html = html_of({
        "id": "i", "type": "image",
        "config": {"imageUrl": "/a.jpg", "alt": '"><script>x</script>', "caption": "<b>hi</b>"},
    })
    assert "<script>" not in html
    assert "&lt;b&gt;hi&lt;/b&gt;" in html


# ── video ────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("url, embed", [
    ("https://youtu.be/abc123", "https://www.youtube.com/embed/abc123"),
    ("https://youtu.be/abc123?t=30", "https://www.youtube.com/embed/abc123"),
    ("https://www.youtube.com/watch?v=abc123&t=10s", "https://www.youtube.com/embed/abc123"),
    ("https://vimeo.com/123456", "https://player.vimeo.com/video/123456"),
    ("https://vimeo.com/channels/staffpicks/987", "https://player.vimeo.com/video/987"),
    ("https://www.youtube.com/embed/xyz", "https://www.youtube.com/embed/xyz"),
    ("https://player.vimeo.com/video/42", "https://player.vimeo.com/video/42"),
])
def test_video_embed_urls(url, embed):
    source = classify_video_url(url)
    assert source.is_embed
    assert source.url == embed


@pytest.mark.parametrize("url", ["/media/clip.mp4", "https://youtube.com/watch?v=", "not a url"])
def test_video_unrecognized_urls_play_natively(url):
    assert classify_video_url(url).kind == "file"


def test_video_youtube_iframe():
    html = html_of({"id": "v", "type": "video", "config": {"videoUrl": "https://youtu.be/abc123"}})
    assert 'src="https://www.youtube.com/embed/abc123"' in html
    assert "<iframe" in html


def test_video_autoplay_parameter():
    html = html_of({"id": "v", "type": "video", "config": {"videoUrl": "https://youtu.be/abc123", "autoplay": True}})
    assert 'src="https://www.youtube.com/embed/abc123?autoplay=1"' in html


def test_video_native_file():
    html = html_of({"id": "v", "type": "video", "config": {"videoUrl": "/media/clip.webm", "controls": False}})
    assert '<source src="https://media.example.com/media/clip.webm" type="video/webm">' in html
    assert " controls" not in html


def test_video_url_from_block_level_field():
    html = html_of({"id": "v", "type": "video", "videoUrl": "https://vimeo.com/77", "config": {}})
    assert "https://player.vimeo.com/video/77" in html


# ── gallery ──────────────────────────────────────────────────────────────────

def test_gallery_one_fragment_per_image():
    rendered = render(doc({
        "id": "g", "type": "gallery", "title": "Trip",
        "config": {"images": [{"url": "/1.jpg"}, {"url": "/2.jpg", "caption": "Two"}, {"url": "https://x.org/3.jpg"}]},
    }), ORIGIN)[0]
    assert len(rendered.fragments) == 3
    assert 'src="https://media.example.com/1.jpg"' in rendered.fragments[0]
    assert "Two" in rendered.fragments[1]
    assert 'src="https://x.org/3.jpg"' in rendered.fragments[2]
    assert "Trip" in rendered.html


def test_gallery_columns_capped_at_five():
    html = html_of({"id": "g", "type": "gallery", "config": {"images": [{"url": "/1.jpg"}], "columns": 9}})
    assert "repeat(5, 1fr)" in html


def test_empty_gallery_is_dropped():
    assert render(doc({"id": "g", "type": "gallery", "config": {"images": []}})) == []


# ── cta / quote / list / divider ─────────────────────────────────────────────

def test_cta_button_and_description():
    html = html_of({
        "id": "c", "type": "cta",
        "config": {"buttonText": "Sign up", "buttonUrl": "/join", "description": "Free", "style": "secondary", "size": "large"},
    })
    assert '<a class="btn btn-secondary btn-large" href="/join">Sign up</a>' in html
    assert "Free" in html


def test_quote_with_attribution():
    html = html_of({"id": "q", "type": "quote", "config": {"quote": "Q", "author": "Ada", "authorTitle": "Engineer"}})
    assert "<blockquote" in html
    assert "<cite>Ada</cite>" in html
    assert "Engineer" in html


def test_quote_falls_back_to_content():
    assert "From content" in html_of({"id": "q", "type": "quote", "content": "From content", "config": {}})


@pytest.mark.parametrize("list_type, marker", [
    ("ordered", "<ol"),
    ("unordered", "<ul"),
    ("checklist", "checklist"),
])
def test_list_markup(list_type, marker):
    html = html_of({"id": "l", "type": "list", "config": {"items": [{"text": "one"}, {"text": ""}], "listType": list_type}})
    assert marker in html
    assert html.count("<li>") == 1


def test_divider_style():
    html = html_of({"id": "d", "type": "divider", "config": {"style": "dashed", "color": "#ff0000", "thickness": "thick"}})
    assert "border-top: 4px dashed #ff0000" in html


def test_divider_rejects_css_injection_in_color():
    html = html_of({"id": "d", "type": "divider", "config": {"color": "red; background: url(x)"}})
    assert "url(x)" not in html
    assert "#e5e7eb" in html


# ── Fallback ─────────────────────────────────────────────────────────────────

def test_unknown_type_shows_config_as_comment():
    html = html_of({"id": "x", "type": "carousel", "config": {"slides": [1, 2]}})
    assert re.fullmatch(r'<!-- block carousel: \{"slides": \[1, 2\]\} -->', html)


def test_unknown_type_with_content_shows_content():
    html = html_of({"id": "x", "type": "carousel", "content": "<p>Raw</p>"})
    assert "<p>Raw</p>" in html


def test_config_that_fits_no_variant_renders_via_fallback():
    html = html_of({"id": "g", "type": "gallery", "config": {"columns": "many"}})
    assert "columns" in html
