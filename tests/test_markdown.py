from l3chat.markdown import html_escape, markdown_to_html


def test_basic_markdown():
    html = markdown_to_html("# Hello\n\nThis is **bold** and *italic* text.")
    assert "<h1" in html
    assert "<strong" in html
    assert "<em" in html


def test_code_blocks():
    html = markdown_to_html('```rust\nfn main() {\n    println!("Hello");\n}\n```')
    assert "<pre" in html
    assert "language-rust" in html
    assert "Copy" in html


def test_code_indentation():
    markdown = (
        '```python\ndef hello():\n    print("Hello")\n    if True:\n'
        '        print("Indented")\n```'
    )
    html = markdown_to_html(markdown)
    assert "    print" in html
    assert "        print" in html


def test_plain_paragraph():
    assert markdown_to_html("Hello") == '<p class="mb-4 leading-relaxed text-left">Hello</p>'


def test_heading_level_two():
    assert markdown_to_html("## Title") == (
        '<h2 class="text-xl font-semibold mb-3 mt-5 text-gray-900 dark:text-gray-100">'
        "Title</h2>"
    )


def test_fence_without_language_shows_text():
    html = markdown_to_html("```\ncode\n```")
    assert '<span class="font-medium">text</span>' in html
    assert html.endswith("code\n</code></pre></div>")


def test_code_block_content_is_escaped():
    html = markdown_to_html("```html\n<b>&</b>\n```")
    assert "&lt;b&gt;&amp;&lt;/b&gt;" in html
    assert "<b>" not in html


def test_indented_code_only_closes():
    assert markdown_to_html("    x = 1") == "x = 1\n</code></pre></div>"


def test_tight_list_has_no_paragraphs():
    html = markdown_to_html("- a\n- b")
    assert html.startswith('<ul class="list-disc')
    assert html.endswith("</li></ul>")
    assert html.count('<li class="text-gray-800 dark:text-gray-200">') == 2
    assert "<p" not in html


def test_ordered_list():
    html = markdown_to_html("1. one\n2. two")
    assert html.startswith('<ol class="list-decimal')
    assert html.endswith("</ol>")


def test_link_attributes():
    html = markdown_to_html('[site](http://example.com "T")')
    assert '<a href="http://example.com" title="T"' in html
    assert 'target="_blank" rel="noopener noreferrer">site</a>' in html


def test_inline_code_escaped():
    html = markdown_to_html("use `a<b`")
    assert ">a&lt;b</code>" in html


def test_raw_html_dropped():
    html = markdown_to_html("a <b>x</b>")
    assert "a x" in html
    assert "<b>" not in html


def test_image_renders_alt_text_only():
    html = markdown_to_html("![alt text](img.png)")
    assert "alt text" in html
    assert "<img" not in html


def test_table_structure():
    html = markdown_to_html("| a | b |\n|---|---|\n| 1 | 2 |")
    head, _, body = html.partition("</thead>")
    assert "<thead" in head
    assert "<tr>" not in head
    assert "<tr>" in body
    assert "<tbody" not in html
    assert html.count("<td") == 4
    assert html.endswith("</table></div>")


def test_strikethrough():
    html = markdown_to_html("~~gone~~")
    assert '<del class="line-through text-gray-600 dark:text-gray-400">gone</del>' in html


def test_smart_quotes_and_dashes():
    html = markdown_to_html('He said "hi" -- then a---b...')
    assert "\u201chi\u201d" in html
    assert "\u2013" in html
    assert "a\u2014b\u2026" in html


def test_hard_break():
    assert "a<br>b" in markdown_to_html("a  \nb")


def test_soft_break_becomes_space():
    assert "a b" in markdown_to_html("a\nb")


def test_task_list_marker_removed():
    html = markdown_to_html("- [ ] todo\n- [x] done")
    assert ">todo</li>" in html
    assert ">done</li>" in html
    assert "[" not in html


def test_footnotes():
    html = markdown_to_html("Text[^1].\n\n[^1]: Note.")
    assert "Text." in html
    assert "Note." in html
    assert "[^1]" not in html


def test_blockquote():
    html = markdown_to_html("> quoted")
    assert html.startswith('<blockquote class="border-l-4')
    assert html.endswith("</blockquote>")
    assert "quoted" in html


def test_html_escape():
    assert html_escape("<a href='x'>&\"") == "&lt;a href=&#x27;x&#x27;&gt;&amp;&quot;"