"""
Post-processing of generated replies.

The model answers in markdown with raw resource URLs. The chat widget
renders HTML, so image links become captioned images, PDFs get an icon
anchor and everything else a generic link anchor.
"""

from __future__ import annotations

import html
import re

IMAGE_URL_RE = re.compile(r"\.(jpg|jpeg|png|gif)$", re.I)
MARKDOWN_IMAGE_RE = re.compile(r"🖼️ \[(.*?)\]\((https?://[^\s)]+)\)")
BARE_URL_RE = re.compile(r"https?://[^\s)\"'<>]+")
# Anchors and image tags produced in the first pass are left alone
RENDERED_TAG_RE = re.compile(r"(<div class=\"chat-image-container\">.*?</div>\s*</div>|<a [^>]*>.*?</a>)", re.S)


def clean_url(url: str | None) -> str:
    """Strip wrapping brackets and trailing punctuation; '' for non-http URLs."""
    if not url:
        return ""
    url = re.sub(r"^[(\[]+", "", url)
    url = re.sub(r"[)\]]+$", "", url)
    url = re.sub(r"[),\]}>.\s]+$", "", url)
    if not url.startswith("http"):
        return ""
    return url.strip()


def _image_block(url: str, title: str | None = None) -> str:
    if title is None:
        return (
            '<div class="chat-image-container">'
            f"<img src='{html.escape(url, quote=True)}' class='chat-image' alt='Image' />"
            "</div>"
        )
    safe_title = html.escape(title, quote=True)
    return (
        '<div class="chat-image-container">'
        f"<img src='{html.escape(url, quote=True)}' class='chat-image' alt='{safe_title}' title='{safe_title}' />"
        f'<div class="image-caption">{safe_title}</div>'
        "</div>"
    )


def _render_url(url: str) -> str:
    cleaned = clean_url(url)
    if not cleaned:
        return url
    # Keep punctuation that clean_url dropped, e.g. a sentence-ending period
    trailing = url[len(cleaned):] if url.startswith(cleaned) else ""
    safe = html.escape(cleaned, quote=True)
    lowered = cleaned.lower()
    if lowered.endswith(".pdf"):
        rendered = f"<a href='{safe}' target='_blank'><i class='pdf-icon'></i> PDF Document</a>"
    elif IMAGE_URL_RE.search(lowered):
        rendered = _image_block(cleaned)
    else:
        rendered = f"<a href='{safe}' target='_blank'><i class='link-icon'></i> Link</a>"
    return rendered + trailing


def transform_links(text: str) -> str:
    """Replace markdown image links and bare URLs with chat-widget HTML."""

    def replace_markdown_image(match: re.Match) -> str:
        title, url = match.group(1), match.group(2)
        cleaned = clean_url(url)
        if IMAGE_URL_RE.search(cleaned.lower()):
            return _image_block(cleaned, title)
        return match.group(0)

    text = MARKDOWN_IMAGE_RE.sub(replace_markdown_image, text)

    # Second pass only touches text outside the HTML produced above
    parts = RENDERED_TAG_RE.split(text)
    for index, part in enumerate(parts):
        if index % 2 == 0:
            parts[index] = BARE_URL_RE.sub(lambda m: _render_url(m.group(0)), part)
    return "".join(parts)


LINK_ICON_STYLE = """<style>
.link-icon {
    display: inline-block;
    width: 16px;
    height: 16px;
    background-image: url('data:image/svg+xml;utf8,<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"><path d="M10 6V8H5V19H16V14H18V20C18 20.5523 17.5523 21 17 21H4C3.44772 21 3 20.5523 3 20V7C3 6.44772 3.44772 6 4 6H10ZM21 3V11H19V6.413L11.207 14.207L9.793 12.793L17.585 5H13V3H21Z" fill="%23007BFF"/></svg>');
    background-repeat: no-repeat;
    background-position: center;
    cursor: pointer;
}

.chat-image-container {
    margin: 10px 0;
    max-width: 100%;
    text-align: center;
}

.chat-image {
    max-width: 100%;
    height: auto;
    border-radius: 8px;
    box-shadow: 0 2px 4px rgba(0,0,0,0.1);
}

.image-caption {
    margin-top: 5px;
    font-size: 0.9em;
    color: #666;
}
</style>"""

PDF_ICON_STYLE = """<style>
.pdf-icon {
    display: inline-block;
    width: 16px;
    height: 16px;
    background-image: url('data:image/svg+xml;utf8,<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"><path d="M8.267 14.68c-.184 0-.308.018-.372.036v1.178c.076.018.171.023.302.023.479 0 .774-.242.774-.651 0-.364-.235-.606-.704-.606zm3.487.012c-.2 0-.33.018-.407.036v2.61c.077.018.201.018.313.018.817.006 1.349-.444 1.349-1.396 0-.979-.59-1.268-1.255-1.268z" fill="%23FF0000"/></svg>');
    background-repeat: no-repeat;
    background-position: center;
    cursor: pointer;
    border: 1px solid #FF0000;
    border-radius: 3px;
    padding: 2px;
}
</style>"""

IMAGE_LINK_STYLE = """<style>
.image-link {
    max-width: 100%;
    height: auto;
    border: 1px solid #ddd;
    border-radius: 4px;
    padding: 5px;
    cursor: pointer;
}
</style>"""

CHAT_STYLES = LINK_ICON_STYLE + PDF_ICON_STYLE + IMAGE_LINK_STYLE
